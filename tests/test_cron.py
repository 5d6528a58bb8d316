from datetime import timedelta

from sqlalchemy import select

from app.core.runtime_state import last_replay_run
from app.models import Transaction, WebhookDelivery
from app.services import webhooks as webhooks_service
from app.services.cron import REPLAY_SOURCE_URL, replay_failed_deliveries_once
from app.services.mercadopago import GatewayError
from app.utils.time import utcnow


def _fail(db_session, resource_id: str, times: int = 1) -> None:
    for _ in range(times):
        webhooks_service.record_delivery(
            db_session,
            evento="payment",
            recurso_id=resource_id,
            url="/api/mercadopago/webhook",
            sucesso=False,
            dados={"error": "timeout"},
        )
    db_session.commit()


def test_replay_reconciles_failed_payment(db_session, gateway):
    _fail(db_session, "901")
    gateway.payments["901"] = {"id": 901, "status": "approved", "transaction_amount": 30.0}

    replayed = replay_failed_deliveries_once(db_session=db_session, gateway=gateway)

    assert replayed == 1
    transaction = db_session.scalars(select(Transaction)).one()
    assert transaction.referencia == "901"
    latest = db_session.scalars(
        select(WebhookDelivery).where(WebhookDelivery.sucesso.is_(True))
    ).one()
    assert latest.url == REPLAY_SOURCE_URL
    assert last_replay_run()["reconciled"] == 1


def test_replay_skips_reconciled_resources(db_session, gateway):
    _fail(db_session, "902")
    gateway.payments["902"] = {"id": 902, "status": "approved", "transaction_amount": 30.0}
    assert replay_failed_deliveries_once(db_session=db_session, gateway=gateway) == 1
    gateway.calls.clear()

    assert replay_failed_deliveries_once(db_session=db_session, gateway=gateway) == 0
    assert gateway.calls == []


def test_replay_gives_up_after_max_attempts(db_session, gateway):
    _fail(db_session, "903", times=5)
    gateway.payments["903"] = {"id": 903, "status": "approved", "transaction_amount": 30.0}

    assert replay_failed_deliveries_once(db_session=db_session, gateway=gateway) == 0
    assert gateway.calls == []


def test_replay_ignores_failures_outside_window(db_session, gateway):
    _fail(db_session, "904")
    delivery = db_session.scalars(select(WebhookDelivery)).one()
    delivery.ultima_execucao = utcnow() - timedelta(hours=48)
    db_session.commit()

    assert replay_failed_deliveries_once(db_session=db_session, gateway=gateway) == 0
    assert gateway.calls == []


def test_replay_logs_another_failure(db_session, gateway):
    _fail(db_session, "905")
    gateway.error = GatewayError("still down")

    assert replay_failed_deliveries_once(db_session=db_session, gateway=gateway) == 0

    failures = db_session.scalars(
        select(WebhookDelivery).where(WebhookDelivery.recurso_id == "905")
    ).all()
    assert len(failures) == 2
    assert all(not item.sucesso for item in failures)
    assert db_session.query(Transaction).count() == 0
    last_run = last_replay_run()
    assert last_run["candidates"] == 1
    assert last_run["reconciled"] == 0
