import pytest
from sqlalchemy import select

from app.models import Activity, Transaction
from app.services.mercadopago import GatewayError


PREFERENCE_PAYLOAD = {
    "items": [{"title": "Plano Pro", "quantity": 1, "unit_price": 99.9, "currency_id": "BRL"}],
    "backUrls": {
        "success": "https://shop.example/ok",
        "failure": "https://shop.example/fail",
        "pending": "https://shop.example/pending",
    },
}


@pytest.mark.anyio
async def test_create_preference(client, db_session, gateway):
    resp = await client.post("/api/mercadopago/preference", json=PREFERENCE_PAYLOAD)

    assert resp.status_code == 201
    body = resp.json()
    assert body["id"] == "pref-123"
    assert body["init_point"].startswith("https://")

    name, sent = gateway.calls[0]
    assert name == "create_preference"
    assert sent["items"] == [{"title": "Plano Pro", "quantity": 1, "unit_price": 99.9, "currency_id": "BRL"}]
    assert sent["back_urls"]["success"] == "https://shop.example/ok"

    activity = db_session.scalars(select(Activity)).one()
    assert activity.tipo == "checkout"
    assert activity.metadados == {"preference_id": "pref-123"}


@pytest.mark.anyio
async def test_create_preference_without_items_rejected(client, gateway):
    resp = await client.post("/api/mercadopago/preference", json={"items": []})

    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "VALIDATION_ERROR"
    assert gateway.calls == []


@pytest.mark.anyio
async def test_create_preference_gateway_error(client, db_session, gateway):
    gateway.error = GatewayError("invalid items", status_code=400)

    resp = await client.post("/api/mercadopago/preference", json=PREFERENCE_PAYLOAD)

    assert resp.status_code == 502
    error = resp.json()["error"]
    assert error["code"] == "GATEWAY_ERROR"
    assert error["message"] == "invalid items"
    assert error["details"] == {"status_code": 400}
    assert db_session.query(Activity).count() == 0


@pytest.mark.anyio
async def test_create_payment_mirrors_transaction(client, db_session, gateway):
    payload = {
        "transaction_amount": 120.0,
        "payment_method_id": "pix",
        "description": "Pedido 42",
        "payer": {"email": "maria@example.com", "first_name": "Maria", "last_name": "Souza"},
        "checkoutId": 42,
    }

    resp = await client.post("/api/mercadopago/payment", json=payload)

    assert resp.status_code == 201
    body = resp.json()
    assert body["id"] == 9001
    assert body["status"] == "pending"

    name, sent = gateway.calls[0]
    assert name == "create_payment"
    assert "checkoutId" not in sent and "checkout_id" not in sent
    assert sent["description"] == "Pedido 42"

    transaction = db_session.scalars(select(Transaction)).one()
    assert transaction.referencia == "9001"
    assert transaction.checkout_id == 42
    assert transaction.cliente_nome == "Maria Souza"
    assert transaction.cliente_email == "maria@example.com"
    assert transaction.valor == 120.0

    activity = db_session.scalars(select(Activity)).one()
    assert activity.tipo == "transacao"
    assert activity.descricao == "Nova transação iniciada - 9001"


@pytest.mark.anyio
async def test_create_payment_gateway_error(client, db_session, gateway):
    gateway.error = GatewayError("MercadoPago unreachable: timed out")

    resp = await client.post("/api/mercadopago/payment", json={"transaction_amount": 10.0})

    assert resp.status_code == 502
    error = resp.json()["error"]
    assert error["code"] == "GATEWAY_ERROR"
    assert "details" not in error
    assert db_session.query(Transaction).count() == 0


@pytest.mark.anyio
async def test_create_payment_rejects_non_positive_amount(client, gateway):
    resp = await client.post("/api/mercadopago/payment", json={"transaction_amount": 0})

    assert resp.status_code == 400
    assert gateway.calls == []


@pytest.mark.anyio
async def test_create_payment_omits_absent_payer(client, gateway):
    resp = await client.post(
        "/api/mercadopago/payment", json={"transaction_amount": 15.0, "payment_method_id": "pix"}
    )

    assert resp.status_code == 201
    _, sent = gateway.calls[0]
    assert sent == {"transaction_amount": 15.0, "payment_method_id": "pix"}
