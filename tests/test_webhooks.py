import pytest

from app.models import Activity
from app.services import webhooks as webhooks_service


@pytest.mark.anyio("asyncio")
async def test_subscription_crud(client, db_session):
    created = await client.post(
        "/api/webhooks", json={"evento": "mercadopago.payment", "url": "https://hooks.example/pay"}
    )
    assert created.status_code == 201
    body = created.json()
    assert body["ativo"] is True
    assert body["ultimoStatus"] is None
    subscription_id = body["id"]

    listed = await client.get("/api/webhooks")
    assert [item["id"] for item in listed.json()] == [subscription_id]

    updated = await client.put(f"/api/webhooks/{subscription_id}", json={"ativo": False})
    assert updated.status_code == 200
    assert updated.json()["ativo"] is False
    assert updated.json()["url"] == "https://hooks.example/pay"

    deleted = await client.delete(f"/api/webhooks/{subscription_id}")
    assert deleted.status_code == 204

    missing = await client.get(f"/api/webhooks/{subscription_id}")
    assert missing.status_code == 404
    assert missing.json()["error"]["code"] == "WEBHOOK_NOT_FOUND"

    descriptions = [a.descricao for a in db_session.query(Activity).order_by(Activity.id)]
    assert descriptions == [
        "Novo webhook criado - mercadopago.payment",
        "Webhook atualizado - mercadopago.payment",
        "Webhook removido - mercadopago.payment",
    ]


@pytest.mark.anyio("asyncio")
async def test_update_and_delete_unknown_subscription(client):
    resp = await client.put("/api/webhooks/999", json={"ativo": False})
    assert resp.status_code == 404

    resp = await client.delete("/api/webhooks/999")
    assert resp.status_code == 404


@pytest.mark.anyio("asyncio")
async def test_list_deliveries(client, db_session):
    webhooks_service.record_delivery(
        db_session, evento="payment", recurso_id="1", url="/hook", sucesso=True, dados={"id": 1}
    )
    webhooks_service.record_delivery(
        db_session, evento="merchant_order", recurso_id="2", url="/hook", sucesso=False,
        dados={"error": "boom"},
    )
    db_session.commit()

    resp = await client.get("/api/webhooks/entregas")
    assert resp.status_code == 200
    assert [item["recursoId"] for item in resp.json()] == ["2", "1"]

    filtered = await client.get("/api/webhooks/entregas", params={"evento": "payment"})
    items = filtered.json()
    assert len(items) == 1
    assert items[0]["sucesso"] is True
    assert items[0]["ultimoStatus"] == 200

    limited = await client.get("/api/webhooks/entregas", params={"limit": 1})
    assert len(limited.json()) == 1


@pytest.mark.anyio("asyncio")
async def test_activity_feed(client, db_session):
    await client.post("/api/webhooks", json={"evento": "mercadopago.payment", "url": "https://a.example"})
    await client.post("/api/webhooks", json={"evento": "mercadopago.merchant_order", "url": "https://b.example"})

    resp = await client.get("/api/atividades")
    assert resp.status_code == 200
    items = resp.json()
    assert [item["descricao"] for item in items] == [
        "Novo webhook criado - mercadopago.merchant_order",
        "Novo webhook criado - mercadopago.payment",
    ]
    assert items[0]["icone"] == "exchange-line"
    assert items[0]["cor"] == "secondary"

    limited = await client.get("/api/atividades", params={"limit": 1})
    assert len(limited.json()) == 1


@pytest.mark.anyio("asyncio")
@pytest.mark.parametrize("field", ["evento", "url", "ativo"])
async def test_update_rejects_null_for_required_fields(client, db_session, field):
    created = await client.post(
        "/api/webhooks", json={"evento": "mercadopago.payment", "url": "https://hooks.example/pay"}
    )
    subscription_id = created.json()["id"]

    resp = await client.put(f"/api/webhooks/{subscription_id}", json={field: None})

    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "VALIDATION_ERROR"
    unchanged = await client.get(f"/api/webhooks/{subscription_id}")
    assert unchanged.json()["evento"] == "mercadopago.payment"
    assert unchanged.json()["ativo"] is True


@pytest.mark.anyio("asyncio")
async def test_update_allows_clearing_last_status(client):
    created = await client.post(
        "/api/webhooks", json={"evento": "mercadopago.payment", "url": "https://hooks.example/pay"}
    )
    subscription_id = created.json()["id"]

    resp = await client.put(
        f"/api/webhooks/{subscription_id}", json={"ultimoStatus": None, "url": "https://hooks.example/v2"}
    )

    assert resp.status_code == 200
    assert resp.json()["ultimoStatus"] is None
    assert resp.json()["url"] == "https://hooks.example/v2"
