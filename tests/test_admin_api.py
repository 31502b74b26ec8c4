from app.crud import crud_bay
from app.crud.crud_bay import DEFAULT_BAY_NAMES

BOOKING = {
    "start": "2025-01-10T09:00:00Z",
    "title": "Brake job",
}


async def test_bay_crud(client, shop, admin_headers, dispatcher_headers):
    created = await client.post("/api/v1/bays", json={"name": "Wash-Bay"}, headers=dispatcher_headers)
    assert created.status_code == 201
    bay = created.json()
    assert bay["key"] == "Wash-Bay"

    duplicate = await client.post("/api/v1/bays", json={"name": "Other", "key": "Wash-Bay"}, headers=admin_headers)
    assert duplicate.status_code == 400

    renamed = await client.put(f"/api/v1/bays/{bay['id']}", json={"name": "Wash Bay"}, headers=dispatcher_headers)
    assert renamed.status_code == 200
    assert renamed.json()["name"] == "Wash Bay"

    assert (await client.delete(f"/api/v1/bays/{bay['id']}", headers=dispatcher_headers)).status_code == 403
    assert (await client.delete(f"/api/v1/bays/{bay['id']}", headers=admin_headers)).status_code == 204
    assert (await client.get(f"/api/v1/bays/{bay['id']}", headers=admin_headers)).status_code == 404


async def test_bay_with_active_booking_cannot_be_deleted(client, shop, admin_headers):
    body = dict(BOOKING, vehicle_id=shop.truck, bay_id=shop.bay_2)
    assert (await client.post("/api/v1/bookings", json=body, headers=admin_headers)).status_code == 201

    response = await client.delete(f"/api/v1/bays/{shop.bay_2}", headers=admin_headers)
    assert response.status_code == 400
    assert "active bookings" in response.json()["detail"]


async def test_logs_limit_is_bounded(client, shop, admin_headers, dispatcher_headers):
    assert (await client.get("/api/v1/logs", params={"limit": 0}, headers=admin_headers)).status_code == 400
    assert (await client.get("/api/v1/logs", params={"limit": 1001}, headers=admin_headers)).status_code == 400
    assert (await client.get("/api/v1/logs", headers=dispatcher_headers)).status_code == 403
    assert (await client.get("/api/v1/logs", headers=admin_headers)).json() == []


async def test_dashboard_summary(client, shop, admin_headers):
    for bay in (shop.bay_1, shop.bay_2):
        body = dict(BOOKING, vehicle_id=shop.truck, bay_id=bay, company_id=shop.company, technician_ids=[shop.alice])
        await client.post("/api/v1/bookings", json=body, headers=admin_headers)

    response = await client.get("/api/v1/dashboard/summary", headers=admin_headers)
    assert response.status_code == 200
    summary = response.json()
    assert summary["open_bookings"] == 2
    assert summary["bays"] == 3
    assert summary["top"]["technicians"] == [{"id": shop.alice, "name": "Alice Moreno", "count": 2}]
    assert summary["top"]["units"] == [{"id": shop.truck, "name": "TRK-100", "count": 2}]
    assert summary["top"]["companies"][0]["count"] == 2
    assert len(summary["top"]["bays"]) == 2


async def test_telegram_settings_roundtrip(client, shop, admin_headers, dispatcher_headers, mock_telegram):
    assert (await client.get("/api/v1/settings/telegram", headers=admin_headers)).json() == {
        "telegram_token": "", "telegram_chat": "", "telegram_template": "",
    }

    payload = {"telegram_token": "123:abc", "telegram_chat": "-1001", "telegram_template": "{status_name} #{number}"}
    assert (await client.put("/api/v1/settings/telegram", json=payload, headers=dispatcher_headers)).status_code == 403
    saved = await client.put("/api/v1/settings/telegram", json=payload, headers=admin_headers)
    assert saved.json() == {"success": True}
    mock_telegram.update.assert_called_once_with("123:abc", "-1001")
    assert (await client.get("/api/v1/settings/telegram", headers=admin_headers)).json() == payload

    body = dict(BOOKING, vehicle_id=shop.truck, bay_id=shop.bay_1)
    booking = (await client.post("/api/v1/bookings", json=body, headers=admin_headers)).json()
    assert mock_telegram.notify.await_args.args[0] == "New booking #000001"

    mock_telegram.notify.reset_mock()
    await client.put(
        f"/api/v1/bookings/{booking['id']}",
        json=dict(body, start="2025-01-10T10:00:00Z"),
        headers=admin_headers,
    )
    assert mock_telegram.notify.await_args.args[0] == "Booking rescheduled #000001"

    preview = await client.get(
        "/api/v1/settings/telegram/preview", params={"booking_id": booking["id"]}, headers=admin_headers
    )
    assert preview.status_code == 200
    assert preview.json()["message"] == "{status_name} #000001"


async def test_preview_uses_default_template(client, shop, admin_headers):
    body = dict(BOOKING, vehicle_id=shop.trailer, bay_id=shop.bay_1)
    booking = (await client.post("/api/v1/bookings", json=body, headers=admin_headers)).json()

    preview = (await client.get(
        "/api/v1/settings/telegram/preview", params={"booking_id": booking["id"]}, headers=admin_headers
    )).json()
    assert preview["message"].splitlines() == [
        "Booking 000001: Brake job",
        "Unit: 1GRAA0621KB700001",
        "Bay: Bay-1-1",
        "Start: 01/10/2025, 04:00 AM",
        "Status: open",
    ]


async def test_seed_bays_once(db):
    assert await crud_bay.seed_if_empty(db, waiting_list_key="WaitingList") == len(DEFAULT_BAY_NAMES) + 1
    assert await crud_bay.seed_if_empty(db, waiting_list_key="WaitingList") == 0
    assert await crud_bay.get_by_key(db, key="WaitingList") is not None


async def test_health(client):
    response = await client.get("/health")
    assert response.json() == {"status": "ok"}
