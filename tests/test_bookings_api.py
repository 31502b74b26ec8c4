import pytest

from app.models.enums import UserRole
from tests.conftest import auth_headers

API = "/api/v1/bookings"


def booking_body(shop, **overrides):
    body = {
        "vehicle_id": shop.truck,
        "bay_id": shop.bay_1,
        "company_id": shop.company,
        "technician_ids": [shop.alice],
        "start": "2025-01-10T09:00:00Z",
        "title": "PM service",
        "complaint": "Oil leak",
    }
    body.update(overrides)
    return body


async def test_conflict_then_close_frees_the_bay(client, shop, dispatcher_headers, mechanic_headers):
    first = await client.post(API, json=booking_body(shop), headers=dispatcher_headers)
    assert first.status_code == 201
    booking_a = first.json()
    assert booking_a["status"] == "open"
    assert booking_a["end"] is None
    assert booking_a["number"] == "000001"

    blocked = await client.post(API, json=booking_body(shop, start="2025-01-10T10:00:00Z"), headers=dispatcher_headers)
    assert blocked.status_code == 409
    assert blocked.json()["detail"] == "bay is already booked in this timeframe"

    closed = await client.put(f"{API}/{booking_a['id']}/close", headers=mechanic_headers)
    assert closed.status_code == 200
    assert closed.json()["status"] == "closed"
    assert closed.json()["end"] is not None

    retry = await client.post(API, json=booking_body(shop, start="2025-01-10T10:00:00Z"), headers=dispatcher_headers)
    assert retry.status_code == 201
    assert retry.json()["number"] == "000002"


async def test_back_to_back_bookings_are_allowed(client, shop, admin_headers):
    first = await client.post(
        API, json=booking_body(shop, end="2025-01-10T11:00:00Z"), headers=admin_headers
    )
    second = await client.post(
        API,
        json=booking_body(shop, start="2025-01-10T11:00:00Z", end="2025-01-10T12:00:00Z"),
        headers=admin_headers,
    )
    assert first.status_code == 201
    assert second.status_code == 201


async def test_update_does_not_conflict_with_itself(client, shop, admin_headers):
    created = (await client.post(API, json=booking_body(shop, end="2025-01-10T11:00:00Z"), headers=admin_headers)).json()

    moved = await client.put(
        f"{API}/{created['id']}",
        json=booking_body(shop, start="2025-01-10T09:30:00Z", end="2025-01-10T12:00:00Z", status="in_progress"),
        headers=admin_headers,
    )
    assert moved.status_code == 200
    assert moved.json()["status"] == "in_progress"
    assert moved.json()["start"].startswith("2025-01-10T09:30:00")


async def test_update_into_an_occupied_bay_is_rejected(client, shop, admin_headers):
    await client.post(API, json=booking_body(shop, bay_id=shop.bay_2), headers=admin_headers)
    other = (await client.post(API, json=booking_body(shop), headers=admin_headers)).json()

    response = await client.put(
        f"{API}/{other['id']}", json=booking_body(shop, bay_id=shop.bay_2), headers=admin_headers
    )
    assert response.status_code == 409


async def test_waiting_list_skips_conflict_checks(client, shop, admin_headers):
    for _ in range(2):
        response = await client.post(API, json=booking_body(shop, bay_id=shop.waiting), headers=admin_headers)
        assert response.status_code == 201

    waiting = await client.get(f"{API}/waiting-list", headers=admin_headers)
    assert waiting.status_code == 200
    assert len(waiting.json()) == 2

    agenda = await client.get(
        f"{API}/agenda",
        params={"from": "2025-01-10T00:00:00Z", "to": "2025-01-11T00:00:00Z"},
        headers=admin_headers,
    )
    assert agenda.json() == []


async def test_agenda_lists_active_bookings_only(client, shop, admin_headers):
    kept = (await client.post(API, json=booking_body(shop), headers=admin_headers)).json()
    dropped = (await client.post(
        API,
        json=booking_body(shop, bay_id=shop.bay_2, start="2025-01-10T13:00:00Z", end="2025-01-10T15:00:00Z"),
        headers=admin_headers,
    )).json()
    assert (await client.put(f"{API}/{dropped['id']}/cancel", headers=admin_headers)).status_code == 200

    agenda = await client.get(
        f"{API}/agenda",
        params={"from": "2025-01-10T00:00:00Z", "to": "2025-01-11T00:00:00Z"},
        headers=admin_headers,
    )
    assert agenda.status_code == 200
    assert [b["id"] for b in agenda.json()] == [kept["id"]]


async def test_occupancy_reports_open_ended_booking(client, shop, admin_headers):
    booking = (await client.post(API, json=booking_body(shop), headers=admin_headers)).json()

    response = await client.get(f"{API}/occupancy", params={"at": "2025-01-10T09:30:00Z"}, headers=admin_headers)
    assert response.status_code == 200
    by_bay = {entry["bay_id"]: entry for entry in response.json()["bays"]}
    assert by_bay[shop.bay_1]["booking"]["id"] == booking["id"]
    assert by_bay[shop.bay_2]["booking"] is None
    assert shop.waiting not in by_bay


@pytest.mark.parametrize("params", [
    {},
    {"from": "2025-01-10T00:00:00Z"},
    {"from": "yesterday", "to": "2025-01-11T00:00:00Z"},
])
async def test_agenda_rejects_missing_or_bad_bounds(client, shop, admin_headers, params):
    response = await client.get(f"{API}/agenda", params=params, headers=admin_headers)
    assert response.status_code == 400


async def test_agenda_accepts_fractional_seconds(client, shop, admin_headers):
    response = await client.get(
        f"{API}/agenda",
        params={"from": "2025-01-10T00:00:00.123456789Z", "to": "2025-01-11T00:00:00.5+00:00"},
        headers=admin_headers,
    )
    assert response.status_code == 200


async def test_closing_twice_is_an_invalid_state(client, shop, admin_headers):
    booking = (await client.post(API, json=booking_body(shop), headers=admin_headers)).json()
    assert (await client.put(f"{API}/{booking['id']}/close", headers=admin_headers)).status_code == 200

    again = await client.put(f"{API}/{booking['id']}/close", headers=admin_headers)
    cancel = await client.put(f"{API}/{booking['id']}/cancel", headers=admin_headers)
    assert again.status_code == 400
    assert cancel.status_code == 400


async def test_unknown_booking_is_not_found(client, shop, admin_headers):
    assert (await client.put(f"{API}/999/cancel", headers=admin_headers)).status_code == 404
    assert (await client.get(f"{API}/999", headers=admin_headers)).status_code == 404


async def test_unknown_bay_is_not_found(client, shop, admin_headers):
    response = await client.post(API, json=booking_body(shop, bay_id=999), headers=admin_headers)
    assert response.status_code == 404


async def test_unknown_technician_is_invalid_input(client, shop, admin_headers):
    response = await client.post(API, json=booking_body(shop, technician_ids=[shop.alice, 999]), headers=admin_headers)
    assert response.status_code == 400


async def test_end_before_start_fails_validation(client, shop, admin_headers):
    response = await client.post(
        API, json=booking_body(shop, end="2025-01-10T08:00:00Z"), headers=admin_headers
    )
    assert response.status_code == 422


async def test_roles_are_enforced(client, shop, mechanic_headers):
    assert (await client.post(API, json=booking_body(shop), headers=mechanic_headers)).status_code == 403
    assert (await client.post(API, json=booking_body(shop))).status_code == 401

    client_role = auth_headers(UserRole.CLIENT, user_id=9)
    assert (await client.get(API, headers=client_role)).status_code == 200


async def test_only_admin_deletes(client, shop, admin_headers, dispatcher_headers, mock_broadcaster):
    booking = (await client.post(API, json=booking_body(shop), headers=admin_headers)).json()

    assert (await client.delete(f"{API}/{booking['id']}", headers=dispatcher_headers)).status_code == 403
    assert (await client.delete(f"{API}/{booking['id']}", headers=admin_headers)).status_code == 204
    assert (await client.get(f"{API}/{booking['id']}", headers=admin_headers)).status_code == 404
    mock_broadcaster.publish.assert_called_with(
        "booking.deleted", {"id": booking["id"], "number": booking["number"]}
    )


async def test_list_filters_by_technician(client, shop, admin_headers):
    await client.post(API, json=booking_body(shop), headers=admin_headers)
    await client.post(API, json=booking_body(shop, bay_id=shop.bay_2, technician_ids=[shop.bob]), headers=admin_headers)

    response = await client.get(API, params={"technician_id": shop.bob}, headers=admin_headers)
    assert response.status_code == 200
    assert [b["technician_ids"] for b in response.json()] == [[shop.bob]]


async def test_mutations_are_audited(client, shop, admin_headers):
    booking = (await client.post(API, json=booking_body(shop), headers=admin_headers)).json()
    await client.put(
        f"{API}/{booking['id']}",
        json=booking_body(shop, technician_ids=[shop.bob], title="Brake job"),
        headers=admin_headers,
    )

    logs = (await client.get(f"{API}/{booking['id']}/logs", headers=admin_headers)).json()
    actions = [entry["action"] for entry in logs]
    assert actions == ["booking.updated", "booking.created"]
    diff = logs[0]["meta"]
    assert diff["title"] == {"from": "PM service", "to": "Brake job"}
    assert diff["technicians_added"] == [shop.bob]
    assert diff["technicians_removed"] == [shop.alice]

    assigned = (await client.get(
        "/api/v1/logs", params={"action": "booking.assigned"}, headers=admin_headers
    )).json()
    assert {entry["entity_id"] for entry in assigned} == {shop.alice, shop.bob}


async def test_events_and_notifications_follow_commits(client, shop, admin_headers, mock_broadcaster, mock_telegram):
    booking = (await client.post(API, json=booking_body(shop), headers=admin_headers)).json()

    event_type, payload = mock_broadcaster.publish.call_args.args
    assert event_type == "booking.created"
    assert payload.id == booking["id"]

    mock_telegram.notify.assert_awaited_once()
    message = mock_telegram.notify.await_args.args[0]
    assert "New booking" in message
    assert "#000001" in message
    assert "Bay-1-1" in message


async def test_update_without_template_sends_nothing(client, shop, admin_headers, mock_telegram):
    booking = (await client.post(API, json=booking_body(shop), headers=admin_headers)).json()
    mock_telegram.notify.reset_mock()

    await client.put(f"{API}/{booking['id']}", json=booking_body(shop, title="Changed"), headers=admin_headers)
    mock_telegram.notify.assert_not_awaited()


async def test_notification_failure_does_not_fail_the_booking(client, shop, admin_headers, mock_telegram):
    mock_telegram.notify.side_effect = RuntimeError("telegram down")
    response = await client.post(API, json=booking_body(shop), headers=admin_headers)
    assert response.status_code == 201


async def test_csv_export(client, shop, admin_headers):
    await client.post(API, json=booking_body(shop, end="2025-01-10T11:00:00Z"), headers=admin_headers)

    response = await client.get(API, params={"export": "csv"}, headers=admin_headers)
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert 'filename="bookings-' in response.headers["content-disposition"]
    lines = response.text.strip().splitlines()
    assert lines[0] == "number,complaint,description,unit,bay,company,technicians,start,end,status"
    assert lines[1].startswith("000001,Oil leak,,TRK-100,Bay-1-1,Acme Freight,Alice Moreno,")
    assert '"01/10/2025, 04:00 AM","01/10/2025, 06:00 AM",open' in lines[1]
