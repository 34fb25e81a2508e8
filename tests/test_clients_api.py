"""HTTP tests for client onboarding, detail, counters and duplicate merge."""

from datetime import date, timedelta

from models import Booking, Client, BookingStatus


def test_create_and_list_clients(client):
    resp = client.post("/clients", json={
        "name": "  Zoe Adams ",
        "phone": "+447700900111",
        "preferred_time": "Mon 07:00, Thu 18:30",
        "on_holiday": "true",
        "sessions_left": 10,
    })
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["name"] == "Zoe Adams"
    assert body["on_holiday"] is True
    assert body["sessions_completed"] == 0

    client.post("/clients", json={"name": "Adam Brown"})
    names = [c["name"] for c in client.get("/clients").get_json()]
    assert names == ["Adam Brown", "Zoe Adams"]


def test_create_client_requires_name(client):
    assert client.post("/clients", json={"name": "   "}).status_code == 400
    assert client.post("/clients", json={"name": "x" * 121}).status_code == 400
    assert client.post("/clients", json={"name": "Ok", "sessions_left": "lots"}).status_code == 400


def test_client_details(client, make_client, make_booking):
    alice = make_client(preferred_time="Mon 07:00, , Thu 18:30", on_holiday=True)
    today = date.today()
    make_booking(alice, today + timedelta(days=1), "09:00")
    make_booking(alice, today + timedelta(days=2), "09:00", status=BookingStatus.CANCELLED)
    make_booking(alice, today - timedelta(days=40), "09:00")

    resp = client.get(f"/clients/{alice.id}")
    assert resp.status_code == 200
    body = resp.get_json()
    assert len(body["upcoming"]) == 1
    assert len(body["recent"]) == 1
    assert body["preferred_time_chips"] == ["Mon 07:00", "Thu 18:30"]
    assert body["holiday_text"] == "On holiday"

    assert client.get("/clients/999").status_code == 404


def test_adjust_counter(client, make_client):
    alice = make_client(sessions_left=2)

    resp = client.post(f"/clients/{alice.id}/counters", json={"target": "completed", "delta": 5})
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["applied"] == 2
    assert (body["client"]["sessions_left"], body["client"]["sessions_completed"]) == (0, 2)

    resp = client.post(f"/clients/{alice.id}/counters", json={"target": "left", "delta": 100})
    assert resp.get_json()["client"]["sessions_left"] == 5

    assert client.post(f"/clients/{alice.id}/counters", json={"target": "x", "delta": 1}).status_code == 400
    assert client.post(f"/clients/{alice.id}/counters", json={"target": "left"}).status_code == 400


def test_merge_duplicates(client, make_client, make_booking, reload):
    keep = make_client("Alice Johnson", email="alice@example.com")
    dup = make_client(" alice johnson ", email="ALICE@example.com ")
    other = make_client("Ben Carter")
    moved = make_booking(dup)
    make_booking(keep, start="11:00")

    preview = client.get("/clients/duplicates").get_json()
    assert len(preview) == 1
    assert preview[0]["keep"]["id"] == keep.id
    assert [d["id"] for d in preview[0]["duplicates"]] == [dup.id]

    resp = client.post("/clients/duplicates/merge")
    assert resp.status_code == 200
    assert resp.get_json()["bookings_moved"] == 1

    assert reload(Client, dup.id) is None
    assert reload(Client, other.id) is not None
    assert reload(Booking, moved.id).client_id == keep.id
    assert Booking.query.filter_by(client_id=keep.id).count() == 2


def test_merge_with_nothing_to_do(client, make_client):
    make_client("Solo")
    resp = client.post("/clients/duplicates/merge")
    assert resp.status_code == 200
    assert resp.get_json()["groups"] == []
