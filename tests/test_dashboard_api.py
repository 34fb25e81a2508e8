"""HTTP tests for the dashboard, management summary and calendar feed."""

from datetime import date, timedelta

from models import BookingStatus


def test_index_redirects_to_dashboard(client):
    resp = client.get("/")
    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/dashboard")


def test_month_dashboard(client, make_client, make_booking, make_block):
    alice = make_client()
    make_booking(alice, date(2024, 6, 10), "09:00", 60)
    make_booking(alice, date(2024, 6, 10), "10:30", 30)
    make_booking(alice, date(2024, 6, 10), "15:00", 60, status=BookingStatus.CANCELLED)
    make_block(date(2024, 6, 10), "12:00", 60)

    resp = client.get("/dashboard?year=2024&month=6&selected=2024-06-10")
    assert resp.status_code == 200
    body = resp.get_json()

    assert len(body["cells"]) == 42
    assert body["cells"][0]["date"] == "2024-05-27"
    june_10 = next(c for c in body["cells"] if c["date"] == "2024-06-10")
    assert june_10["booking_count"] == 2
    assert body["prev"] == {"year": 2024, "month": 5}
    assert body["next"] == {"year": 2024, "month": 7}

    selected = body["selected"]
    assert [b["start"] for b in selected["bookings"]] == ["09:00", "10:30"]
    assert [(g["start"], g["end"]) for g in selected["gaps"]] == [
        ("06:00", "09:00"),
        ("10:00", "10:30"),
        ("11:00", "12:00"),
        ("13:00", "22:00"),
    ]


def test_month_dashboard_validation(client):
    assert client.get("/dashboard?year=2024&month=13").status_code == 400
    assert client.get("/dashboard?year=2024&month=0").status_code == 400
    assert client.get("/dashboard?year=9999&month=12").status_code == 400
    assert client.get("/dashboard?year=twenty&month=6").status_code == 400
    assert client.get("/dashboard?selected=june").status_code == 400
    assert client.get("/dashboard?year=9998&month=12").status_code == 200


def test_week_dashboard(client, make_client, make_booking):
    alice = make_client()
    today = date.today()
    make_booking(alice, today + timedelta(days=2), "11:00")
    make_booking(alice, today + timedelta(days=1), "09:00")
    make_booking(alice, today + timedelta(days=1), "07:00", status=BookingStatus.CANCELLED)
    make_booking(alice, today + timedelta(days=10), "09:00")

    rows = client.get("/dashboard/week").get_json()["bookings"]
    assert [(r["date"], r["start"]) for r in rows] == [
        ((today + timedelta(days=1)).isoformat(), "09:00"),
        ((today + timedelta(days=2)).isoformat(), "11:00"),
    ]


def test_management_summary(client, make_client, make_booking):
    alice = make_client()
    today = date.today()
    start_of_week = today - timedelta(days=today.weekday())
    make_booking(alice, start_of_week, "09:00")
    cancelled = make_booking(alice, start_of_week, "11:00")
    client.post(f"/bookings/{cancelled.id}/cancel")

    body = client.get("/management").get_json()
    assert body["total_clients"] == 1
    assert body["bookings_this_week"] == 1
    assert body["cancellations_this_week"] == 1
    assert body["recent_changes"][0]["action"] == "BOOKING_CANCEL"


def test_calendar_feed(client, make_client, make_booking):
    alice = make_client("Alice, Johnson", gym="Central; Gym")
    today = date.today()
    upcoming = make_booking(alice, today + timedelta(days=1), "09:00", 75)
    make_booking(alice, today + timedelta(days=1), "12:00", status=BookingStatus.CANCELLED)
    make_booking(alice, today - timedelta(days=30), "09:00")

    resp = client.get("/calendar.ics")
    assert resp.status_code == 200
    assert resp.mimetype == "text/calendar"
    text = resp.get_data(as_text=True)

    assert text.startswith("BEGIN:VCALENDAR\r\n")
    assert text.count("BEGIN:VEVENT") == 1
    assert f"UID:tbs-{upcoming.id}@trainerbooking" in text
    day = (today + timedelta(days=1)).strftime("%Y%m%d")
    assert f"DTSTART:{day}T090000" in text
    assert f"DTEND:{day}T101500" in text
    assert "SUMMARY:Alice\\, Johnson - Training" in text
    assert "LOCATION:Central\\; Gym" in text
