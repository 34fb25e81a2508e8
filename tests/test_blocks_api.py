"""HTTP tests for trainer blocks."""

from datetime import date

from models import TrainerBlock


def test_create_block_reports_overlapping_bookings(client, make_client, make_booking):
    alice = make_client()
    make_booking(alice, date(2024, 6, 10), "09:30", 60)
    make_booking(alice, date(2024, 6, 10), "11:00", 60)

    resp = client.post("/blocks", json={
        "date": "2024-06-10", "start": "09:00", "duration_minutes": 120, "note": " Physio ",
    })
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["block"]["end"] == "11:00"
    assert body["block"]["note"] == "Physio"
    assert body["overlapping_bookings"] == ["Alice Johnson @ 09:30-10:30"]


def test_create_block_validation(client):
    assert client.post("/blocks", json={"date": "2024-06-10", "start": "25:00"}).status_code == 400
    assert client.post("/blocks", json={"start": "09:00"}).status_code == 400
    resp = client.post("/blocks", json={"date": "2024-06-10", "start": "09:00", "duration_minutes": 0})
    assert resp.status_code == 400
    resp = client.post("/blocks", json={"date": "2024-06-10", "start": "09:00", "note": "n" * 161})
    assert resp.status_code == 400


def test_list_and_delete_blocks(client, make_block):
    lunch = make_block(date(2024, 6, 10))
    make_block(date(2024, 6, 11), "08:00")

    assert len(client.get("/blocks").get_json()) == 2
    rows = client.get("/blocks?date=2024-06-10").get_json()
    assert [r["id"] for r in rows] == [lunch.id]
    assert client.get("/blocks?date=10/06/2024").status_code == 400

    assert client.delete(f"/blocks/{lunch.id}").status_code == 200
    assert TrainerBlock.query.count() == 1
    assert client.delete(f"/blocks/{lunch.id}").status_code == 404
