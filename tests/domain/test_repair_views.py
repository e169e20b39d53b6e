"""
Tests for the technician listing and repair detail endpoints.
"""

from app.models import Repair


def test_listing_orders_by_return_date_then_newest(api_client, db_session, make_intake):
    late = api_client.post("/repairs", json=make_intake(desired_return_date="2026-12-01")).json()
    undated = api_client.post("/repairs", json=make_intake(desired_return_date=None)).json()
    soon = api_client.post("/repairs", json=make_intake(desired_return_date="2026-11-01")).json()

    response = api_client.get("/repairs")

    assert response.status_code == 200
    ids = [r["id"] for r in response.json()["repairs"]]
    assert ids == [soon["id"], late["id"], undated["id"]]


def test_listing_totals_only_open_work(api_client, make_intake, mock_send_notification):
    first = api_client.post("/repairs", json=make_intake()).json()
    api_client.post("/repairs", json=make_intake())
    api_client.patch(f"/repairs/{first['id']}/status", json={"status": "completed"})

    body = api_client.get("/repairs").json()

    assert body["total_active_minutes"] == 30
    assert body["status_counts"] == {"completed": 1, "initial": 1}


def test_listing_filters_by_status(api_client, make_intake):
    first = api_client.post("/repairs", json=make_intake()).json()
    api_client.post("/repairs", json=make_intake())
    api_client.patch(f"/repairs/{first['id']}/status", json={"status": "in_repair"})

    body = api_client.get("/repairs", params={"status": "in_repair"}).json()

    assert [r["id"] for r in body["repairs"]] == [first["id"]]


def test_detail_lists_only_defects_with_items(api_client, make_intake, catalog):
    payload = make_intake(
        responses={
            str(catalog["tires"].id): "ng",
            str(catalog["chain"].id): "ok",
            str(catalog["brakes"].id): "ng",
        }
    )
    created = api_client.post("/repairs", json=payload).json()

    response = api_client.get(f"/repairs/{created['id']}")

    assert response.status_code == 200
    defects = response.json()["defects"]
    assert [d["category"] for d in defects] == ["Brakes", "Wheels"]
    assert all(d["status"] == "ng" for d in defects)
    assert defects[1]["estimated_labor_minutes"] == 20


def test_unknown_repair_is_not_found(api_client, catalog):
    assert api_client.get("/repairs/4242").status_code == 404


def test_views_require_authentication(anonymous_client, db_session):
    response = anonymous_client.get("/repairs")

    assert response.status_code == 401
    assert db_session.query(Repair).count() == 0
