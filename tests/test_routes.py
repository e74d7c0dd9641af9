import pytest

from configs import db
from db.models import User
from db.models.user import UserRole


@pytest.fixture
def stocked(client, hq_headers, ledger, metric):
    """Create an item and 10 units of HQ stock through the API."""
    r = client.post("/items", json={"name": "VHF Handset", "ledger_id": 2}, headers=hq_headers)
    item = r.get_json()
    client.post(
        "/stock/hq",
        json={"item_id": item["id"], "metric_id": metric.id, "quantity": 10},
        headers=hq_headers,
    )
    return item


def _iv_body(item, district, staff, quantity, returnable=True):
    return {
        "receiving_staff_g_no": staff.g_no,
        "receiving_district_id": district.id,
        "approval_authority": "Addl. DGP",
        "approval_date": "2024-03-01",
        "lines": [{"item_id": item["id"], "quantity": quantity, "is_returnable": returnable}],
    }


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.get_json()["status"] == "ok"


def test_missing_or_unknown_identity(client, hq_user):
    r = client.get("/items")
    assert r.status_code == 401
    assert r.get_json()["error"] == "unauthorized"

    assert client.get("/items", headers={"X-User-Id": "999"}).status_code == 401
    assert client.get("/items", headers={"X-User-Id": "abc"}).status_code == 401


def test_inactive_user_is_rejected(client, hq_user, hq_headers):
    hq_user.is_active = False
    db.session.commit()

    assert client.get("/auth/me", headers=hq_headers).status_code == 401


def test_me(client, district_headers, district):
    body = client.get("/auth/me", headers=district_headers).get_json()
    assert body["username"] == "districtadmin"
    assert body["role"] == "DISTRICT_ADMIN"
    assert body["district_id"] == district.id


def test_item_create_and_preview(client, hq_headers, ledger):
    assert client.get("/ledgers/2/next-code", headers=hq_headers).get_json()["code"] == "L2-001"

    r = client.post("/items", json={"name": "VHF Handset", "ledger_id": 2}, headers=hq_headers)

    assert r.status_code == 201
    assert r.get_json()["code"] == "L2-001"
    assert r.get_json()["ledger_name"] == "Volume II"
    assert client.get("/ledgers/2/next-code", headers=hq_headers).get_json()["code"] == "L2-002"


def test_item_writes_need_hq_role(client, district_headers, ledger):
    r = client.post("/items", json={"name": "Radio", "ledger_id": 2}, headers=district_headers)

    assert r.status_code == 403
    assert r.get_json()["error"] == "forbidden"


def test_error_bodies(client, hq_headers, ledger, stocked):
    r = client.post("/items", json={"name": "", "ledger_id": 2}, headers=hq_headers)
    assert r.status_code == 400
    assert r.get_json() == {
        "error": "validation_error",
        "message": "Item name is required.",
        "field": "name",
    }

    r = client.get("/items/999", headers=hq_headers)
    assert r.status_code == 404
    assert r.get_json()["message"] == "Item #999 not found."

    r = client.delete(f"/items/{stocked['id']}", headers=hq_headers)
    assert r.status_code == 409
    assert r.get_json()["error"] == "item_in_use"

    r = client.patch(f"/items/{stocked['id']}", json={"code": "L9-001"}, headers=hq_headers)
    assert r.status_code == 400


def test_malformed_ids_are_field_errors(client, hq_headers, stocked, district, staff, metric):
    r = client.post(
        "/stock/hq",
        json={"item_id": "abc", "metric_id": metric.id, "quantity": 1},
        headers=hq_headers,
    )
    assert r.status_code == 400
    assert r.get_json()["field"] == "item_id"

    body = {**_iv_body(stocked, district, staff, 1), "receiving_district_id": "abc"}
    r = client.post("/hq/ivs", json=body, headers=hq_headers)
    assert r.status_code == 400
    assert r.get_json()["field"] == "receiving_district_id"

    body = _iv_body(stocked, district, staff, 1)
    del body["receiving_district_id"]
    r = client.post("/hq/ivs", json=body, headers=hq_headers)
    assert r.status_code == 400

    r = client.get(f"/stock/hq/{stocked['id']}", headers=hq_headers)
    assert r.get_json()["quantity"] == 10


def test_hq_stock_and_default_threshold(client, hq_headers, stocked, app):
    r = client.get(f"/stock/hq/{stocked['id']}", headers=hq_headers)

    assert r.get_json()["quantity"] == 10
    assert r.get_json()["low_stock_threshold"] == app.config["DEFAULT_ITEM_LOW_STOCK_THRESHOLD"]

    client.put(
        f"/stock/hq/{stocked['id']}/threshold",
        json={"low_stock_threshold": 10},
        headers=hq_headers,
    )
    low = client.get("/stock/low", headers=hq_headers).get_json()
    assert [x["item_id"] for x in low] == [stocked["id"]]
    assert client.get("/stock/low?threshold=10", headers=hq_headers).get_json() == []
    assert len(client.get("/stock/low?mode=global", headers=hq_headers).get_json()) == 0


def test_issue_and_return_over_http(client, hq_headers, stocked, district, staff):
    r = client.post("/hq/ivs", json=_iv_body(stocked, district, staff, 6), headers=hq_headers)
    assert r.status_code == 201
    iv = r.get_json()
    assert iv["iv_number"].startswith("IV/")
    assert iv["movements"][0]["quantity"] == 6

    returnable = client.get(f"/hq/ivs/{iv['id']}/returnable", headers=hq_headers).get_json()
    assert returnable[0]["remaining_quantity"] == 6

    r = client.post(
        "/hq/lars",
        json={
            "iv_id": iv["id"],
            "lines": [{"movement_id": returnable[0]["movement_id"], "quantity": 2}],
        },
        headers=hq_headers,
    )
    assert r.status_code == 201
    assert r.get_json()["iv_number"] == iv["iv_number"]

    detail = client.get(f"/hq/ivs/{iv['id']}", headers=hq_headers).get_json()
    assert detail["movements"][0]["returned_quantity"] == 2
    assert len(detail["lars"]) == 1

    hq = client.get(f"/stock/current/{stocked['id']}", headers=hq_headers).get_json()
    dist = client.get(
        f"/stock/current/{stocked['id']}?district_id={district.id}", headers=hq_headers
    ).get_json()
    assert (hq["quantity"], dist["quantity"]) == (6, 4)

    outstanding = client.get("/hq/ivs?outstanding=1", headers=hq_headers).get_json()
    assert [x["id"] for x in outstanding] == [iv["id"]]


def test_over_issue_over_http(client, hq_headers, stocked, district, staff):
    r = client.post("/hq/ivs", json=_iv_body(stocked, district, staff, 11), headers=hq_headers)

    assert r.status_code == 400
    assert r.get_json()["field"] == "quantity"
    assert client.get(f"/stock/hq/{stocked['id']}", headers=hq_headers).get_json()["quantity"] == 10


def test_district_admin_is_scoped_to_own_district(
    client, hq_headers, district_headers, stocked, district, other_district, staff
):
    client.post("/hq/ivs", json=_iv_body(stocked, district, staff, 5, False), headers=hq_headers)

    own = client.get(f"/stock/districts/{district.id}", headers=district_headers)
    assert own.status_code == 200
    assert [x["ledger"] for x in own.get_json()["ledger_ii"]] == ["Ledger-II"]

    assert client.get(f"/stock/districts/{other_district.id}", headers=district_headers).status_code == 403
    assert client.get(f"/stock/districts/{other_district.id}", headers=hq_headers).status_code == 200

    r = client.post(
        f"/districts/{district.id}/ivs",
        json={
            "receiving_staff_g_no": staff.g_no,
            "receiving_office_name": "Guntur Control Room",
            "lines": [{"item_id": stocked["id"], "quantity": 2, "is_returnable": False}],
        },
        headers=district_headers,
    )
    assert r.status_code == 201
    assert r.get_json()["iv_number"].startswith("DIST-IV/")
    assert len(client.get(f"/districts/{district.id}/ivs", headers=district_headers).get_json()) == 1


def test_district_lar_must_belong_to_the_district(
    client, hq_headers, stocked, district, other_district, staff
):
    client.post("/hq/ivs", json=_iv_body(stocked, district, staff, 5), headers=hq_headers)
    div = client.post(
        f"/districts/{district.id}/ivs",
        json={
            "receiving_staff_g_no": staff.g_no,
            "receiving_office_name": "Guntur Control Room",
            "lines": [{"item_id": stocked["id"], "quantity": 3}],
        },
        headers=hq_headers,
    ).get_json()
    line = {"movement_id": div["movements"][0]["id"], "quantity": 1}

    r = client.post(
        f"/districts/{other_district.id}/lars",
        json={"district_iv_id": div["id"], "lines": [line]},
        headers=hq_headers,
    )
    assert r.status_code == 404

    r = client.post(
        f"/districts/{district.id}/lars",
        json={"district_iv_id": div["id"], "lines": [line]},
        headers=hq_headers,
    )
    assert r.status_code == 201
    assert r.get_json()["lar_number"].startswith("DIST-LAR/")


def test_loans_over_http(client, hq_headers, stocked, metric):
    r = client.post(
        "/loans",
        json={
            "item_id": stocked["id"],
            "metric_id": metric.id,
            "quantity": 1,
            "source_wing": "SIB Wing",
            "event_name": "Independence Day",
        },
        headers=hq_headers,
    )
    assert r.status_code == 201
    loan = r.get_json()
    assert loan["status"] == "Loaned"
    assert loan["expected_return_date"]

    r = client.post(f"/loans/{loan['id']}/return", json={"returned_to": "HQ"}, headers=hq_headers)
    assert r.get_json()["status"] == "Returned"
    assert client.get("/loans?status=returned", headers=hq_headers).get_json()[0]["id"] == loan["id"]


def test_master_data_endpoints(client, hq_headers, district_headers):
    r = client.post(
        "/staff", json={"g_no": "G67890", "name": "Srinivas Rao"}, headers=hq_headers
    )
    assert r.status_code == 201
    assert client.get("/staff/G67890", headers=district_headers).get_json()["name"] == "Srinivas Rao"

    dup = client.post("/staff", json={"g_no": "G67890", "name": "Other"}, headers=hq_headers)
    assert dup.status_code == 400
    assert dup.get_json()["field"] == "g_no"

    assert client.post("/metrics", json={"name": "KGs"}, headers=district_headers).status_code == 403


def test_district_admin_without_district_cannot_write_master_data(client, app):
    u = User(username="viewer", role=UserRole.DISTRICT_ADMIN, district_id=None)
    db.session.add(u)
    db.session.commit()

    r = client.post("/ledgers", json={"name": "Volume VII"}, headers={"X-User-Id": str(u.id)})
    assert r.status_code == 403
