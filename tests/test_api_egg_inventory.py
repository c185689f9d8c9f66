"""Endpoint tests for /api/egg-inventory, in-process through TestClient."""
import uuid

import pytest

from farmledger.services import egg_inventory_service
from farmledger.services.egg_inventory_service import EggInventoryService
from farmledger.exceptions import InternalError

URL = "/api/egg-inventory"


def create(client, day, crack=1, jumbo=2, normal=3):
    r = client.post(URL, json={
        "date": day, "crack_eggs": crack, "jumbo_eggs": jumbo, "normal_eggs": normal,
    })
    assert r.status_code == 201, r.text
    return r.json()["inventory"]


# ---------------------------------------------------------------------------
# Create
# ---------------------------------------------------------------------------


@pytest.mark.api
def test_create_computes_total(client, inventory_payload):
    r = client.post(URL, json=inventory_payload)
    assert r.status_code == 201
    body = r.json()
    assert body["message"] == "Inventory created successfully"
    inventory = body["inventory"]
    assert inventory["date"] == "2024-05-01"
    assert inventory["total_eggs"] == 100
    assert uuid.UUID(inventory["id"])


@pytest.mark.api
def test_client_supplied_total_is_ignored(client, inventory_payload):
    r = client.post(URL, json={**inventory_payload, "total_eggs": 5})
    assert r.status_code == 201
    assert r.json()["inventory"]["total_eggs"] == 100


@pytest.mark.api
def test_date_defaults_to_today(client, monkeypatch):
    import datetime as dt
    monkeypatch.setattr(egg_inventory_service, "today", lambda: dt.date(2024, 6, 15))
    r = client.post(URL, json={"crack_eggs": 0, "jumbo_eggs": 0, "normal_eggs": 0})
    assert r.status_code == 201
    inventory = r.json()["inventory"]
    assert inventory["date"] == "2024-06-15"
    assert inventory["total_eggs"] == 0


@pytest.mark.api
def test_timestamp_date_keeps_calendar_day(client):
    r = client.post(URL, json={
        "date": "2024-05-02T00:00:00.000Z", "crack_eggs": 1, "jumbo_eggs": 1, "normal_eggs": 1,
    })
    assert r.status_code == 201
    assert r.json()["inventory"]["date"] == "2024-05-02"


@pytest.mark.api
def test_second_inventory_for_a_date_conflicts(client, inventory_payload):
    assert client.post(URL, json=inventory_payload).status_code == 201
    r = client.post(URL, json={**inventory_payload, "normal_eggs": 1})
    assert r.status_code == 400
    assert r.json() == {"error": "Inventory for this date already exists"}


@pytest.mark.api
def test_create_reports_invalid_counts(client):
    r = client.post(URL, json={"date": "not-a-date", "crack_eggs": -1, "jumbo_eggs": "many"})
    assert r.status_code == 400
    body = r.json()
    assert body["error"] == "Validation error"
    paths = [d["path"] for d in body["details"]]
    assert ["date"] in paths
    assert ["crack_eggs"] in paths
    assert ["jumbo_eggs"] in paths
    assert ["normal_eggs"] in paths


@pytest.mark.api
@pytest.mark.parametrize("value", [True, "5"])
def test_create_rejects_loosely_typed_counts(client, value):
    r = client.post(URL, json={
        "date": "2024-05-01", "crack_eggs": value, "jumbo_eggs": 2, "normal_eggs": 93,
    })
    assert r.status_code == 400
    paths = [d["path"] for d in r.json()["details"]]
    assert paths == [["crack_eggs"]]


# ---------------------------------------------------------------------------
# Read
# ---------------------------------------------------------------------------


@pytest.mark.api
def test_get_by_id(client, inventory_payload):
    created = client.post(URL, json=inventory_payload).json()["inventory"]
    r = client.get(URL, params={"id": created["id"]})
    assert r.status_code == 200
    assert r.json() == {"inventory": created}


@pytest.mark.api
def test_get_unknown_id_is_404(client):
    r = client.get(URL, params={"id": str(uuid.uuid4())})
    assert r.status_code == 404
    assert r.json() == {"error": "Inventory not found"}


@pytest.mark.api
def test_list_is_latest_date_first(client):
    for day in ("2024-05-03", "2024-05-01", "2024-05-02"):
        create(client, day)
    body = client.get(URL).json()
    assert [i["date"] for i in body["inventories"]] == ["2024-05-03", "2024-05-02", "2024-05-01"]
    assert body["pagination"] == {"page": 1, "limit": 10, "total": 3, "totalPages": 1}


@pytest.mark.api
def test_date_range_is_inclusive(client):
    for day in range(1, 11):
        create(client, f"2024-05-{day:02d}")

    body = client.get(URL, params={"startDate": "2024-05-03", "endDate": "2024-05-05"}).json()
    assert [i["date"] for i in body["inventories"]] == ["2024-05-05", "2024-05-04", "2024-05-03"]
    assert body["pagination"]["total"] == 3

    only_start = client.get(URL, params={"startDate": "2024-05-09"}).json()
    assert only_start["pagination"]["total"] == 2

    only_end = client.get(URL, params={"endDate": "2024-05-02", "limit": 1}).json()
    assert only_end["pagination"] == {"page": 1, "limit": 1, "total": 2, "totalPages": 2}


@pytest.mark.api
def test_bad_date_filter_is_400(client):
    r = client.get(URL, params={"startDate": "yesterday"})
    assert r.status_code == 400
    assert r.json()["details"][0]["path"] == ["query", "startDate"]


# ---------------------------------------------------------------------------
# Update
# ---------------------------------------------------------------------------


@pytest.mark.api
def test_update_one_count_recomputes_total(client, inventory_payload):
    created = client.post(URL, json=inventory_payload).json()["inventory"]
    r = client.put(URL, params={"id": created["id"]}, json={"crack_eggs": 11})
    assert r.status_code == 200
    body = r.json()
    assert body["message"] == "Inventory updated successfully"
    assert body["inventory"]["crack_eggs"] == 11
    assert body["inventory"]["jumbo_eggs"] == 20
    assert body["inventory"]["total_eggs"] == 101


@pytest.mark.api
def test_update_date_only_keeps_total(client, inventory_payload):
    created = client.post(URL, json=inventory_payload).json()["inventory"]
    r = client.put(URL, params={"id": created["id"]}, json={"date": "2024-05-09", "total_eggs": 3})
    assert r.status_code == 200
    assert r.json()["inventory"]["date"] == "2024-05-09"
    assert r.json()["inventory"]["total_eggs"] == 100


@pytest.mark.api
def test_update_onto_taken_date_conflicts(client):
    first = create(client, "2024-05-01")
    second = create(client, "2024-05-02")
    r = client.put(URL, params={"id": second["id"]}, json={"date": first["date"]})
    assert r.status_code == 400
    assert r.json()["error"] == "Inventory for this date already exists"

    same_day = client.put(URL, params={"id": second["id"]}, json={"date": second["date"]})
    assert same_day.status_code == 200


@pytest.mark.api
def test_update_rejects_null_count(client, inventory_payload):
    created = client.post(URL, json=inventory_payload).json()["inventory"]
    r = client.put(URL, params={"id": created["id"]}, json={"normal_eggs": None})
    assert r.status_code == 400


@pytest.mark.api
def test_update_requires_id(client):
    r = client.put(URL, json={"crack_eggs": 1})
    assert r.status_code == 400
    assert r.json()["error"] == "Inventory ID is required"


# ---------------------------------------------------------------------------
# Delete
# ---------------------------------------------------------------------------


@pytest.mark.api
def test_delete_then_404(client, inventory_payload):
    created = client.post(URL, json=inventory_payload).json()["inventory"]
    r = client.delete(URL, params={"id": created["id"]})
    assert r.status_code == 200
    assert r.json() == {"message": "Inventory deleted successfully"}

    again = client.delete(URL, params={"id": created["id"]})
    assert again.status_code == 404
    assert again.json() == {"error": "Inventory not found"}


@pytest.mark.api
def test_delete_requires_id(client):
    r = client.delete(URL)
    assert r.status_code == 400
    assert r.json()["error"] == "Inventory ID is required"


@pytest.mark.api
def test_internal_error_hides_details(client, monkeypatch):
    async def fail(self, data):
        raise InternalError("disk I/O error")

    monkeypatch.setattr(EggInventoryService, "create", fail)
    r = client.post(URL, json={"crack_eggs": 1, "jumbo_eggs": 1, "normal_eggs": 1})
    assert r.status_code == 500
    assert r.json() == {"error": "Internal server error"}
