"""Endpoint tests for /api/employee, in-process through TestClient."""
import uuid

import pytest

from farmledger.services import EmployeeService

URL = "/api/employee"


def detail_paths(body):
    return [d["path"] for d in body["details"]]


# ---------------------------------------------------------------------------
# Create
# ---------------------------------------------------------------------------


@pytest.mark.api
def test_create_returns_201_with_camel_case_record(client, employee_payload):
    r = client.post(URL, json=employee_payload)
    assert r.status_code == 201
    body = r.json()
    assert body["message"] == "Employee created successfully"
    employee = body["employee"]
    assert employee["fullName"] == "Asha Rao"
    assert employee["maritalStatus"] == "MARRIED"
    assert employee["aadharNumber"] == "123412341234"
    assert employee["salary"] == 15000.5
    assert uuid.UUID(employee["id"])
    assert "createdAt" in employee and "updatedAt" in employee


@pytest.mark.api
def test_create_rejects_duplicate_aadhar(client, employee_payload):
    assert client.post(URL, json=employee_payload).status_code == 201
    r = client.post(URL, json={**employee_payload, "fullName": "Someone Else"})
    assert r.status_code == 400
    assert r.json() == {"error": "Employee with this Aadhar number already exists"}

    listing = client.get(URL).json()
    assert listing["pagination"]["total"] == 1


@pytest.mark.api
def test_create_reports_every_invalid_field(client, employee_payload):
    bad = {
        **employee_payload,
        "age": 17,
        "phoneNumber": "98765",
        "aadharNumber": "1234abcd1234",
        "workEmployedToDo": "short",
    }
    r = client.post(URL, json=bad)
    assert r.status_code == 400
    body = r.json()
    assert body["error"] == "Validation error"
    paths = detail_paths(body)
    assert ["age"] in paths
    assert ["phoneNumber"] in paths
    assert ["aadharNumber"] in paths
    assert ["workEmployedToDo"] in paths
    messages = " ".join(d["message"] for d in body["details"])
    assert "Phone number must be 10 digits" in messages
    assert "Aadhar number must be 12 digits" in messages


@pytest.mark.api
def test_create_reports_missing_fields(client):
    r = client.post(URL, json={"fullName": "Asha Rao"})
    assert r.status_code == 400
    paths = detail_paths(r.json())
    assert ["age"] in paths
    assert ["salary"] in paths
    assert ["fullName"] not in paths


@pytest.mark.api
def test_create_rejects_non_object_body(client):
    r = client.post(URL, json=["not", "an", "object"])
    assert r.status_code == 400
    assert r.json()["error"] == "Validation error"


@pytest.mark.api
@pytest.mark.parametrize("salary", [0, -10, "10000000000"])
def test_create_rejects_out_of_range_salary(client, employee_payload, salary):
    r = client.post(URL, json={**employee_payload, "salary": salary})
    assert r.status_code == 400
    assert ["salary"] in detail_paths(r.json())


@pytest.mark.api
@pytest.mark.parametrize("field,value", [
    ("phoneNumber", "9876543210\n"),
    ("aadharNumber", "123412341234\n"),
])
def test_create_rejects_trailing_newline_in_numbers(client, employee_payload, field, value):
    r = client.post(URL, json={**employee_payload, field: value})
    assert r.status_code == 400
    assert [field] in detail_paths(r.json())


@pytest.mark.api
def test_aadhar_with_trailing_newline_is_not_a_second_record(client, employee_payload):
    assert client.post(URL, json=employee_payload).status_code == 201
    r = client.post(URL, json={
        **employee_payload,
        "fullName": "Someone Else",
        "aadharNumber": employee_payload["aadharNumber"] + "\n",
    })
    assert r.status_code == 400
    assert client.get(URL).json()["pagination"]["total"] == 1


@pytest.mark.api
@pytest.mark.parametrize("field,value", [
    ("age", "30"),
    ("age", True),
    ("salary", True),
])
def test_create_rejects_loosely_typed_numbers(client, employee_payload, field, value):
    r = client.post(URL, json={**employee_payload, field: value})
    assert r.status_code == 400
    assert [field] in detail_paths(r.json())


@pytest.mark.api
def test_salary_is_rounded_to_two_places(client, employee_payload):
    r = client.post(URL, json={**employee_payload, "salary": "100.005"})
    assert r.status_code == 201
    assert r.json()["employee"]["salary"] == 100.01


# ---------------------------------------------------------------------------
# Read
# ---------------------------------------------------------------------------


@pytest.mark.api
def test_get_by_id_returns_envelope(client, employee_payload):
    created = client.post(URL, json=employee_payload).json()["employee"]
    r = client.get(URL, params={"id": created["id"]})
    assert r.status_code == 200
    assert r.json() == {"employee": created}


@pytest.mark.api
def test_get_unknown_id_is_404(client):
    r = client.get(URL, params={"id": str(uuid.uuid4())})
    assert r.status_code == 404
    assert r.json() == {"error": "Employee not found"}


@pytest.mark.api
def test_malformed_id_is_400(client):
    r = client.get(URL, params={"id": "not-a-uuid"})
    assert r.status_code == 400
    assert "Invalid employee ID format" in r.json()["error"]


@pytest.mark.api
def test_empty_list(client):
    r = client.get(URL)
    assert r.status_code == 200
    assert r.json() == {
        "employees": [],
        "pagination": {"page": 1, "limit": 10, "total": 0, "totalPages": 0},
    }


@pytest.mark.api
def test_list_pages_cover_every_employee_newest_first(client, make_employee):
    for n in range(12):
        assert client.post(URL, json=make_employee(n)).status_code == 201

    seen = []
    for page in (1, 2, 3):
        body = client.get(URL, params={"page": page, "limit": 5}).json()
        assert body["pagination"] == {"page": page, "limit": 5, "total": 12, "totalPages": 3}
        seen.extend(e["fullName"] for e in body["employees"])

    assert seen == [f"Worker {n:03d}" for n in reversed(range(12))]

    beyond = client.get(URL, params={"page": 4, "limit": 5}).json()
    assert beyond["employees"] == []
    assert beyond["pagination"]["total"] == 12


@pytest.mark.api
@pytest.mark.parametrize("params", [
    {"page": 0},
    {"page": "abc"},
    {"limit": 0},
    {"limit": 101},
])
def test_list_rejects_bad_paging(client, params):
    r = client.get(URL, params=params)
    assert r.status_code == 400
    assert r.json()["error"] == "Validation error"


@pytest.mark.api
def test_search_matches_name_phone_and_aadhar(client, make_employee):
    client.post(URL, json=make_employee(1, fullName="Asha Rao", phoneNumber="9000000001"))
    client.post(URL, json=make_employee(2, fullName="Ravi Kumar", phoneNumber="9000000002"))
    client.post(URL, json=make_employee(3, fullName="Meena Das", aadharNumber="555566667777"))

    def names(search):
        body = client.get(URL, params={"search": search}).json()
        assert body["pagination"]["total"] == len(body["employees"])
        return sorted(e["fullName"] for e in body["employees"])

    assert names("asha") == ["Asha Rao"]
    assert names("RAVI") == ["Ravi Kumar"]
    assert names("0000002") == ["Ravi Kumar"]
    assert names("5555666") == ["Meena Das"]
    assert names("nobody") == []
    assert names("  ") == ["Asha Rao", "Meena Das", "Ravi Kumar"]


@pytest.mark.api
def test_search_treats_wildcards_literally(client, make_employee):
    client.post(URL, json=make_employee(1, fullName="Asha Rao"))
    body = client.get(URL, params={"search": "%"}).json()
    assert body["employees"] == []


# ---------------------------------------------------------------------------
# Update
# ---------------------------------------------------------------------------


@pytest.mark.api
def test_update_changes_only_supplied_fields(client, employee_payload):
    created = client.post(URL, json=employee_payload).json()["employee"]
    r = client.put(URL, params={"id": created["id"]}, json={"age": 31, "id": "ignored"})
    assert r.status_code == 200
    body = r.json()
    assert body["message"] == "Employee updated successfully"
    updated = body["employee"]
    assert updated["age"] == 31
    assert updated["id"] == created["id"]
    assert updated["fullName"] == created["fullName"]
    assert updated["salary"] == created["salary"]
    assert updated["updatedAt"] >= created["updatedAt"]


@pytest.mark.api
def test_update_keeping_own_aadhar_is_allowed(client, employee_payload):
    created = client.post(URL, json=employee_payload).json()["employee"]
    r = client.put(
        URL,
        params={"id": created["id"]},
        json={"aadharNumber": created["aadharNumber"], "fullName": "Asha R."},
    )
    assert r.status_code == 200
    assert r.json()["employee"]["fullName"] == "Asha R."


@pytest.mark.api
def test_update_to_another_employees_aadhar_conflicts(client, make_employee):
    first = client.post(URL, json=make_employee(1)).json()["employee"]
    second = client.post(URL, json=make_employee(2)).json()["employee"]
    r = client.put(URL, params={"id": second["id"]}, json={"aadharNumber": first["aadharNumber"]})
    assert r.status_code == 400
    assert r.json()["error"] == "Employee with this Aadhar number already exists"

    unchanged = client.get(URL, params={"id": second["id"]}).json()["employee"]
    assert unchanged["aadharNumber"] == second["aadharNumber"]


@pytest.mark.api
def test_update_rejects_explicit_null(client, employee_payload):
    created = client.post(URL, json=employee_payload).json()["employee"]
    r = client.put(URL, params={"id": created["id"]}, json={"fullName": None})
    assert r.status_code == 400
    assert ["fullName"] in detail_paths(r.json())


@pytest.mark.api
def test_update_validates_supplied_fields(client, employee_payload):
    created = client.post(URL, json=employee_payload).json()["employee"]
    r = client.put(URL, params={"id": created["id"]}, json={"phoneNumber": "12"})
    assert r.status_code == 400
    assert ["phoneNumber"] in detail_paths(r.json())


@pytest.mark.api
def test_update_requires_id(client):
    r = client.put(URL, json={"age": 40})
    assert r.status_code == 400
    assert r.json()["error"] == "Employee ID is required"


@pytest.mark.api
def test_update_unknown_id_is_404(client):
    r = client.put(URL, params={"id": str(uuid.uuid4())}, json={"age": 40})
    assert r.status_code == 404
    assert r.json() == {"error": "Employee not found"}


# ---------------------------------------------------------------------------
# Delete
# ---------------------------------------------------------------------------


@pytest.mark.api
def test_delete_removes_employee(client, employee_payload):
    created = client.post(URL, json=employee_payload).json()["employee"]
    r = client.delete(URL, params={"id": created["id"]})
    assert r.status_code == 200
    assert r.json() == {"message": "Employee deleted successfully"}

    assert client.get(URL, params={"id": created["id"]}).status_code == 404
    again = client.delete(URL, params={"id": created["id"]})
    assert again.status_code == 404
    assert again.json() == {"error": "Employee not found"}


@pytest.mark.api
def test_delete_requires_id(client):
    r = client.delete(URL)
    assert r.status_code == 400
    assert r.json()["error"] == "Employee ID is required"


@pytest.mark.api
def test_deleted_aadhar_can_be_reused(client, employee_payload):
    created = client.post(URL, json=employee_payload).json()["employee"]
    client.delete(URL, params={"id": created["id"]})
    assert client.post(URL, json=employee_payload).status_code == 201


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------


@pytest.mark.api
def test_unexpected_error_is_generic_500(lenient_client, monkeypatch):
    async def explode(self, **kwargs):
        raise RuntimeError("connection reset by peer")

    monkeypatch.setattr(EmployeeService, "list", explode)
    r = lenient_client.get(URL)
    assert r.status_code == 500
    assert r.json() == {"error": "Internal server error"}


@pytest.mark.api
def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "healthy"
