import pytest


def _create(client, headers, business_id, **overrides):
    body = {
        "business_id": business_id,
        "first_name": "Robin",
        "last_name": "Diaz",
        "phone_number": "555-987-0000",
        "role": "MANAGER",
        "pin_code": "2468",
    }
    body.update(overrides)
    return client.post("/api/employees", headers=headers, json=body)


def test_create_employee_uses_role_template(client, business, auth_headers):
    response = _create(client, auth_headers, business.id)
    assert response.status_code == 201
    employee = response.json()
    assert "pin_code" not in employee
    assert employee["status"] == "ACTIVE"
    assert employee["permissions"]["viewReports"] is True
    assert employee["permissions"]["manageEmployees"] is False


def test_explicit_permissions_override_template(client, business, auth_headers):
    response = _create(client, auth_headers, business.id, role="STAFF", permissions={"viewReports": True})
    permissions = response.json()["permissions"]
    assert permissions["viewReports"] is True
    assert permissions["processTransactions"] is True
    assert permissions["manageSettings"] is False


def test_update_single_permission_keeps_the_rest(client, employee, auth_headers):
    response = client.put(
        f"/api/employees/{employee.id}",
        headers=auth_headers,
        json={"permissions": {"manageCustomers": True}},
    )
    permissions = response.json()["permissions"]
    assert permissions["manageCustomers"] is True
    assert permissions["manageOrders"] is True


def test_pin_must_be_four_digits(client, business, auth_headers):
    response = _create(client, auth_headers, business.id, pin_code="12")
    assert response.status_code == 422
    assert response.json()["detail"]["message"] == "PIN must be exactly 4 digits"


def test_duplicate_pin_is_409(client, business, employee, auth_headers):
    response = _create(client, auth_headers, business.id, pin_code="4321")
    assert response.status_code == 409
    assert response.json()["detail"]["field"] == "pin_code"


def test_pin_availability(client, business, employee, auth_headers):
    params = {"business_id": business.id, "pin_code": "4321"}
    assert client.get("/api/employees/pin-availability", headers=auth_headers, params=params).json()["available"] is False
    params["exclude_id"] = employee.id
    assert client.get("/api/employees/pin-availability", headers=auth_headers, params=params).json()["available"] is True
    params["pin_code"] = "abcd"
    assert client.get("/api/employees/pin-availability", headers=auth_headers, params=params).status_code == 400


def test_verify_pin(client, business, employee, auth_headers):
    ok = client.post("/api/employees/verify-pin", headers=auth_headers, json={"business_id": business.id, "pin_code": "4321"})
    assert ok.status_code == 200
    assert ok.json()["id"] == employee.id

    bad = client.post("/api/employees/verify-pin", headers=auth_headers, json={"business_id": business.id, "pin_code": "0000"})
    assert bad.status_code == 401


def test_suspended_employee_cannot_verify_pin(client, business, employee, auth_headers):
    client.put(f"/api/employees/{employee.id}", headers=auth_headers, json={"status": "SUSPENDED"})
    response = client.post("/api/employees/verify-pin", headers=auth_headers, json={"business_id": business.id, "pin_code": "4321"})
    assert response.status_code == 403


def test_role_change_resets_permissions(client, employee, auth_headers):
    response = client.put(f"/api/employees/{employee.id}", headers=auth_headers, json={"role": "ADMIN"})
    assert response.status_code == 200
    assert all(response.json()["permissions"].values())


def test_list_filters_by_status(client, business, employee, auth_headers):
    _create(client, auth_headers, business.id, status="INACTIVE")
    active = client.get("/api/employees", headers=auth_headers, params={"business_id": business.id, "status": "active"})
    assert [e["id"] for e in active.json()] == [employee.id]


def test_clock_in_out_and_performance(client, employee, auth_headers):
    clock_in = client.post(f"/api/employees/{employee.id}/clock-in", headers=auth_headers)
    assert clock_in.status_code == 201
    assert clock_in.json()["status"] == "ACTIVE"

    assert client.post(f"/api/employees/{employee.id}/clock-in", headers=auth_headers).status_code == 409

    clock_out = client.post(f"/api/employees/{employee.id}/clock-out", headers=auth_headers, json={"notes": "done"})
    assert clock_out.status_code == 200
    assert clock_out.json()["status"] == "COMPLETED"
    assert clock_out.json()["duration"] is not None

    assert client.post(f"/api/employees/{employee.id}/clock-out", headers=auth_headers).status_code == 409

    shifts = client.get(f"/api/employees/{employee.id}/shifts", headers=auth_headers, params={"period": "day"})
    assert len(shifts.json()) == 1

    performance = client.get(f"/api/employees/{employee.id}/performance", headers=auth_headers).json()
    assert performance["period"] == "week"
    assert performance["metrics"]["totalShifts"] == 1
    assert performance["metrics"]["completedShifts"] == 1
    assert performance["active_shift"] is None


def test_unknown_period_is_422(client, employee, auth_headers):
    response = client.get(f"/api/employees/{employee.id}/shifts", headers=auth_headers, params={"period": "decade"})
    assert response.status_code == 422


def test_employees_are_private_to_their_owner(client, employee, other_headers):
    assert client.get(f"/api/employees/{employee.id}", headers=other_headers).status_code == 403


@pytest.mark.parametrize("field", ["first_name", "phone_number", "pin_code", "role", "status", "hire_date"])
def test_update_cannot_null_required_field(client, employee, auth_headers, field):
    response = client.put(f"/api/employees/{employee.id}", headers=auth_headers, json={field: None})
    assert response.status_code == 422
    assert response.json()["detail"]["errors"][0]["field"] == field

    unchanged = client.get(f"/api/employees/{employee.id}", headers=auth_headers).json()
    assert unchanged["role"] == "STAFF"
    assert unchanged["first_name"] == "Sam"


def test_pin_with_trailing_newline_is_422(client, business, auth_headers):
    response = _create(client, auth_headers, business.id, pin_code="9876\n")
    assert response.status_code == 422
    assert response.json()["detail"]["message"] == "PIN must be exactly 4 digits"
