from datetime import date

import pytest

import config.testing
from timeclock.common.ip_restriction import IPAllowList
from timeclock.container import ContainerOptions, assemble_container
from timeclock.main import create_app


def login(client):
    resp = client.post("/api/admin/login", json={"username": "admin", "password": "secret123"})
    assert resp.status_code == 200


def test_index(client):
    assert client.get("/").get_json() == {"message": "Time clock API"}


def test_clock_in_and_out_by_employee_id(client, records):
    resp = client.post("/api/time-records/clock-in", json={"employee_id": "E001"})
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["status"] == "Normal"
    assert body["record"]["record_date"] == "2024-04-15"
    assert body["record"]["clock_in_time"] == "2024-04-15T00:00:00.000Z"

    resp = client.post("/api/time-records/clock-out", json={"employee_id": "E001"})
    assert resp.status_code == 200
    assert resp.get_json()["work_hours"] == 0.0


def test_clock_in_errors_map_to_status_codes(client):
    assert client.post("/api/time-records/clock-in", json={}).status_code == 400
    resp = client.post("/api/time-records/clock-in", json={"employee_id": "E999"})
    assert resp.status_code == 404
    assert resp.get_json() == {"error": "Employee not found"}
    assert client.post("/api/time-records/clock-out", json={"employee_id": "E001"}).status_code == 400


def test_session_token_identifies_employee(client, records):
    resp = client.post("/api/sessions", json={"employee_id": "E002"})
    assert resp.status_code == 201
    token = resp.get_json()["token"]

    resp = client.post("/api/time-records/clock-in", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 200
    assert records.get_record("E002", date(2024, 4, 15)) is not None

    client.delete("/api/sessions", headers={"Authorization": f"Bearer {token}"})
    resp = client.post("/api/time-records/clock-in", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401


def test_employee_queries(client):
    client.post("/api/time-records/clock-in", json={"employee_id": "E001"})

    rows = client.get("/api/time-records/employee/E001?year=2024&month=4").get_json()
    assert len(rows) == 1
    assert rows[0]["employee_name"] == "Sato"
    assert client.get("/api/time-records/today/E001").get_json()["employee_id"] == "E001"
    assert client.get("/api/time-records/today/E002").get_json() is None
    assert len(client.get("/api/time-records").get_json()) == 1


def test_admin_endpoints_require_login(client):
    assert client.get("/api/admin/time-records").status_code == 401
    assert client.post("/api/admin/time-records/correct", json={}).status_code == 401
    assert client.post("/api/admin/maintenance/recalculate").status_code == 401
    assert client.post("/api/employees", json={}).status_code == 401


def test_bad_login(client):
    resp = client.post("/api/admin/login", json={"username": "admin", "password": "wrong"})
    assert resp.status_code == 401


def test_admin_correction_flow(client, audit):
    login(client)
    assert client.get("/api/admin/me").get_json()["admin"]["username"] == "admin"

    resp = client.post(
        "/api/admin/time-records/correct",
        json={
            "action": "delete_and_create",
            "employee_id": "E001",
            "record_date": "2024-04-01",
            "clock_in_time": "2024-04-01T00:05:00Z",
            "clock_out_time": "2024-04-01T09:30:00Z",
            "reason": "Forgot to clock",
        },
    )
    assert resp.status_code == 200
    record = resp.get_json()["record"]
    assert record["status"] == "Late+Overtime"
    assert record["work_hours"] == 9.42
    assert record["is_manual_entry"] is True

    logs = client.get("/api/admin/audit-logs").get_json()
    assert [e["action"] for e in logs] == ["delete_and_create"]
    assert logs[0]["record_id"] == "E001-2024-04-01"

    resp = client.delete(
        "/api/admin/time-records",
        json={"employee_id": "E001", "record_date": "2024-04-01", "reason": "Duplicate"},
    )
    assert resp.get_json()["deleted_count"] == 1
    assert len(audit.entries) == 2


def test_admin_correction_validation(client):
    login(client)
    resp = client.post("/api/admin/time-records/correct", json={"action": "update", "employee_id": "E001"})
    assert resp.status_code == 400


def test_admin_maintenance(client):
    login(client)
    client.post("/api/time-records/clock-in", json={"employee_id": "E001"})

    cleanup = client.post("/api/admin/maintenance/cleanup", json={"window_days": 30}).get_json()
    assert cleanup["cleaned_count"] == 0
    assert cleanup["cutoff_date"] == "2024-03-16"

    recalc = client.post("/api/admin/maintenance/recalculate").get_json()
    assert recalc == {"total_considered": 0, "updated_count": 0, "failed_count": 0}


def test_admin_employee_crud(client):
    login(client)
    resp = client.post("/api/employees", json={"employee_id": "E100", "name": "Tanaka"})
    assert resp.status_code == 201
    new_id = resp.get_json()["id"]

    assert client.post("/api/employees", json={"employee_id": "E100", "name": "Again"}).status_code == 409
    resp = client.put(
        f"/api/employees/{new_id}",
        json={"employee_id": "E100", "name": "Tanaka", "work_start_time": "08:00", "work_end_time": "16:00"},
    )
    assert resp.status_code == 200
    assert client.delete(f"/api/employees/{new_id}").status_code == 200
    assert client.delete(f"/api/employees/{new_id}").status_code == 404


def test_delete_employee_with_records_conflicts(client, employees):
    login(client)
    client.post("/api/time-records/clock-in", json={"employee_id": "E001"})
    employee = employees.get_by_employee_id("E001")

    resp = client.delete(f"/api/employees/{employee.id}")

    assert resp.status_code == 409
    assert resp.get_json() == {"error": "Employee has time records"}


def test_export_csv(client):
    login(client)
    client.post("/api/time-records/clock-in", json={"employee_id": "E001"})

    resp = client.get("/api/admin/export/time-records.csv?start_date=2024-04-01&end_date=2024-04-30")
    assert resp.status_code == 200
    assert resp.mimetype == "text/csv"
    assert resp.data.startswith(b"\xef\xbb\xbf")
    assert client.get("/api/admin/export/time-records.csv?start_date=04-01").status_code == 400


def test_export_xlsx(client):
    login(client)
    client.post("/api/time-records/clock-in", json={"employee_id": "E001"})

    for path in ("/api/admin/export/time-records.xlsx", "/api/admin/export/timerecords"):
        resp = client.get(path)
        assert resp.status_code == 200
        assert resp.mimetype == "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
        assert resp.data[:2] == b"PK"


@pytest.fixture
def make_restricted_client(employees, records, audit, admins, clock):
    def build():
        options = ContainerOptions(
            allowed_ips=IPAllowList.from_csv("10.0.0.0/8"),
            admin_allowed_ips=IPAllowList.from_csv("10.0.0.5"),
        )
        container = assemble_container(
            employees_repo=employees,
            records_repo=records,
            audit_repo=audit,
            admins_repo=admins,
            options=options,
            clock=clock,
        )
        return create_app(container=container, settings_module="config.testing").test_client()

    return build


LOGIN_BODY = {"username": "admin", "password": "secret123"}


def test_ip_restriction(make_restricted_client):
    restricted_client = make_restricted_client()

    def clock_in(ip):
        return restricted_client.post(
            "/api/time-records/clock-in",
            json={"employee_id": "E001"},
            environ_base={"REMOTE_ADDR": ip},
        )

    denied = clock_in("192.168.1.1")
    assert denied.status_code == 403
    assert denied.get_json() == {"error": "Internal network required"}
    assert clock_in("10.1.2.3").status_code == 200

    resp = restricted_client.post("/api/admin/login", json=LOGIN_BODY, environ_base={"REMOTE_ADDR": "10.1.2.3"})
    assert resp.status_code == 403
    resp = restricted_client.post("/api/admin/login", json=LOGIN_BODY, environ_base={"REMOTE_ADDR": "10.0.0.5"})
    assert resp.status_code == 200


def test_forwarded_header_is_ignored_without_trusted_proxy(make_restricted_client):
    restricted_client = make_restricted_client()

    resp = restricted_client.post(
        "/api/admin/login",
        json=LOGIN_BODY,
        headers={"X-Forwarded-For": "10.0.0.5"},
        environ_base={"REMOTE_ADDR": "198.51.100.7"},
    )

    assert resp.status_code == 403


def test_forwarded_header_is_used_behind_trusted_proxy(make_restricted_client, monkeypatch):
    monkeypatch.setattr(config.testing, "TRUSTED_PROXY_HOPS", 1)
    restricted_client = make_restricted_client()

    resp = restricted_client.post(
        "/api/admin/login",
        json=LOGIN_BODY,
        headers={"X-Forwarded-For": "198.51.100.7, 10.0.0.5"},
        environ_base={"REMOTE_ADDR": "10.0.0.1"},
    )
    assert resp.status_code == 200

    resp = restricted_client.post(
        "/api/admin/login",
        json=LOGIN_BODY,
        headers={"X-Forwarded-For": "10.0.0.5, 198.51.100.7"},
        environ_base={"REMOTE_ADDR": "10.0.0.1"},
    )
    assert resp.status_code == 403
