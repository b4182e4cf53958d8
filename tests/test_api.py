from __future__ import annotations

import io
import json
from types import SimpleNamespace

import pytest
from PIL import Image

from qr_attendance.common.datetime_utils import epoch_millis
from qr_attendance.main import create_app
from qr_attendance.sessions import codes


def _register(client, roll="21CSE001", password="secret1"):
    return client.post(
        "/register",
        json={
            "fullName": "Rahul Sharma",
            "rollNumber": roll,
            "email": f"{roll.lower()}@example.edu",
            "password": password,
            "confirmPassword": password,
            "year": "2021",
            "course": "B.Tech Computer Science",
        },
    )


def _login(client, user_type, username, password):
    return client.post("/login", json={"userType": user_type, "username": username, "password": password})


@pytest.fixture
def student_client(app):
    c = app.test_client()
    assert _register(c).status_code == 201
    assert _login(c, "student", "21CSE001", "secret1").status_code == 200
    return c


@pytest.fixture
def admin_client(app):
    c = app.test_client()
    assert _login(c, "faculty", "admin@aimscs", "admin123").status_code == 200
    return c


def test_register_validation_errors(client):
    resp = client.post("/register", json={"fullName": "", "rollNumber": "21CSE001"})

    body = resp.get_json()
    assert resp.status_code == 400
    assert body["success"] is False
    assert body["errors"]["fullName"] == "Full name is required"


def test_bad_login(client):
    _register(client)

    resp = _login(client, "student", "21CSE001", "wrong")

    assert resp.status_code == 401
    assert resp.get_json()["message"] == "Invalid username or password"


def test_protected_routes_need_login(client):
    assert client.post("/api/scan", json={"code": "21CSE001"}).status_code == 401
    assert client.get("/api/me").status_code == 401


def test_student_cannot_use_faculty_scanner(student_client):
    assert student_client.post("/api/scan", json={"code": "21CSE001"}).status_code == 403


def test_faculty_scanner_flow(app, admin_client):
    _register(app.test_client())

    first = admin_client.post("/api/scan", json={"code": "21CSE001"})
    second = admin_client.post("/api/scan", json={"code": "21CSE001"})
    third = admin_client.post("/api/scan", json={"code": "21CSE001"})

    assert first.get_json()["action"] == "check-in"
    assert first.get_json()["message"] == "Check-in successful for Rahul Sharma"
    assert second.get_json()["action"] == "check-out"
    assert third.status_code == 409
    assert third.get_json()["reason"] == "ALREADY_COMPLETED"

    unknown = admin_client.post("/api/scan", json={"code": "99XYZ999"})
    assert unknown.status_code == 404
    assert unknown.get_json()["message"] == "Student not found! Please check the QR code."

    assert admin_client.post("/api/scan", json={"code": "  "}).status_code == 400

    stats = admin_client.get("/api/reports/scanner").get_json()
    assert stats["present_today"] == 1
    assert stats["scans_today"] == 2


def test_student_self_scan(student_client):
    stale = codes.generate(epoch_millis() - 120_000).value

    assert student_client.post("/api/scan/self", json={"code": "GARBAGE"}).get_json()["reason"] == "MALFORMED_CODE"
    assert student_client.post("/api/scan/self", json={"code": stale}).get_json()["reason"] == "EXPIRED_CODE"

    resp = student_client.post("/api/scan/self", json={"code": codes.generate(epoch_millis()).value})
    assert resp.status_code == 200
    assert resp.get_json()["action"] == "check-in"

    history = student_client.get("/api/attendance/history").get_json()
    assert len(history["entries"]) == 1
    assert history["entries"][0]["checkOutTime"] is None

    me = student_client.get("/api/reports/me").get_json()
    assert me["summary"]["present_days"] == 1


def test_student_self_scan_from_image(app, student_client):
    app.config["QR_DECODER"] = lambda img: [SimpleNamespace(data=codes.generate(epoch_millis()).value.encode())]
    buf = io.BytesIO()
    Image.new("RGB", (8, 8), "white").save(buf, format="PNG")
    buf.seek(0)

    resp = student_client.post(
        "/api/scan/self/image",
        data={"image": (buf, "scan.png")},
        content_type="multipart/form-data",
    )

    assert resp.status_code == 200
    assert resp.get_json()["action"] == "check-in"


def test_image_without_code(app, student_client):
    app.config["QR_DECODER"] = lambda img: []
    buf = io.BytesIO()
    Image.new("RGB", (8, 8), "white").save(buf, format="PNG")
    buf.seek(0)

    resp = student_client.post(
        "/api/scan/self/image",
        data={"image": (buf, "scan.png")},
        content_type="multipart/form-data",
    )

    assert resp.status_code == 400
    assert resp.get_json()["message"] == "No QR code found in the image"


def test_session_lifecycle(admin_client):
    assert admin_client.get("/api/session/code.png").status_code == 409
    assert admin_client.post("/api/session/resume").status_code == 409

    started = admin_client.post("/api/session/start").get_json()
    try:
        assert started["running"] is True
        assert codes.is_valid(started["code"], epoch_millis())
        assert 0 < started["secondsRemaining"] <= 15

        png = admin_client.get("/api/session/code.png")
        assert png.mimetype == "image/png"

        paused = admin_client.post("/api/session/pause").get_json()
        assert paused["code"] is None
        assert paused["secondsRemaining"] == 0

        resumed = admin_client.post("/api/session/resume").get_json()
        assert resumed["code"] is not None
    finally:
        stopped = admin_client.post("/api/session/stop").get_json()

    assert stopped["running"] is False
    assert stopped["code"] is None


def test_admin_manages_faculty(admin_client, app):
    created = admin_client.post(
        "/api/admin/faculty",
        json={
            "fullName": "Dr. Meera Iyer",
            "email": "meera@example.edu",
            "facultyId": "FAC001",
            "department": "Computer Science",
            "password": "teach123",
        },
    )
    assert created.status_code == 201
    person_id = created.get_json()["id"]

    listing = admin_client.get("/api/admin/faculty").get_json()
    assert [f["facultyId"] for f in listing["faculty"]] == ["FAC001"]
    assert listing["overview"]["total"] == 1

    faculty = app.test_client()
    assert _login(faculty, "faculty", "FAC001", "teach123").get_json()["role"] == "faculty"
    assert faculty.get("/api/admin/faculty").status_code == 403

    edited = admin_client.put(
        f"/api/admin/faculty/{person_id}",
        json={"fullName": "Dr. Meera Iyer", "email": "meera@example.edu", "department": "Mathematics"},
    )
    assert edited.get_json()["faculty"]["department"] == "Mathematics"

    assert admin_client.delete(f"/api/admin/faculty/{person_id}").status_code == 200
    assert admin_client.delete(f"/api/admin/faculty/{person_id}").status_code == 400


def test_day_report_and_csv(app, admin_client):
    _register(app.test_client())
    admin_client.post("/api/scan", json={"code": "21CSE001"})

    report = admin_client.get("/api/reports/day").get_json()
    assert report["summary"]["present"] == 1
    assert report["rows"][0]["status"] == "present"

    csv_resp = admin_client.get("/api/reports/day.csv")
    text = csv_resp.data.decode("utf-8-sig")
    assert csv_resp.mimetype == "text/csv"
    assert text.splitlines()[0] == "date,student_id,full_name,roll_number,course,year,check_in,check_out,status"
    assert "21CSE001" in text

    assert admin_client.get("/api/reports/day?date=02-02-2026").status_code == 400


def test_demo_seed_on_startup():
    app = create_app("qr_attendance.config.testing", AUTO_SEED_DEMO=True)
    c = app.test_client()

    assert _login(c, "student", "21CSE001", "student123").status_code == 200
    assert c.get("/api/reports/me").get_json()["summary"]["total_days"] >= 1


def test_student_badge_qr(student_client, admin_client):
    resp = student_client.get("/api/me/qr.png")

    assert resp.status_code == 200
    assert resp.mimetype == "image/png"
    assert Image.open(io.BytesIO(resp.data)).format == "PNG"
    assert admin_client.get("/api/me/qr.png").status_code == 403


def test_legacy_store_is_migrated_on_startup(tmp_path):
    path = tmp_path / "attendance.json"
    path.write_text(
        json.dumps({"students": [{"id": "1", "fullName": "Rahul Sharma", "rollNumber": "21CSE001", "password": "student123"}]}),
        encoding="utf-8",
    )

    app = create_app("qr_attendance.config.testing", STORE_PATH=str(path))

    stored = json.loads(path.read_text(encoding="utf-8"))["students"][0]
    assert "password" not in stored
    assert _login(app.test_client(), "student", "21CSE001", "student123").status_code == 200
