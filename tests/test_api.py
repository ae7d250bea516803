from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from classroom_attendance.main import create_app
from classroom_attendance.sessions.codec import encode_token
from classroom_attendance.sessions.model import SessionToken


@pytest.fixture
def client(container):
    app = create_app(container=container, settings_module="classroom_attendance.config.testing")
    return app.test_client()


def _seed(client):
    course = client.post("/api/courses", json={"name": "Algebra", "instructor": "Dr. A"}).get_json()
    student = client.post(
        "/api/students", json={"name": "Ann", "studentId": "S1", "email": "ann@uni.edu", "courseIds": [course["id"]]}
    ).get_json()
    return course, student


def test_issue_session_and_scan(client):
    course, student = _seed(client)

    resp = client.post(f"/api/courses/{course['id']}/session")
    assert resp.status_code == 201
    issued = resp.get_json()
    assert issued["scanUrl"].startswith("http://testserver/student?data=")
    assert issued["qrCode"].startswith("data:image/png;base64,")

    scan = client.post("/api/attendance/scan", json={"qrData": issued["scanUrl"], "studentId": student["id"]})
    assert scan.status_code == 200
    assert scan.get_json()["record"]["sessionId"] == issued["sessionId"]

    again = client.post("/api/attendance/scan", json={"qrData": issued["encodedToken"], "studentId": student["id"]})
    assert again.status_code == 409
    assert again.get_json()["code"] == "already_recorded"


def test_scan_errors_map_to_status_codes(client):
    course, student = _seed(client)
    stale = SessionToken(course_id=course["id"], session_id="old", issued_at=datetime.now() - timedelta(minutes=10))

    expired = client.post("/api/attendance/scan", json={"qrData": encode_token(stale), "studentId": student["id"]})
    assert expired.status_code == 400
    assert expired.get_json()["code"] == "expired"

    malformed = client.post("/api/attendance/scan", json={"qrData": "{nope", "studentId": student["id"]})
    assert malformed.get_json()["code"] == "validation_error"

    missing = client.post("/api/attendance/scan", json={"qrData": encode_token(stale), "studentId": 999})
    assert missing.status_code == 404


def test_scan_image_requires_file(client):
    resp = client.post("/api/attendance/scan/image", data={"studentId": "1"}, content_type="multipart/form-data")

    assert resp.status_code == 400


def test_reports_and_percentages(client):
    course, student = _seed(client)
    client.post("/api/students", json={"name": "Ben", "studentId": "S2", "courseIds": [course["id"]]})
    issued = client.post(f"/api/courses/{course['id']}/session").get_json()
    client.post("/api/attendance/scan", json={"qrData": issued["encodedToken"], "studentId": student["id"]})

    report = client.get(f"/api/reports/attendance/{course['id']}").get_json()
    assert (report["present"], report["absent"], report["attendanceRate"]) == (1, 1, 50.0)

    summaries = client.get("/api/reports").get_json()
    assert summaries[0]["courseName"] == "Algebra"

    stats = client.get("/api/students/attendance-percentages").get_json()
    assert stats[0]["name"] == "Ann"
    assert stats[0]["attendancePercentage"] == 100.0

    listed = client.get(f"/api/attendance?courseId={course['id']}").get_json()
    assert [r["student"]["studentId"] for r in listed] == ["S1"]


def test_report_download_is_csv(client):
    course, _ = _seed(client)

    resp = client.get(f"/api/reports/download/{course['id']}?date=2026-03-02")

    assert resp.mimetype == "text/csv"
    assert "attendance_Algebra_2026-03-02.csv" in resp.headers["Content-Disposition"]
    assert "Absent" in resp.data.decode("utf-8-sig")


def test_bad_date_is_rejected(client):
    assert client.get("/api/reports?date=02/03/2026").status_code == 400


def test_course_qr_image_needs_a_session(client):
    course, _ = _seed(client)

    assert client.get(f"/api/courses/{course['id']}/session/qr.png").status_code == 404

    client.post(f"/api/courses/{course['id']}/session")
    resp = client.get(f"/api/courses/{course['id']}/session/qr.png")
    assert resp.status_code == 200
    assert resp.mimetype == "image/png"


def test_student_crud(client):
    course, student = _seed(client)

    dup = client.post("/api/students", json={"name": "X", "studentId": "S1"})
    assert dup.status_code == 400

    updated = client.put(f"/api/students/{student['id']}", json={"name": "Annie"}).get_json()
    assert updated["name"] == "Annie"
    assert updated["email"] == "ann@uni.edu"

    cleared = client.put(f"/api/students/{student['id']}", json={"email": ""}).get_json()
    assert cleared["name"] == "Annie"
    assert cleared["email"] == ""

    found = client.get("/api/students/search?studentId=S1").get_json()
    assert found["id"] == student["id"]

    assert client.delete(f"/api/students/{student['id']}").status_code == 200
    assert client.get("/api/students").get_json() == []

    assert client.delete(f"/api/courses/{course['id']}").status_code == 200
    assert client.get(f"/api/courses/{course['id']}").status_code == 404
