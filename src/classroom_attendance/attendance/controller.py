from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import date_arg, json_body
from ..common.validators import require_int
from ..container import Container
from ..core.exceptions import ValidationError
from ..sessions.codec import decode_qr_image


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance/scan", methods=["POST"], endpoint="scan_attendance")
    def scan_attendance():
        """Record attendance from a scanned token (JSON text, scanner URL or object)."""
        data = json_body()
        token = data.get("qrData")
        if token is None or token == "":
            raise ValidationError("QR code data is required")
        student_id = require_int(data.get("studentId"), "Student ID")

        record = container.attendance_recorder.record_attendance(token, student_id)
        return jsonify({"message": "Attendance recorded successfully", "record": record.to_dict()})

    @app.route("/api/attendance/scan/image", methods=["POST"], endpoint="scan_attendance_image")
    def scan_attendance_image():
        """Accept an uploaded photo of the QR code, decode it, and record attendance."""
        if "image" not in request.files:
            raise ValidationError("Image file is required")
        student_id = require_int(request.form.get("studentId"), "Student ID")

        scanned = decode_qr_image(request.files["image"].stream)
        record = container.attendance_recorder.record_attendance(scanned, student_id)
        return jsonify({"message": "Attendance recorded successfully", "record": record.to_dict()})

    @app.route("/api/attendance", methods=["GET"], endpoint="list_attendance")
    def list_attendance():
        course_id = request.args.get("courseId")
        rows = container.attendance_query_service.list_events(
            course_id=require_int(course_id, "Course ID") if course_id else None,
            on_date=date_arg(),
        )
        return jsonify([r.to_dict() for r in rows])
