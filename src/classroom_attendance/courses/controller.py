from __future__ import annotations

import io

from flask import Flask, jsonify, send_file

from ..common.http import json_body, public_base_url
from ..container import Container
from ..sessions.codec import build_scan_url, qr_data_url, render_qr_png


def register(app: Flask, container: Container) -> None:
    @app.route("/api/courses", methods=["POST"], endpoint="create_course")
    def create_course():
        data = json_body()
        course = container.course_service.create_course(
            name=data.get("name", ""),
            instructor=data.get("instructor", ""),
            schedule=data.get("schedule", ""),
            description=data.get("description", ""),
        )
        return jsonify(course.to_dict()), 201

    @app.route("/api/courses", methods=["GET"], endpoint="list_courses")
    def list_courses():
        return jsonify([c.to_dict() for c in container.course_service.list_courses()])

    @app.route("/api/courses/<int:course_id>", methods=["GET"], endpoint="get_course")
    def get_course(course_id: int):
        return jsonify(container.course_service.get_course(course_id).to_dict())

    @app.route("/api/courses/<int:course_id>", methods=["DELETE"], endpoint="delete_course")
    def delete_course(course_id: int):
        container.course_service.delete_course(course_id)
        return jsonify({"message": "Course deleted successfully"})

    # ===== SESSION / QR CODE ENDPOINTS =====

    @app.route("/api/courses/<int:course_id>/session", methods=["POST"], endpoint="issue_session")
    def issue_session(course_id: int):
        """Open a new attendance session and return its token and QR image."""
        issued = container.session_issuer.issue_session(course_id, base_url=public_base_url())
        payload = issued.to_dict()
        payload["qrCode"] = qr_data_url(issued.scan_url or issued.encoded_token)
        return jsonify(payload), 201

    @app.route("/api/courses/<int:course_id>/session/qr.png", methods=["GET"], endpoint="session_qr_image")
    def session_qr_image(course_id: int):
        """QR image of the course's latest session, for re-display."""
        token = container.session_issuer.current_session(course_id)
        png = render_qr_png(build_scan_url(public_base_url(), token))
        return send_file(io.BytesIO(png), mimetype="image/png")
