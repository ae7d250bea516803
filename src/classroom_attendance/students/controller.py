from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import json_body
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/students", methods=["POST"], endpoint="create_student")
    def create_student():
        data = json_body()
        student = container.student_service.create_student(
            name=data.get("name", ""),
            student_number=data.get("studentId", ""),
            email=data.get("email") or "",
            course_ids=data.get("courseIds") or [],
        )
        return jsonify(student.to_dict()), 201

    @app.route("/api/students", methods=["GET"], endpoint="list_students")
    def list_students():
        return jsonify([s.to_dict() for s in container.student_service.list_students()])

    @app.route("/api/students/search", methods=["GET"], endpoint="search_student")
    def search_student():
        student = container.student_service.find_student(
            student_number=request.args.get("studentId"),
            email=request.args.get("email"),
        )
        return jsonify(student.to_dict() if student else None)

    @app.route("/api/students/<int:student_id>", methods=["PUT"], endpoint="update_student")
    def update_student(student_id: int):
        data = json_body()
        # Missing keys keep the stored values; an empty email clears it.
        student = container.student_service.update_student(
            student_id,
            name=data.get("name") or None,
            email=data.get("email"),
            course_ids=data.get("courseIds"),
        )
        return jsonify(student.to_dict())

    @app.route("/api/students/<int:student_id>", methods=["DELETE"], endpoint="delete_student")
    def delete_student(student_id: int):
        container.student_service.delete_student(student_id)
        return jsonify({"message": "Student deleted successfully"})
