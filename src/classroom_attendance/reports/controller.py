from __future__ import annotations

import re
from datetime import date

from flask import Flask, jsonify

from ..common.http import date_arg
from ..container import Container
from .csv_export import report_csv_rows, write_csv_bytes


def register(app: Flask, container: Container) -> None:
    def _csv_response(rows: list[dict], *, filename: str):
        return app.response_class(
            write_csv_bytes(rows),
            mimetype="text/csv",
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )

    def _label(on_date) -> str:
        return (on_date or date.today()).strftime("%Y-%m-%d")

    @app.route("/api/reports/attendance/<int:course_id>", methods=["GET"], endpoint="course_report")
    def course_report(course_id: int):
        report = container.report_service.course_report(course_id, on_date=date_arg())
        return jsonify(report.to_dict())

    @app.route("/api/reports", methods=["GET"], endpoint="all_reports")
    def all_reports():
        reports = container.report_service.all_courses_report(on_date=date_arg())
        return jsonify([r.summary_dict() for r in reports])

    @app.route("/api/reports/download/<int:course_id>", methods=["GET"], endpoint="download_course_report")
    def download_course_report(course_id: int):
        on_date = date_arg()
        report = container.report_service.course_report(course_id, on_date=on_date)
        safe_name = re.sub(r"[\s\"]+", "_", report.course_name)
        return _csv_response(report_csv_rows([report]), filename=f"attendance_{safe_name}_{_label(on_date)}.csv")

    @app.route("/api/reports/download-all", methods=["GET"], endpoint="download_all_reports")
    def download_all_reports():
        on_date = date_arg()
        reports = container.report_service.all_courses_report(on_date=on_date)
        return _csv_response(report_csv_rows(reports), filename=f"all_attendance_reports_{_label(on_date)}.csv")

    @app.route("/api/students/attendance-percentages", methods=["GET"], endpoint="attendance_percentages")
    def attendance_percentages():
        stats = container.report_service.student_attendance_percentages(on_date=date_arg())
        return jsonify([s.to_dict() for s in stats])
