"""Example: drive the service layer directly (without Flask).

Controllers are a thin layer; the attendance rules live in the services.
"""

import importlib

from classroom_attendance.config import get_settings_module
from classroom_attendance.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    course = container.course_service.create_course(name="Demo course", instructor="Demo instructor")
    student = container.student_service.create_student(
        name="Demo student", student_number=f"DEMO-{course.course_id}", course_ids=[course.course_id]
    )

    issued = container.session_issuer.issue_session(course.course_id)
    print("token:", issued.encoded_token)

    event = container.attendance_recorder.record_attendance(issued.encoded_token, student.student_id)
    print("recorded:", event.to_dict())
    print("report:", container.report_service.course_report(course.course_id).to_dict())


if __name__ == "__main__":
    main()
