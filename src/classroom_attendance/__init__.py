"""Classroom Attendance package.

This package is organized by feature modules (courses, students, sessions,
attendance, reports) with a thin Flask controller layer on top of
service/repository layers.
"""
