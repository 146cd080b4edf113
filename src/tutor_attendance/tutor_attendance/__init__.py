"""Tutor Attendance package.

Organized by feature modules (attendance, students, subjects, ...) with a thin
Flask controller layer over services that talk to the tuition-center backend.
"""
