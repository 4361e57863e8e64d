"""Attendance Tracker package.

Feature modules (attendance, users, announcements, complaints, reports) each keep
a thin Flask controller on top of service/repository layers.
"""
