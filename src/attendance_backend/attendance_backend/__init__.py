"""Attendance Backend package.

Feature modules (auth, users, roles, shifts, schedules, attendance) each carry
a Protocol repository, a MySQL implementation, a service and a thin Flask
controller.
"""
