"""HR System package.

Organized by feature modules (shifts, schedules, users) with a thin Flask
JSON controller layer over service and repository layers.
"""
