"""Kitchen Attendance package.

Volunteer check-in/check-out kiosk for a single community kitchen. The package
is organized by feature modules (volunteers, schedules, attendance, reports, ...)
with a thin Flask controller layer over service/repository layers.
"""
