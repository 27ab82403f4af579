"""Geo Attendance package.

This package is organized by feature modules (geo, shifts, attendance, reports, ...)
with a thin Flask controller layer and service/repository layers. The status engine
(geofence, shift windows, calculator) is pure and has no database access.
"""
