"""Campus Attendance package.

This package is organized by feature modules (devices, catalog, attendance,
principals, notes, ...) with a thin Flask controller layer and service/repository
layers underneath.
"""
