"""Attendance & Payroll package.

Organized by feature modules (employees, shifts, attendance, payroll, ...)
with a thin Flask controller layer over service/repository layers.
"""
