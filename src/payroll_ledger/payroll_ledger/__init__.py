"""Payroll Ledger package.

Attendance-driven payroll for site workers, organized by feature modules
(rates, attendance, salary, budget, ...) with a thin Flask controller layer
on top of service/repository layers.
"""
