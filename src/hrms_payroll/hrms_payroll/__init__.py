"""HRMS payroll core.

Feature modules (attendance, leaves, salary) each carry a model, a repository
protocol with its MySQL implementation, a service and a thin Flask controller.
"""
