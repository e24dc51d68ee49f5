# tasks/tests/__init__.py
"""
Tasks app tests.

- test_scoring: the productivity score (weights, rounding, edge cases)
- test_api: task endpoints, tenant scoping and status transitions

Run with ``python manage.py test tasks`` from ``backend/``.
"""
