# employees/services.py

import logging

from rest_framework.exceptions import NotFound, PermissionDenied

from organizations.principal import Principal
from tasks.scoring import ScoreResult, compute_score
from .models import Employee

logger = logging.getLogger(__name__)


def get_current_employee(request) -> Employee:
    """
    Resolve the employee behind an employee-tagged token.

    The lookup is scoped to the token's organization, so a token can never
    reach an employee of another tenant.
    """
    principal = Principal.from_request(request)
    if principal is None or not principal.is_employee:
        raise PermissionDenied("Employee access required")

    employee = Employee.objects.filter(
        id=principal.employee_id,
        organization_id=principal.org_id,
        is_active=True,
    ).first()
    if employee is None:
        raise NotFound("Employee not found")
    return employee


def score_for_employee(employee: Employee) -> ScoreResult:
    """Productivity score over every task currently assigned to the employee."""
    tasks = employee.tasks.only("status", "priority", "deadline", "completed_at")
    result = compute_score(tasks)
    logger.debug(f"Computed score {result.final_score} for employee {employee.pk}")
    return result
