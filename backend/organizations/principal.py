# organizations/principal.py
"""
Capability-tagged principal.

Both kinds of caller authenticate against the organization account:
organization admins with their own credentials, employees through
``EmployeeTokenObtainSerializer``. The access token tells them apart with a
``role`` claim, and employee tokens also carry ``employee_id``.
"""

from dataclasses import dataclass
from typing import Optional

from rest_framework import permissions

ROLE_ADMIN = "admin"
ROLE_EMPLOYEE = "employee"


@dataclass(frozen=True)
class Principal:
    org_id: str
    role: str
    employee_id: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    @property
    def is_employee(self) -> bool:
        return self.role == ROLE_EMPLOYEE and bool(self.employee_id)

    @classmethod
    def from_request(cls, request) -> Optional["Principal"]:
        user = getattr(request, "user", None)
        if user is None or not user.is_authenticated:
            return None

        token = request.auth
        role = token.get("role", ROLE_ADMIN) if token is not None else ROLE_ADMIN
        employee_id = token.get("employee_id") if token is not None else None

        return cls(
            org_id=str(user.pk),
            role=role,
            employee_id=str(employee_id) if employee_id else None,
        )


class IsOrganizationAdmin(permissions.BasePermission):
    """Only the organization account itself, never one of its employees."""
    message = "Admin access required"

    def has_permission(self, request, view):
        principal = Principal.from_request(request)
        return bool(principal and principal.is_admin)


class IsEmployee(permissions.BasePermission):
    message = "Employee access required"

    def has_permission(self, request, view):
        principal = Principal.from_request(request)
        return bool(principal and principal.is_employee)
