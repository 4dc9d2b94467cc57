"""Role gates shared by every API area.

Each view lists the roles it admits; the table below is the single place the
role model is interpreted.
"""

from collections.abc import Iterable

from rest_framework.permissions import BasePermission

from cxo_survey.employees.models import Employee

ROLE_ADMIN = Employee.Role.ADMIN
ROLE_CEO = Employee.Role.CEO
ROLE_USER = Employee.Role.USER

ADMIN_ONLY = (ROLE_ADMIN,)
CEO_OR_ADMIN = (ROLE_CEO, ROLE_ADMIN)
ANY_MEMBER = (ROLE_ADMIN, ROLE_CEO, ROLE_USER)


def has_role(user, roles: Iterable[str]) -> bool:
    if not (user and getattr(user, "is_authenticated", False)):
        return False
    return getattr(user, "role", None) in set(roles)


class _RolePermission(BasePermission):
    """Base helper to gate access by role names."""

    allowed_roles: tuple[str, ...] = ()

    def get_allowed_roles(self, view) -> Iterable[str]:
        return self.allowed_roles

    def has_permission(self, request, view) -> bool:
        user = getattr(request, "user", None)
        return has_role(user, self.get_allowed_roles(view))


class RoleRequired(_RolePermission):
    """Reads the admitted roles from ``view.allowed_roles``."""

    def get_allowed_roles(self, view) -> Iterable[str]:
        return getattr(view, "allowed_roles", ())


class IsAdmin(_RolePermission):
    allowed_roles = ADMIN_ONLY


class IsCEOOrAdmin(_RolePermission):
    allowed_roles = CEO_OR_ADMIN


class IsMember(_RolePermission):
    allowed_roles = ANY_MEMBER
