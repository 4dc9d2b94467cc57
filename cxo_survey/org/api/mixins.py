from __future__ import annotations

from typing import TYPE_CHECKING

from cxo_survey.users.api.permissions import CEO_OR_ADMIN
from cxo_survey.users.api.permissions import RoleRequired
from cxo_survey.utils.exceptions import DomainError

if TYPE_CHECKING:
    from cxo_survey.org.models import Organization


class OrganizationScopedMixin:
    """Resolve the tenant from the caller; clients never send an org id."""

    permission_classes = [RoleRequired]
    allowed_roles: tuple[str, ...] = CEO_OR_ADMIN

    def get_organization(self) -> Organization:
        org = getattr(self.request.user, "organization", None)
        if org is None:
            msg = "No organization is associated with this account"
            raise DomainError(msg)
        return org
