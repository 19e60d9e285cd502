"""
Profile Field Registry
======================

Resolves internal profile field names (LAST_NAME, FIRST_NAME, EMAIL ...)
to the field ids used in adm_user_data for one organization.
"""

from typing import Optional, Protocol

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from memberportal.core.exceptions import ProfileFieldNotFoundError
from memberportal.core.logging import get_logger
from memberportal.models.profile_field import ProfileField

logger = get_logger(__name__)


class ProfileFieldRegistry(Protocol):
    """Lookup of profile field ids by internal name."""

    def resolve(self, name_intern: str) -> int:
        ...


class ProfileFields:
    """
    Profile field registry backed by adm_user_fields.

    A definition of the organization wins over a shared definition
    (usf_org_id IS NULL). Resolved ids are cached for the lifetime
    of the instance, which is one request.

    Usage:
        fields = ProfileFields(db, organization_id)
        last_name_id = fields.resolve("LAST_NAME")
    """

    def __init__(self, db: Session, organization_id: Optional[int]):
        self.db = db
        self.organization_id = organization_id
        self._cache: dict[str, int] = {}

    def resolve(self, name_intern: str) -> int:
        """
        Get the field id for an internal field name.

        Raises:
            ProfileFieldNotFoundError: If no definition exists for the organization
        """
        if name_intern in self._cache:
            return self._cache[name_intern]

        statement = (
            select(ProfileField.id, ProfileField.organization_id)
            .where(ProfileField.name_intern == name_intern)
            .where(
                or_(
                    ProfileField.organization_id == self.organization_id,
                    ProfileField.organization_id.is_(None),
                )
            )
        )
        rows = self.db.execute(statement).all()

        if not rows:
            logger.warning(
                "Profile field not defined",
                extra={"name_intern": name_intern, "organization_id": self.organization_id},
            )
            raise ProfileFieldNotFoundError(identifier=name_intern)

        # Organization specific definition first
        rows.sort(key=lambda row: row.organization_id is None)
        field_id = rows[0].id
        self._cache[name_intern] = field_id
        return field_id
