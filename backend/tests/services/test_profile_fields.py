"""
Profile Field Registry Tests
============================

Tests for resolving internal profile field names per organization.
"""

import pytest
from sqlalchemy.orm import Session

from memberportal.core.exceptions import ProfileFieldNotFoundError
from memberportal.models import Organization, ProfileField
from memberportal.services.profile_fields import ProfileFields


pytestmark = pytest.mark.integration


class TestResolve:
    """Tests for ProfileFields.resolve."""

    def test_shared_field_is_resolved(
        self, db_session: Session, organization: Organization, profile_fields: dict
    ):
        fields = ProfileFields(db_session, organization.id)

        assert fields.resolve("LAST_NAME") == profile_fields["LAST_NAME"].id

    def test_organization_field_wins_over_shared_field(
        self, db_session: Session, organization: Organization, profile_fields: dict
    ):
        # Arrange
        own_field = ProfileField(
            organization_id=organization.id, name_intern="EMAIL", name="Contact email"
        )
        db_session.add(own_field)
        db_session.commit()

        # Act
        field_id = ProfileFields(db_session, organization.id).resolve("EMAIL")

        # Assert
        assert field_id == own_field.id
        assert field_id != profile_fields["EMAIL"].id

    def test_field_of_other_organization_is_not_visible(
        self, db_session: Session, organization: Organization, second_organization: Organization
    ):
        db_session.add(
            ProfileField(organization_id=second_organization.id, name_intern="STREET", name="Street")
        )
        db_session.commit()

        with pytest.raises(ProfileFieldNotFoundError):
            ProfileFields(db_session, organization.id).resolve("STREET")

    def test_resolved_ids_are_cached(
        self, db_session: Session, organization: Organization, profile_fields: dict
    ):
        # Arrange
        fields = ProfileFields(db_session, organization.id)
        first_id = fields.resolve("FIRST_NAME")

        # Act
        db_session.delete(profile_fields["FIRST_NAME"])
        db_session.commit()

        # Assert
        assert fields.resolve("FIRST_NAME") == first_id
