"""
Registration Module Service
===========================

Pending self registrations of the current organization:
- Query registrations with name and email from the profile fields
- Build the card list shown to administrators
- Assign (approve) or delete a registration

Usage:
    module = RegistrationModule(ctx, ProfileFields(session, ctx.organization_id))
    content = module.create_content()
"""

from typing import Optional, Union
from urllib.parse import urlencode

from markupsafe import Markup
from sqlalchemy import and_, false, select
from sqlalchemy.orm import aliased

from memberportal.core.context import RequestContext
from memberportal.core.exceptions import ProfileFieldNotFoundError, RegistrationNotFoundError
from memberportal.core.logging import audit_logger, get_logger
from memberportal.models.profile_field import UserData
from memberportal.models.registration import Registration
from memberportal.models.user import User
from memberportal.schemas.registration import (
    CardAction,
    CardButton,
    NoRegistrations,
    RegistrationCard,
    RegistrationCards,
    RegistrationRecord,
)
from memberportal.services.profile_fields import ProfileFieldRegistry

# Initialize logger
logger = get_logger(__name__)


class RegistrationModule:
    """
    Registration list and actions for one organization.

    Args:
        ctx: Request context; organization_id selects the organization
        profile_fields: Registry resolving LAST_NAME, FIRST_NAME and EMAIL
        base_url: Public URL of the installation used for card links
    """

    def __init__(
        self,
        ctx: RequestContext,
        profile_fields: ProfileFieldRegistry,
        base_url: str = "",
    ):
        self.ctx = ctx
        self.profile_fields = profile_fields
        self.base_url = base_url.rstrip("/")

    # --------------------------
    # Queries
    # --------------------------

    def get_registrations(self) -> list[RegistrationRecord]:
        """
        Get all pending registrations of the organization.

        Returns:
            Records ordered by last name, then first name
        """
        last_name = aliased(UserData, name="last_name")
        first_name = aliased(UserData, name="first_name")
        email = aliased(UserData, name="email")

        statement = (
            select(
                User.id.label("user_id"),
                User.uuid.label("user_uuid"),
                User.login_name.label("login_name"),
                Registration.timestamp.label("registration_timestamp"),
                last_name.value.label("last_name"),
                first_name.value.label("first_name"),
                email.value.label("email"),
            )
            .select_from(Registration)
            .join(User, User.id == Registration.user_id)
            .outerjoin(
                last_name,
                and_(
                    last_name.user_id == User.id,
                    last_name.field_id == self._field_id("LAST_NAME"),
                ),
            )
            .outerjoin(
                first_name,
                and_(
                    first_name.user_id == User.id,
                    first_name.field_id == self._field_id("FIRST_NAME"),
                ),
            )
            .outerjoin(
                email,
                and_(
                    email.user_id == User.id,
                    email.field_id == self._field_id("EMAIL"),
                ),
            )
            .where(User.valid == false())
            .where(Registration.organization_id == self.ctx.organization_id)
            .order_by(last_name.value, first_name.value)
        )

        rows = self.ctx.db.get_array_from_sql(statement)
        return [RegistrationRecord(**row) for row in rows]

    def _field_id(self, name_intern: str) -> Optional[int]:
        """
        Field id for the joins, None if the organization does not define the field.

        A None id matches no user data, so the column comes back NULL.
        """
        try:
            return self.profile_fields.resolve(name_intern)
        except ProfileFieldNotFoundError:
            return None

    # --------------------------
    # View Model
    # --------------------------

    def create_content(self) -> Union[NoRegistrations, RegistrationCards]:
        """
        Build the registration page content.

        Returns:
            NoRegistrations with a notice and forward url if nothing is pending,
            otherwise one card per registration
        """
        l10n = self.ctx.l10n
        registrations = self.get_registrations()

        if not registrations:
            return NoRegistrations(
                headline=l10n.get("SYS_REGISTRATION"),
                message=l10n.get("SYS_NO_NEW_REGISTRATIONS"),
                forward_url=self.ctx.settings.home_url,
            )

        return RegistrationCards(
            headline=l10n.get("SYS_REGISTRATION"),
            cards=[self._build_card(record) for record in registrations],
        )

    def _build_card(self, record: RegistrationRecord) -> RegistrationCard:
        l10n = self.ctx.l10n
        settings = self.ctx.settings
        element_id = f"row_user_{record.user_uuid}"
        name = record.full_name
        timestamp = record.registration_timestamp

        information = [
            l10n.get(
                "SYS_REGISTRATION_AT",
                [timestamp.strftime(settings.system_date), timestamp.strftime(settings.system_time)],
            ),
            str(Markup("{}: {}").format(l10n.get("SYS_USERNAME"), record.login_name or "")),
            str(
                Markup('{0}: <a href="mailto:{1}">{1}</a>').format(
                    l10n.get("SYS_EMAIL"), record.email or ""
                )
            ),
        ]

        actions = [
            CardAction(
                url=self._encode_url("modules/profile/profile.php", {"user_uuid": record.user_uuid}),
                icon="fas fa-eye",
                tooltip=l10n.get("SYS_SHOW_PROFILE"),
            ),
            CardAction(
                data_href=self._encode_url(
                    "system/popup_message.php",
                    {
                        "type": "nwu",
                        "element_id": element_id,
                        "name": name,
                        "database_id": record.user_uuid,
                    },
                ),
                icon="fas fa-trash-alt",
                tooltip=l10n.get("SYS_DELETE"),
            ),
        ]

        buttons = [
            CardButton(
                url=self._encode_url(
                    "modules/registration/registration_assign.php",
                    {"new_user_uuid": record.user_uuid},
                ),
                name=l10n.get("SYS_ASSIGN_REGISTRATION"),
            )
        ]

        return RegistrationCard(
            id=element_id,
            title=name,
            information=information,
            actions=actions,
            buttons=buttons,
        )

    def _encode_url(self, path: str, params: dict) -> str:
        """Url below the program folder with an encoded query string."""
        return f"{self.base_url}/{self.ctx.settings.program_folder}/{path}?{urlencode(params)}"

    # --------------------------
    # Actions
    # --------------------------

    def assign_registration(self, user_uuid: str, actor_id: Optional[str] = None) -> str:
        """
        Approve a pending registration.

        The user becomes valid and the registration row is removed,
        so the user no longer shows up in the list.

        Returns:
            Localized confirmation text

        Raises:
            RegistrationNotFoundError: If the user has no pending registration here
        """
        registration = self._get_pending_registration(user_uuid)
        user = registration.user
        session = self.ctx.db.session

        user.valid = True
        session.delete(registration)
        session.commit()

        audit_logger.log_registration_assigned(
            actor_id=actor_id or "system",
            user_uuid=user_uuid,
            organization_id=self.ctx.organization_id,
        )
        return self.ctx.l10n.get("SYS_REGISTRATION_ASSIGNED", [user.login_name or user_uuid])

    def delete_registration(self, user_uuid: str, actor_id: Optional[str] = None) -> str:
        """
        Delete a pending registration.

        The never validated user is removed together with its profile
        data unless it is still registered at another organization.

        Returns:
            Localized confirmation text

        Raises:
            RegistrationNotFoundError: If the user has no pending registration here
        """
        registration = self._get_pending_registration(user_uuid)
        user = registration.user
        session = self.ctx.db.session
        display_name = user.login_name or user_uuid

        other_registrations = [reg for reg in user.registrations if reg.id != registration.id]
        if other_registrations:
            session.delete(registration)
        else:
            session.delete(user)
        session.commit()

        audit_logger.log_registration_deleted(
            actor_id=actor_id or "system",
            user_uuid=user_uuid,
            organization_id=self.ctx.organization_id,
        )
        return self.ctx.l10n.get("SYS_REGISTRATION_DELETED", [display_name])

    def _get_pending_registration(self, user_uuid: str) -> Registration:
        statement = (
            select(Registration)
            .join(User, User.id == Registration.user_id)
            .where(User.uuid == user_uuid)
            .where(User.valid == false())
            .where(Registration.organization_id == self.ctx.organization_id)
        )
        registration = self.ctx.db.session.execute(statement).scalar_one_or_none()

        if registration is None:
            logger.warning(
                "Pending registration not found",
                extra={"user_uuid": user_uuid, "organization_id": self.ctx.organization_id},
            )
            raise RegistrationNotFoundError(identifier=user_uuid)
        return registration
