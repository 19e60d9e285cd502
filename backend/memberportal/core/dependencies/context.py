"""
Request Context Dependencies
============================

Builds the RequestContext handed to the services from the request
session, the settings and the organization of the current user.
"""

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from memberportal.core.config import Settings, get_settings
from memberportal.core.context import RequestContext, ServerEnvironment
from memberportal.core.i18n import Language
from memberportal.core.logging import organization_id_context
from memberportal.db.database import Database
from memberportal.db.session import get_db
from memberportal.models.user import User
from memberportal.services.installation_utils import get_deployment_url
from memberportal.core.dependencies.auth import get_current_user


def get_request_context(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> RequestContext:
    """Context acting for the organization of the authenticated user."""
    organization_id_context.set(str(current_user.organization_id))
    return RequestContext(
        db=Database(db, settings),
        l10n=Language(settings.language),
        settings=settings,
        organization_id=current_user.organization_id,
    )


def get_base_url(request: Request, settings: Settings = Depends(get_settings)) -> str:
    """
    Public URL of the installation.

    The configured APP_URL wins; otherwise it is derived from the request.
    """
    if settings.app_url:
        return settings.app_url.rstrip("/")
    return get_deployment_url(
        ServerEnvironment.from_request(request),
        check_forwarded_host=settings.trust_forwarded_host,
        program_folder=settings.program_folder,
    )
