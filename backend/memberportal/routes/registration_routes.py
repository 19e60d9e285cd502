"""
Registration Routes Module
==========================

Administration of pending self registrations.

Endpoints:
- GET /registrations: card list or "no new registrations" notice
- POST /registrations/{user_uuid}/assign: approve a registration
- DELETE /registrations/{user_uuid}: delete a registration

Security:
- ORG_ADMIN or higher
- Only registrations of the administrator's organization are visible
"""

from fastapi import APIRouter, Depends

from memberportal.core.context import RequestContext
from memberportal.core.dependencies.context import get_base_url, get_request_context
from memberportal.core.dependencies.rbac import require_org_admin
from memberportal.core.logging import get_logger
from memberportal.models.user import User
from memberportal.schemas import (
    ErrorResponse,
    RegistrationActionResponse,
    RegistrationListResponse,
)
from memberportal.services.profile_fields import ProfileFields
from memberportal.services.registration_service import RegistrationModule

# Initialize logger
logger = get_logger(__name__)


router = APIRouter(
    prefix="/registrations",
    tags=["Registrations"],
    responses={
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Insufficient permissions"},
    },
)


def get_registration_module(
    ctx: RequestContext = Depends(get_request_context),
    base_url: str = Depends(get_base_url),
) -> RegistrationModule:
    """Registration module for the organization of the current user."""
    return RegistrationModule(
        ctx,
        ProfileFields(ctx.db.session, ctx.organization_id),
        base_url=base_url,
    )


@router.get(
    "",
    response_model=RegistrationListResponse,
    summary="List Pending Registrations",
    description="""
    Returns `kind = "cards"` with one card per pending registration, or
    `kind = "empty"` with a notice and the url the client should forward to.
    """,
)
def list_registrations(
    current_user: User = Depends(require_org_admin),
    module: RegistrationModule = Depends(get_registration_module),
):
    content = module.create_content()

    logger.info(
        "Registration list requested",
        extra={"user_id": str(current_user.id), "kind": content.kind},
    )
    return content


@router.post(
    "/{user_uuid}/assign",
    response_model=RegistrationActionResponse,
    summary="Assign Registration",
    responses={404: {"model": ErrorResponse, "description": "Registration not found"}},
)
def assign_registration(
    user_uuid: str,
    current_user: User = Depends(require_org_admin),
    module: RegistrationModule = Depends(get_registration_module),
) -> dict:
    """Approve the registration: the user becomes valid and leaves the list."""
    message = module.assign_registration(user_uuid, actor_id=current_user.uuid)
    return {"message": message, "user_uuid": user_uuid}


@router.delete(
    "/{user_uuid}",
    response_model=RegistrationActionResponse,
    summary="Delete Registration",
    responses={404: {"model": ErrorResponse, "description": "Registration not found"}},
)
def delete_registration(
    user_uuid: str,
    current_user: User = Depends(require_org_admin),
    module: RegistrationModule = Depends(get_registration_module),
) -> dict:
    """Delete the registration and the never validated user."""
    message = module.delete_registration(user_uuid, actor_id=current_user.uuid)
    return {"message": message, "user_uuid": user_uuid}
