"""
Installation Routes Module
==========================

Installation and update tasks for super administrators.

Endpoints:
- GET /installation/status: database version check and detected url
- POST /installation/fixups: engine specific compatibility fixups
- POST /installation/scripts/{filename}: replay a SQL script

A failing script statement rolls back the transaction and aborts the
remaining statements.
"""

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import DBAPIError

from memberportal.core.context import RequestContext, ServerEnvironment
from memberportal.core.dependencies.context import get_request_context
from memberportal.core.dependencies.rbac import require_super_admin
from memberportal.core.logging import get_logger
from memberportal.models.user import User
from memberportal.schemas import (
    ErrorResponse,
    FixupResponse,
    InstallationStatusResponse,
    SqlScriptResponse,
)
from memberportal.services.installation_utils import (
    check_database_version,
    disable_soundex_search_if_pgsql,
    get_deployment_url,
    query_sql_file,
)

# Initialize logger
logger = get_logger(__name__)


router = APIRouter(
    prefix="/installation",
    tags=["Installation"],
    responses={
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Insufficient permissions"},
    },
)


@router.get(
    "/status",
    response_model=InstallationStatusResponse,
    summary="Installation Status",
)
def installation_status(
    request: Request,
    current_user: User = Depends(require_super_admin),
    ctx: RequestContext = Depends(get_request_context),
) -> dict:
    """Check the database server version and detect the public url."""
    message = check_database_version(ctx)
    deployment_url = get_deployment_url(
        ServerEnvironment.from_request(request),
        check_forwarded_host=ctx.settings.trust_forwarded_host,
        program_folder=ctx.settings.program_folder,
    )

    return {
        "engine": ctx.db.engine_name,
        "database_version": ctx.db.get_version(),
        "minimum_version": ctx.db.get_minimum_required_version(),
        "version_ok": message == "",
        "message": message or None,
        "deployment_url": deployment_url,
    }


@router.post(
    "/fixups",
    response_model=FixupResponse,
    summary="Run Compatibility Fixups",
)
def run_fixups(
    current_user: User = Depends(require_super_admin),
    ctx: RequestContext = Depends(get_request_context),
) -> dict:
    disabled = disable_soundex_search_if_pgsql(ctx)
    ctx.db.session.commit()
    return {"engine": ctx.db.engine_name, "search_similar_disabled": disabled}


@router.post(
    "/scripts/{filename}",
    response_model=SqlScriptResponse,
    summary="Apply SQL Script",
    responses={
        404: {"model": SqlScriptResponse, "description": "Script not found or unreadable"},
        500: {"model": ErrorResponse, "description": "Statement failed"},
    },
)
def apply_sql_script(
    filename: str,
    current_user: User = Depends(require_super_admin),
    ctx: RequestContext = Depends(get_request_context),
):
    """
    Execute all statements of a script from the installation db_scripts folder.
    """
    try:
        result = query_sql_file(ctx, filename)
    except DBAPIError as e:
        ctx.db.session.rollback()
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "message": "SQL statement failed",
                "details": {"filename": filename, "error": str(e.orig)},
            },
        )

    if result is not True:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"filename": filename, "success": False, "message": result},
        )

    ctx.db.session.commit()
    logger.info(
        "SQL script applied",
        extra={"filename": filename, "user_id": str(current_user.id)},
    )
    return {"filename": filename, "success": True, "message": None}
