"""
Installation Schemas Module
===========================

Responses of the installation endpoints.
"""

from typing import Optional

from pydantic import BaseModel, Field


class InstallationStatusResponse(BaseModel):
    """Database and URL checks of the running installation."""

    engine: str = Field(..., description="Connected engine: mysql, pgsql or sqlite")
    database_version: str = Field(..., description="Version reported by the database server")
    minimum_version: str = Field(..., description="Minimum supported version for the engine")
    version_ok: bool
    message: Optional[str] = Field(default=None, description="Error text if the version is too old")
    deployment_url: str = Field(..., description="Detected public URL of the installation")


class SqlScriptResponse(BaseModel):
    """Result of replaying a SQL script."""

    filename: str
    success: bool
    message: Optional[str] = None


class FixupResponse(BaseModel):
    """Result of the engine compatibility fixups."""

    engine: str
    search_similar_disabled: bool
