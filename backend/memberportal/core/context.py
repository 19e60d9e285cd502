"""
Request Context Module
======================

Explicit per-request state handed to the installation utilities
and the registration module instead of process wide globals.

- RequestContext: database handle, localization, settings, organization
- ServerEnvironment: the request metadata needed to rebuild the public URL
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import Request

from memberportal.core.config import Settings
from memberportal.core.i18n import Language
from memberportal.db.database import Database


@dataclass
class RequestContext:
    """
    Everything a service needs to know about the current request.

    Attributes:
        db: Database handle bound to the request session
        l10n: Localization for user facing messages
        settings: Application settings
        organization_id: Organization the request acts for
    """

    db: Database
    l10n: Language
    settings: Settings
    organization_id: Optional[int] = None


@dataclass(frozen=True)
class ServerEnvironment:
    """
    Request metadata as seen by the application server.

    Attributes:
        https: Whether the request arrived over TLS
        server_protocol: Protocol and version, e.g. HTTP/1.1
        server_port: Port the server received the request on
        server_name: Configured or bound server name
        request_uri: Path and query string of the request
        host: Value of the Host header
        forwarded_host: Value of the X-Forwarded-Host header
    """

    https: bool
    server_port: int
    server_name: str
    request_uri: str
    server_protocol: str = "HTTP/1.1"
    host: Optional[str] = None
    forwarded_host: Optional[str] = None

    @classmethod
    def from_request(cls, request: Request) -> "ServerEnvironment":
        """
        Build the environment from an incoming FastAPI request.

        Args:
            request: Current request

        Returns:
            ServerEnvironment for the request
        """
        https = request.url.scheme == "https"
        server = request.scope.get("server") or (None, None)
        server_name = server[0] or request.url.hostname or "localhost"
        server_port = server[1] or request.url.port or (443 if https else 80)

        request_uri = request.url.path
        if request.url.query:
            request_uri = f"{request_uri}?{request.url.query}"

        return cls(
            https=https,
            server_protocol=f"HTTP/{request.scope.get('http_version', '1.1')}",
            server_port=int(server_port),
            server_name=server_name,
            request_uri=request_uri,
            host=request.headers.get("host"),
            forwarded_host=request.headers.get("x-forwarded-host"),
        )
