"""
Installation Utilities Module
=============================

Helpers used by the installation and update process:
- Database server version check
- Engine specific compatibility fixups
- Detection of the public URL of the installation
- Replay of SQL scripts from the installation folder

Version and file problems are returned as localized messages so the
caller can show them and stop the install flow. Statement failures are
database errors and propagate to the caller.
"""

import re
from typing import Optional, Union

from sqlalchemy import update
from sqlalchemy.exc import DBAPIError

from memberportal.core.config import PathConfig, get_path_config
from memberportal.core.context import RequestContext, ServerEnvironment
from memberportal.core.exceptions import SqlScriptError
from memberportal.core.logging import audit_logger, get_logger, log_execution_time
from memberportal.db.database import ENGINE_PGSQL, Database
from memberportal.models.preference import Preference

# Initialize logger
logger = get_logger(__name__)

SEARCH_SIMILAR_PREFERENCE = "system_search_similar"

_VERSION_PATTERN = re.compile(r"\d+(?:\.\d+)*")


# =====================================
# Version Check
# =====================================

def parse_version(version: str) -> tuple[int, ...]:
    """
    Parse the leading numeric part of a version string.

    "8.0.32-0ubuntu0.22.04.2" -> (8, 0, 32), "10.6.12-MariaDB" -> (10, 6, 12)
    """
    match = _VERSION_PATTERN.match(version.strip())
    if match is None:
        return (0,)
    return tuple(int(part) for part in match.group(0).split("."))


def is_version_lower(version: str, minimum: str) -> bool:
    """
    Compare two versions component by component.

    Missing trailing components count as zero, so "9.0" equals "9.0.0".
    """
    current = parse_version(version)
    required = parse_version(minimum)
    length = max(len(current), len(required))
    current += (0,) * (length - len(current))
    required += (0,) * (length - len(required))
    return current < required


def check_database_version(ctx: RequestContext) -> str:
    """
    Check whether the connected database server meets the minimum version.

    Args:
        ctx: Request context with an established database connection

    Returns:
        Empty string if the version is sufficient, otherwise an error text
        with both versions and a link to the download page.
    """
    version = ctx.db.get_version()
    minimum = ctx.db.get_minimum_required_version()

    if not is_version_lower(version, minimum):
        return ""

    logger.warning(
        "Database version below minimum",
        extra={"engine": ctx.db.engine_name, "version": version, "minimum": minimum},
    )

    return (
        f"{ctx.l10n.get('SYS_DATABASE_VERSION')}: <strong>{version}</strong><br /><br />"
        + ctx.l10n.get(
            "INS_WRONG_MYSQL_VERSION",
            [
                ctx.settings.version_text,
                minimum,
                f'<a href="{ctx.settings.homepage_url}download.php">',
                "</a>",
            ],
        )
    )


# =====================================
# Compatibility Fixups
# =====================================

def disable_soundex_search_if_pgsql(ctx: RequestContext) -> bool:
    """
    Disable the similar-name search on PostgreSQL.

    SOUNDEX is not a default function in PostgreSQL, so the preference
    is switched off for every organization. Running it again leaves
    the same state.

    Returns:
        True if the preference update was issued
    """
    if ctx.db.engine_name != ENGINE_PGSQL:
        return False

    statement = (
        update(Preference)
        .where(Preference.name == SEARCH_SIMILAR_PREFERENCE)
        .values(value="false")
    )
    ctx.db.query_prepared(statement)

    logger.info("Similar search disabled for PostgreSQL")
    return True


# =====================================
# Deployment URL
# =====================================

def get_deployment_url(
    environment: ServerEnvironment,
    check_forwarded_host: bool = True,
    program_folder: str = "adm_program",
) -> str:
    """
    Get the public URL of the installation with subdirectories, forwarded
    host and port, e.g. https://www.example.org/playground

    X-Forwarded-Host can be set by any client. Only enable
    check_forwarded_host when the application runs behind a proxy that
    overwrites the header.

    Args:
        environment: Request metadata of the current request
        check_forwarded_host: Prefer X-Forwarded-Host over the Host header
        program_folder: Folder below the installation root that holds the scripts

    Returns:
        URL of the installation without trailing slash
    """
    protocol = environment.server_protocol.lower().split("/", 1)[0]
    if environment.https:
        protocol += "s"

    port = environment.server_port
    default_port = 443 if environment.https else 80
    port_suffix = "" if port == default_port else f":{port}"

    if check_forwarded_host and environment.forwarded_host:
        host = environment.forwarded_host
    elif environment.host:
        # The Host header already names the port the client connected to
        host = environment.host
    else:
        host = environment.server_name + port_suffix

    full_url = f"{protocol}://{host}{environment.request_uri}"

    folder_position = full_url.find(f"/{program_folder}")
    if folder_position == -1:
        # Request outside the program folder: the application lives at the host root
        return f"{protocol}://{host}"
    return full_url[:folder_position]


# =====================================
# SQL Scripts
# =====================================

@log_execution_time(logger, "query_sql_file")
def query_sql_file(
    ctx: RequestContext,
    sql_file_name: str,
    path_config: Optional[PathConfig] = None,
) -> Union[bool, str]:
    """
    Read a SQL file and execute all statements against the current database.

    Args:
        ctx: Request context
        sql_file_name: Name of a file in the installation db_scripts folder
        path_config: Path configuration, the application default if None

    Returns:
        True if all statements were executed, otherwise an error text

    Raises:
        sqlalchemy.exc.DBAPIError: If a statement fails; later statements are not executed
    """
    paths = path_config or get_path_config()
    sql_path = paths.db_scripts_dir
    sql_file_path = paths.get_sql_script_path(sql_file_name)

    if sql_file_path.resolve().parent != sql_path.resolve() or not sql_file_path.is_file():
        return ctx.l10n.get("INS_DATABASE_FILE_NOT_FOUND", [sql_file_name, f"{sql_path}/"])

    try:
        sql_statements = Database.get_sql_statements_from_sql_file(
            sql_file_path, ctx.settings.table_prefix
        )
    except SqlScriptError:
        return ctx.l10n.get("INS_ERROR_OPEN_FILE", [str(sql_file_path)])

    for index, sql_statement in enumerate(sql_statements, start=1):
        try:
            ctx.db.query_prepared(sql_statement)
        except DBAPIError as e:
            logger.error(
                "SQL script statement failed",
                extra={"file": sql_file_name, "statement_index": index, "error": str(e.orig)},
            )
            raise

    audit_logger.log_sql_script_applied(sql_file_name, len(sql_statements))
    return True
