"""
Database Handle Module
======================

Thin wrapper around a SQLAlchemy session used by the installer
and the registration module.

Responsible for:
- Reporting the connected engine and its server version
- Executing parameterized statements
- Returning query results as plain row dictionaries
- Splitting installation SQL files into single statements
"""

from pathlib import Path
from typing import Any, Mapping, Optional, Union

from sqlalchemy import text
from sqlalchemy.engine import Result
from sqlalchemy.orm import Session
from sqlalchemy.sql import Executable

from memberportal.core.config import Settings, get_settings
from memberportal.core.exceptions import SqlScriptError
from memberportal.core.logging import get_logger

logger = get_logger(__name__)

Statement = Union[str, Executable]

# Engine names as used by the installer
ENGINE_MYSQL = "mysql"
ENGINE_PGSQL = "pgsql"
ENGINE_SQLITE = "sqlite"

_DIALECT_ENGINES = {
    "postgresql": ENGINE_PGSQL,
    "mysql": ENGINE_MYSQL,
    "mariadb": ENGINE_MYSQL,
    "sqlite": ENGINE_SQLITE,
}


class Database:
    """
    Database handle bound to one session.

    Usage:
        db = Database(session)
        rows = db.get_array_from_sql("SELECT * FROM adm_users WHERE usr_id = :id", {"id": 1})
    """

    def __init__(self, session: Session, settings: Optional[Settings] = None):
        """
        Initialize the handle.

        Args:
            session: SQLAlchemy session owned by the caller
            settings: Application settings (minimum versions)
        """
        self.session = session
        self.settings = settings or get_settings()

    @property
    def engine_name(self) -> str:
        """Short engine name: mysql, pgsql or sqlite."""
        dialect_name = self.session.get_bind().dialect.name
        return _DIALECT_ENGINES.get(dialect_name, dialect_name)

    def get_version(self) -> str:
        """
        Get the version of the connected database server.

        Only the leading numeric parts are returned, vendor
        suffixes such as MariaDB build tags are dropped.
        """
        connection = self.session.connection()
        version_info = connection.dialect.server_version_info or ()

        parts = []
        for part in version_info:
            if not isinstance(part, int):
                break
            parts.append(str(part))
        return ".".join(parts)

    def get_minimum_required_version(self) -> str:
        """Get the minimum server version supported for the connected engine."""
        minimum_versions = {
            ENGINE_MYSQL: self.settings.min_mysql_version,
            ENGINE_PGSQL: self.settings.min_pgsql_version,
            ENGINE_SQLITE: self.settings.min_sqlite_version,
        }
        return minimum_versions.get(self.engine_name, "0")

    def query_prepared(self, sql: Statement, params: Optional[Mapping[str, Any]] = None) -> Result:
        """
        Execute a parameterized statement.

        SQL text without parameters is passed to the driver unchanged, so
        literals inside script statements (e.g. '10:15') are not parsed
        as bind parameters.

        Args:
            sql: SQL text with named placeholders (:name) or a SQLAlchemy statement
            params: Values for the placeholders

        Returns:
            SQLAlchemy Result

        Raises:
            sqlalchemy.exc.DBAPIError: If the database rejects the statement
        """
        logger.debug("Executing statement", extra={"statement": str(sql)[:200]})

        if isinstance(sql, str):
            if params is None:
                return self.session.connection().exec_driver_sql(
                    sql, execution_options={"no_parameters": True}
                )
            return self.session.execute(text(sql), params)
        return self.session.execute(sql, params or {})

    def get_array_from_sql(
        self,
        sql: Statement,
        params: Optional[Mapping[str, Any]] = None,
    ) -> list[dict[str, Any]]:
        """
        Execute a query and return all rows as dictionaries keyed by column label.
        """
        result = self.query_prepared(sql, params)
        return [dict(row) for row in result.mappings().all()]

    @staticmethod
    def get_sql_statements_from_sql_file(sql_file_path: Path, table_prefix: str) -> list[str]:
        """
        Read a SQL file and split it into single statements.

        Statements are separated by semicolons. Lines starting with ``--``
        are comments and the placeholder ``%PREFIX%`` is replaced by the
        table prefix of this installation.

        Args:
            sql_file_path: Path of the SQL file
            table_prefix: Table prefix, e.g. adm

        Returns:
            Statements in file order

        Raises:
            SqlScriptError: If the file cannot be read
        """
        try:
            content = Path(sql_file_path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.error("SQL file not readable", extra={"path": str(sql_file_path), "error": str(e)})
            raise SqlScriptError(path=str(sql_file_path)) from e

        lines = [line for line in content.splitlines() if not line.strip().startswith("--")]

        statements = []
        for fragment in "\n".join(lines).split(";"):
            statement = fragment.replace("%PREFIX%", table_prefix).strip()
            if statement:
                statements.append(statement)
        return statements
