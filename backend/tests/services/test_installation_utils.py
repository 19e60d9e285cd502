"""
Installation Utilities Tests
============================

Tests for:
- Database version check
- PostgreSQL search fixup
- Deployment URL detection
- SQL script replay
"""

from pathlib import Path
from unittest.mock import MagicMock

import pytest
from sqlalchemy import select
from sqlalchemy.exc import DBAPIError
from sqlalchemy.orm import Session

from memberportal.core.config import PathConfig, Settings
from memberportal.core.context import RequestContext, ServerEnvironment
from memberportal.core.i18n import Language
from memberportal.db.database import ENGINE_PGSQL, Database
from memberportal.models import Organization, Preference
from memberportal.services.installation_utils import (
    check_database_version,
    disable_soundex_search_if_pgsql,
    get_deployment_url,
    is_version_lower,
    parse_version,
    query_sql_file,
)


def mock_context(engine_name: str = "mysql", version: str = "8.0.32", minimum: str = "5.0.1") -> RequestContext:
    """Context with a mocked database handle."""
    db = MagicMock()
    db.engine_name = engine_name
    db.get_version.return_value = version
    db.get_minimum_required_version.return_value = minimum
    return RequestContext(
        db=db,
        l10n=Language("en"),
        settings=Settings(app_name="MemberPortal", app_version="4.3.0"),
        organization_id=1,
    )


# =====================================
# Version Check
# =====================================

@pytest.mark.unit
class TestVersionComparison:
    """Tests for parse_version and is_version_lower."""

    @pytest.mark.parametrize(
        "version, expected",
        [
            ("8.0.32", (8, 0, 32)),
            ("10.6.12-MariaDB", (10, 6, 12)),
            ("8.0.32-0ubuntu0.22.04.2", (8, 0, 32)),
            ("unknown", (0,)),
        ],
    )
    def test_parse_version(self, version, expected):
        assert parse_version(version) == expected

    def test_missing_components_count_as_zero(self):
        assert not is_version_lower("9.0", "9.0.0")

    def test_components_compare_numerically(self):
        assert is_version_lower("9.6.24", "9.10.0")
        assert not is_version_lower("10.0", "9.10.0")


@pytest.mark.unit
class TestCheckDatabaseVersion:
    """Tests for check_database_version."""

    def test_sufficient_version_returns_empty_text(self):
        ctx = mock_context(version="8.0.32", minimum="5.0.1")

        assert check_database_version(ctx) == ""

    def test_equal_version_is_sufficient(self):
        ctx = mock_context(version="5.0.1", minimum="5.0.1")

        assert check_database_version(ctx) == ""

    def test_old_version_returns_message_with_both_versions(self):
        # Arrange
        ctx = mock_context(version="4.1.22", minimum="5.0.1")

        # Act
        message = check_database_version(ctx)

        # Assert
        assert message.startswith("Database version: <strong>4.1.22</strong><br /><br />")
        assert "MemberPortal 4.3.0 requires at least version 5.0.1" in message
        assert '<a href="https://www.admidio.org/download.php">website</a>' in message


# =====================================
# Compatibility Fixups
# =====================================

@pytest.mark.unit
class TestDisableSoundexSearch:
    """Tests for disable_soundex_search_if_pgsql."""

    def test_pgsql_updates_preference(self):
        # Arrange
        ctx = mock_context(engine_name="pgsql")

        # Act
        result = disable_soundex_search_if_pgsql(ctx)

        # Assert
        assert result is True
        ctx.db.query_prepared.assert_called_once()
        statement = ctx.db.query_prepared.call_args.args[0]
        compiled = statement.compile()
        assert "adm_preferences" in str(compiled)
        assert set(compiled.params.values()) == {"false", "system_search_similar"}

    @pytest.mark.parametrize("engine_name", ["mysql", "sqlite"])
    def test_other_engines_are_untouched(self, engine_name):
        ctx = mock_context(engine_name=engine_name)

        assert disable_soundex_search_if_pgsql(ctx) is False
        ctx.db.query_prepared.assert_not_called()


# =====================================
# Deployment URL
# =====================================

@pytest.mark.unit
class TestGetDeploymentUrl:
    """Tests for get_deployment_url."""

    def test_default_https_port_is_omitted(self):
        environment = ServerEnvironment(
            https=True,
            server_port=443,
            server_name="example.org",
            host="example.org",
            request_uri="/adm_program/x.php",
        )

        assert get_deployment_url(environment) == "https://example.org"

    def test_subdirectory_is_kept(self):
        environment = ServerEnvironment(
            https=True,
            server_port=443,
            server_name="www.example.org",
            host="www.example.org",
            request_uri="/playground/adm_program/modules/registration/registration.php?x=1",
        )

        assert get_deployment_url(environment) == "https://www.example.org/playground"

    def test_non_default_port_is_included(self):
        environment = ServerEnvironment(
            https=False,
            server_port=8080,
            server_name="example.org",
            host="example.org:8080",
            request_uri="/adm_program/x.php",
        )

        assert get_deployment_url(environment) == "http://example.org:8080"

    def test_host_header_is_used_unchanged(self):
        """Behind a proxy the server port differs from the port the client used."""
        environment = ServerEnvironment(
            https=False,
            server_port=8000,
            server_name="127.0.0.1",
            host="example.org",
            request_uri="/adm_program/x.php",
        )

        assert get_deployment_url(environment) == "http://example.org"

    def test_forwarded_host_is_used_when_checked(self):
        environment = ServerEnvironment(
            https=True,
            server_port=443,
            server_name="backend.local",
            host="backend.local",
            forwarded_host="proxy.example.com",
            request_uri="/adm_program/x.php",
        )

        assert get_deployment_url(environment, check_forwarded_host=True) == "https://proxy.example.com"

    def test_forwarded_host_is_ignored_when_not_checked(self):
        environment = ServerEnvironment(
            https=True,
            server_port=443,
            server_name="backend.local",
            host="backend.local",
            forwarded_host="proxy.example.com",
            request_uri="/adm_program/x.php",
        )

        assert get_deployment_url(environment, check_forwarded_host=False) == "https://backend.local"

    def test_server_name_and_port_without_host_header(self):
        environment = ServerEnvironment(
            https=False,
            server_port=8000,
            server_name="10.0.0.5",
            request_uri="/adm_program/x.php",
        )

        assert get_deployment_url(environment) == "http://10.0.0.5:8000"

    def test_request_outside_program_folder_returns_origin(self):
        environment = ServerEnvironment(
            https=True,
            server_port=443,
            server_name="example.org",
            host="example.org",
            request_uri="/installation/status",
        )

        assert get_deployment_url(environment) == "https://example.org"


# =====================================
# SQL Scripts
# =====================================

@pytest.fixture
def sql_paths(tmp_path: Path) -> PathConfig:
    paths = PathConfig(Settings(), base_dir=tmp_path)
    paths.db_scripts_dir.mkdir(parents=True)
    return paths


@pytest.mark.integration
class TestQuerySqlFile:
    """Tests for query_sql_file against the SQLite test database."""

    def test_missing_file_returns_message(self, request_context: RequestContext, sql_paths: PathConfig):
        # Act
        result = query_sql_file(request_context, "db.sql", sql_paths)

        # Assert
        assert result == (
            f"The file db.sql could not be found in the folder {sql_paths.db_scripts_dir}/."
        )

    def test_path_outside_scripts_folder_is_rejected(
        self, request_context: RequestContext, sql_paths: PathConfig
    ):
        (sql_paths.installation_dir / "secret.sql").write_text("SELECT 1;", encoding="utf-8")

        result = query_sql_file(request_context, "../secret.sql", sql_paths)

        assert isinstance(result, str)
        assert "could not be found" in result

    def test_unreadable_file_returns_open_error(
        self, request_context: RequestContext, sql_paths: PathConfig
    ):
        sql_file = sql_paths.db_scripts_dir / "broken.sql"
        sql_file.write_bytes(b"SELECT '\xff';")

        result = query_sql_file(request_context, "broken.sql", sql_paths)

        assert result == f"The file {sql_file} could not be opened."

    def test_statements_are_executed_in_order(
        self, request_context: RequestContext, sql_paths: PathConfig, db_session: Session
    ):
        # Arrange
        (sql_paths.db_scripts_dir / "update.sql").write_text(
            "-- two statements, the second needs the first\n"
            "INSERT INTO %PREFIX%_organizations (org_uuid, org_shortname, org_longname, org_homepage)"
            " VALUES ('b1a6', 'NEW', 'New Organization', 'https://example.org:8080');\n"
            "UPDATE %PREFIX%_organizations SET org_longname = 'Renamed'"
            " WHERE org_shortname = 'NEW';\n",
            encoding="utf-8",
        )

        # Act
        result = query_sql_file(request_context, "update.sql", sql_paths)

        # Assert
        assert result is True
        longname = db_session.execute(
            select(Organization.longname).where(Organization.shortname == "NEW")
        ).scalar_one()
        assert longname == "Renamed"

    def test_failing_statement_stops_replay(
        self, request_context: RequestContext, sql_paths: PathConfig, db_session: Session
    ):
        # Arrange
        (sql_paths.db_scripts_dir / "broken_update.sql").write_text(
            "UPDATE adm_organizations SET org_longname = 'First';\n"
            "UPDATE adm_missing_table SET x = 1;\n"
            "UPDATE adm_organizations SET org_longname = 'Third';\n",
            encoding="utf-8",
        )

        # Act / Assert
        with pytest.raises(DBAPIError):
            query_sql_file(request_context, "broken_update.sql", sql_paths)

        longnames = db_session.execute(select(Organization.longname)).scalars().all()
        assert "Third" not in longnames


@pytest.mark.unit
class TestQuerySqlFileCalls:
    """Tests for the statements handed to the database handle."""

    def test_missing_file_makes_no_database_call(self, sql_paths: PathConfig):
        ctx = mock_context()

        query_sql_file(ctx, "db.sql", sql_paths)

        ctx.db.query_prepared.assert_not_called()

    def test_two_statements_are_sent_in_order(self, sql_paths: PathConfig):
        # Arrange
        ctx = mock_context()
        (sql_paths.db_scripts_dir / "two.sql").write_text(
            "CREATE TABLE %PREFIX%_a (id INTEGER);\nCREATE INDEX %PREFIX%_idx_a ON %PREFIX%_a (id);\n",
            encoding="utf-8",
        )

        # Act
        result = query_sql_file(ctx, "two.sql", sql_paths)

        # Assert
        assert result is True
        assert [call.args[0] for call in ctx.db.query_prepared.call_args_list] == [
            "CREATE TABLE adm_a (id INTEGER)",
            "CREATE INDEX adm_idx_a ON adm_a (id)",
        ]


@pytest.mark.integration
class TestDisableSoundexSearchOnDatabase:
    """Runs the PostgreSQL fixup against a stored preference."""

    def test_running_twice_leaves_search_disabled(
        self,
        request_context: RequestContext,
        db_session: Session,
        organization: Organization,
        monkeypatch,
    ):
        # Arrange
        db_session.add(
            Preference(organization_id=organization.id, name="system_search_similar", value="true")
        )
        db_session.add(Preference(organization_id=organization.id, name="system_date", value="d.m.Y"))
        db_session.commit()
        monkeypatch.setattr(Database, "engine_name", property(lambda self: ENGINE_PGSQL))

        # Act
        first = disable_soundex_search_if_pgsql(request_context)
        second = disable_soundex_search_if_pgsql(request_context)
        db_session.commit()

        # Assert
        assert first is True
        assert second is True
        values = dict(db_session.execute(select(Preference.name, Preference.value)).all())
        assert values == {"system_search_similar": "false", "system_date": "d.m.Y"}
