"""
Test Configuration and Fixtures
================================

Central configuration for pytest with all shared fixtures.

Features:
- SQLite in-memory database for testing
- TestClient setup
- Fixtures for organizations, profile fields, users and pending registrations
- Dependency overrides for database session
"""

import os
from datetime import datetime
from typing import Callable, Generator, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

# Set testing environment before importing app modules
os.environ["ENVIRONMENT"] = "testing"
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only-min-32-chars"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["APP_URL"] = ""

from memberportal.core.config import get_settings
from memberportal.core.context import RequestContext
from memberportal.core.i18n import Language
from memberportal.db.base import Base
from memberportal.db.database import Database
from memberportal.db.session import get_db
from memberportal.models import Organization, ProfileField, Registration, Role, User, UserData
from memberportal.services.auth_service import AuthService
from memberportal.main import app as main_app


# =====================================
# Database Configuration
# =====================================

# StaticPool is used to maintain the same connection across tests
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


@event.listens_for(engine, "connect")
def set_sqlite_pragma(dbapi_connection, connection_record):
    """Enable foreign key constraints for SQLite."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


TestingSessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    expire_on_commit=False,
)


# =====================================
# Database Fixtures
# =====================================

@pytest.fixture(scope="function")
def db_session() -> Generator[Session, None, None]:
    """
    Create a fresh database session for each test.

    Creates all tables before each test and drops them after.
    """
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """
    Create a TestClient with database dependency override.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    main_app.dependency_overrides[get_db] = override_get_db

    with TestClient(main_app) as test_client:
        yield test_client

    main_app.dependency_overrides.clear()


@pytest.fixture
def request_context(db_session: Session, organization: Organization) -> RequestContext:
    """Service context acting for the test organization."""
    settings = get_settings()
    return RequestContext(
        db=Database(db_session, settings),
        l10n=Language("en"),
        settings=settings,
        organization_id=organization.id,
    )


# =====================================
# Organization Fixtures
# =====================================

@pytest.fixture
def organization(db_session: Session) -> Organization:
    org = Organization(shortname="TEST", longname="Test Organization")
    db_session.add(org)
    db_session.commit()
    db_session.refresh(org)
    return org


@pytest.fixture
def second_organization(db_session: Session) -> Organization:
    """Second organization for cross-organization testing."""
    org = Organization(shortname="OTHER", longname="Second Organization")
    db_session.add(org)
    db_session.commit()
    db_session.refresh(org)
    return org


@pytest.fixture
def profile_fields(db_session: Session) -> dict:
    """
    Shared profile field definitions (usf_org_id IS NULL).

    Returns:
        Mapping of internal name to ProfileField
    """
    fields = {
        "LAST_NAME": ProfileField(name_intern="LAST_NAME", name="Last name"),
        "FIRST_NAME": ProfileField(name_intern="FIRST_NAME", name="First name"),
        "EMAIL": ProfileField(name_intern="EMAIL", name="Email", type="EMAIL"),
    }
    db_session.add_all(fields.values())
    db_session.commit()
    return fields


# =====================================
# User Fixtures
# =====================================

def create_user(
    db_session: Session,
    organization: Organization,
    login_name: str,
    password: Optional[str] = None,
    role: Role = Role.MEMBER,
    valid: bool = True,
) -> User:
    """Persist a user, hashing the password if one is given."""
    user = User(
        login_name=login_name,
        password=AuthService.hash_password(password) if password else None,
        role=role,
        valid=valid,
        organization_id=organization.id,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def member(db_session: Session, organization: Organization) -> User:
    return create_user(db_session, organization, "member", "MemberPassword123!")


@pytest.fixture
def org_admin(db_session: Session, organization: Organization) -> User:
    return create_user(db_session, organization, "orgadmin", "AdminPassword123!", Role.ORG_ADMIN)


@pytest.fixture
def super_admin(db_session: Session, organization: Organization) -> User:
    return create_user(
        db_session, organization, "superadmin", "SuperAdminPassword123!", Role.SUPER_ADMIN
    )


@pytest.fixture
def second_org_admin(db_session: Session, second_organization: Organization) -> User:
    return create_user(
        db_session, second_organization, "otheradmin", "OtherAdminPassword123!", Role.ORG_ADMIN
    )


# =====================================
# Registration Fixtures
# =====================================

@pytest.fixture
def make_registration(db_session: Session, profile_fields: dict) -> Callable[..., User]:
    """
    Factory creating a not yet valid user with a pending registration.

    Usage:
        user = make_registration(organization, "jdoe", "John", "Doe", "john@example.org")
    """
    def _make(
        organization: Organization,
        login_name: str,
        first_name: Optional[str],
        last_name: Optional[str],
        email: Optional[str],
        timestamp: datetime = datetime(2024, 2, 1, 10, 15),
        password: Optional[str] = None,
    ) -> User:
        user = create_user(db_session, organization, login_name, password, valid=False)

        for name_intern, value in (
            ("FIRST_NAME", first_name),
            ("LAST_NAME", last_name),
            ("EMAIL", email),
        ):
            if value is not None:
                db_session.add(
                    UserData(user_id=user.id, field_id=profile_fields[name_intern].id, value=value)
                )

        db_session.add(
            Registration(organization_id=organization.id, user_id=user.id, timestamp=timestamp)
        )
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make


@pytest.fixture
def pending_registrations(make_registration, organization: Organization) -> list[User]:
    """Two pending registrations, created in reverse alphabetical order."""
    return [
        make_registration(
            organization, "zanna", "Anna", "Zimmer", "anna@example.org",
            timestamp=datetime(2024, 2, 1, 10, 15),
        ),
        make_registration(
            organization, "abernd", "Bernd", "Albers", "bernd@example.org",
            timestamp=datetime(2024, 3, 5, 18, 40),
        ),
    ]


# =====================================
# Auth Header Fixtures
# =====================================

def bearer(user: User) -> dict:
    token = AuthService.create_access_token(user.uuid, user.organization_id)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def member_auth_headers(member: User) -> dict:
    return bearer(member)


@pytest.fixture
def org_admin_auth_headers(org_admin: User) -> dict:
    return bearer(org_admin)


@pytest.fixture
def super_admin_auth_headers(super_admin: User) -> dict:
    return bearer(super_admin)


@pytest.fixture
def second_org_admin_auth_headers(second_org_admin: User) -> dict:
    return bearer(second_org_admin)
