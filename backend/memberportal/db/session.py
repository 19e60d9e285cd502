"""
Database Session Management Module
==================================

Responsible for:
- Creating database engine with optimized settings
- Managing session lifecycle
- Providing dependency for FastAPI routes
- Connection pooling configuration

Security Features:
- Connection validation (pool_pre_ping)
- Proper session cleanup
- Transaction isolation
"""

from typing import Any, Generator

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import QueuePool, StaticPool

from memberportal.core.config import settings
from memberportal.core.logging import get_logger

# Initialize logger
logger = get_logger(__name__)


# ==========================
# Database Engine
# ==========================

def get_engine_options(database_url: str) -> dict[str, Any]:
    """
    Build create_engine keyword arguments for a database URL.

    SQLite has no server side pool or connect timeout, so it gets a
    single shared connection instead of the QueuePool settings.
    """
    options: dict[str, Any] = {
        "pool_pre_ping": True,
        "future": True,
        "echo": settings.debug,
    }

    if make_url(database_url).get_backend_name() == "sqlite":
        options["poolclass"] = StaticPool
        options["connect_args"] = {"check_same_thread": False}
        return options

    options.update(
        poolclass=QueuePool,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_timeout=settings.db_pool_timeout,
        pool_recycle=settings.db_pool_recycle,
        connect_args={"connect_timeout": 10},
    )
    return options


engine = create_engine(settings.database_url, **get_engine_options(settings.database_url))


# ==========================
# Pool Event Listeners
# ==========================

@event.listens_for(engine, "connect")
def receive_connect(dbapi_connection, connection_record):
    """Log new database connections."""
    logger.debug(
        "New database connection established",
        extra={"event": "db_connect"}
    )


# ==========================
# Session Factory
# ==========================

SessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,
)


# ==========================
# Dependency for FastAPI
# ==========================

def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency that provides a database session.

    Ensures:
    - Session is opened per request
    - Session is properly closed after request completes
    - Transactions are rolled back on error

    Yields:
        SQLAlchemy Session object

    Usage:
        @router.get("/registrations")
        def list_registrations(db: Session = Depends(get_db)):
            ...
    """
    db = SessionLocal()
    try:
        yield db
    except Exception as e:
        logger.error(
            "Database session error",
            extra={"error": str(e)}
        )
        db.rollback()
        raise
    finally:
        db.close()


# ==========================
# Database Health Check
# ==========================

def check_database_connection() -> bool:
    """
    Check if database connection is healthy.

    Returns:
        True if connection is healthy, False otherwise
    """
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(
            "Database health check failed",
            extra={"error": str(e)}
        )
        return False
