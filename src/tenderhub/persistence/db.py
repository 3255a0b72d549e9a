"""
Database connection and session management.

Provides engine creation with connection pooling, session lifecycle
management, and translation of driver errors into store errors.
"""

from __future__ import annotations

import re
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from sqlalchemy import UniqueConstraint, create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from tenderhub.core.errors import StoreError, UniqueViolation

from .models import Base

DEFAULT_DATABASE_URL = "sqlite:///data/tenderhub.db"

# Alembic environment and revisions, shipped inside the package
MIGRATIONS_DIR = Path(__file__).resolve().parent / "migrations"

# Seconds a SQLite writer waits for another transaction to finish
SQLITE_BUSY_TIMEOUT = 15.0


# =============================================================================
# Global Engine References
# =============================================================================

_engine: Engine | None = None
_session_factory: sessionmaker[Session] | None = None


# =============================================================================
# SQLite Configuration
# =============================================================================


def configure_sqlite(engine: Engine) -> None:
    """Configure SQLite for reliability and working SAVEPOINTs.

    Enables:
    - Foreign key enforcement
    - WAL mode for better concurrency
    - BEGIN IMMEDIATE, which serializes writers (a second transaction
      waits for the first to commit) and keeps SAVEPOINTs working
    """
    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        # Let SQLAlchemy, not the driver, emit BEGIN
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA synchronous=NORMAL")
        cursor.close()

    @event.listens_for(engine, "begin")
    def do_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def _is_memory_url(url: str) -> bool:
    return url in ("sqlite://", "sqlite:///:memory:")


# =============================================================================
# Engine Creation
# =============================================================================


def build_engine(
    url: str = DEFAULT_DATABASE_URL,
    echo: bool = False,
    pool_size: int = 5,
) -> Engine:
    """Create a new engine without touching the global one.

    In-memory SQLite uses a single shared connection so every session
    sees the same database.
    """
    if url.startswith("sqlite:///") and not _is_memory_url(url):
        db_path = url.replace("sqlite:///", "")
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    if url.startswith("sqlite"):
        kwargs: dict = {"connect_args": {"check_same_thread": False, "timeout": SQLITE_BUSY_TIMEOUT}}
        if _is_memory_url(url):
            kwargs["poolclass"] = StaticPool
        engine = create_engine(url, echo=echo, **kwargs)
        configure_sqlite(engine)
    else:
        engine = create_engine(
            url,
            echo=echo,
            pool_size=pool_size,
            max_overflow=10,
            pool_pre_ping=True,
        )
    return engine


def make_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Session factory with the settings every TenderHub session uses."""
    return sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )


def get_engine(
    url: str = DEFAULT_DATABASE_URL,
    echo: bool = False,
    pool_size: int = 5,
) -> Engine:
    """Get or create the process-wide database engine.

    Args:
        url: SQLAlchemy database URL
        echo: Whether to log SQL statements
        pool_size: Connection pool size (ignored for SQLite)

    Returns:
        SQLAlchemy Engine instance
    """
    global _engine, _session_factory

    if _engine is not None:
        return _engine

    _engine = build_engine(url, echo=echo, pool_size=pool_size)
    _session_factory = make_session_factory(_engine)
    return _engine


# =============================================================================
# Session Management
# =============================================================================


@contextmanager
def get_session() -> Generator[Session, None, None]:
    """Get a database session that commits on success.

    Usage:
        with get_session() as session:
            CompanyDirectory(session).ensure_profile(identity)

    Yields:
        SQLAlchemy Session instance
    """
    if _session_factory is None:
        get_engine()  # Initialize with defaults

    assert _session_factory is not None
    session = _session_factory()

    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


# =============================================================================
# Error Translation
# =============================================================================

_SQLITE_UNIQUE = re.compile(r"UNIQUE constraint failed: (.+)")


def _sqlite_constraint_name(message: str) -> str | None:
    """Map 'UNIQUE constraint failed: t.a, t.b' back to a named constraint."""
    match = _SQLITE_UNIQUE.search(message)
    if not match:
        return None

    columns = [part.strip() for part in match.group(1).split(",")]
    table_name = columns[0].split(".")[0]
    column_names = {c.split(".")[-1] for c in columns}

    table = Base.metadata.tables.get(table_name)
    if table is None:
        return None
    for constraint in table.constraints:
        if isinstance(constraint, UniqueConstraint):
            if {c.name for c in constraint.columns} == column_names:
                return constraint.name
    return None


def unique_violation_from(exc: IntegrityError) -> UniqueViolation | None:
    """Return a UniqueViolation if the integrity error is a unique-key clash.

    Recognises PostgreSQL (SQLSTATE 23505), SQLite and MySQL (1062).
    """
    orig = exc.orig
    message = str(orig)

    sqlstate = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if sqlstate == "23505":
        diag = getattr(orig, "diag", None)
        return UniqueViolation(message, constraint=getattr(diag, "constraint_name", None))

    if "UNIQUE constraint failed" in message:
        return UniqueViolation(message, constraint=_sqlite_constraint_name(message))

    args = getattr(orig, "args", ())
    if args and args[0] == 1062:
        return UniqueViolation(message)

    return None


@contextmanager
def store_errors() -> Generator[None, None, None]:
    """Translate SQLAlchemy failures raised inside the block into StoreError.

    Unique-key clashes become UniqueViolation so callers never inspect
    driver-specific error codes.
    """
    try:
        yield
    except IntegrityError as e:
        violation = unique_violation_from(e)
        if violation is not None:
            raise violation from e
        raise StoreError(f"Integrity error: {e.orig}") from e
    except SQLAlchemyError as e:
        raise StoreError(f"Database error: {e}") from e


# =============================================================================
# Database Initialization
# =============================================================================


def init_db(url: str = DEFAULT_DATABASE_URL, echo: bool = False) -> None:
    """Initialize the database schema.

    Creates all tables if they don't exist. For production use,
    prefer Alembic migrations.

    Args:
        url: Database URL
        echo: Whether to log SQL
    """
    engine = get_engine(url, echo=echo)
    Base.metadata.create_all(bind=engine)


def drop_db(url: str = DEFAULT_DATABASE_URL) -> None:
    """Drop all database tables.

    WARNING: This will delete all data!

    Args:
        url: Database URL
    """
    engine = get_engine(url)
    Base.metadata.drop_all(bind=engine)


# =============================================================================
# Cleanup
# =============================================================================


def dispose_engines() -> None:
    """Dispose of the global engine.

    Should be called on application shutdown.
    """
    global _engine, _session_factory

    if _engine is not None:
        _engine.dispose()
        _engine = None
        _session_factory = None
