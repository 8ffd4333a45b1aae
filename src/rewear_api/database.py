"""Database connection and session management.

This module provides SQLModel engine setup, connection pooling, session management,
transaction scoping and database initialization utilities for the ReWear API.
"""

from collections.abc import Generator, Iterator
from contextlib import asynccontextmanager, contextmanager
from typing import Any

from fastapi import FastAPI
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import QueuePool, StaticPool
from sqlmodel import Session, SQLModel, create_engine

from .config import settings
# Import models to register them with SQLModel
from .models import Item, PointTransaction, Swap, User  # noqa: F401


def build_engine_options(database_url: str) -> dict[str, Any]:
    """Build engine keyword arguments appropriate for the database backend.

    SQLite in-memory databases need a single shared connection, file-based
    SQLite needs cross-thread access, PostgreSQL gets a bounded QueuePool.

    Args:
        database_url: SQLAlchemy database URL

    Returns:
        dict: Keyword arguments for ``create_engine``
    """
    if database_url.startswith("sqlite"):
        options: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            options["poolclass"] = StaticPool
        return options

    return {
        "pool_size": 10,  # Number of connections to maintain in the pool
        "max_overflow": 20,  # Additional connections that can be created on demand
        "pool_timeout": 30,  # Timeout for getting connection from pool
        "pool_recycle": 3600,  # Recycle connections after 1 hour
        "pool_pre_ping": True,
        "poolclass": QueuePool,
    }


engine = create_engine(
    settings.database_url,
    echo=settings.debug,  # Log SQL queries in debug mode
    **build_engine_options(settings.database_url),
)


def get_session() -> Generator[Session, None, None]:
    """Dependency to get database session.

    The session is rolled back if the request handler raises and closed
    once the response has been produced.

    Yields:
        Session: SQLModel database session
    """
    with Session(engine) as session:
        try:
            yield session
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()


@contextmanager
def atomic(session: Session) -> Iterator[Session]:
    """Run a block of writes as one transaction.

    Commits when the block finishes and rolls back every pending write if
    it raises, so multi-step workflows never leave partial state behind.

    Args:
        session: Session whose pending transaction should be committed

    Yields:
        Session: The same session

    Example:
        with atomic(session):
            user_repository.adjust_points(owner_id, 10)
            ledger_repository.create(entry)
    """
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise


def create_db_and_tables() -> None:
    """Create database tables based on SQLModel definitions.

    Note:
        This function is idempotent - it won't recreate existing tables.
    """
    SQLModel.metadata.create_all(engine)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """FastAPI lifespan context manager for database initialization.

    Args:
        app: FastAPI application instance

    Yields:
        None: Control to the application
    """
    create_db_and_tables()
    yield
    engine.dispose()


def get_database_info() -> dict[str, Any]:
    """Get database connection information for health checks.

    Returns:
        dict: Database backend and pool status, credentials stripped
    """
    info: dict[str, Any] = {
        "url": settings.database_url.split("@")[-1] if "@" in settings.database_url else settings.database_url,
        "backend": engine.dialect.name,
    }
    pool = engine.pool
    if isinstance(pool, QueuePool):
        info.update(
            {
                "pool_size": pool.size(),
                "checked_in": pool.checkedin(),
                "checked_out": pool.checkedout(),
                "overflow": pool.overflow(),
            }
        )
    return info


def check_database_connection(session: Session) -> bool:
    """Check database connectivity with a trivial query.

    Args:
        session: Session to test

    Returns:
        bool: True if the database answered, False otherwise
    """
    try:
        session.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError:
        return False
