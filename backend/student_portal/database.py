"""
In-memory database engine and session management.

Student records live in an SQLite database held entirely in process memory.
Each call to create_memory_engine() returns an independent database, so every
store instance (and every test) starts empty. Nothing is written to disk.
"""

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase
from sqlalchemy.pool import StaticPool

DATABASE_URL = "sqlite://"


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models."""
    pass


def create_memory_engine() -> Engine:
    """
    Create an engine bound to a fresh in-memory SQLite database.

    StaticPool keeps one connection for the engine's lifetime: an in-memory
    database exists only as long as its connection, and every session must
    see the same data. check_same_thread=False lets FastAPI's worker threads
    share that connection; callers serialize access themselves.
    """
    engine = create_engine(
        DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    # Register all models with Base.metadata before creating tables
    import student_portal.models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    return engine


def create_session_factory(engine: Engine) -> sessionmaker:
    """
    Session factory for an engine.

    expire_on_commit=False keeps loaded attributes readable after the
    session closes, so records can be handed to templates and serializers.
    """
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)
