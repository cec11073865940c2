"""Database configuration and session management."""

from typing import Any, Dict, Sequence, Type

from sqlalchemy import create_engine, insert
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker, DeclarativeBase

from formdesk.config import get_settings


settings = get_settings()

# Handle SQLite vs PostgreSQL connection args
connect_args = {}
engine_kwargs = {}

if settings.database_url.startswith("sqlite"):
    connect_args = {"check_same_thread": False}
else:
    engine_kwargs = {
        "pool_pre_ping": True,
        "pool_size": 10,
        "max_overflow": 20,
    }

engine = create_engine(
    settings.database_url,
    connect_args=connect_args,
    **engine_kwargs
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


def get_db():
    """Dependency that provides a database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def insert_ignore(
    db: Session,
    model: Type[Base],
    values: Dict[str, Any],
    conflict_columns: Sequence[str],
) -> bool:
    """
    Insert a row unless it collides with a unique key.

    Uses ON CONFLICT DO NOTHING on SQLite and PostgreSQL, and a savepoint
    around a plain INSERT elsewhere. Returns True when a row was inserted.
    Does not commit.
    """
    dialect = db.get_bind().dialect.name

    if dialect in ("sqlite", "postgresql"):
        module = sqlite if dialect == "sqlite" else postgresql
        stmt = module.insert(model).values(**values).on_conflict_do_nothing(
            index_elements=list(conflict_columns)
        )
        result = db.execute(stmt)
        return result.rowcount == 1

    try:
        with db.begin_nested():
            db.execute(insert(model).values(**values))
    except IntegrityError:
        return False
    return True
