"""SQLAlchemy engine and session setup."""

import os

from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker


def _get_database_url() -> str:
    url = os.environ.get("DATABASE_URL", "sqlite:///data/brand_monitor.db")
    # Hosted Postgres often hands out postgres:// but SQLAlchemy 2.x requires postgresql://
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql://", 1)
    return url


DATABASE_URL = _get_database_url()

engine = create_engine(
    DATABASE_URL,
    pool_pre_ping=True,
    echo=False,
)

SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


class Base(DeclarativeBase):
    pass


def init_db(bind=None) -> None:
    """Create all tables on the given engine (defaults to the app engine)."""
    if bind is None:
        bind = engine
        if DATABASE_URL.startswith("sqlite:///") and not DATABASE_URL.startswith("sqlite:///:memory:"):
            db_file = DATABASE_URL.removeprefix("sqlite:///")
            os.makedirs(os.path.dirname(db_file) or ".", exist_ok=True)
    Base.metadata.create_all(bind=bind)
