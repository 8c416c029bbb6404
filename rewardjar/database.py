# rewardjar/database.py - Database Configuration
import os
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
from rewardjar.config import settings

# Database URL loaded from .env via rewardjar/config.py
DATABASE_URL = settings.DATABASE_URL


def build_engine(url: str):
    """
    Create an engine for the record store.

    SQLite connections are shared across threads (FastAPI runs sync routes in
    a thread pool); an in-memory SQLite URL also gets a single static
    connection so every session sees the same database.
    """
    if not str(url).startswith("sqlite"):
        return create_engine(url, pool_pre_ping=True)

    kwargs = {"connect_args": {"check_same_thread": False}}
    if str(url) in ("sqlite://", "sqlite:///:memory:"):
        kwargs["poolclass"] = StaticPool
    return create_engine(url, **kwargs)


# Create engine (with local fallback when postgres driver is unavailable)
try:
    engine = build_engine(DATABASE_URL)
except ModuleNotFoundError as exc:  # pragma: no cover - environment fallback
    if "psycopg2" not in str(exc):
        raise
    fallback_url = os.getenv("FALLBACK_DATABASE_URL", "sqlite:///./rewardjar.db")
    engine = build_engine(fallback_url)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def init_db(bind=None) -> None:
    """Create the records table if it does not exist yet."""
    from rewardjar import models  # noqa: F401 - register tables on Base.metadata

    Base.metadata.create_all(bind=bind or engine)


# Dependency to get database session
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
