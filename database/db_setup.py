# database/db_setup.py
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base

from core.config import DATABASE_URL

# ---------------------------------------------------------------------
# Base class for ORM models
# ---------------------------------------------------------------------
Base = declarative_base()

# ---------------------------------------------------------------------
# Engine factory
# ---------------------------------------------------------------------
def get_engine(url: str = DATABASE_URL) -> Engine:
    """
    Return a SQLAlchemy Engine for the configured database.

    SQLite (the default) is opened with check_same_thread disabled because
    FastAPI serves sync endpoints from a worker thread pool.

    Example:
        engine = get_engine()
    """
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, echo=False, future=True, connect_args=connect_args)


def init_db(engine: Engine) -> None:
    """Create all tables that do not exist yet."""
    # models must be imported so their tables are registered on Base
    from . import models  # noqa: F401

    Base.metadata.create_all(engine)
