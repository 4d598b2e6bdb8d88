from sqlalchemy import create_engine
from sqlalchemy.ext.declarative import declarative_base
from sqlalchemy.orm import sessionmaker
from todoapp.core.config import settings


def build_engine(database_url: str, **kwargs):
    """
    Create an engine for the given URL.

    SQLite connections are shared across FastAPI's worker threads, so the
    same-thread check has to be switched off for that driver.
    """
    if database_url.startswith("sqlite"):
        connect_args = kwargs.pop("connect_args", {})
        connect_args.setdefault("check_same_thread", False)
        kwargs["connect_args"] = connect_args
    return create_engine(database_url, **kwargs)


# Connection pool shared by every request
engine = build_engine(settings.DATABASE_URL)

# autocommit=False: changes require an explicit commit
# autoflush=False: don't flush before every query
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for all database models
Base = declarative_base()


def get_db():
    """
    Dependency for getting database session.

    Each request gets its own session; the session is closed when the
    request completes, even if the handler raised.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=None):
    """Create tables for every model registered on Base"""
    # Models must be imported so they are attached to Base.metadata
    from todoapp.models import todo, user  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
