"""Database engine, session factory and FastAPI session dependency.

Every HTTP request gets its own session; services flush their changes and
routers commit, so a logical operation is exactly one transaction.
"""

from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session

from .config import get_settings


def build_engine(database_url: str, echo: bool = False, **overrides) -> Engine:
    """Create an engine with settings appropriate for the backend.

    Pool settings only apply to PostgreSQL. SQLite connections get foreign
    key enforcement switched on so ON DELETE rules match production.
    Keyword overrides (e.g. poolclass) are passed to create_engine as-is.
    """
    engine_kwargs = {
        "pool_pre_ping": True,  # Verify connections before using
        "echo": echo,
    }

    if database_url.startswith("sqlite"):
        engine_kwargs["connect_args"] = {"check_same_thread": False}
    else:
        engine_kwargs["pool_size"] = 5
        engine_kwargs["max_overflow"] = 10

    engine_kwargs.update(overrides)
    engine = create_engine(database_url, **engine_kwargs)

    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)

    return engine


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


_settings = get_settings()

engine = build_engine(_settings.DATABASE_URL, echo=_settings.SQL_ECHO)

# Create session factory
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)


@contextmanager
def get_db_session() -> Generator[Session, None, None]:
    """Context manager for database sessions.

    Usage:
        with get_db_session() as session:
            session.query(Document).all()

    Automatically commits on success, rolls back on exception.
    """
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def get_db() -> Generator[Session, None, None]:
    """Dependency for FastAPI endpoints.

    Uncommitted work is rolled back when the session closes, so a request
    that raises half way through leaves no partial writes behind.

    Usage:
        @router.get("/documents")
        def list_documents(db: Session = Depends(get_db)):
            return db.query(Document).all()
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
