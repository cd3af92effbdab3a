"""Database connection and session management."""

from __future__ import annotations

from pathlib import Path
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session as OrmSession

from ..settings import Settings
from .models import Base, DurationsRecord

# ── paths ────────────────────────────────────────────────────────────────────

APP_SUPPORT_DIR = Path.home() / "Library" / "Application Support" / "FlowTimer"
DB_PATH = APP_SUPPORT_DIR / "flowtimer.db"

# ── engine & session factory (created lazily) ─────────────────────────────

_engine = None
_SessionFactory = None


def _get_engine():
    global _engine
    if _engine is None:
        APP_SUPPORT_DIR.mkdir(parents=True, exist_ok=True)
        _engine = create_engine(
            f"sqlite:///{DB_PATH}",
            connect_args={"check_same_thread": False},
            echo=False,
        )
    return _engine


def _get_session_factory():
    global _SessionFactory
    if _SessionFactory is None:
        _SessionFactory = sessionmaker(bind=_get_engine(), expire_on_commit=False)
    return _SessionFactory


# ── public API ────────────────────────────────────────────────────────────


def configure_engine(url: str) -> None:
    """Override the database connection URL.  Used by tests to point at
    an in-memory SQLite database instead of the real one on disk."""
    global _engine, _SessionFactory
    _SessionFactory = None
    _engine = create_engine(
        url,
        connect_args={"check_same_thread": False},
        echo=False,
    )


def init_db(settings: Settings | None = None) -> None:
    """Create all tables and seed the durations row.

    The seed values come from *settings* (defaults when omitted).  An
    existing row is left untouched.
    """
    settings = settings or Settings()
    engine = _get_engine()
    Base.metadata.create_all(engine)

    factory = _get_session_factory()
    with factory() as session:
        if session.query(DurationsRecord).count() == 0:
            session.add(DurationsRecord(
                work=max(0, int(settings.work_duration)),
                short_break=max(0, int(settings.short_break_duration)),
                long_break=max(0, int(settings.long_break_duration)),
            ))
            session.commit()


@contextmanager
def get_session():
    """Yield a SQLAlchemy session; commit on success, rollback on error."""
    factory = _get_session_factory()
    session: OrmSession = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
