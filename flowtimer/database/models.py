"""SQLAlchemy ORM models for FlowTimer."""

from sqlalchemy import Column, Integer, DateTime
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class DurationsRecord(Base):
    """Single-row table holding the configured interval lengths."""

    __tablename__ = "durations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    work = Column(Integer, nullable=False, default=25 * 60)
    short_break = Column(Integer, nullable=False, default=5 * 60)
    long_break = Column(Integer, nullable=False, default=15 * 60)

    def __repr__(self) -> str:
        return (
            f"<DurationsRecord work={self.work} "
            f"short_break={self.short_break} long_break={self.long_break}>"
        )


class SuspendSnapshot(Base):
    """When the running countdown was suspended.  At most one row."""

    __tablename__ = "suspend_snapshot"

    id = Column(Integer, primary_key=True, autoincrement=True)
    suspended_at = Column(DateTime, nullable=False)

    def __repr__(self) -> str:
        return f"<SuspendSnapshot suspended_at={self.suspended_at}>"
