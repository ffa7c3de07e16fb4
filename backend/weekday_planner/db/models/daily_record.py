"""DailyRecord ORM model."""
from __future__ import annotations

from uuid import uuid4

from sqlalchemy import Boolean, Column, Date, DateTime, Integer, String, Text, func, text as sa_text
from sqlalchemy.dialects.postgresql import UUID

from weekday_planner.db.base import Base
from weekday_planner.db.types import JSONBCompat


class DailyRecord(Base):
    __tablename__ = "daily_records"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    # Unique key for upserts; one record per calendar date.
    date = Column(Date, nullable=False, unique=True)
    arrival_hour = Column(Integer, nullable=False)
    arrival_minute = Column(Integer, nullable=False)
    has_dinner = Column(Boolean, nullable=False, server_default=sa_text("true"))
    has_laundry = Column(Boolean, nullable=False, server_default=sa_text("false"))
    study_minutes = Column(Integer, nullable=False)
    total_free_time = Column(Integer, nullable=False)
    schedule_policy = Column(String(length=32), nullable=True)
    schedule_json = Column(JSONBCompat, nullable=False, default=list)
    completed_tasks = Column(JSONBCompat, nullable=False, default=list)
    notes = Column(Text, nullable=False, server_default=sa_text("''"))
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
