"""ScheduledNotification (reminder binding) ORM model."""
from __future__ import annotations

from uuid import uuid4

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    String,
    Text,
    UniqueConstraint,
    func,
    text as sa_text,
)
from sqlalchemy.dialects.postgresql import UUID

from weekday_planner.db.base import Base


class ScheduledNotification(Base):
    __tablename__ = "scheduled_notifications"
    __table_args__ = (
        UniqueConstraint("subscription_id", "event_id", name="uq_scheduled_notifications_subscription_event"),
        Index("ix_scheduled_notifications_due", "scheduled_time", "notified"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    subscription_id = Column(
        UUID(as_uuid=True),
        ForeignKey("push_subscriptions.id", ondelete="CASCADE"),
        nullable=False,
    )
    event_id = Column(String(length=64), nullable=False)
    event_label = Column(Text, nullable=False)
    # Local wall-clock "HH:MM"; the sweep matches it against the current minute.
    scheduled_time = Column(String(length=5), nullable=False)
    notified = Column(Boolean, nullable=False, server_default=sa_text("false"))
    notified_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
