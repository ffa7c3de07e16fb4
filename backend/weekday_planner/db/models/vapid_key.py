"""VapidKey ORM model (single row, id=1)."""
from __future__ import annotations

from sqlalchemy import Column, DateTime, Integer, Text, func

from weekday_planner.db.base import Base


class VapidKey(Base):
    __tablename__ = "vapid_keys"

    id = Column(Integer, primary_key=True, autoincrement=False)
    public_key = Column(Text, nullable=False)
    private_key = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
