"""Database utilities and models."""

from weekday_planner.db.base import Base
from weekday_planner.db import models  # noqa: F401  (imported for side effects)

__all__ = ["Base"]
