"""ORM models exposed for metadata discovery."""
from weekday_planner.db.models.daily_record import DailyRecord
from weekday_planner.db.models.push_subscription import PushSubscription
from weekday_planner.db.models.scheduled_notification import ScheduledNotification
from weekday_planner.db.models.vapid_key import VapidKey

__all__ = [
    "DailyRecord",
    "PushSubscription",
    "ScheduledNotification",
    "VapidKey",
]
