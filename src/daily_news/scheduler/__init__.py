"""Task scheduler for the daily news broadcast."""

from .scheduler import ScheduledTask, Scheduler, daily_cron

__all__ = ["Scheduler", "ScheduledTask", "daily_cron"]
