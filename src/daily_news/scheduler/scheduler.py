"""Cron-based task scheduler for the daily news broadcast."""

from datetime import UTC, datetime
from typing import Any, Callable, Coroutine

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from loguru import logger

from ..broadcast import BaseBroadcaster
from ..config import settings
from ..service import NewsService, to_data_uri


def daily_cron(point: list[int]) -> str:
    """Build a crontab expression firing once a day at [hour, minute].

    Hour 24 is accepted and means midnight.
    """
    hour, minute = point
    return f"{minute} {hour % 24} * * *"


class ScheduledTask:
    """Represents a scheduled task."""

    def __init__(
        self,
        name: str,
        cron_expression: str,
        task_func: Callable[..., Coroutine[Any, Any, Any]],
        args: tuple = (),
        kwargs: dict | None = None,
    ):
        """Initialize scheduled task.

        Args:
            name: Task name for identification
            cron_expression: Cron expression for scheduling
            task_func: Async function to execute
            args: Positional arguments for task function
            kwargs: Keyword arguments for task function
        """
        self.name = name
        self.cron_expression = cron_expression
        self.task_func = task_func
        self.args = args
        self.kwargs = kwargs or {}
        self.last_run: datetime | None = None
        self.next_run: datetime | None = None
        self.run_count: int = 0
        self.error_count: int = 0
        self.last_error: str | None = None


class Scheduler:
    """Runs the daily news push on the configured local time."""

    def __init__(
        self,
        service: NewsService | None = None,
        broadcaster: BaseBroadcaster | None = None,
        timezone: str | None = None,
    ):
        """Initialize scheduler.

        Args:
            service: News service shared with the chat command
            broadcaster: Delivery target for the daily image
            timezone: Timezone of cron expressions, defaults to local time
        """
        self.scheduler = AsyncIOScheduler(timezone=timezone) if timezone else AsyncIOScheduler()
        self.tasks: dict[str, ScheduledTask] = {}
        self.service = service or NewsService()
        self.broadcaster = broadcaster

    def add_task(self, task: ScheduledTask) -> None:
        """Add a task to the scheduler.

        Args:
            task: Task to schedule
        """
        if task.name in self.tasks:
            logger.warning(f"Task {task.name} already exists, replacing")
            self.remove_task(task.name)

        try:
            trigger = CronTrigger.from_crontab(
                task.cron_expression, timezone=self.scheduler.timezone
            )
        except ValueError as e:
            logger.error(f"Invalid cron expression '{task.cron_expression}': {e}")
            raise ValueError(f"Invalid cron expression: {e}") from e

        job = self.scheduler.add_job(
            self._run_task,
            trigger=trigger,
            args=[task],
            id=task.name,
            name=task.name,
            replace_existing=True,
        )

        # next_run_time is only set once the scheduler has started
        task.next_run = getattr(job, "next_run_time", None)
        self.tasks[task.name] = task

        logger.info(
            f"Scheduled task '{task.name}' with cron '{task.cron_expression}', "
            f"next run: {task.next_run}"
        )

    def remove_task(self, task_name: str) -> None:
        """Remove a task from the scheduler.

        Args:
            task_name: Name of task to remove
        """
        if task_name in self.tasks:
            self.scheduler.remove_job(task_name)
            del self.tasks[task_name]
            logger.info(f"Removed task '{task_name}'")

    async def _run_task(self, task: ScheduledTask) -> None:
        """Execute a scheduled task, recording failures instead of raising.

        Args:
            task: Task to execute
        """
        logger.info(f"Running scheduled task: {task.name}")
        start_time = datetime.now(UTC)

        try:
            await task.task_func(*task.args, **task.kwargs)

            task.last_run = start_time
            task.run_count += 1
            task.last_error = None

            job = self.scheduler.get_job(task.name)
            task.next_run = getattr(job, "next_run_time", None)

            duration = (datetime.now(UTC) - start_time).total_seconds()
            logger.info(f"Task '{task.name}' completed successfully in {duration:.1f}s")

        except Exception as e:
            task.error_count += 1
            task.last_error = str(e)
            logger.error(f"Task '{task.name}' failed: {e}")

    def setup_default_tasks(self) -> None:
        """Register the daily news push at settings.point."""
        self.add_task(
            ScheduledTask(
                name="daily_news",
                cron_expression=daily_cron(settings.point),
                task_func=self.push_daily_news,
            )
        )

    async def push_daily_news(self) -> dict[str, Any]:
        """Get today's image and broadcast it to all channels."""
        image = await self.service.get_image()

        if self.broadcaster is None:
            logger.warning("No broadcaster configured, daily news not delivered")
            return {"status": "not_delivered"}

        await self.broadcaster.broadcast(to_data_uri(image))
        logger.info("Broadcast daily news image")
        return {"status": "success", "size": len(image)}

    def start(self) -> None:
        """Start the scheduler."""
        if self.scheduler.running:
            logger.warning("Scheduler already running")
            return

        self.scheduler.start()
        logger.info(f"Scheduler started with {len(self.tasks)} tasks")

        for task in self.tasks.values():
            job = self.scheduler.get_job(task.name)
            task.next_run = getattr(job, "next_run_time", None)
            logger.info(f"Task '{task.name}' next run: {task.next_run}")

    def stop(self) -> None:
        """Stop the scheduler."""
        if not self.scheduler.running:
            logger.warning("Scheduler not running")
            return

        self.scheduler.shutdown(wait=False)
        logger.info("Scheduler stopped")

    def get_status(self) -> dict[str, Any]:
        """Get scheduler status and task information."""
        return {
            "running": self.scheduler.running,
            "tasks": {
                name: {
                    "cron": task.cron_expression,
                    "last_run": task.last_run.isoformat() if task.last_run else None,
                    "next_run": task.next_run.isoformat() if task.next_run else None,
                    "run_count": task.run_count,
                    "error_count": task.error_count,
                    "last_error": task.last_error,
                }
                for name, task in self.tasks.items()
            },
        }

    async def run_task_now(self, task_name: str) -> None:
        """Run a specific task immediately.

        Args:
            task_name: Name of task to run
        """
        if task_name not in self.tasks:
            raise ValueError(f"Task '{task_name}' not found")

        logger.info(f"Running task '{task_name}' manually")
        await self._run_task(self.tasks[task_name])
