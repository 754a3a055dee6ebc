"""Tests for the scheduler module."""

import asyncio
from datetime import UTC, datetime
from unittest.mock import AsyncMock, patch

import pytest
from apscheduler.triggers.cron import CronTrigger

from daily_news.exceptions import StaleUpstream
from daily_news.scheduler import ScheduledTask, Scheduler, daily_cron


@pytest.fixture
def mock_service():
    """Create mock news service."""
    service = AsyncMock()
    service.get_image.return_value = "QUJD"
    return service


@pytest.fixture
def mock_broadcaster():
    return AsyncMock()


@pytest.fixture
def scheduler(mock_service, mock_broadcaster):
    """Create scheduler with mocked dependencies."""
    return Scheduler(service=mock_service, broadcaster=mock_broadcaster, timezone="UTC")


async def dummy_task():
    return "done"


class TestDailyCron:
    """Test building cron expressions from [hour, minute]."""

    def test_default_point(self):
        assert daily_cron([8, 0]) == "0 8 * * *"

    def test_minutes(self):
        assert daily_cron([21, 45]) == "45 21 * * *"

    def test_hour_24_is_midnight(self):
        assert daily_cron([24, 0]) == "0 0 * * *"

    def test_expressions_are_valid_crontab(self):
        for point in [[0, 0], [8, 0], [23, 59], [24, 30]]:
            assert CronTrigger.from_crontab(daily_cron(point)) is not None


class TestScheduledTask:
    """Test ScheduledTask class."""

    def test_task_creation(self):
        task = ScheduledTask(
            name="test_task",
            cron_expression="0 8 * * *",
            task_func=dummy_task,
            kwargs={"x": 1},
        )

        assert task.name == "test_task"
        assert task.kwargs == {"x": 1}
        assert task.args == ()
        assert task.last_run is None
        assert task.run_count == 0
        assert task.error_count == 0


class TestScheduler:
    """Test Scheduler class."""

    def test_initialization(self, scheduler):
        assert len(scheduler.tasks) == 0
        assert not scheduler.scheduler.running

    def test_add_and_remove_task(self, scheduler):
        task = ScheduledTask("test", "0 * * * *", dummy_task)

        scheduler.add_task(task)
        assert scheduler.tasks["test"] is task

        scheduler.remove_task("test")
        assert "test" not in scheduler.tasks

    def test_add_task_invalid_cron(self, scheduler):
        task = ScheduledTask("test", "invalid cron", dummy_task)

        with pytest.raises(ValueError, match="Invalid cron expression"):
            scheduler.add_task(task)

    def test_add_duplicate_task_replaces(self, scheduler):
        scheduler.add_task(ScheduledTask("test", "0 * * * *", dummy_task))
        scheduler.add_task(ScheduledTask("test", "30 * * * *", dummy_task))

        assert len(scheduler.tasks) == 1
        assert scheduler.tasks["test"].cron_expression == "30 * * * *"

    def test_setup_default_tasks(self, scheduler):
        with patch("daily_news.scheduler.scheduler.settings") as mock_settings:
            mock_settings.point = [7, 30]

            scheduler.setup_default_tasks()

        assert list(scheduler.tasks) == ["daily_news"]
        assert scheduler.tasks["daily_news"].cron_expression == "30 7 * * *"

    @pytest.mark.asyncio
    async def test_push_daily_news(self, scheduler, mock_service, mock_broadcaster):
        result = await scheduler.push_daily_news()

        assert result["status"] == "success"
        mock_service.get_image.assert_called_once_with()
        mock_broadcaster.broadcast.assert_called_once_with("data:image/jpg;base64,QUJD")

    @pytest.mark.asyncio
    async def test_push_without_broadcaster(self, mock_service):
        scheduler = Scheduler(service=mock_service, timezone="UTC")

        result = await scheduler.push_daily_news()

        assert result["status"] == "not_delivered"
        mock_service.get_image.assert_called_once()

    @pytest.mark.asyncio
    async def test_failed_push_is_recorded(self, scheduler, mock_service, mock_broadcaster):
        """A stale upstream is counted as a task error and nothing is sent."""
        mock_service.get_image.side_effect = StaleUpstream("2024-03-10", "ab" * 32)
        scheduler.setup_default_tasks()

        await scheduler.run_task_now("daily_news")

        task = scheduler.tasks["daily_news"]
        assert task.run_count == 0
        assert task.error_count == 1
        assert "identical to the previous day" in task.last_error
        mock_broadcaster.broadcast.assert_not_called()

    @pytest.mark.asyncio
    async def test_successful_push_is_recorded(self, scheduler, mock_broadcaster):
        scheduler.setup_default_tasks()

        await scheduler.run_task_now("daily_news")

        task = scheduler.tasks["daily_news"]
        assert task.run_count == 1
        assert task.error_count == 0
        assert task.last_run is not None
        mock_broadcaster.broadcast.assert_called_once()

    @pytest.mark.asyncio
    async def test_run_task_now_not_found(self, scheduler):
        with pytest.raises(ValueError, match="Task 'nonexistent' not found"):
            await scheduler.run_task_now("nonexistent")

    @pytest.mark.asyncio
    async def test_start_stop(self, scheduler):
        scheduler.setup_default_tasks()

        scheduler.start()
        assert scheduler.scheduler.running
        assert scheduler.tasks["daily_news"].next_run is not None

        # Starting twice only logs a warning
        scheduler.start()

        scheduler.stop()
        await asyncio.sleep(0.1)
        assert not scheduler.scheduler.running

        scheduler.stop()

    def test_get_status(self, scheduler):
        scheduler.add_task(ScheduledTask("task1", "0 * * * *", dummy_task))
        scheduler.add_task(ScheduledTask("task2", "30 * * * *", dummy_task))
        scheduler.tasks["task1"].run_count = 5
        scheduler.tasks["task1"].last_run = datetime.now(UTC)
        scheduler.tasks["task2"].error_count = 2
        scheduler.tasks["task2"].last_error = "Test error"

        status = scheduler.get_status()

        assert not status["running"]
        assert status["tasks"]["task1"]["run_count"] == 5
        assert status["tasks"]["task1"]["last_run"] is not None
        assert status["tasks"]["task2"]["error_count"] == 2
        assert status["tasks"]["task2"]["last_error"] == "Test error"
