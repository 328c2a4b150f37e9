"""Tests for the in-process periodic trigger."""

from unittest.mock import patch

import pytest

from brand_monitor import scheduler
from brand_monitor.pipeline import RunSummary


@pytest.fixture
def running_scheduler(config):
    config.scheduler.interval_minutes = 30
    scheduler.init_scheduler(config)
    yield scheduler
    scheduler.shutdown_scheduler()


class TestScheduler:
    def test_not_running_by_default(self):
        assert scheduler.get_scheduler_info() == {"running": False, "jobs": []}

    def test_registers_interval_job(self, running_scheduler):
        info = running_scheduler.get_scheduler_info()
        assert info["running"] is True
        assert [job["id"] for job in info["jobs"]] == [scheduler.MONITOR_JOB_ID]
        assert "0:30:00" in info["jobs"][0]["trigger"]
        assert info["jobs"][0]["next_run_time"] is not None

    def test_init_is_idempotent(self, running_scheduler, config):
        running_scheduler.init_scheduler(config)
        assert len(running_scheduler.get_scheduler_info()["jobs"]) == 1

    def test_shutdown(self, config):
        scheduler.init_scheduler(config)
        scheduler.shutdown_scheduler()
        assert scheduler.get_scheduler_info()["running"] is False


class TestRunMonitorWrapper:
    def test_runs_scheduled_pass(self, config):
        with patch("brand_monitor.pipeline.run_keyword_monitor", return_value=RunSummary()) as run:
            scheduler._run_monitor_wrapper(config)
        run.assert_called_once_with(config)

    def test_reraises_failures(self, config):
        with patch("brand_monitor.pipeline.run_keyword_monitor", side_effect=RuntimeError("boom")):
            with pytest.raises(RuntimeError):
                scheduler._run_monitor_wrapper(config)
