"""
Tests for the scheduled triggers.
"""
from unittest.mock import MagicMock, patch

import pytest

from econ_pipeline.config.indicators import CATALOG, list_job_names
from econ_pipeline.ingestion.backfill import BackfillProgress
from econ_pipeline.scheduler import jobs
from econ_pipeline.scheduler.scheduler import build_scheduler

pytestmark = pytest.mark.unit


def cron_fields(trigger):
    return {field.name: str(field) for field in trigger.fields}


class TestBuildScheduler:
    def test_one_job_per_catalog_entry(self):
        scheduler = build_scheduler()
        job_ids = sorted(job.id for job in scheduler.get_jobs())
        assert job_ids == sorted(f"{name}_ingestion" for name in list_job_names())
        assert len(job_ids) == len(CATALOG)

    def test_jobs_never_overlap(self):
        for job in build_scheduler().get_jobs():
            assert job.max_instances == 1
            assert job.coalesce is True

    def test_cadences(self):
        by_id = {job.id: job for job in build_scheduler().get_jobs()}

        exchange = cron_fields(by_id["exchange_ingestion"].trigger)
        assert (exchange["hour"], exchange["minute"], exchange["day"]) == ("2", "0", "*")

        interest = cron_fields(by_id["interest_ingestion"].trigger)
        assert (interest["hour"], interest["day_of_week"]) == ("3", "sun")

        gini = cron_fields(by_id["gini_ingestion"].trigger)
        assert gini["day"] == "1"

    def test_job_calls_ingestion_with_its_name(self):
        job = {j.id: j for j in build_scheduler().get_jobs()}["gini_ingestion"]
        assert job.func is jobs.run_ingestion_job
        assert job.args == ("gini",)


class TestRunIngestionJob:
    def test_failure_is_logged_not_raised(self):
        orchestrator = MagicMock()
        orchestrator.run.side_effect = RuntimeError("provider down")
        with patch.object(jobs, "build_orchestrator", return_value=orchestrator):
            assert jobs.run_ingestion_job("gini", engine=MagicMock()) is None

    def test_returns_result(self):
        orchestrator = MagicMock()
        with patch.object(jobs, "build_orchestrator", return_value=orchestrator):
            result = jobs.run_ingestion_job("gini", engine=MagicMock())
        assert result is orchestrator.run.return_value
        orchestrator.run.assert_called_once_with("gini")


class TestRunFullBackfill:
    def test_adapter_failure_releases_progress(self):
        progress = BackfillProgress()
        progress.start(total=20)

        with patch.object(jobs, "WorldBankAdapter", side_effect=RuntimeError("no session")):
            with pytest.raises(RuntimeError, match="no session"):
                jobs.run_full_backfill(engine=MagicMock(), progress=progress)

        assert progress.running is False
        assert progress.completed_at is not None
