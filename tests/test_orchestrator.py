"""
Integration tests for the run lifecycle: fetch, upsert, ledger, cache.
"""
import pytest

from econ_pipeline.cache.response_cache import ResponseCache
from econ_pipeline.ingestion.core.orchestrator import Orchestrator
from econ_pipeline.ingestion.core.registry import AdapterRegistry
from econ_pipeline.ingestion.errors import ProviderResponseError, UnknownJobError
from tests.helpers import GDP_ID, GINI_ID, StaticAdapter, ledger_rows, obs, stored_values

pytestmark = pytest.mark.integration


def make_orchestrator(engine, payload=(), error=None, cache=None):
    adapter_cls = type("TestAdapter", (StaticAdapter,), {"payload": list(payload), "error": error})
    registry = AdapterRegistry()
    registry.register("worldbank", adapter_cls)
    return Orchestrator(registry, engine, cache=cache)


class TestRun:
    def test_success_writes_values_and_one_ledger_row(self, engine):
        orchestrator = make_orchestrator(engine, [obs("US", 80000.0), obs("GB", 46000.0)])

        result = orchestrator.run("gdp_per_capita")

        assert (result.inserted, result.updated, result.skipped) == (2, 0, 0)
        assert len(stored_values(engine, GDP_ID)) == 2
        rows = ledger_rows(engine)
        assert len(rows) == 1
        assert (rows[0].job_name, rows[0].status, rows[0].items_inserted) == ("gdp_per_capita", "success", 2)
        assert rows[0].error_message is None

    def test_reduces_to_latest_per_country(self, engine):
        orchestrator = make_orchestrator(engine, [
            obs("US", 1.0, "2021-12-31"),
            obs("US", 2.0, "2023-12-31"),
            obs("US", 1.5, "2022-12-31"),
        ])
        orchestrator.run("gdp_per_capita")
        assert stored_values(engine, GDP_ID) == [("US", "2023-12-31", 2.0, 1)]

    def test_validation_errors_make_partial(self, engine):
        orchestrator = make_orchestrator(engine, [obs("USA", 1.0), obs("GB", 2.0)])

        result = orchestrator.run("gini")

        assert result.inserted == 1
        assert len(result.errors) == 1
        row = ledger_rows(engine)[0]
        assert row.status == "partial"
        assert row.error_message == "Invalid country_code: USA"
        assert stored_values(engine, GINI_ID) == [("GB", "2023-12-31", 2.0, 1)]

    def test_second_run_with_unchanged_data_is_success_with_no_writes(self, engine):
        orchestrator = make_orchestrator(engine, [obs("US", 1.0)])
        orchestrator.run("gini")
        result = orchestrator.run("gini")

        assert (result.inserted, result.updated, result.skipped) == (0, 0, 1)
        assert [r.status for r in ledger_rows(engine)] == ["success", "success"]

    def test_provider_failure_records_failure_and_reraises(self, engine):
        orchestrator = make_orchestrator(engine, error=ProviderResponseError("Unrecognized World Bank indicator response"))

        with pytest.raises(ProviderResponseError):
            orchestrator.run("inflation")

        rows = ledger_rows(engine)
        assert len(rows) == 1
        assert (rows[0].job_name, rows[0].status) == ("inflation", "failure")
        assert (rows[0].items_inserted, rows[0].items_updated) == (0, 0)
        assert "Unrecognized World Bank" in rows[0].error_message

    def test_interrupt_records_failure_and_reraises(self, engine):
        orchestrator = make_orchestrator(engine, error=KeyboardInterrupt())

        with pytest.raises(KeyboardInterrupt):
            orchestrator.run("inflation")

        row = ledger_rows(engine)[0]
        assert row.status == "failure"
        assert row.error_message == "Run interrupted before commit"

    def test_unknown_job_writes_nothing(self, engine):
        orchestrator = make_orchestrator(engine, [obs("US", 1.0)])
        with pytest.raises(UnknownJobError):
            orchestrator.run("not_an_indicator")
        assert ledger_rows(engine) == []

    def test_unregistered_source_is_unknown(self, engine):
        orchestrator = Orchestrator(AdapterRegistry(), engine)
        with pytest.raises(UnknownJobError):
            orchestrator.run("gini")


class TestCacheInvalidation:
    def test_committed_run_drops_indicator_entries(self, engine):
        cache = ResponseCache()
        cache.set("indicators:gini", {"rows": []})
        cache.set("history:US:gini", {"rows": []})
        cache.set("meta:last-updated", {}, kind="meta")
        cache.set("countries:all", [], kind="countries")

        make_orchestrator(engine, [obs("US", 1.0)], cache=cache).run("gini")

        assert cache.get("indicators:gini") is None
        assert cache.get("history:US:gini") is None
        assert cache.get("meta:last-updated") is None
        assert cache.get("countries:all") == []

    def test_failed_run_leaves_cache(self, engine):
        cache = ResponseCache()
        cache.set("indicators:gini", {"rows": []})

        with pytest.raises(RuntimeError):
            make_orchestrator(engine, error=RuntimeError("boom"), cache=cache).run("gini")

        assert cache.get("indicators:gini") == {"rows": []}


class TestRunAll:
    def test_failures_do_not_stop_other_jobs(self, engine):
        class FlakyAdapter(StaticAdapter):
            payload = [obs("US", 1.0)]

            def fetch(self, source_code, **kwargs):
                if source_code == "SI.POV.GINI":
                    raise ProviderResponseError("bad payload")
                return super().fetch(source_code, **kwargs)

        registry = AdapterRegistry()
        registry.register("worldbank", FlakyAdapter)
        orchestrator = Orchestrator(registry, engine)

        results = orchestrator.run_all(["gdp_per_capita", "gini", "inflation", "bogus"])

        assert results["gini"] is None
        assert results["bogus"] is None
        assert results["gdp_per_capita"].inserted == 1
        assert results["inflation"].inserted == 1
        statuses = {r.job_name: r.status for r in ledger_rows(engine)}
        assert statuses == {"gdp_per_capita": "success", "gini": "failure", "inflation": "success"}
