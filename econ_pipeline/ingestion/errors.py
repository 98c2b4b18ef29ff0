from econ_pipeline.ingestion.types import BackfillResult


class IngestionError(Exception):
    """Base for run-level ingestion failures."""


class ProviderResponseError(IngestionError):
    """Provider payload did not match any shape the adapter understands."""


class UnknownJobError(IngestionError, ValueError):
    pass


class BackfillCancelled(IngestionError):
    """Cancellation observed at a batch boundary. Earlier batches stay committed."""

    def __init__(self, result: BackfillResult):
        super().__init__(
            f"Backfill cancelled after {result.batches} batches "
            f"(inserted={result.inserted}, skipped={result.skipped})"
        )
        self.result = result
