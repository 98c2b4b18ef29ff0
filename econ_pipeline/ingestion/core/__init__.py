# ingestion core: base_adapter, registry, validation, orchestrator
# (import Orchestrator from its module; the loader depends on this package)

from econ_pipeline.ingestion.core.base_adapter import BaseAdapter
from econ_pipeline.ingestion.core.registry import AdapterRegistry, registry

__all__ = ["BaseAdapter", "AdapterRegistry", "registry"]
