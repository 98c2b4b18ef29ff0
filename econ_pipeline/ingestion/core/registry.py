"""
Adapter registry: map source name -> adapter class (not instance).

Instantiate per run via adapter_cls(countries=...).
No DB, no lifecycle. Only registration and lookup.
"""

from typing import Dict, Optional, Type

from econ_pipeline.ingestion.core.base_adapter import BaseAdapter


class AdapterRegistry:
    """Maps source name to adapter class. Caller instantiates per run."""

    def __init__(self) -> None:
        self._adapters: Dict[str, Type[BaseAdapter]] = {}

    def register(self, source: str, adapter_cls: Type[BaseAdapter]) -> None:
        self._adapters[source] = adapter_cls

    def get(self, source: str) -> Optional[Type[BaseAdapter]]:
        return self._adapters.get(source)

    def list_sources(self) -> list[str]:
        return list(self._adapters.keys())


registry = AdapterRegistry()
