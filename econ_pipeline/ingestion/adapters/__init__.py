# adapter plugins, registered by source name

from econ_pipeline.config.indicators import SOURCE_EXCHANGE, SOURCE_WORLD_BANK
from econ_pipeline.ingestion.core.registry import registry
from econ_pipeline.ingestion.adapters.world_bank import WorldBankAdapter
from econ_pipeline.ingestion.adapters.exchange_rates import ExchangeRateAdapter

registry.register(SOURCE_WORLD_BANK, WorldBankAdapter)
registry.register(SOURCE_EXCHANGE, ExchangeRateAdapter)

__all__ = ["WorldBankAdapter", "ExchangeRateAdapter"]
