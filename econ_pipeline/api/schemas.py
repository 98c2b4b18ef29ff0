from pydantic import BaseModel
from datetime import datetime
from typing import Dict


class LastIngestion(BaseModel):
    finished_at: datetime
    items_inserted: int
    items_updated: int


class MetaResponse(BaseModel):
    last_ingestion: Dict[str, LastIngestion]
    data_counts: Dict[str, int]
    server_time: datetime
