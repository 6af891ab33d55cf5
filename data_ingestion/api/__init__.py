from data_ingestion.api.base_client import BaseAPIClient
from data_ingestion.api.lunarcrush_client import LunarCrushClient

__all__ = [
    "BaseAPIClient",
    "LunarCrushClient",
]
