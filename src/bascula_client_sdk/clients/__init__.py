from .catalog_client import CatalogClient
from .lots_client import LotsClient

__all__ = [
    "CatalogClient",
    "LotsClient",
]
