from .catalog_service import CatalogService, CatalogServiceError, CatalogSnapshot
from .lots_service import LotCommitResult, LotMutationMeta, LotsService, LotsServiceError

__all__ = [
    "CatalogService",
    "CatalogServiceError",
    "CatalogSnapshot",
    "LotCommitResult",
    "LotMutationMeta",
    "LotsService",
    "LotsServiceError",
]
