from __future__ import annotations

import logging
from typing import Iterator, Protocol, Sequence

from bascula_console.engine.errors import CatalogUnavailableError
from bascula_console.engine.models import DEFAULT_AREAS, Area, Product, Provider
from bascula_console.services.catalog_service import CatalogServiceError, CatalogSnapshot

logger = logging.getLogger(__name__)


class CatalogSource(Protocol):
    def load_catalog(self) -> CatalogSnapshot:
        ...


class CatalogCache:
    """Reference lists read once per screen activation.

    Accessors return fresh iterators over the loaded lists; calling ``load``
    again is the only way to refresh them.
    """

    def __init__(
        self,
        source: CatalogSource,
        *,
        base_only: bool = True,
        areas: Sequence[Area] = DEFAULT_AREAS,
    ) -> None:
        self.source = source
        self.base_only = base_only
        self._areas = tuple(areas)
        self._providers: tuple[Provider, ...] = ()
        self._products: tuple[Product, ...] = ()
        self.is_loaded = False
        self.error: CatalogServiceError | None = None

    def load(self) -> None:
        try:
            snapshot = self.source.load_catalog()
        except CatalogServiceError as exc:
            self._providers = ()
            self._products = ()
            self.is_loaded = False
            self.error = exc
            raise CatalogUnavailableError(exc.message) from exc
        providers = [Provider.from_row(row) for row in snapshot.providers]
        products = [Product.from_row(row) for row in snapshot.products]
        if self.base_only:
            products = [product for product in products if product.is_base_product]
        self._providers = tuple(providers)
        self._products = tuple(products)
        self.is_loaded = True
        self.error = None
        logger.info(
            "catalog_cache_ready",
            extra={"providers": len(self._providers), "products": len(self._products), "base_only": self.base_only},
        )

    def ensure_loaded(self) -> None:
        if not self.is_loaded:
            message = self.error.message if self.error else "Catalog has not been loaded"
            raise CatalogUnavailableError(message)

    def providers(self) -> Iterator[Provider]:
        self.ensure_loaded()
        return iter(self._providers)

    def products(self) -> Iterator[Product]:
        self.ensure_loaded()
        return iter(self._products)

    def areas(self) -> Iterator[Area]:
        return iter(self._areas)

    def find_provider(self, provider_id: int | str | None) -> Provider | None:
        if provider_id in (None, ""):
            return None
        return next((p for p in self.providers() if str(p.id) == str(provider_id)), None)

    def find_product(self, product_id: int | str | None) -> Product | None:
        if product_id in (None, ""):
            return None
        return next((p for p in self.products() if str(p.id) == str(product_id)), None)

    def find_area(self, area_id: int | str | None) -> Area | None:
        if area_id in (None, ""):
            return None
        return next((a for a in self._areas if str(a.id) == str(area_id)), None)
