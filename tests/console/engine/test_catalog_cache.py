from __future__ import annotations

import pytest

from bascula_console.engine import CatalogCache, CatalogUnavailableError
from bascula_console.services.catalog_service import CatalogServiceError
from weighing_helpers import FakeCatalogSource


def test_load_filters_byproducts_for_intake() -> None:
    cache = CatalogCache(FakeCatalogSource())

    cache.load()

    assert cache.is_loaded
    assert [provider.id for provider in cache.providers()] == [7, 8]
    assert [product.name for product in cache.products()] == ["Frijol negro", "Maiz blanco"]
    assert [area.name for area in cache.areas()] == ["Limpieza", "Subproductos", "Venta"]


def test_load_keeps_every_product_when_not_base_only() -> None:
    cache = CatalogCache(FakeCatalogSource(), base_only=False)

    cache.load()

    assert [product.id for product in cache.products()] == [1, 2, 9]
    assert cache.find_product("9") is not None
    assert cache.find_product(9).is_base_product is False


def test_iterators_are_fresh_per_call() -> None:
    cache = CatalogCache(FakeCatalogSource())
    cache.load()

    first = cache.providers()
    list(first)

    assert len(list(cache.providers())) == 2


def test_failed_load_leaves_cache_unavailable() -> None:
    source = FakeCatalogSource(error=CatalogServiceError(message="No connection", trace_id="trace-1"))
    cache = CatalogCache(source)

    with pytest.raises(CatalogUnavailableError, match="No connection"):
        cache.load()

    assert not cache.is_loaded
    assert cache.error is not None and cache.error.trace_id == "trace-1"
    with pytest.raises(CatalogUnavailableError):
        list(cache.products())


def test_reload_recovers_after_failure() -> None:
    source = FakeCatalogSource(error=CatalogServiceError(message="timeout"))
    cache = CatalogCache(source)
    with pytest.raises(CatalogUnavailableError):
        cache.load()

    source.error = None
    cache.load()

    assert cache.is_loaded
    assert cache.error is None
    assert source.calls == 2


def test_find_helpers_ignore_blank_ids() -> None:
    cache = CatalogCache(FakeCatalogSource())
    cache.load()

    assert cache.find_provider("") is None
    assert cache.find_product(None) is None
    assert cache.find_area(2).routing_tag == "byproducts"
