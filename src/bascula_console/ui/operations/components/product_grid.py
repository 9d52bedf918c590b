from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

from bascula_console.engine.models import Product


@dataclass
class ProductGrid:
    products: Sequence[Product]
    selected: Product | None = None
    reviewed: Sequence[Product] = field(default_factory=tuple)
    confirmed: Sequence[Product] = field(default_factory=tuple)

    def render(self) -> dict[str, Any]:
        # Once the shipment is confirmed only its products stay on the grid.
        visible = list(self.confirmed) if self.confirmed else list(self.products)
        return {
            "count": len(visible),
            "items": [
                {
                    "id": product.id,
                    "name": product.name,
                    "unit": product.unit,
                    "selected": product == self.selected,
                    "in_shipment": product in self.reviewed,
                }
                for product in visible
            ],
        }
