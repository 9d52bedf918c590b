from .finish_lot_dialog import FinishLotDialog
from .ledger_table import LedgerTable
from .product_grid import ProductGrid
from .scale_display import ScaleDisplay

__all__ = ["FinishLotDialog", "LedgerTable", "ProductGrid", "ScaleDisplay"]
