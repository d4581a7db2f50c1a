"""Order drafting, pricing, and sizing tools."""

from .composer import OrderComposer
from .pricing import evaluate_order
from .sizing import quick_select_quantity

__all__ = ["OrderComposer", "evaluate_order", "quick_select_quantity"]
