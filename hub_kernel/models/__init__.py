"""Domain models for the hub kernel."""

from hub_kernel.models.adjustment import AdjustableType, Adjustment, AdjustmentKind
from hub_kernel.models.enterprise import Enterprise
from hub_kernel.models.enterprise_fee import EnterpriseFee, FeeType
from hub_kernel.models.order import LineItem, Order, OrderState
from hub_kernel.models.order_cycle import OrderCycle
from hub_kernel.models.tax import TaxCategory, TaxRate

__all__ = [
    "Enterprise",
    "OrderCycle",
    "EnterpriseFee",
    "FeeType",
    "TaxCategory",
    "TaxRate",
    "Order",
    "OrderState",
    "LineItem",
    "Adjustment",
    "AdjustmentKind",
    "AdjustableType",
]
