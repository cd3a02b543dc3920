"""Selectors for the hub kernel (read side)."""

from hub_kernel.selectors.adjustment_selector import AdjustmentSelector, FeeAdjustmentSet
from hub_kernel.selectors.order_selector import OrderInfo, OrderSelector
from hub_kernel.selectors.reference_selector import (
    EnterpriseFeeInfo,
    EnterpriseInfo,
    OrderCycleInfo,
    ReferenceSelector,
    TaxRateInfo,
)

__all__ = [
    "AdjustmentSelector",
    "FeeAdjustmentSet",
    "OrderSelector",
    "OrderInfo",
    "ReferenceSelector",
    "EnterpriseInfo",
    "OrderCycleInfo",
    "EnterpriseFeeInfo",
    "TaxRateInfo",
]
