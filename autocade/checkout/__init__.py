"""
Checkout module - finishing-combination suggestions for X01.
"""
from .solver import (
    Checkout,
    MAX_CHECKOUT,
    suggest_checkouts,
    get_all_checkouts,
    is_checkable,
    format_checkout,
)

__all__ = [
    "Checkout",
    "MAX_CHECKOUT",
    "suggest_checkouts",
    "get_all_checkouts",
    "is_checkable",
    "format_checkout",
]
