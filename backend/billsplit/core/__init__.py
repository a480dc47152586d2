"""Core settlement logic: pure split, balance and settlement computations."""

from .split_calculator import (
    SETTLEMENT_EPSILON,
    ExpenseShare,
    Settlement,
    SplitCalculator,
)

__all__ = [
    "SETTLEMENT_EPSILON",
    "ExpenseShare",
    "Settlement",
    "SplitCalculator",
]
