# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Financial calculation functions.

Contains static methods for ratio and return math shared by the deal metrics
modules. These functions are pure and independent of deal structure; the
metrics modules delegate to them so zero-denominator policy lives in one place.
"""

from __future__ import annotations

import logging
import math
from typing import Optional, Sequence

from pyxirr import irr

logger = logging.getLogger(__name__)


class FinancialCalculations:
    """
    Pure mathematical functions for financial calculations.

    Degenerate but legitimate inputs (no debt, no cash invested, no revenue)
    never raise; each method documents the value it returns instead.
    """

    @staticmethod
    def percent_of(numerator: float, denominator: float) -> float:
        """
        Ratio expressed as a percentage, 0.0 when the denominator is zero.

        Used for cap rate, cash-on-cash and ROI, where a zero base (no price,
        no cash invested) means the ratio is simply not meaningful.
        """
        if denominator == 0:
            return 0.0
        return numerator / denominator * 100

    @staticmethod
    def multiple_of(price: float, base: float) -> float:
        """Price multiple of an earnings or revenue base, 0.0 when the base is zero."""
        if base == 0:
            return 0.0
        return price / base

    @staticmethod
    def coverage_ratio(income: float, debt_service: float) -> float:
        """
        Debt service coverage ratio.

        Returns:
            income / debt_service, or ``math.inf`` when there is no debt
            service. Infinity is a deliberate sentinel for "unlevered", not an
            error.
        """
        if debt_service == 0:
            return math.inf
        return income / debt_service

    @staticmethod
    def grow(value: float, rate_percent: float, years: int) -> float:
        """Compound ``value`` at an annual percentage rate for ``years`` years."""
        return value * (1 + rate_percent / 100) ** years

    @staticmethod
    def calculate_irr(cash_flows: Sequence[float]) -> Optional[float]:
        """
        Calculate the annual Internal Rate of Return using PyXIRR.

        PyXIRR solves NPV = 0 with a bounded Newton iteration and a bracketed
        fallback, so this never loops indefinitely.

        Args:
            cash_flows: Evenly spaced annual flows; index 0 is the initial
                investment (negative), later values are returns.

        Returns:
            IRR as a percentage (e.g. 12.5 for 12.5%) or None if it cannot be
            calculated.

        Edge Cases Handled:
            - Fewer than two flows → None
            - No sign change (all inflows or all outflows) → None
            - Solver fails to converge → None
        """
        if len(cash_flows) < 2:
            return None

        has_negative = any(cf < 0 for cf in cash_flows)
        has_positive = any(cf > 0 for cf in cash_flows)
        if not (has_negative and has_positive):
            return None  # Need both investments and returns

        result = irr(list(cash_flows), silent=True)
        if result is None or not math.isfinite(result):
            logger.warning(f"IRR did not converge for cash flows {list(cash_flows)}")
            return None
        return float(result) * 100
