# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Metric and projection result models.

Results are derived values: produced fresh by every calculation call and never
cached or persisted, so they cannot drift from the deal they describe.
Percent-valued fields are in percent (8.5 means 8.5%); ``dscr`` is a plain
ratio and is ``math.inf`` for unlevered deals.
"""

from __future__ import annotations

from typing import List, Optional, Union

import pandas as pd

from ..core.primitives import Model


class RealEstateMetrics(Model):
    noi: float
    cap_rate: float
    cash_on_cash_return: float
    roi: float
    dscr: float
    irr: Optional[float]  # None when the return series has no solvable IRR
    monthly_mortgage: float
    annual_cash_flow: float
    total_cash_invested: float
    effective_gross_income: float
    operating_expenses: float

    @property
    def annual_debt_service(self) -> float:
        return self.monthly_mortgage * 12


class BusinessMetrics(Model):
    ebitda: float
    sde: float
    roi: float
    cash_on_cash_return: float
    dscr: float
    annual_cash_flow: float
    break_even_revenue: float
    monthly_debt_service: float
    total_cash_invested: float
    revenue_multiple: float
    sde_multiple: float

    @property
    def annual_debt_service(self) -> float:
        return self.monthly_debt_service * 12


class HybridMetrics(Model):
    # Property
    property_noi: float
    cap_rate: float

    # Business
    ebitda: float
    sde: float
    revenue_multiple: float
    sde_multiple: float

    # Combined
    total_noi: float
    annual_cash_flow: float
    cash_on_cash_return: float
    roi: float
    dscr: float
    monthly_mortgage: float
    total_cash_invested: float
    break_even_revenue: float
    effective_gross_income: float
    total_operating_expenses: float

    @property
    def annual_debt_service(self) -> float:
        return self.monthly_mortgage * 12


AnyMetrics = Union[RealEstateMetrics, BusinessMetrics, HybridMetrics]


class CashFlowProjectionRow(Model):
    """
    One projected year.

    Real estate and hybrid rows carry ``noi``; business rows carry
    ``revenue`` and ``ebitda``.
    """

    year: int
    cash_flow: float
    cumulative_cash_flow: float
    noi: Optional[float] = None
    ebitda: Optional[float] = None
    revenue: Optional[float] = None


def projection_to_frame(rows: List[CashFlowProjectionRow]) -> pd.DataFrame:
    """Projection as a DataFrame indexed by year, dropping columns that are empty for the deal type."""
    df = pd.DataFrame([row.model_dump() for row in rows])
    if df.empty:
        return df
    df = df.set_index("year").dropna(axis=1, how="all")
    return df
