# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Recession stress test

Produces a pessimistic copy of a deal's data (higher vacancy and rates, lower
income, slower growth). The stressed record goes back through the regular
metrics pipeline; there is no separate stressed formula path.
"""

from __future__ import annotations

from typing import Any, Dict, List, Union

from pydantic import Field

from ..core.primitives import DealTypeEnum, Model
from ..deal import BusinessDeal, Deal, HybridDeal, RealEstateDeal

DealData = Union[RealEstateDeal, BusinessDeal, HybridDeal]

# Floors and caps applied to stressed assumptions
MAX_STRESSED_VACANCY = 50.0
RENT_GROWTH_CUT, RENT_GROWTH_FLOOR = 2.0, -5.0
REVENUE_GROWTH_CUT, REVENUE_GROWTH_FLOOR = 3.0, -10.0
APPRECIATION_CUT, APPRECIATION_FLOOR = 3.0, -5.0


class RecessionOverrides(Model):
    """
    Size of each recession adjustment.

    Attributes:
        vacancy_increase: Percentage points added to vacancy
        revenue_reduction: Percent cut to rent and business revenue
        interest_rate_increase: Percentage points added to the loan rate
        expense_growth_increase: Percentage points added to expense growth
    """

    vacancy_increase: float = Field(default=7.0, ge=0)
    revenue_reduction: float = Field(default=10.0, ge=0, le=100)
    interest_rate_increase: float = Field(default=1.5, ge=0)
    expense_growth_increase: float = Field(default=1.0, ge=0)


DEFAULT_RECESSION = RecessionOverrides()


def _cut(rate: float, cut: float, floor: float) -> float:
    """Lower a growth rate by ``cut`` without going below ``floor``; never raises it."""
    return min(rate, max(rate - cut, floor))


def apply_recession_overrides(
    data: DealData,
    deal_type: DealTypeEnum,
    params: RecessionOverrides = DEFAULT_RECESSION,
) -> DealData:
    """
    Return a stressed copy of ``data``; the input record is left untouched.

    All deal types: loan rate up, expense growth up. Property income (real
    estate and hybrid): vacancy up (capped), gross rent down, rent growth and
    appreciation cut (floored). Business income (business and hybrid): revenue
    down, revenue growth cut (floored). Caps and floors only limit the stress;
    an input already past one is left as is. Management fee percent is held.
    """
    deal_type = DealTypeEnum(deal_type)
    revenue_factor = 1 - params.revenue_reduction / 100

    financing = data.financing.model_copy(
        update={"interest_rate": data.financing.interest_rate + params.interest_rate_increase}
    )
    update: Dict[str, Any] = {
        "financing": financing,
        "annual_expense_growth": data.annual_expense_growth + params.expense_growth_increase,
    }

    if deal_type in (DealTypeEnum.REAL_ESTATE, DealTypeEnum.HYBRID):
        update.update(
            vacancy_rate=max(
                data.vacancy_rate,
                min(data.vacancy_rate + params.vacancy_increase, MAX_STRESSED_VACANCY),
            ),
            gross_rental_income=data.gross_rental_income * revenue_factor,
            annual_rent_growth=_cut(data.annual_rent_growth, RENT_GROWTH_CUT, RENT_GROWTH_FLOOR),
            annual_appreciation=_cut(
                data.annual_appreciation, APPRECIATION_CUT, APPRECIATION_FLOOR
            ),
        )
    if deal_type in (DealTypeEnum.BUSINESS, DealTypeEnum.HYBRID):
        update.update(
            annual_revenue=data.annual_revenue * revenue_factor,
            annual_revenue_growth=_cut(
                data.annual_revenue_growth, REVENUE_GROWTH_CUT, REVENUE_GROWTH_FLOOR
            ),
        )

    return data.model_copy(update=update)


def stress_deal(deal: Deal, params: RecessionOverrides = DEFAULT_RECESSION) -> Deal:
    """A copy of ``deal`` carrying recession-stressed data."""
    return deal.with_data(apply_recession_overrides(deal.data, deal.deal_type, params))


def get_recession_labels(
    deal_type: DealTypeEnum, params: RecessionOverrides = DEFAULT_RECESSION
) -> List[str]:
    """Human-readable list of the adjustments applied for a deal type."""
    deal_type = DealTypeEnum(deal_type)
    has_property = deal_type is not DealTypeEnum.BUSINESS

    labels = [
        f"Interest rate +{params.interest_rate_increase:g}%",
        f"Revenue -{params.revenue_reduction:g}%",
    ]
    if has_property:
        labels.append(f"Vacancy +{params.vacancy_increase:g}%")
    labels.append(f"Expense growth +{params.expense_growth_increase:g}%")
    if has_property:
        labels.append("Appreciation reduced")
    return labels
