# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from typing import Literal

from pydantic import Field

from ..core.primitives import Model
from ..debt.financing import FinancingTerms


class HybridDeal(Model):
    """
    Property plus the business operating inside it (laundromat, car wash,
    restaurant with its building), bought at one price with one loan.

    ``property_value`` and ``business_value`` allocate the purchase price
    between the two halves for valuation metrics. They are a modeling choice
    and need not sum to ``purchase_price``.
    """

    type: Literal["hybrid"] = "hybrid"

    # Purchase
    purchase_price: float = 0.0
    closing_costs: float = 0.0
    rehab_costs: float = 0.0
    property_value: float = 0.0
    business_value: float = 0.0

    # Property income
    gross_rental_income: float = 0.0
    other_property_income: float = 0.0
    vacancy_rate: float = 0.0

    # Property expenses
    property_tax: float = 0.0
    insurance: float = 0.0
    maintenance: float = 0.0
    property_management: float = Field(
        default=0.0, description="Management fee as a percent of gross property income."
    )
    utilities: float = 0.0
    other_property_expenses: float = 0.0

    # Business operations
    annual_revenue: float = 0.0
    cost_of_goods: float = 0.0
    business_operating_expenses: float = 0.0
    owner_salary: float = 0.0
    depreciation: float = 0.0
    amortization: float = 0.0
    interest: float = 0.0
    taxes: float = 0.0
    other_add_backs: float = 0.0

    financing: FinancingTerms = Field(default_factory=FinancingTerms)

    # Growth assumptions
    annual_rent_growth: float = 0.0
    annual_revenue_growth: float = 0.0
    annual_expense_growth: float = 0.0
    annual_appreciation: float = 0.0
