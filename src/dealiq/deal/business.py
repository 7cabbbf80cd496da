# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from typing import Literal

from pydantic import Field

from ..core.primitives import Model
from ..debt.financing import FinancingTerms


class BusinessDeal(Model):
    """
    Operating business acquisition without real estate.

    ``owner_salary``, ``depreciation``, ``amortization``, ``interest``,
    ``taxes`` and ``other_add_backs`` are the seller's figures already inside
    ``operating_expenses``; they are added back to reach SDE.
    """

    type: Literal["business"] = "business"

    # Purchase
    asking_price: float = 0.0
    closing_costs: float = 0.0

    # Revenue
    annual_revenue: float = 0.0

    # Expenses
    cost_of_goods: float = 0.0
    operating_expenses: float = 0.0

    # Add-backs
    owner_salary: float = 0.0
    depreciation: float = 0.0
    amortization: float = 0.0
    interest: float = 0.0
    taxes: float = 0.0
    other_add_backs: float = Field(default=0.0, description="One-time or discretionary expenses.")

    financing: FinancingTerms = Field(default_factory=FinancingTerms)

    # Growth assumptions
    annual_revenue_growth: float = 0.0
    annual_expense_growth: float = 0.0
