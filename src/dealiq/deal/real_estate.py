# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from typing import Literal

from pydantic import Field

from ..core.primitives import Model
from ..debt.financing import FinancingTerms


class RealEstateDeal(Model):
    """
    Income property acquisition.

    All income and expense lines are annual dollar amounts; rates and growth
    assumptions are percentages (5.0 means 5%). Negative values are accepted
    as entered; sanitising inputs is the caller's job.
    """

    type: Literal["real-estate"] = "real-estate"

    # Purchase
    purchase_price: float = 0.0
    closing_costs: float = 0.0
    rehab_costs: float = 0.0

    # Income
    gross_rental_income: float = 0.0
    other_income: float = Field(default=0.0, description="Laundry, parking, storage, etc.")
    vacancy_rate: float = 0.0

    # Operating expenses
    property_tax: float = 0.0
    insurance: float = 0.0
    maintenance: float = 0.0
    property_management: float = Field(
        default=0.0, description="Management fee as a percent of gross income."
    )
    utilities: float = 0.0
    other_expenses: float = 0.0

    financing: FinancingTerms = Field(default_factory=FinancingTerms)

    # Growth assumptions
    annual_rent_growth: float = 0.0
    annual_expense_growth: float = 0.0
    annual_appreciation: float = 0.0
