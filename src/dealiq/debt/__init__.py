# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Debt financing primitives: loan terms, payments, amortization and the
reference lending-rate table.
"""

from .amortization import (
    AmortizationRow,
    AmortizationTotals,
    AnnualAmortizationSummary,
    amortization_totals,
    generate_amortization_schedule,
    schedule_to_frame,
    summarize_by_year,
)
from .financing import (
    FinancingTerms,
    calc_annual_debt_service,
    calc_monthly_payment,
    calc_remaining_balance,
    loan_amount_for_price,
)
from .rates import DEFAULT_LENDING_RATES, LendingRate, financing_defaults, get_lending_rate

__all__ = [
    # Terms
    "FinancingTerms",
    "calc_annual_debt_service",
    "calc_monthly_payment",
    "calc_remaining_balance",
    "loan_amount_for_price",
    # Amortization
    "AmortizationRow",
    "AmortizationTotals",
    "AnnualAmortizationSummary",
    "amortization_totals",
    "generate_amortization_schedule",
    "schedule_to_frame",
    "summarize_by_year",
    # Rates
    "DEFAULT_LENDING_RATES",
    "LendingRate",
    "financing_defaults",
    "get_lending_rate",
]
