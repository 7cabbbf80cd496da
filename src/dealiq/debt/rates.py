# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Lending rate reference table

A static snapshot of typical acquisition-loan terms, used to pre-fill financing
when a deal is created. Live market rates are supplied by callers; this table
is the fallback.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Dict, List

from ..core.primitives import LoanTypeEnum, Model, Percentage, PositiveFloat, PositiveInt
from .financing import FinancingTerms, loan_amount_for_price

logger = logging.getLogger(__name__)


class LendingRate(Model):
    loan_type: LoanTypeEnum
    label: str
    interest_rate: PositiveFloat
    term_years: PositiveInt
    max_ltv: Percentage
    down_payment_min: Percentage
    last_updated: date


_SNAPSHOT = date(2026, 2, 1)

DEFAULT_LENDING_RATES: List[LendingRate] = [
    LendingRate(
        loan_type=LoanTypeEnum.SBA_7A,
        label="SBA 7(a)",
        interest_rate=10.5,
        term_years=25,
        max_ltv=90,
        down_payment_min=10,
        last_updated=_SNAPSHOT,
    ),
    LendingRate(
        loan_type=LoanTypeEnum.SBA_504,
        label="SBA 504",
        interest_rate=6.6,
        term_years=25,
        max_ltv=90,
        down_payment_min=10,
        last_updated=_SNAPSHOT,
    ),
    LendingRate(
        loan_type=LoanTypeEnum.CONVENTIONAL,
        label="Conventional Multi-Family",
        interest_rate=7.25,
        term_years=30,
        max_ltv=80,
        down_payment_min=20,
        last_updated=_SNAPSHOT,
    ),
    LendingRate(
        loan_type=LoanTypeEnum.FHA,
        label="FHA Loan",
        interest_rate=6.5,
        term_years=30,
        max_ltv=96.5,
        down_payment_min=3.5,
        last_updated=_SNAPSHOT,
    ),
    LendingRate(
        loan_type=LoanTypeEnum.HARD_MONEY,
        label="Hard Money / Bridge",
        interest_rate=12.0,
        term_years=2,
        max_ltv=70,
        down_payment_min=30,
        last_updated=_SNAPSHOT,
    ),
]

# Loan programs without a published market rate
_FALLBACK_TERMS: Dict[LoanTypeEnum, LendingRate] = {
    LoanTypeEnum.VA: LendingRate(
        loan_type=LoanTypeEnum.VA,
        label="VA",
        interest_rate=6.25,
        term_years=30,
        max_ltv=100,
        down_payment_min=0,
        last_updated=_SNAPSHOT,
    ),
    LoanTypeEnum.CUSTOM: LendingRate(
        loan_type=LoanTypeEnum.CUSTOM,
        label="Custom",
        interest_rate=7.0,
        term_years=30,
        max_ltv=80,
        down_payment_min=20,
        last_updated=_SNAPSHOT,
    ),
}


def get_lending_rate(loan_type: LoanTypeEnum) -> LendingRate:
    """
    Reference terms for a loan program.

    Raises:
        ValueError: If ``loan_type`` is not a known loan program
    """
    loan_type = LoanTypeEnum(loan_type)
    for rate in DEFAULT_LENDING_RATES:
        if rate.loan_type is loan_type:
            return rate
    return _FALLBACK_TERMS[loan_type]


def financing_defaults(loan_type: LoanTypeEnum, price: float = 0.0) -> FinancingTerms:
    """
    Financing terms pre-filled from the reference table.

    The down payment is the program minimum and the loan covers the rest of
    ``price``; the loan amortizes over its full term.
    """
    rate = get_lending_rate(loan_type)
    logger.debug(
        f"Financing defaults for {rate.loan_type.value}: {rate.interest_rate}% "
        f"over {rate.term_years}y, {rate.down_payment_min}% down"
    )
    return FinancingTerms(
        loan_type=rate.loan_type,
        loan_amount=loan_amount_for_price(price, rate.down_payment_min),
        down_payment=rate.down_payment_min,
        interest_rate=rate.interest_rate,
        loan_term_years=rate.term_years,
        amortization_years=rate.term_years,
    )
