# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""Financing terms and the debt-service primitives shared by every deal type"""

from __future__ import annotations

from pydantic import model_validator
from pyxirr import fv, pmt

from ..core.primitives import LoanTypeEnum, Model, Percentage, PositiveFloat, PositiveInt


class FinancingTerms(Model):
    """
    Acquisition loan terms embedded in every deal record.

    Rates and down payment are expressed in percent (7.0 means 7%), matching
    how deal records are entered and stored.

    Attributes:
        loan_type: Loan program
        loan_amount: Principal financed
        down_payment: Buyer equity as a percent of price
        interest_rate: Annual interest rate in percent
        loan_term_years: Term of the note
        amortization_years: Amortization period; 0 means "same as term"

    Example:
        >>> terms = FinancingTerms(
        ...     loan_amount=160_000, down_payment=20, interest_rate=7,
        ...     loan_term_years=30, amortization_years=30,
        ... )
        >>> round(calc_monthly_payment(terms), 2)
        1064.48
    """

    loan_type: LoanTypeEnum = LoanTypeEnum.CONVENTIONAL
    loan_amount: PositiveFloat = 0.0
    down_payment: Percentage = 20.0
    interest_rate: PositiveFloat = 0.0
    loan_term_years: PositiveInt = 30
    amortization_years: PositiveInt = 30

    @model_validator(mode="after")
    def validate_term(self) -> "FinancingTerms":
        """A financed amount needs at least a one-year term."""
        if self.loan_amount > 0 and self.loan_term_years < 1:
            raise ValueError(
                f"loan_term_years must be at least 1 when loan_amount > 0 "
                f"(got {self.loan_term_years})"
            )
        return self

    @property
    def monthly_rate(self) -> float:
        return self.interest_rate / 100 / 12

    @property
    def amortization_months(self) -> int:
        """Number of monthly payments over the amortization period."""
        years = self.amortization_years or self.loan_term_years
        return years * 12


def calc_monthly_payment(financing: FinancingTerms) -> float:
    """
    Fixed monthly payment for a fully amortizing loan.

    Uses the standard annuity formula ``P * r / (1 - (1 + r)^-n)`` via PyXIRR;
    a zero-rate loan pays ``P / n``. No loan means no payment.
    """
    principal = financing.loan_amount
    num_payments = financing.amortization_months
    if principal <= 0 or num_payments <= 0:
        return 0.0

    monthly_rate = financing.monthly_rate
    if monthly_rate == 0:
        return principal / num_payments

    return pmt(monthly_rate, num_payments, principal) * -1


def calc_annual_debt_service(financing: FinancingTerms) -> float:
    """Twelve monthly payments."""
    return calc_monthly_payment(financing) * 12


def calc_remaining_balance(financing: FinancingTerms, months: int) -> float:
    """
    Outstanding principal after ``months`` scheduled payments.

    Closed form: ``B = P(1+r)^k - payment * ((1+r)^k - 1) / r``, evaluated as a
    future value with PyXIRR. Clamped to the schedule: 0 payments leaves the
    full principal, a paid-off loan has no balance.
    """
    principal = financing.loan_amount
    if principal <= 0:
        return 0.0
    if months <= 0:
        return principal

    num_payments = financing.amortization_months
    if months >= num_payments:
        return 0.0

    payment = calc_monthly_payment(financing)
    monthly_rate = financing.monthly_rate
    if monthly_rate == 0:
        return principal - payment * months

    balance = fv(monthly_rate, months, -payment, principal) * -1
    return max(0.0, balance)


def loan_amount_for_price(price: float, down_payment: float) -> float:
    """Loan needed to close at ``price`` with a ``down_payment`` percent of equity."""
    return price * (1 - down_payment / 100)
