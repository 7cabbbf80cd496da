# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""Loan amortization calculations"""

from __future__ import annotations

from typing import List

import numpy as np
import pandas as pd

from ..core.primitives import Model
from .financing import FinancingTerms, calc_monthly_payment


class AmortizationRow(Model):
    """A single monthly payment in an amortization schedule."""

    month: int
    payment: float
    principal: float
    interest: float
    balance: float
    cumulative_principal: float
    cumulative_interest: float


class AnnualAmortizationSummary(Model):
    """
    One year of an amortization schedule.

    Attributes:
        year: 1-based loan year
        total_payment: Sum of the year's payments
        total_principal: Principal repaid during the year
        total_interest: Interest paid during the year
        ending_balance: Balance after the year's last payment
        principal_percent: Percent of the year's payments that went to principal
    """

    year: int
    total_payment: float
    total_principal: float
    total_interest: float
    ending_balance: float
    principal_percent: float


class AmortizationTotals(Model):
    """Life-of-loan totals."""

    total_payments: float
    total_interest: float
    total_principal: float
    loan_term: int  # number of monthly payments


def generate_amortization_schedule(financing: FinancingTerms) -> List[AmortizationRow]:
    """
    Generate the full monthly amortization schedule for a fixed-rate loan.

    Every month pays the fixed annuity payment; interest accrues on the
    opening balance and the remainder retires principal. The final month pays
    exactly the remaining balance plus its interest, so the loan is fully
    retired by construction rather than by clamping.

    Args:
        financing: Loan terms; ``amortization_years`` drives the number of rows

    Returns:
        One row per month (``amortization_years * 12`` rows), or an empty
        list when nothing is financed.

    Example:
        >>> rows = generate_amortization_schedule(terms)
        >>> rows[-1].balance
        0.0
    """
    principal = financing.loan_amount
    if principal <= 0:
        return []

    total_payments = financing.amortization_months
    monthly_rate = financing.monthly_rate
    fixed_payment = calc_monthly_payment(financing)

    payments = np.zeros(total_payments)
    interest_paid = np.zeros(total_payments)
    principal_paid = np.zeros(total_payments)
    balances = np.zeros(total_payments + 1)  # Extra element for initial balance

    balances[0] = principal

    for i in range(total_payments):
        current_balance = balances[i]
        interest_payment = current_balance * monthly_rate

        if i == total_payments - 1:
            # Final payment retires whatever principal remains
            principal_payment = current_balance
            payment = current_balance + interest_payment
        else:
            payment = fixed_payment
            principal_payment = payment - interest_payment

        payments[i] = payment
        interest_paid[i] = interest_payment
        principal_paid[i] = principal_payment
        balances[i + 1] = current_balance - principal_payment

    cumulative_principal = np.cumsum(principal_paid)
    cumulative_interest = np.cumsum(interest_paid)

    return [
        AmortizationRow(
            month=i + 1,
            payment=float(payments[i]),
            principal=float(principal_paid[i]),
            interest=float(interest_paid[i]),
            balance=float(balances[i + 1]),
            cumulative_principal=float(cumulative_principal[i]),
            cumulative_interest=float(cumulative_interest[i]),
        )
        for i in range(total_payments)
    ]


def summarize_by_year(schedule: List[AmortizationRow]) -> List[AnnualAmortizationSummary]:
    """
    Roll a monthly schedule up into loan years of 12 payments.

    A trailing partial year (only possible for hand-built schedules) is
    summarized on its own.
    """
    summaries: List[AnnualAmortizationSummary] = []

    for year_index, start in enumerate(range(0, len(schedule), 12)):
        year_rows = schedule[start : start + 12]

        total_payment = sum(row.payment for row in year_rows)
        total_principal = sum(row.principal for row in year_rows)
        total_interest = sum(row.interest for row in year_rows)
        principal_percent = (
            total_principal / total_payment * 100 if total_payment > 0 else 0.0
        )

        summaries.append(
            AnnualAmortizationSummary(
                year=year_index + 1,
                total_payment=total_payment,
                total_principal=total_principal,
                total_interest=total_interest,
                ending_balance=year_rows[-1].balance,
                principal_percent=principal_percent,
            )
        )

    return summaries


def amortization_totals(schedule: List[AmortizationRow]) -> AmortizationTotals:
    """Totals for the full life of the loan; an empty schedule totals to zero."""
    if not schedule:
        return AmortizationTotals(
            total_payments=0.0, total_interest=0.0, total_principal=0.0, loan_term=0
        )

    total_principal = sum(row.principal for row in schedule)
    total_interest = sum(row.interest for row in schedule)
    return AmortizationTotals(
        total_payments=round(total_principal + total_interest, 2),
        total_interest=round(total_interest, 2),
        total_principal=round(total_principal, 2),
        loan_term=len(schedule),
    )


def schedule_to_frame(schedule: List[AmortizationRow]) -> pd.DataFrame:
    """
    Tabular view of a schedule, indexed by month.

    Columns: Payment, Principal, Interest, Balance, Cumulative Principal,
    Cumulative Interest.
    """
    columns = [
        "Payment",
        "Principal",
        "Interest",
        "Balance",
        "Cumulative Principal",
        "Cumulative Interest",
    ]
    df = pd.DataFrame(
        [
            (
                row.month,
                row.payment,
                row.principal,
                row.interest,
                row.balance,
                row.cumulative_principal,
                row.cumulative_interest,
            )
            for row in schedule
        ],
        columns=["Month", *columns],
    )
    df.set_index("Month", inplace=True)
    return df
