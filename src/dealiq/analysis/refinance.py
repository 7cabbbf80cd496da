# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Refinance modeling

Models a future refinance of a property-backed deal: the property is
re-appraised at its appreciated value, a new loan is sized by LTV, the old
balance is paid off, and any surplus is returned to the investor as cash out.
"""

from __future__ import annotations

import logging
from typing import Union

from pydantic import Field

from ..core.calculations import FinancialCalculations
from ..core.primitives import LoanTypeEnum, Model, Percentage, PositiveFloat
from ..deal import HybridDeal, RealEstateDeal
from ..debt.financing import FinancingTerms, calc_monthly_payment, calc_remaining_balance
from . import hybrid, real_estate

logger = logging.getLogger(__name__)


class RefinanceInputs(Model):
    """
    Attributes:
        refi_year: Refinance at the end of this year of ownership
        new_rate: New annual interest rate, percent
        new_term_years: New loan term
        new_amort_years: New amortization period
        new_ltv: New loan as a percent of the appraised value
        refi_closing_costs: Costs of closing the new loan
    """

    refi_year: int = Field(default=1, ge=1)
    new_rate: PositiveFloat = 6.5
    new_term_years: int = Field(default=30, ge=1)
    new_amort_years: int = Field(default=30, ge=1)
    new_ltv: Percentage = 75.0
    refi_closing_costs: PositiveFloat = 3000.0


DEFAULT_REFI = RefinanceInputs()


class RefinanceResult(Model):
    future_property_value: float
    new_loan_amount: float
    original_balance_at_refi: float
    cash_out: float
    original_monthly_payment: float
    new_monthly_payment: float
    monthly_payment_delta: float  # positive means a higher payment
    new_financing: FinancingTerms
    equity_after_refi: float
    noi_at_refi: float
    new_annual_cash_flow: float
    new_cash_on_cash: float
    adjusted_cash_invested: float  # initial cash + refi costs - cash out


def calc_refinance(
    data: Union[RealEstateDeal, HybridDeal], inputs: RefinanceInputs = DEFAULT_REFI
) -> RefinanceResult:
    """
    Evaluate a refinance at the end of ``inputs.refi_year``.

    NOI at the refinance is the projected NOI for the following year, so the
    new debt service is compared with the income it will actually carry.

    Raises:
        ValueError: If the deal has no property to refinance (business deals)
    """
    if isinstance(data, RealEstateDeal):
        projection = real_estate.project_cash_flows(data, inputs.refi_year + 1)
        initial_cash = real_estate.calc_total_cash_invested(data)
    elif isinstance(data, HybridDeal):
        projection = hybrid.project_cash_flows(data, inputs.refi_year + 1)
        initial_cash = hybrid.calc_total_cash_invested(data)
    else:
        raise ValueError(
            f"Refinance requires a real estate or hybrid deal, got {type(data).__name__}"
        )

    future_value = FinancialCalculations.grow(
        data.purchase_price, data.annual_appreciation, inputs.refi_year
    )
    new_loan_amount = future_value * (inputs.new_ltv / 100)
    original_balance = calc_remaining_balance(data.financing, inputs.refi_year * 12)
    cash_out = max(0.0, new_loan_amount - original_balance - inputs.refi_closing_costs)

    new_financing = FinancingTerms(
        loan_type=LoanTypeEnum.CONVENTIONAL,
        loan_amount=new_loan_amount,
        down_payment=100 - inputs.new_ltv,
        interest_rate=inputs.new_rate,
        loan_term_years=inputs.new_term_years,
        amortization_years=inputs.new_amort_years,
    )
    original_payment = calc_monthly_payment(data.financing)
    new_payment = calc_monthly_payment(new_financing)

    noi = projection[-1].noi
    new_annual_cash_flow = noi - new_payment * 12
    adjusted_cash = initial_cash - cash_out + inputs.refi_closing_costs
    new_cash_on_cash = (
        new_annual_cash_flow / adjusted_cash * 100 if adjusted_cash > 0 else 0.0
    )

    logger.debug(
        f"Refinance in year {inputs.refi_year}: new loan ${new_loan_amount:,.0f}, "
        f"payoff ${original_balance:,.0f}, cash out ${cash_out:,.0f}"
    )
    return RefinanceResult(
        future_property_value=future_value,
        new_loan_amount=new_loan_amount,
        original_balance_at_refi=original_balance,
        cash_out=cash_out,
        original_monthly_payment=original_payment,
        new_monthly_payment=new_payment,
        monthly_payment_delta=new_payment - original_payment,
        new_financing=new_financing,
        equity_after_refi=future_value - new_loan_amount,
        noi_at_refi=noi,
        new_annual_cash_flow=new_annual_cash_flow,
        new_cash_on_cash=new_cash_on_cash,
        adjusted_cash_invested=adjusted_cash,
    )
