# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Real Estate Metrics

Income-property formulas: effective gross income, NOI, cap rate, levered cash
flow, coverage and hold-period returns. All functions are pure and take a
``RealEstateDeal`` snapshot.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from ..core.calculations import FinancialCalculations
from ..core.primitives import AnalysisSettings, resolve_settings
from ..deal.real_estate import RealEstateDeal
from ..debt.financing import (
    FinancingTerms,
    calc_annual_debt_service,
    calc_monthly_payment,
    calc_remaining_balance,
)
from .results import CashFlowProjectionRow, RealEstateMetrics

logger = logging.getLogger(__name__)


def calc_monthly_mortgage(financing: FinancingTerms) -> float:
    """Monthly principal and interest payment on the acquisition loan."""
    return calc_monthly_payment(financing)


def calc_gross_income(deal: RealEstateDeal) -> float:
    """Potential gross income before vacancy: rent plus other income."""
    return deal.gross_rental_income + deal.other_income


def calc_effective_gross_income(deal: RealEstateDeal) -> float:
    """Effective Gross Income = (gross rent + other income) x (1 - vacancy)."""
    return calc_gross_income(deal) * (1 - deal.vacancy_rate / 100)


def calc_management_fee(deal: RealEstateDeal) -> float:
    """Management fee charged on gross (pre-vacancy) income."""
    return calc_gross_income(deal) * (deal.property_management / 100)


def calc_operating_expenses(deal: RealEstateDeal) -> float:
    """Total annual operating expenses, excluding debt service."""
    return (
        deal.property_tax
        + deal.insurance
        + deal.maintenance
        + calc_management_fee(deal)
        + deal.utilities
        + deal.other_expenses
    )


def calc_noi(deal: RealEstateDeal) -> float:
    """Net Operating Income = EGI - operating expenses. May be negative."""
    return calc_effective_gross_income(deal) - calc_operating_expenses(deal)


def calc_cap_rate(deal: RealEstateDeal) -> float:
    """Cap Rate = NOI / purchase price, in percent; 0 for a zero price."""
    return FinancialCalculations.percent_of(calc_noi(deal), deal.purchase_price)


def calc_total_cash_invested(deal: RealEstateDeal) -> float:
    """Down payment plus closing and rehab costs."""
    down_payment = deal.purchase_price * (deal.financing.down_payment / 100)
    return down_payment + deal.closing_costs + deal.rehab_costs


def calc_annual_cash_flow(deal: RealEstateDeal) -> float:
    """Annual Cash Flow = NOI - annual debt service."""
    return calc_noi(deal) - calc_annual_debt_service(deal.financing)


def calc_cash_on_cash(deal: RealEstateDeal) -> float:
    """Cash-on-Cash = annual cash flow / total cash invested, in percent."""
    return FinancialCalculations.percent_of(
        calc_annual_cash_flow(deal), calc_total_cash_invested(deal)
    )


def calc_dscr(deal: RealEstateDeal) -> float:
    """DSCR = NOI / annual debt service; ``math.inf`` when there is no debt service."""
    return FinancialCalculations.coverage_ratio(
        calc_noi(deal), calc_annual_debt_service(deal.financing)
    )


def calc_sale_equity(
    deal: RealEstateDeal, hold_years: int, settings: Optional[AnalysisSettings] = None
) -> float:
    """
    Net equity from selling at the end of the hold.

    Sale price is the purchase price compounded at ``annual_appreciation``,
    less selling costs and the loan balance still outstanding at exit.
    """
    settings = resolve_settings(settings)
    future_value = FinancialCalculations.grow(
        deal.purchase_price, deal.annual_appreciation, hold_years
    )
    selling_costs = future_value * (settings.selling_cost_rate / 100)
    remaining_loan = calc_remaining_balance(deal.financing, hold_years * 12)
    return future_value - selling_costs - remaining_loan


def calc_roi(
    deal: RealEstateDeal,
    hold_years: Optional[int] = None,
    settings: Optional[AnalysisSettings] = None,
) -> float:
    """
    Total return over the hold period, in percent of cash invested.

    (cumulative cash flow + sale equity - cash invested) / cash invested.
    Returns 0 when no cash is invested.
    """
    settings = resolve_settings(settings)
    hold_years = hold_years or settings.hold_years

    cash_invested = calc_total_cash_invested(deal)
    if cash_invested == 0:
        return 0.0

    projection = project_cash_flows(deal, hold_years)
    total_cash_flow = projection[-1].cumulative_cash_flow
    equity = calc_sale_equity(deal, hold_years, settings)

    return FinancialCalculations.percent_of(
        total_cash_flow + equity - cash_invested, cash_invested
    )


def calc_irr(
    deal: RealEstateDeal,
    hold_years: Optional[int] = None,
    settings: Optional[AnalysisSettings] = None,
) -> Optional[float]:
    """
    Levered IRR over the hold period, in percent.

    Cash flows: year 0 is the cash invested (outflow), years 1..N the projected
    cash flow, and year N also receives the net sale equity.

    Returns:
        IRR percent, or None when the flows have no solvable IRR.
    """
    settings = resolve_settings(settings)
    hold_years = hold_years or settings.hold_years

    cash_flows = [-calc_total_cash_invested(deal)]
    cash_flows.extend(row.cash_flow for row in project_cash_flows(deal, hold_years))
    cash_flows[-1] += calc_sale_equity(deal, hold_years, settings)

    return FinancialCalculations.calculate_irr(cash_flows)


def calc_real_estate_metrics(
    deal: RealEstateDeal, settings: Optional[AnalysisSettings] = None
) -> RealEstateMetrics:
    """Compute every real estate metric for one deal snapshot."""
    metrics = RealEstateMetrics(
        noi=calc_noi(deal),
        cap_rate=calc_cap_rate(deal),
        cash_on_cash_return=calc_cash_on_cash(deal),
        roi=calc_roi(deal, settings=settings),
        dscr=calc_dscr(deal),
        irr=calc_irr(deal, settings=settings),
        monthly_mortgage=calc_monthly_mortgage(deal.financing),
        annual_cash_flow=calc_annual_cash_flow(deal),
        total_cash_invested=calc_total_cash_invested(deal),
        effective_gross_income=calc_effective_gross_income(deal),
        operating_expenses=calc_operating_expenses(deal),
    )
    logger.debug(
        f"Real estate metrics: NOI ${metrics.noi:,.0f}, cap rate {metrics.cap_rate:.2f}%, "
        f"DSCR {metrics.dscr:.2f}"
    )
    return metrics


def project_cash_flows(deal: RealEstateDeal, years: int = 10) -> List[CashFlowProjectionRow]:
    """
    Project NOI and cash flow year by year.

    Effective gross income compounds at ``annual_rent_growth`` and operating
    expenses at ``annual_expense_growth``; debt service is fixed.
    """
    annual_debt = calc_annual_debt_service(deal.financing)
    current_income = calc_effective_gross_income(deal)
    current_expenses = calc_operating_expenses(deal)
    cumulative = 0.0

    projections: List[CashFlowProjectionRow] = []
    for year in range(1, years + 1):
        noi = current_income - current_expenses
        cash_flow = noi - annual_debt
        cumulative += cash_flow

        projections.append(
            CashFlowProjectionRow(
                year=year, noi=noi, cash_flow=cash_flow, cumulative_cash_flow=cumulative
            )
        )

        current_income *= 1 + deal.annual_rent_growth / 100
        current_expenses *= 1 + deal.annual_expense_growth / 100

    return projections
