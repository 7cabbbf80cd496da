# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Business Acquisition Metrics

Small-business formulas: EBITDA, Seller's Discretionary Earnings, price
multiples, post-acquisition cash flow and break-even revenue. All functions
are pure and take a ``BusinessDeal`` snapshot.

Cash flow is measured from EBITDA, not SDE: the buyer is assumed to pay
themselves a salary that stays inside operating expenses, so the owner-salary
add-back is not cash available for debt service.
"""

from __future__ import annotations

import logging
import math
from typing import List, Optional

from ..core.calculations import FinancialCalculations
from ..core.primitives import AnalysisSettings
from ..deal.business import BusinessDeal
from ..debt.financing import FinancingTerms, calc_annual_debt_service, calc_monthly_payment
from .results import BusinessMetrics, CashFlowProjectionRow

logger = logging.getLogger(__name__)


def calc_monthly_debt_service(financing: FinancingTerms) -> float:
    """Monthly payment on the acquisition loan (same annuity formula as a mortgage)."""
    return calc_monthly_payment(financing)


def calc_ebitda(deal: BusinessDeal) -> float:
    """EBITDA = revenue - cost of goods - operating expenses."""
    return deal.annual_revenue - deal.cost_of_goods - deal.operating_expenses


def calc_add_backs(deal: BusinessDeal) -> float:
    """Owner salary plus every non-cash and discretionary add-back, in full."""
    return (
        deal.owner_salary
        + deal.depreciation
        + deal.amortization
        + deal.interest
        + deal.taxes
        + deal.other_add_backs
    )


def calc_sde(deal: BusinessDeal) -> float:
    """Seller's Discretionary Earnings = EBITDA + add-backs."""
    return calc_ebitda(deal) + calc_add_backs(deal)


def calc_revenue_multiple(deal: BusinessDeal) -> float:
    """Asking price / annual revenue; 0 without revenue."""
    return FinancialCalculations.multiple_of(deal.asking_price, deal.annual_revenue)


def calc_sde_multiple(deal: BusinessDeal) -> float:
    """Asking price / SDE; 0 when SDE is zero."""
    return FinancialCalculations.multiple_of(deal.asking_price, calc_sde(deal))


def calc_total_cash_invested(deal: BusinessDeal) -> float:
    """Down payment on the asking price plus closing costs."""
    down_payment = deal.asking_price * (deal.financing.down_payment / 100)
    return down_payment + deal.closing_costs


def calc_annual_cash_flow(deal: BusinessDeal) -> float:
    """Annual Cash Flow = EBITDA - annual debt service."""
    return calc_ebitda(deal) - calc_annual_debt_service(deal.financing)


def calc_cash_on_cash(deal: BusinessDeal) -> float:
    """Annual cash flow / total cash invested, in percent."""
    return FinancialCalculations.percent_of(
        calc_annual_cash_flow(deal), calc_total_cash_invested(deal)
    )


def calc_roi(deal: BusinessDeal) -> float:
    """
    First-year return on the buyer's cash, in percent.

    A business has no appreciating hard asset to sell, so ROI is measured on
    the same basis as cash-on-cash.
    """
    return calc_cash_on_cash(deal)


def calc_dscr(deal: BusinessDeal) -> float:
    """EBITDA / annual debt service; ``math.inf`` without debt service."""
    return FinancialCalculations.coverage_ratio(
        calc_ebitda(deal), calc_annual_debt_service(deal.financing)
    )


def calc_break_even_revenue(deal: BusinessDeal) -> float:
    """
    Revenue at which annual cash flow reaches zero.

    Fixed costs (operating expenses and debt service) divided by the gross
    margin ratio. 0 when there is no revenue to derive a margin from;
    ``math.inf`` when the gross margin is zero or negative.
    """
    if deal.annual_revenue == 0:
        return 0.0

    gross_margin = (deal.annual_revenue - deal.cost_of_goods) / deal.annual_revenue
    if gross_margin <= 0:
        return math.inf

    fixed_costs = deal.operating_expenses + calc_annual_debt_service(deal.financing)
    return fixed_costs / gross_margin


def calc_business_metrics(
    deal: BusinessDeal, settings: Optional[AnalysisSettings] = None
) -> BusinessMetrics:
    """Compute every business metric for one deal snapshot."""
    metrics = BusinessMetrics(
        ebitda=calc_ebitda(deal),
        sde=calc_sde(deal),
        roi=calc_roi(deal),
        cash_on_cash_return=calc_cash_on_cash(deal),
        dscr=calc_dscr(deal),
        annual_cash_flow=calc_annual_cash_flow(deal),
        break_even_revenue=calc_break_even_revenue(deal),
        monthly_debt_service=calc_monthly_debt_service(deal.financing),
        total_cash_invested=calc_total_cash_invested(deal),
        revenue_multiple=calc_revenue_multiple(deal),
        sde_multiple=calc_sde_multiple(deal),
    )
    logger.debug(
        f"Business metrics: EBITDA ${metrics.ebitda:,.0f}, SDE ${metrics.sde:,.0f}, "
        f"SDE multiple {metrics.sde_multiple:.2f}x"
    )
    return metrics


def project_cash_flows(deal: BusinessDeal, years: int = 10) -> List[CashFlowProjectionRow]:
    """
    Project revenue, EBITDA and cash flow year by year.

    Revenue compounds at ``annual_revenue_growth``; cost of goods and operating
    expenses together compound at ``annual_expense_growth``.
    """
    annual_debt = calc_annual_debt_service(deal.financing)
    current_revenue = deal.annual_revenue
    current_expenses = deal.cost_of_goods + deal.operating_expenses
    cumulative = 0.0

    projections: List[CashFlowProjectionRow] = []
    for year in range(1, years + 1):
        ebitda = current_revenue - current_expenses
        cash_flow = ebitda - annual_debt
        cumulative += cash_flow

        projections.append(
            CashFlowProjectionRow(
                year=year,
                revenue=current_revenue,
                ebitda=ebitda,
                cash_flow=cash_flow,
                cumulative_cash_flow=cumulative,
            )
        )

        current_revenue *= 1 + deal.annual_revenue_growth / 100
        current_expenses *= 1 + deal.annual_expense_growth / 100

    return projections
