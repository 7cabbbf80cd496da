# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Hybrid Deal Metrics

A hybrid deal is a property and the business operating inside it, bought at
one price with one loan. Each half is evaluated with its own formulas against
its own value allocation:

- the property half is an unlevered ``RealEstateDeal`` priced at
  ``property_value``
- the business half is an unlevered ``BusinessDeal`` priced at
  ``business_value``

Combined figures (cash invested, cash flow, coverage) use the full purchase
price and the shared financing.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from ..core.calculations import FinancialCalculations
from ..core.primitives import AnalysisSettings, resolve_settings
from ..deal.business import BusinessDeal
from ..deal.hybrid import HybridDeal
from ..deal.real_estate import RealEstateDeal
from ..debt.financing import FinancingTerms, calc_annual_debt_service, calc_monthly_payment
from . import business, real_estate
from .results import CashFlowProjectionRow, HybridMetrics

logger = logging.getLogger(__name__)

_UNLEVERED = FinancingTerms(loan_amount=0.0, down_payment=0.0)


def property_component(deal: HybridDeal) -> RealEstateDeal:
    """The property half as an unlevered real estate deal priced at ``property_value``."""
    return RealEstateDeal(
        purchase_price=deal.property_value,
        gross_rental_income=deal.gross_rental_income,
        other_income=deal.other_property_income,
        vacancy_rate=deal.vacancy_rate,
        property_tax=deal.property_tax,
        insurance=deal.insurance,
        maintenance=deal.maintenance,
        property_management=deal.property_management,
        utilities=deal.utilities,
        other_expenses=deal.other_property_expenses,
        financing=_UNLEVERED,
        annual_rent_growth=deal.annual_rent_growth,
        annual_expense_growth=deal.annual_expense_growth,
        annual_appreciation=deal.annual_appreciation,
    )


def business_component(deal: HybridDeal) -> BusinessDeal:
    """The business half as an unlevered business deal priced at ``business_value``."""
    return BusinessDeal(
        asking_price=deal.business_value,
        annual_revenue=deal.annual_revenue,
        cost_of_goods=deal.cost_of_goods,
        operating_expenses=deal.business_operating_expenses,
        owner_salary=deal.owner_salary,
        depreciation=deal.depreciation,
        amortization=deal.amortization,
        interest=deal.interest,
        taxes=deal.taxes,
        other_add_backs=deal.other_add_backs,
        financing=_UNLEVERED,
        annual_revenue_growth=deal.annual_revenue_growth,
        annual_expense_growth=deal.annual_expense_growth,
    )


def calc_monthly_mortgage(financing: FinancingTerms) -> float:
    """Monthly payment on the one loan covering both halves."""
    return calc_monthly_payment(financing)


# --- Property side ---


def calc_property_egi(deal: HybridDeal) -> float:
    return real_estate.calc_effective_gross_income(property_component(deal))


def calc_property_expenses(deal: HybridDeal) -> float:
    return real_estate.calc_operating_expenses(property_component(deal))


def calc_property_noi(deal: HybridDeal) -> float:
    return real_estate.calc_noi(property_component(deal))


def calc_cap_rate(deal: HybridDeal) -> float:
    """Property NOI / property value. Cap rate stays a real-estate-only metric."""
    return real_estate.calc_cap_rate(property_component(deal))


# --- Business side ---


def calc_ebitda(deal: HybridDeal) -> float:
    return business.calc_ebitda(business_component(deal))


def calc_sde(deal: HybridDeal) -> float:
    return business.calc_sde(business_component(deal))


def calc_revenue_multiple(deal: HybridDeal) -> float:
    return business.calc_revenue_multiple(business_component(deal))


def calc_sde_multiple(deal: HybridDeal) -> float:
    return business.calc_sde_multiple(business_component(deal))


# --- Combined ---


def calc_total_noi(deal: HybridDeal) -> float:
    """Property NOI + business EBITDA."""
    return calc_property_noi(deal) + calc_ebitda(deal)


def calc_total_cash_invested(deal: HybridDeal) -> float:
    """Down payment on the full purchase price plus closing and rehab costs."""
    down_payment = deal.purchase_price * (deal.financing.down_payment / 100)
    return down_payment + deal.closing_costs + deal.rehab_costs


def calc_annual_cash_flow(deal: HybridDeal) -> float:
    return calc_total_noi(deal) - calc_annual_debt_service(deal.financing)


def calc_cash_on_cash(deal: HybridDeal) -> float:
    return FinancialCalculations.percent_of(
        calc_annual_cash_flow(deal), calc_total_cash_invested(deal)
    )


def calc_dscr(deal: HybridDeal) -> float:
    """Total NOI / annual debt service; ``math.inf`` without debt service."""
    return FinancialCalculations.coverage_ratio(
        calc_total_noi(deal), calc_annual_debt_service(deal.financing)
    )


def calc_roi(
    deal: HybridDeal,
    hold_years: Optional[int] = None,
    settings: Optional[AnalysisSettings] = None,
) -> float:
    """
    Hold-period return in percent of cash invested: cumulative projected cash
    flow plus the appreciation gain on the property allocation.
    """
    settings = resolve_settings(settings)
    hold_years = hold_years or settings.hold_years

    cash_invested = calc_total_cash_invested(deal)
    if cash_invested == 0:
        return 0.0

    total_cash_flow = project_cash_flows(deal, hold_years)[-1].cumulative_cash_flow
    appreciation = (
        FinancialCalculations.grow(deal.property_value, deal.annual_appreciation, hold_years)
        - deal.property_value
    )
    return FinancialCalculations.percent_of(total_cash_flow + appreciation, cash_invested)


def calc_break_even_revenue(deal: HybridDeal) -> float:
    """Business revenue needed to cover business costs, property costs and debt net of rent."""
    return (
        deal.cost_of_goods
        + deal.business_operating_expenses
        + calc_property_expenses(deal)
        + calc_annual_debt_service(deal.financing)
        - calc_property_egi(deal)
    )


def calc_effective_gross_income(deal: HybridDeal) -> float:
    """Property EGI + business revenue."""
    return calc_property_egi(deal) + deal.annual_revenue


def calc_total_operating_expenses(deal: HybridDeal) -> float:
    return calc_property_expenses(deal) + deal.cost_of_goods + deal.business_operating_expenses


def calc_hybrid_metrics(
    deal: HybridDeal, settings: Optional[AnalysisSettings] = None
) -> HybridMetrics:
    """
    Compute every hybrid metric for one deal snapshot.

    Each component is built once and shared by all figures derived from it.
    """
    prop = property_component(deal)
    biz = business_component(deal)

    property_egi = real_estate.calc_effective_gross_income(prop)
    property_expenses = real_estate.calc_operating_expenses(prop)
    property_noi = property_egi - property_expenses
    ebitda = business.calc_ebitda(biz)
    total_noi = property_noi + ebitda
    annual_debt = calc_annual_debt_service(deal.financing)
    annual_cash_flow = total_noi - annual_debt
    cash_invested = calc_total_cash_invested(deal)

    metrics = HybridMetrics(
        property_noi=property_noi,
        cap_rate=FinancialCalculations.percent_of(property_noi, prop.purchase_price),
        ebitda=ebitda,
        sde=business.calc_sde(biz),
        revenue_multiple=business.calc_revenue_multiple(biz),
        sde_multiple=business.calc_sde_multiple(biz),
        total_noi=total_noi,
        annual_cash_flow=annual_cash_flow,
        cash_on_cash_return=FinancialCalculations.percent_of(annual_cash_flow, cash_invested),
        roi=calc_roi(deal, settings=settings),
        dscr=FinancialCalculations.coverage_ratio(total_noi, annual_debt),
        monthly_mortgage=calc_monthly_mortgage(deal.financing),
        total_cash_invested=cash_invested,
        break_even_revenue=(
            deal.cost_of_goods
            + deal.business_operating_expenses
            + property_expenses
            + annual_debt
            - property_egi
        ),
        effective_gross_income=property_egi + deal.annual_revenue,
        total_operating_expenses=(
            property_expenses + deal.cost_of_goods + deal.business_operating_expenses
        ),
    )
    logger.debug(
        f"Hybrid metrics: property NOI ${metrics.property_noi:,.0f}, "
        f"EBITDA ${metrics.ebitda:,.0f}, DSCR {metrics.dscr:.2f}"
    )
    return metrics


def project_cash_flows(deal: HybridDeal, years: int = 10) -> List[CashFlowProjectionRow]:
    """
    Project combined NOI and cash flow year by year.

    The property and business halves are projected independently with their
    own growth rates, then combined and charged the shared debt service.
    """
    annual_debt = calc_annual_debt_service(deal.financing)
    property_rows = real_estate.project_cash_flows(property_component(deal), years)
    business_rows = business.project_cash_flows(business_component(deal), years)
    cumulative = 0.0

    projections: List[CashFlowProjectionRow] = []
    for property_row, business_row in zip(property_rows, business_rows):
        total_noi = property_row.noi + business_row.ebitda
        cash_flow = total_noi - annual_debt
        cumulative += cash_flow

        projections.append(
            CashFlowProjectionRow(
                year=property_row.year,
                noi=total_noi,
                ebitda=business_row.ebitda,
                revenue=business_row.revenue,
                cash_flow=cash_flow,
                cumulative_cash_flow=cumulative,
            )
        )

    return projections
