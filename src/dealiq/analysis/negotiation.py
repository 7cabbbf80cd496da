# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Negotiation Analysis - evidence for an offer price

Builds the case for what a buyer should pay:

- a market valuation range (cap rate bands for property, SDE multiple bands
  for businesses, both for hybrids)
- the highest price the income can carry at a lender's minimum DSCR
- the gap between asking price and fair value, with a suggested offer range
- talking points drawn from the deal's weak spots
- base versus recession-stressed score and cash flow
- cash flow and coverage at prices around the asking price

Everything is derived through the regular metrics, scoring, stress and
sensitivity pipelines; nothing here has its own formula for a deal metric.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Union

from pyxirr import pv

from ..core.calculations import FinancialCalculations
from ..core.primitives import (
    AnalysisSettings,
    DealTypeEnum,
    ImpactEnum,
    Model,
    NegotiationCategoryEnum,
    ValueFormatEnum,
)
from ..deal import BusinessDeal, Deal, HybridDeal, RealEstateDeal, deal_price
from ..debt.financing import FinancingTerms, calc_annual_debt_service
from . import business, hybrid, real_estate
from .api import calc_data_metrics
from .recession import stress_deal
from .results import AnyMetrics, BusinessMetrics, HybridMetrics, RealEstateMetrics
from .score import calc_investment_score
from .sensitivity import format_input_value, get_variable

logger = logging.getLogger(__name__)

DealData = Union[RealEstateDeal, BusinessDeal, HybridDeal]

MIN_DSCR = 1.25
PRICE_STEPS = (-20, -15, -10, -5, 0, 5, 10)  # percent of asking

# Benchmarks behind the talking points
STANDARD_VACANCY = 5.0
MAX_EXPENSE_RATIO = 0.55
TARGET_CASH_ON_CASH = 8.0
POOR_CASH_ON_CASH = 5.0
MAX_REHAB_SHARE = 0.15
THIN_SDE_MARGIN = 0.15
LOW_OWNER_SALARY = 40_000
OWNER_SALARY_REVENUE_FLOOR = 300_000
MICRO_BUSINESS_REVENUE = 250_000
LARGE_BUSINESS_REVENUE = 2_000_000
LOW_GROSS_MARGIN = 0.30
HIGH_INTEREST_RATE = 8.0

DEAL_TYPE_LABELS: Dict[DealTypeEnum, str] = {
    DealTypeEnum.REAL_ESTATE: "Real Estate",
    DealTypeEnum.BUSINESS: "Business Acquisition",
    DealTypeEnum.HYBRID: "Hybrid (RE + Business)",
}

_PRICE_KEYS: Dict[DealTypeEnum, str] = {
    DealTypeEnum.REAL_ESTATE: "purchase_price",
    DealTypeEnum.BUSINESS: "asking_price",
    DealTypeEnum.HYBRID: "purchase_price",
}


class MarketRange(Model):
    """A low/high market band (cap rate percent or SDE multiple) and why it applies."""

    low: float
    high: float
    reason: str


class ValuationRange(Model):
    low: float
    high: float
    method: str
    details: List[str]


class DSCRConstraint(Model):
    """
    Highest price the deal's income supports at a minimum coverage ratio.

    Attributes:
        max_supportable_price: Price whose loan the income covers at ``min_dscr``
        dscr: Coverage at the current price
        min_dscr: Required coverage
        noi: Income available for debt service
        annual_debt_service: Debt service at the current price
        explanation: Plain-language derivation
    """

    max_supportable_price: float
    dscr: float
    min_dscr: float
    noi: float
    annual_debt_service: float
    explanation: str


class PriceGap(Model):
    """
    Asking price against fair value.

    ``overpay_amount`` is negative when the asking price is below fair value.
    """

    asking_price: float
    fair_value_mid: float
    max_supportable: float
    ceiling_price: float
    suggested_offer_low: float
    suggested_offer_high: float
    overpay_amount: float
    overpay_percent: float


class NegotiationPoint(Model):
    category: NegotiationCategoryEnum
    title: str
    detail: str
    impact: ImpactEnum


class StressTestResult(Model):
    base_score: int
    base_label: str
    stressed_score: int
    stressed_label: str
    base_cash_flow: float
    stressed_cash_flow: float


class PricePoint(Model):
    """Cash flow and coverage if the deal closed at ``price``."""

    price: float
    cash_flow: float
    dscr: float
    return_metric: float
    return_label: str


class NegotiationAnalysis(Model):
    deal_name: str
    deal_type: DealTypeEnum
    deal_type_label: str
    asking_price: float
    valuation: ValuationRange
    dscr_constraint: DSCRConstraint
    price_gap: PriceGap
    negotiation_points: List[NegotiationPoint]
    stress_test: StressTestResult
    sensitivity_at_price: List[PricePoint]


# --- Formatting ---


def _money(value: float) -> str:
    return format_input_value(value, ValueFormatEnum.CURRENCY)


def _pct(value: float) -> str:
    return format_input_value(value, ValueFormatEnum.PERCENT)


# --- Market bands ---


def cap_rate_range(property_price: float) -> MarketRange:
    """Market cap rate band, in percent, by property price tier."""
    if property_price < 500_000:
        return MarketRange(low=6, high=10, reason="small residential/commercial")
    if property_price < 2_000_000:
        return MarketRange(low=5, high=8, reason="mid-market commercial")
    return MarketRange(low=4, high=7, reason="institutional-grade")


def multiple_range(revenue: float, sde: float, has_property: bool = False) -> MarketRange:
    """
    Market SDE multiple band for a business.

    Starts at 2.0x-3.5x and shifts for margin, revenue scale and, in a hybrid
    deal, real property backing.
    """
    margin = sde / (revenue or 1)
    reasons: List[str] = []
    low, high = 2.0, 3.5

    if margin < THIN_SDE_MARGIN:
        low, high = 1.5, 2.5
        reasons.append("thin margins compress multiples")
    elif margin > 0.35:
        low, high = 2.5, 4.0
        reasons.append("strong margins command premium multiples")

    if revenue < MICRO_BUSINESS_REVENUE:
        low, high = max(1.0, low - 0.5), max(2.0, high - 0.5)
        reasons.append("micro-business trades at lower multiples")
    elif revenue > LARGE_BUSINESS_REVENUE:
        low, high = low + 0.5, high + 0.5
        reasons.append("established revenue supports higher multiples")

    if has_property:
        low, high = low + 0.5, high + 0.5
        reasons.append("real property backing adds value")

    return MarketRange(
        low=round(low, 1), high=round(high, 1), reason="; ".join(reasons) or "standard range"
    )


# --- Valuation ---


def calc_valuation_range(
    deal_type: DealTypeEnum, data: DealData, metrics: AnyMetrics
) -> ValuationRange:
    """Fair value band from market cap rates, SDE multiples, or both."""
    deal_type = DealTypeEnum(deal_type)
    if deal_type is DealTypeEnum.REAL_ESTATE:
        band = cap_rate_range(data.purchase_price)
        low = metrics.noi / (band.high / 100)
        high = metrics.noi / (band.low / 100)
        return ValuationRange(
            low=low,
            high=high,
            method="Cap Rate",
            details=[
                f"NOI: {_money(metrics.noi)}/yr",
                f"Market cap rate range: {_pct(band.low)}-{_pct(band.high)} ({band.reason})",
                f"At {_pct(band.high)} cap: {_money(low)}",
                f"At {_pct(band.low)} cap: {_money(high)}",
                f"Current implied cap: {_pct(metrics.cap_rate)}",
            ],
        )

    if deal_type is DealTypeEnum.BUSINESS:
        band = multiple_range(data.annual_revenue, metrics.sde)
        low = metrics.sde * band.low
        high = metrics.sde * band.high
        return ValuationRange(
            low=low,
            high=high,
            method="SDE Multiple",
            details=[
                f"SDE: {_money(metrics.sde)}/yr",
                f"Market multiple range: {band.low:g}x-{band.high:g}x ({band.reason})",
                f"At {band.low:g}x: {_money(low)}",
                f"At {band.high:g}x: {_money(high)}",
                f"Current implied multiple: {metrics.sde_multiple:.1f}x",
            ],
        )

    biz_band = multiple_range(data.annual_revenue, metrics.sde, has_property=True)
    prop_band = cap_rate_range(data.property_value)
    biz_low = metrics.sde * biz_band.low
    biz_high = metrics.sde * biz_band.high
    prop_low = metrics.property_noi / (prop_band.high / 100) if metrics.property_noi > 0 else 0.0
    prop_high = metrics.property_noi / (prop_band.low / 100) if metrics.property_noi > 0 else 0.0
    return ValuationRange(
        low=biz_low + prop_low,
        high=biz_high + prop_high,
        method="Dual (Property + Business)",
        details=[
            f"Business SDE: {_money(metrics.sde)} x {biz_band.low:g}-{biz_band.high:g}x = "
            f"{_money(biz_low)}-{_money(biz_high)}",
            f"Property NOI: {_money(metrics.property_noi)} at "
            f"{_pct(prop_band.low)}-{_pct(prop_band.high)} cap = "
            f"{_money(prop_low)}-{_money(prop_high)}",
            f"Combined range: {_money(biz_low + prop_low)}-{_money(biz_high + prop_high)}",
        ],
    )


# --- Debt capacity ---


def debt_service_income(deal_type: DealTypeEnum, data: DealData, metrics: AnyMetrics) -> float:
    """
    Annual income a lender sizes the loan against.

    NOI for property, combined NOI for hybrids, and SDE less the owner's
    replacement salary for businesses.
    """
    deal_type = DealTypeEnum(deal_type)
    if deal_type is DealTypeEnum.REAL_ESTATE:
        return metrics.noi
    if deal_type is DealTypeEnum.HYBRID:
        return metrics.total_noi
    return metrics.sde - data.owner_salary


def max_loan_for_payment(annual_payment: float, financing: FinancingTerms) -> float:
    """Largest loan whose level payment fits ``annual_payment`` on the deal's amortization."""
    num_payments = financing.amortization_months
    if annual_payment <= 0 or num_payments <= 0:
        return 0.0
    monthly_payment = annual_payment / 12
    if financing.monthly_rate == 0:
        return monthly_payment * num_payments
    return pv(financing.monthly_rate, num_payments, -monthly_payment)


def calc_max_supportable_price(
    deal_type: DealTypeEnum,
    data: DealData,
    metrics: AnyMetrics,
    min_dscr: float = MIN_DSCR,
) -> DSCRConstraint:
    """
    Highest price the deal's income carries at ``min_dscr``.

    The income's maximum debt service is converted to a loan with the deal's
    rate and amortization, then grossed up by the down payment.
    """
    financing = data.financing
    income = debt_service_income(deal_type, data, metrics)
    annual_debt = calc_annual_debt_service(financing)
    max_annual_debt = income / min_dscr

    max_loan = max_loan_for_payment(max_annual_debt, financing)
    equity_share = financing.down_payment / 100
    max_price = max_loan / (1 - equity_share) if equity_share < 1 else max_loan
    max_price = max(0.0, max_price)

    if income <= 0:
        explanation = (
            f"The deal produces no positive cash flow, so no price is supportable "
            f"at a {min_dscr:g}x DSCR."
        )
    else:
        amort_years = financing.amortization_years or financing.loan_term_years
        explanation = (
            f"With {_money(income)}/yr NOI and a {min_dscr:g}x DSCR requirement, the maximum "
            f"annual debt service is {_money(max_annual_debt)}. At "
            f"{_pct(financing.interest_rate)} over {amort_years} years with "
            f"{_pct(financing.down_payment)} down, the highest price the income supports "
            f"is {_money(max_price)}."
        )

    return DSCRConstraint(
        max_supportable_price=max_price,
        dscr=FinancialCalculations.coverage_ratio(income, annual_debt),
        min_dscr=min_dscr,
        noi=income,
        annual_debt_service=annual_debt,
        explanation=explanation,
    )


def calc_price_gap(
    asking_price: float, valuation: ValuationRange, constraint: DSCRConstraint
) -> PriceGap:
    """Fair value midpoint, overpayment, and an offer range in the lower half of fair value."""
    fair_mid = (valuation.low + valuation.high) / 2
    overpay = asking_price - fair_mid
    return PriceGap(
        asking_price=asking_price,
        fair_value_mid=fair_mid,
        max_supportable=constraint.max_supportable_price,
        ceiling_price=min(valuation.high, constraint.max_supportable_price),
        suggested_offer_low=valuation.low,
        suggested_offer_high=(valuation.low + fair_mid) / 2,
        overpay_amount=overpay,
        overpay_percent=round(FinancialCalculations.percent_of(overpay, fair_mid), 1),
    )


# --- Talking points ---


def _point(
    category: NegotiationCategoryEnum, title: str, detail: str, impact: ImpactEnum
) -> NegotiationPoint:
    return NegotiationPoint(category=category, title=title, detail=detail, impact=impact)


_RISK = NegotiationCategoryEnum.RISK
_VALUATION = NegotiationCategoryEnum.VALUATION
_FINANCIAL = NegotiationCategoryEnum.FINANCIAL
_HIGH = ImpactEnum.HIGH
_MEDIUM = ImpactEnum.MEDIUM


def _real_estate_points(data: RealEstateDeal, m: RealEstateMetrics) -> List[NegotiationPoint]:
    points: List[NegotiationPoint] = []
    band = cap_rate_range(data.purchase_price)

    if m.cap_rate < band.low:
        points.append(_point(
            _VALUATION,
            "Cap Rate Below Market Range",
            f"The implied cap rate of {_pct(m.cap_rate)} is below the "
            f"{_pct(band.low)}-{_pct(band.high)} range for {band.reason} properties. "
            "Comparable properties trade at higher yields.",
            _HIGH,
        ))

    if data.vacancy_rate < STANDARD_VACANCY:
        gross = data.gross_rental_income + data.other_income
        lost_income = gross * (STANDARD_VACANCY - data.vacancy_rate) / 100
        points.append(_point(
            _RISK,
            "Optimistic Vacancy Assumption",
            f"The {_pct(data.vacancy_rate)} vacancy rate used is below the industry-standard "
            f"5-8% for rental properties. Realistic vacancy would reduce NOI by "
            f"{_money(lost_income)}/yr.",
            _MEDIUM,
        ))

    expense_ratio = m.operating_expenses / (m.effective_gross_income or 1)
    if expense_ratio > MAX_EXPENSE_RATIO:
        points.append(_point(
            _FINANCIAL,
            "High Operating Expense Ratio",
            f"Operating expenses consume {_pct(expense_ratio * 100)} of effective gross "
            "income, above the 40-50% benchmark. This points to deferred maintenance, "
            "management inefficiency or aging infrastructure.",
            _MEDIUM,
        ))

    if 0 < m.dscr < MIN_DSCR:
        points.append(_point(
            _FINANCIAL,
            "Insufficient Debt Service Coverage",
            f"DSCR of {m.dscr:.2f}x is below the lender-standard {MIN_DSCR}x minimum. "
            "Financing is difficult at the asking price, which sits above what the "
            "income supports.",
            _HIGH,
        ))

    if m.cash_on_cash_return < TARGET_CASH_ON_CASH:
        points.append(_point(
            _FINANCIAL,
            "Below-Target Cash-on-Cash Return",
            f"Cash-on-cash return of {_pct(m.cash_on_cash_return)} is below the typical "
            "8-12% target for investment properties. At this level, REITs or index funds "
            "offer comparable returns with less risk.",
            _HIGH if m.cash_on_cash_return < POOR_CASH_ON_CASH else _MEDIUM,
        ))

    if data.rehab_costs > data.purchase_price * MAX_REHAB_SHARE:
        share = FinancialCalculations.percent_of(data.rehab_costs, data.purchase_price)
        points.append(_point(
            _RISK,
            "Significant Rehabilitation Required",
            f"Rehab costs of {_money(data.rehab_costs)} represent {_pct(share)} of the "
            "purchase price. The execution risk and carrying costs belong in a lower "
            "acquisition price.",
            _MEDIUM,
        ))

    return points


def _business_points(data: BusinessDeal, m: BusinessMetrics) -> List[NegotiationPoint]:
    points: List[NegotiationPoint] = []
    band = multiple_range(data.annual_revenue, m.sde)

    if m.sde_multiple > band.high:
        points.append(_point(
            _VALUATION,
            "Asking Multiple Above Market Range",
            f"The asking price implies a {m.sde_multiple:.1f}x SDE multiple, above the "
            f"{band.low:g}x-{band.high:g}x range for comparable businesses ({band.reason}). "
            f"A rational price is {_money(m.sde * band.low)}-{_money(m.sde * band.high)}.",
            _HIGH,
        ))

    sde_margin = m.sde / (data.annual_revenue or 1)
    if sde_margin < THIN_SDE_MARGIN:
        points.append(_point(
            _RISK,
            "Thin SDE Margin",
            f"SDE margin of {_pct(sde_margin * 100)} is below 15%. A small revenue decline "
            "or cost increase could eliminate earnings entirely.",
            _HIGH,
        ))

    if data.owner_salary < LOW_OWNER_SALARY and data.annual_revenue > OWNER_SALARY_REVENUE_FLOOR:
        points.append(_point(
            _RISK,
            "Understated Owner Compensation",
            f"Owner salary of {_money(data.owner_salary)} appears below market for a "
            f"{_money(data.annual_revenue)}-revenue business. If a replacement manager costs "
            "$60K-$80K, true SDE is lower than stated.",
            _MEDIUM,
        ))

    if data.annual_revenue < MICRO_BUSINESS_REVENUE:
        points.append(_point(
            _RISK,
            "Small Revenue Base",
            f"Revenue of {_money(data.annual_revenue)} indicates a micro-business with likely "
            "owner dependency and customer concentration. These trade at the low end of "
            "multiple ranges.",
            _MEDIUM,
        ))

    gross_margin = (data.annual_revenue - data.cost_of_goods) / (data.annual_revenue or 1)
    if gross_margin < LOW_GROSS_MARGIN:
        points.append(_point(
            _FINANCIAL,
            "Low Gross Margin",
            f"Gross margin of {_pct(gross_margin * 100)} leaves little room for operating "
            "expenses. A small increase in cost of goods would cut deeply into profit.",
            _MEDIUM,
        ))

    return points


def _hybrid_points(data: HybridDeal, m: HybridMetrics) -> List[NegotiationPoint]:
    points: List[NegotiationPoint] = []
    biz_band = multiple_range(data.annual_revenue, m.sde, has_property=True)
    prop_band = cap_rate_range(data.property_value)

    if m.sde_multiple > biz_band.high:
        points.append(_point(
            _VALUATION,
            "Business Portion Overvalued",
            f"The business allocation implies a {m.sde_multiple:.1f}x SDE multiple, above "
            f"the {biz_band.low:g}x-{biz_band.high:g}x range.",
            _HIGH,
        ))

    if m.cap_rate < prop_band.low and m.property_noi > 0:
        points.append(_point(
            _VALUATION,
            "Property Cap Rate Below Market",
            f"The property portion cap rate of {_pct(m.cap_rate)} is below the "
            f"{_pct(prop_band.low)}-{_pct(prop_band.high)} market range. The real estate "
            "allocation is priced at a premium.",
            _HIGH,
        ))

    if 0 < m.dscr < MIN_DSCR:
        points.append(_point(
            _FINANCIAL,
            "Thin Debt Coverage",
            f"Combined DSCR of {m.dscr:.2f}x is below the {MIN_DSCR}x standard. The "
            "combined operation barely covers its debt service at the asking price.",
            _HIGH,
        ))

    return points


def build_negotiation_points(
    deal_type: DealTypeEnum, data: DealData, metrics: AnyMetrics
) -> List[NegotiationPoint]:
    """Weak spots of a deal phrased as arguments for a lower price."""
    deal_type = DealTypeEnum(deal_type)
    if deal_type is DealTypeEnum.REAL_ESTATE:
        points = _real_estate_points(data, metrics)
    elif deal_type is DealTypeEnum.BUSINESS:
        points = _business_points(data, metrics)
    else:
        points = _hybrid_points(data, metrics)

    rate = data.financing.interest_rate
    if rate > HIGH_INTEREST_RATE:
        points.append(_point(
            NegotiationCategoryEnum.MARKET,
            "Elevated Interest Rate Environment",
            f"The {_pct(rate)} financing rate raises carrying costs. Higher rates mean "
            "buyers can pay less for the same cash flow.",
            _MEDIUM,
        ))
    return points


# --- Stress and price sweep ---


def build_stress_test(deal: Deal, settings: Optional[AnalysisSettings] = None) -> StressTestResult:
    """Score and cash flow before and after the default recession overrides."""
    stressed = stress_deal(deal)
    base_score = calc_investment_score(deal, settings)
    stressed_score = calc_investment_score(stressed, settings)
    return StressTestResult(
        base_score=base_score.total,
        base_label=base_score.label,
        stressed_score=stressed_score.total,
        stressed_label=stressed_score.label,
        base_cash_flow=calc_data_metrics(deal.deal_type, deal.data, settings).annual_cash_flow,
        stressed_cash_flow=calc_data_metrics(
            stressed.deal_type, stressed.data, settings
        ).annual_cash_flow,
    )


_CASH_INVESTED = {
    DealTypeEnum.REAL_ESTATE: real_estate.calc_total_cash_invested,
    DealTypeEnum.BUSINESS: business.calc_total_cash_invested,
    DealTypeEnum.HYBRID: hybrid.calc_total_cash_invested,
}


def build_price_sensitivity(
    deal_type: DealTypeEnum, data: DealData, metrics: AnyMetrics
) -> List[PricePoint]:
    """
    Cash flow, DSCR and cash return at each of ``PRICE_STEPS`` around the asking price.

    Each price is applied with the sensitivity price setter, so the loan keeps
    the deal's down-payment percent.
    """
    deal_type = DealTypeEnum(deal_type)
    price_variable = get_variable(deal_type, _PRICE_KEYS[deal_type])
    asking_price = deal_price(data)
    income = debt_service_income(deal_type, data, metrics)
    return_label = "ROI" if deal_type is DealTypeEnum.BUSINESS else "Cash-on-Cash"

    points: List[PricePoint] = []
    for step in PRICE_STEPS:
        price = float(round(asking_price * (1 + step / 100)))
        priced = price_variable.setter(data, price)
        annual_debt = calc_annual_debt_service(priced.financing)
        cash_flow = income - annual_debt
        points.append(
            PricePoint(
                price=price,
                cash_flow=cash_flow,
                dscr=FinancialCalculations.coverage_ratio(income, annual_debt),
                return_metric=FinancialCalculations.percent_of(
                    cash_flow, _CASH_INVESTED[deal_type](priced)
                ),
                return_label=return_label,
            )
        )
    return points


def build_negotiation_analysis(
    deal: Deal,
    min_dscr: float = MIN_DSCR,
    settings: Optional[AnalysisSettings] = None,
) -> NegotiationAnalysis:
    """
    Assemble the full negotiation case for a deal.

    Args:
        deal: Deal to analyze at its asking price
        min_dscr: Coverage a lender requires when sizing the maximum price
        settings: Optional analysis settings

    Returns:
        NegotiationAnalysis
    """
    deal_type = deal.deal_type
    data = deal.data
    metrics = calc_data_metrics(deal_type, data, settings)
    asking_price = deal_price(data)

    valuation = calc_valuation_range(deal_type, data, metrics)
    constraint = calc_max_supportable_price(deal_type, data, metrics, min_dscr)

    analysis = NegotiationAnalysis(
        deal_name=deal.name,
        deal_type=deal_type,
        deal_type_label=DEAL_TYPE_LABELS[deal_type],
        asking_price=asking_price,
        valuation=valuation,
        dscr_constraint=constraint,
        price_gap=calc_price_gap(asking_price, valuation, constraint),
        negotiation_points=build_negotiation_points(deal_type, data, metrics),
        stress_test=build_stress_test(deal, settings),
        sensitivity_at_price=build_price_sensitivity(deal_type, data, metrics),
    )
    logger.debug(
        f"Negotiation analysis for {deal.name or deal.id}: asking {_money(asking_price)}, "
        f"fair value {_money(valuation.low)}-{_money(valuation.high)}, "
        f"{len(analysis.negotiation_points)} points"
    )
    return analysis
