# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Investment Score - composite 0-100 deal rating

Maps a handful of metrics through linear scoring curves, weights them into a
composite, and subtracts points for detected risk conditions. A pure function
of the deal snapshot.
"""

from __future__ import annotations

import logging
import math
from typing import List, Optional, Tuple, Union

from ..core.primitives import AnalysisSettings, DealTypeEnum, Model
from ..deal import BusinessDeal, Deal, HybridDeal, RealEstateDeal
from .api import calc_data_metrics
from .results import AnyMetrics, BusinessMetrics, HybridMetrics, RealEstateMetrics

logger = logging.getLogger(__name__)

POINTS_PER_FLAG = 5
MAX_DEDUCTION = 25

# Minimum total for each label, highest first
SCORE_BANDS: List[Tuple[int, str]] = [
    (80, "Strong Buy"),
    (65, "Good Deal"),
    (50, "Fair"),
    (35, "Below Average"),
    (0, "Weak"),
]


class ScoreComponent(Model):
    name: str
    score: float  # 0-100 before weighting
    weight: float  # 0-1
    weighted: float


class ScoreDeduction(Model):
    reason: str
    points: float


class InvestmentScore(Model):
    """
    Composite deal score.

    Attributes:
        total: Final score, 0-100
        label: Qualitative band ("Strong Buy", "Good Deal", ...)
        summary: One-line reading of the strongest/weakest components
        component_scores: Per-metric curve scores and weights
        deductions: Risk flags found, before the deduction cap
        total_deduction: Points actually subtracted (capped)
    """

    total: int
    label: str
    summary: str
    component_scores: List[ScoreComponent]
    deductions: List[ScoreDeduction]
    total_deduction: float


# --- Scoring curves ---


def clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


def linear_score(value: Optional[float], low: float, high: float) -> float:
    """0 at ``low``, 100 at ``high``, clamped. Missing or NaN values score 0."""
    if value is None or math.isnan(value):
        return 0.0
    if high == low:
        return 100.0 if value >= high else 0.0
    return clamp((value - low) / (high - low) * 100)


def inverse_linear_score(value: Optional[float], low: float, high: float) -> float:
    """100 at ``low``, 0 at ``high``; for metrics where lower is better."""
    if value is None or math.isnan(value):
        return 0.0
    return 100.0 - linear_score(value, low, high)


def _component(name: str, score: float, weight: float) -> ScoreComponent:
    return ScoreComponent(name=name, score=score, weight=weight, weighted=score * weight)


# --- Components per deal type ---


def _real_estate_components(data: RealEstateDeal, m: RealEstateMetrics) -> List[ScoreComponent]:
    egi = m.effective_gross_income or 1
    expense_ratio = m.operating_expenses / egi * 100
    return [
        _component("Cap Rate", linear_score(m.cap_rate, 3, 10), 0.25),
        _component("Cash-on-Cash", linear_score(m.cash_on_cash_return, 0, 15), 0.20),
        _component("DSCR", linear_score(m.dscr, 0.8, 1.75), 0.20),
        _component("IRR", linear_score(m.irr, 0, 20), 0.15),
        _component("Cash Flow", linear_score(m.annual_cash_flow, 0, 50_000), 0.10),
        _component("Expense Ratio", inverse_linear_score(expense_ratio, 30, 65), 0.10),
    ]


def _sde_margin(sde: float, revenue: float) -> float:
    return sde / revenue * 100 if revenue > 0 else 0.0


def _business_components(data: BusinessDeal, m: BusinessMetrics) -> List[ScoreComponent]:
    sde_margin = _sde_margin(m.sde, data.annual_revenue)
    return [
        _component("SDE Multiple", inverse_linear_score(m.sde_multiple, 1.5, 5), 0.25),
        _component("ROI", linear_score(m.roi, 0, 40), 0.20),
        _component("SDE Margin", linear_score(sde_margin, 10, 40), 0.20),
        _component("Cash Flow", linear_score(m.annual_cash_flow, 0, 100_000), 0.20),
        _component("Revenue Multiple", inverse_linear_score(m.revenue_multiple, 0.3, 2), 0.15),
    ]


def _hybrid_components(data: HybridDeal, m: HybridMetrics) -> List[ScoreComponent]:
    # Do the property and business allocations account for the price paid?
    allocation_gap = abs(data.property_value + data.business_value - data.purchase_price)
    if allocation_gap < 1000:
        allocation_score = 100.0
    else:
        allocation_score = inverse_linear_score(allocation_gap, 0, data.purchase_price * 0.1)

    return [
        _component("Cap Rate", linear_score(m.cap_rate, 3, 10), 0.15),
        _component("Cash-on-Cash", linear_score(m.cash_on_cash_return, 0, 15), 0.15),
        _component("DSCR", linear_score(m.dscr, 0.8, 1.75), 0.20),
        _component("SDE Multiple", inverse_linear_score(m.sde_multiple, 1.5, 5), 0.15),
        _component("Cash Flow", linear_score(m.annual_cash_flow, 0, 75_000), 0.15),
        _component("ROI", linear_score(m.roi, 0, 30), 0.10),
        _component("Allocation", allocation_score, 0.10),
    ]


# --- Risk flags ---


def find_risk_flags(
    deal_type: DealTypeEnum,
    data: Union[RealEstateDeal, BusinessDeal, HybridDeal],
    m: AnyMetrics,
) -> List[ScoreDeduction]:
    """Risk conditions present in a deal, each worth ``POINTS_PER_FLAG`` points."""
    reasons: List[str] = []

    if m.dscr < 1.0:
        reasons.append("DSCR below 1.0: income does not cover debt service")
    elif m.dscr < 1.25:
        reasons.append("DSCR below 1.25 lender minimum")
    if m.annual_cash_flow < 0:
        reasons.append("Negative annual cash flow")

    if deal_type is DealTypeEnum.REAL_ESTATE:
        if data.vacancy_rate < 3:
            reasons.append("Vacancy assumption below 3% is optimistic")
        if m.cap_rate < 4:
            reasons.append("Cap rate below 4%")
        if m.cash_on_cash_return < 5:
            reasons.append("Cash-on-cash return below 5%")
        if data.rehab_costs > data.purchase_price * 0.25:
            reasons.append("Rehab budget above 25% of purchase price")
    elif deal_type is DealTypeEnum.BUSINESS:
        if _sde_margin(m.sde, data.annual_revenue) < 15:
            reasons.append("Thin SDE margin below 15%")
        if m.sde_multiple > 4:
            reasons.append("SDE multiple above 4x")
        if data.annual_revenue < 200_000:
            reasons.append("Revenue below $200,000")
    elif deal_type is DealTypeEnum.HYBRID:
        if m.sde_multiple > 4:
            reasons.append("SDE multiple above 4x")
        if data.property_value + data.business_value > data.purchase_price * 1.1:
            reasons.append("Allocations exceed purchase price by more than 10%")

    return [ScoreDeduction(reason=reason, points=POINTS_PER_FLAG) for reason in reasons]


# --- Labels ---


def label_for_score(score: float) -> str:
    for minimum, label in SCORE_BANDS:
        if score >= minimum:
            return label
    return SCORE_BANDS[-1][1]


def build_summary(total: int, components: List[ScoreComponent]) -> str:
    ranked = sorted(components, key=lambda c: c.score, reverse=True)
    best, worst = ranked[0], ranked[-1]
    runner_up_worst = ranked[-2] if len(ranked) > 1 else best

    if total >= 80:
        return f"Strong yield and safe coverage. {best.name} is excellent."
    if total >= 65:
        return f"Solid fundamentals, {worst.name} could be stronger."
    if total >= 50:
        return f"Acceptable deal but {worst.name} is a concern. Negotiate terms."
    if total >= 35:
        return f"Multiple weaknesses: {worst.name} and {runner_up_worst.name} need improvement."
    return f"Significant risk. {worst.name} is critically weak. Consider walking away."


# --- Public API ---


def calc_score_from_metrics(
    deal_type: DealTypeEnum,
    data: Union[RealEstateDeal, BusinessDeal, HybridDeal],
    metrics: AnyMetrics,
) -> InvestmentScore:
    """Score a deal from already computed metrics, avoiding a second calculation."""
    deal_type = DealTypeEnum(deal_type)
    if deal_type is DealTypeEnum.REAL_ESTATE:
        components = _real_estate_components(data, metrics)
    elif deal_type is DealTypeEnum.BUSINESS:
        components = _business_components(data, metrics)
    elif deal_type is DealTypeEnum.HYBRID:
        components = _hybrid_components(data, metrics)
    else:
        raise ValueError(f"Unsupported deal type: {deal_type}")

    deductions = find_risk_flags(deal_type, data, metrics)
    total_deduction = min(sum(d.points for d in deductions), MAX_DEDUCTION)

    raw = sum(c.weighted for c in components)
    total = int(round(clamp(raw - total_deduction)))

    logger.debug(
        f"Investment score {total} (raw {raw:.1f}, {len(deductions)} risk flags, "
        f"-{total_deduction} pts)"
    )
    return InvestmentScore(
        total=total,
        label=label_for_score(total),
        summary=build_summary(total, components),
        component_scores=components,
        deductions=deductions,
        total_deduction=total_deduction,
    )


def calc_investment_score(
    deal: Deal, settings: Optional[AnalysisSettings] = None
) -> InvestmentScore:
    """Compute a deal's metrics and score them."""
    metrics = calc_data_metrics(deal.deal_type, deal.data, settings)
    return calc_score_from_metrics(deal.deal_type, deal.data, metrics)
