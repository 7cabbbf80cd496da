# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""Portfolio aggregation across saved deals"""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import Field

from ..core.primitives import AnalysisSettings, DealTypeEnum, Model
from ..deal import Deal, deal_price
from .api import calc_data_metrics
from .score import InvestmentScore, calc_score_from_metrics


class DealSummary(Model):
    id: str
    name: str
    deal_type: DealTypeEnum
    price: float
    cash_invested: float
    annual_cash_flow: float
    cash_on_cash: float
    roi: float
    score: InvestmentScore


class PortfolioMetrics(Model):
    """
    Portfolio-level totals.

    Weighted averages are weighted by cash invested; ``deals`` is sorted by
    score, best first.
    """

    deal_count: int = 0
    type_counts: Dict[DealTypeEnum, int] = Field(
        default_factory=lambda: {deal_type: 0 for deal_type in DealTypeEnum}
    )
    total_portfolio_value: float = 0.0
    total_cash_invested: float = 0.0
    total_debt: float = 0.0
    total_annual_cash_flow: float = 0.0
    total_annual_debt_service: float = 0.0
    weighted_cash_on_cash: float = 0.0
    weighted_roi: float = 0.0
    average_score: float = 0.0
    total_equity: float = 0.0
    portfolio_ltv: float = 0.0
    deals: List[DealSummary] = Field(default_factory=list)


def calc_portfolio_metrics(
    deals: List[Deal], settings: Optional[AnalysisSettings] = None
) -> PortfolioMetrics:
    """Aggregate metrics for a list of deals; an empty list yields zeroed metrics."""
    if not deals:
        return PortfolioMetrics()

    type_counts = {deal_type: 0 for deal_type in DealTypeEnum}
    total_value = total_cash = total_debt = total_cash_flow = total_debt_service = 0.0
    coc_weighted_sum = roi_weighted_sum = score_sum = 0.0
    summaries: List[DealSummary] = []

    for deal in deals:
        metrics = calc_data_metrics(deal.deal_type, deal.data, settings)
        score = calc_score_from_metrics(deal.deal_type, deal.data, metrics)
        price = deal_price(deal.data)

        type_counts[deal.deal_type] += 1
        total_value += price
        total_debt += deal.data.financing.loan_amount
        total_cash += metrics.total_cash_invested
        total_cash_flow += metrics.annual_cash_flow
        total_debt_service += metrics.annual_debt_service
        coc_weighted_sum += metrics.cash_on_cash_return * metrics.total_cash_invested
        roi_weighted_sum += metrics.roi * metrics.total_cash_invested
        score_sum += score.total

        summaries.append(
            DealSummary(
                id=deal.id,
                name=deal.name,
                deal_type=deal.deal_type,
                price=price,
                cash_invested=metrics.total_cash_invested,
                annual_cash_flow=metrics.annual_cash_flow,
                cash_on_cash=metrics.cash_on_cash_return,
                roi=metrics.roi,
                score=score,
            )
        )

    summaries.sort(key=lambda summary: summary.score.total, reverse=True)

    return PortfolioMetrics(
        deal_count=len(deals),
        type_counts=type_counts,
        total_portfolio_value=total_value,
        total_cash_invested=total_cash,
        total_debt=total_debt,
        total_annual_cash_flow=total_cash_flow,
        total_annual_debt_service=total_debt_service,
        weighted_cash_on_cash=coc_weighted_sum / total_cash if total_cash > 0 else 0.0,
        weighted_roi=roi_weighted_sum / total_cash if total_cash > 0 else 0.0,
        average_score=score_sum / len(deals),
        total_equity=total_value - total_debt,
        portfolio_ltv=total_debt / total_value * 100 if total_value > 0 else 0.0,
        deals=summaries,
    )
