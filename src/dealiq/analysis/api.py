# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Deal Analysis API

Single entry points for metrics and projections across all deal types. Each
function dispatches on ``DealTypeEnum`` to the matching formulas module, so
every formula stays in one place per deal type and callers never branch on
type themselves.
"""

from __future__ import annotations

from typing import List, Optional, Union

from ..core.primitives import AnalysisSettings, DealTypeEnum, resolve_settings
from ..deal import BusinessDeal, Deal, HybridDeal, RealEstateDeal
from . import business, hybrid, real_estate
from .results import AnyMetrics, CashFlowProjectionRow

DealData = Union[RealEstateDeal, BusinessDeal, HybridDeal]


def _check_data(deal_type: DealTypeEnum, data: DealData, expected: type) -> None:
    if not isinstance(data, expected):
        raise TypeError(
            f"{deal_type.value} deals require {expected.__name__} data, got {type(data).__name__}"
        )


def calc_data_metrics(
    deal_type: DealTypeEnum,
    data: DealData,
    settings: Optional[AnalysisSettings] = None,
) -> AnyMetrics:
    """
    Compute the full metrics set for a deal data record.

    Args:
        deal_type: Which formulas apply
        data: Deal data record of the matching type
        settings: Optional analysis settings (hold period, selling costs)

    Returns:
        RealEstateMetrics, BusinessMetrics or HybridMetrics
    """
    deal_type = DealTypeEnum(deal_type)
    if deal_type is DealTypeEnum.REAL_ESTATE:
        _check_data(deal_type, data, RealEstateDeal)
        return real_estate.calc_real_estate_metrics(data, settings)
    elif deal_type is DealTypeEnum.BUSINESS:
        _check_data(deal_type, data, BusinessDeal)
        return business.calc_business_metrics(data, settings)
    elif deal_type is DealTypeEnum.HYBRID:
        _check_data(deal_type, data, HybridDeal)
        return hybrid.calc_hybrid_metrics(data, settings)
    raise ValueError(f"Unsupported deal type: {deal_type}")


def calc_metrics(deal: Deal, settings: Optional[AnalysisSettings] = None) -> AnyMetrics:
    """Compute the full metrics set for a saved deal."""
    return calc_data_metrics(deal.deal_type, deal.data, settings)


def project_data_cash_flows(
    deal_type: DealTypeEnum,
    data: DealData,
    years: Optional[int] = None,
    settings: Optional[AnalysisSettings] = None,
) -> List[CashFlowProjectionRow]:
    """Project ``years`` years of cash flow (default from settings) for a deal data record."""
    years = years if years is not None else resolve_settings(settings).projection_years
    deal_type = DealTypeEnum(deal_type)
    if deal_type is DealTypeEnum.REAL_ESTATE:
        _check_data(deal_type, data, RealEstateDeal)
        return real_estate.project_cash_flows(data, years)
    elif deal_type is DealTypeEnum.BUSINESS:
        _check_data(deal_type, data, BusinessDeal)
        return business.project_cash_flows(data, years)
    elif deal_type is DealTypeEnum.HYBRID:
        _check_data(deal_type, data, HybridDeal)
        return hybrid.project_cash_flows(data, years)
    raise ValueError(f"Unsupported deal type: {deal_type}")


def project_cash_flows(
    deal: Deal,
    years: Optional[int] = None,
    settings: Optional[AnalysisSettings] = None,
) -> List[CashFlowProjectionRow]:
    """Project ``years`` years of cash flow for a saved deal."""
    return project_data_cash_flows(deal.deal_type, deal.data, years, settings)
