# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Deal analysis: metrics, projections, sensitivity, scoring, stress tests and
negotiation support.

The per-type formula modules (``real_estate``, ``business``, ``hybrid``) are
importable directly; most callers want the dispatching entry points exported
here.
"""

from .api import calc_data_metrics, calc_metrics, project_cash_flows, project_data_cash_flows
from .breakdowns import BreakdownSummary, summarize_breakdowns
from .criteria import (
    CriteriaCondition,
    InvestmentCriteria,
    deal_matches_criteria,
    get_matching_criteria,
    get_metric_value,
)
from .negotiation import (
    DSCRConstraint,
    NegotiationAnalysis,
    NegotiationPoint,
    PriceGap,
    PricePoint,
    StressTestResult,
    ValuationRange,
    build_negotiation_analysis,
)
from .portfolio import DealSummary, PortfolioMetrics, calc_portfolio_metrics
from .recession import (
    DEFAULT_RECESSION,
    RecessionOverrides,
    apply_recession_overrides,
    get_recession_labels,
    stress_deal,
)
from .refinance import DEFAULT_REFI, RefinanceInputs, RefinanceResult, calc_refinance
from .results import (
    AnyMetrics,
    BusinessMetrics,
    CashFlowProjectionRow,
    HybridMetrics,
    RealEstateMetrics,
    projection_to_frame,
)
from .score import InvestmentScore, calc_investment_score, calc_score_from_metrics
from .sensitivity import (
    SensitivityResult,
    SensitivityVariable,
    get_output_metrics,
    get_variables_for_deal_type,
    run_sensitivity,
)

__all__ = [
    # Entry points
    "calc_data_metrics",
    "calc_metrics",
    "project_cash_flows",
    "project_data_cash_flows",
    # Results
    "AnyMetrics",
    "BusinessMetrics",
    "CashFlowProjectionRow",
    "HybridMetrics",
    "RealEstateMetrics",
    "projection_to_frame",
    # Sensitivity
    "SensitivityResult",
    "SensitivityVariable",
    "get_output_metrics",
    "get_variables_for_deal_type",
    "run_sensitivity",
    # Scoring
    "InvestmentScore",
    "calc_investment_score",
    "calc_score_from_metrics",
    # Stress and refinance
    "DEFAULT_RECESSION",
    "DEFAULT_REFI",
    "RecessionOverrides",
    "RefinanceInputs",
    "RefinanceResult",
    "apply_recession_overrides",
    "calc_refinance",
    "get_recession_labels",
    "stress_deal",
    # Negotiation
    "DSCRConstraint",
    "NegotiationAnalysis",
    "NegotiationPoint",
    "PriceGap",
    "PricePoint",
    "StressTestResult",
    "ValuationRange",
    "build_negotiation_analysis",
    # Detail schedules
    "BreakdownSummary",
    "summarize_breakdowns",
    # Portfolio and criteria
    "CriteriaCondition",
    "DealSummary",
    "InvestmentCriteria",
    "PortfolioMetrics",
    "calc_portfolio_metrics",
    "deal_matches_criteria",
    "get_matching_criteria",
    "get_metric_value",
]
