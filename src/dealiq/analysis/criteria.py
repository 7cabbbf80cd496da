# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Investment criteria matching

Checks deals against an investor's saved criteria ("cap rate >= 8 and
DSCR >= 1.25"). Metric names are the camelCase keys used by stored criteria.
"""

from __future__ import annotations

from typing import List, Literal, Optional, Union

from pydantic import Field
from pydantic.alias_generators import to_snake

from ..core.primitives import CriteriaOperatorEnum, DealTypeEnum, Model
from ..deal import Deal
from .api import calc_metrics

EQ_TOLERANCE = 0.01


class CriteriaCondition(Model):
    metric: str  # e.g. "capRate", "cashOnCashReturn", "dscr"
    operator: CriteriaOperatorEnum
    value: float


class InvestmentCriteria(Model):
    """All conditions must hold for a deal to match; ``deal_type="any"`` matches every type."""

    id: str = ""
    user_id: Optional[str] = None
    name: str
    deal_type: Union[DealTypeEnum, Literal["any"]] = "any"
    conditions: List[CriteriaCondition] = Field(default_factory=list)
    is_active: bool = True


def get_metric_value(deal: Deal, metric: str) -> Optional[float]:
    """Value of a named metric for a deal, or None if the deal type has no such metric."""
    metrics = calc_metrics(deal)
    name = to_snake(metric)
    if name not in type(metrics).model_fields:
        return None
    return getattr(metrics, name)


def check_condition(deal: Deal, condition: CriteriaCondition) -> bool:
    value = get_metric_value(deal, condition.metric)
    if value is None:
        return False

    if condition.operator is CriteriaOperatorEnum.GTE:
        return value >= condition.value
    if condition.operator is CriteriaOperatorEnum.LTE:
        return value <= condition.value
    if condition.operator is CriteriaOperatorEnum.EQ:
        return abs(value - condition.value) < EQ_TOLERANCE
    return False


def deal_matches_criteria(deal: Deal, criteria: InvestmentCriteria) -> bool:
    if criteria.deal_type != "any" and criteria.deal_type != deal.deal_type:
        return False
    return all(check_condition(deal, condition) for condition in criteria.conditions)


def get_matching_criteria(
    deal: Deal, all_criteria: List[InvestmentCriteria]
) -> List[InvestmentCriteria]:
    """Active criteria the deal satisfies."""
    return [c for c in all_criteria if c.is_active and deal_matches_criteria(deal, c)]
