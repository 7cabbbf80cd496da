# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from .breakdowns import (
    Asset,
    DealBreakdowns,
    Employee,
    InterestItem,
    LeaseItem,
    PayrollBreakdown,
    UtilityItem,
)
from .business import BusinessDeal
from .deal import AnyDealData, Deal, deal_price
from .hybrid import HybridDeal
from .real_estate import RealEstateDeal
from .scenario import Scenario, apply_scenario

__all__ = [
    "AnyDealData",
    "BusinessDeal",
    "Deal",
    "HybridDeal",
    "RealEstateDeal",
    "Scenario",
    "apply_scenario",
    "deal_price",
    # Detail schedules
    "Asset",
    "DealBreakdowns",
    "Employee",
    "InterestItem",
    "LeaseItem",
    "PayrollBreakdown",
    "UtilityItem",
]
