# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from enum import Enum


class DealTypeEnum(str, Enum):
    """
    The closed set of deal variants handled by the calculation engine.

    Every calculation entry point dispatches on this value; there is no
    calculator class hierarchy.

    Attributes:
        REAL_ESTATE: Income property acquisition
        BUSINESS: Operating business acquisition (no real estate)
        HYBRID: Property and the business operating inside it, one loan
    """

    REAL_ESTATE = "real-estate"
    BUSINESS = "business"
    HYBRID = "hybrid"


class LoanTypeEnum(str, Enum):
    """Loan programs used to pre-populate financing defaults."""

    CONVENTIONAL = "conventional"
    SBA_7A = "sba-7a"
    SBA_504 = "sba-504"
    FHA = "fha"
    VA = "va"
    HARD_MONEY = "hard-money"
    CUSTOM = "custom"


class ValueFormatEnum(str, Enum):
    """How an input or output value is displayed."""

    PERCENT = "percent"
    CURRENCY = "currency"
    NUMBER = "number"
    RATIO = "ratio"


class CriteriaOperatorEnum(str, Enum):
    """Comparison operators for investment criteria conditions."""

    GTE = "gte"
    LTE = "lte"
    EQ = "eq"


class NegotiationCategoryEnum(str, Enum):
    """Kind of argument a negotiation point makes."""

    RISK = "risk"
    VALUATION = "valuation"
    MARKET = "market"
    FINANCIAL = "financial"


class ImpactEnum(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class WageTypeEnum(str, Enum):
    """How an employee's wage rate is quoted."""

    HOURLY = "hourly"
    SALARY = "salary"


class AssetOwnershipEnum(str, Enum):
    OWNED = "owned"
    LEASED = "leased"


class DepreciationMethodEnum(str, Enum):
    """
    Depreciation schedules for business assets.

    MACRS classes are simplified to straight-line over the class life.
    """

    STRAIGHT_LINE = "straight-line"
    MACRS_5 = "macrs-5"
    MACRS_7 = "macrs-7"
    MACRS_15 = "macrs-15"
    MACRS_39 = "macrs-39"
