# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
dealiq Core Primitives

Building blocks shared by every calculation module: the immutable model base,
enums, constrained types and analysis settings.
"""

from .enums import (
    AssetOwnershipEnum,
    CriteriaOperatorEnum,
    DealTypeEnum,
    DepreciationMethodEnum,
    ImpactEnum,
    LoanTypeEnum,
    NegotiationCategoryEnum,
    ValueFormatEnum,
    WageTypeEnum,
)
from .model import Model
from .settings import DEFAULT_SETTINGS, AnalysisSettings, resolve_settings
from .types import Percentage, PositiveFloat, PositiveInt

__all__ = [
    # Core models
    "Model",
    # Settings
    "AnalysisSettings",
    "DEFAULT_SETTINGS",
    "resolve_settings",
    # Enums
    "AssetOwnershipEnum",
    "CriteriaOperatorEnum",
    "DealTypeEnum",
    "DepreciationMethodEnum",
    "ImpactEnum",
    "LoanTypeEnum",
    "NegotiationCategoryEnum",
    "ValueFormatEnum",
    "WageTypeEnum",
    # Types
    "Percentage",
    "PositiveFloat",
    "PositiveInt",
]
