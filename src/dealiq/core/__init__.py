# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from .calculations import FinancialCalculations
from .primitives import (
    DEFAULT_SETTINGS,
    AnalysisSettings,
    CriteriaOperatorEnum,
    DealTypeEnum,
    LoanTypeEnum,
    Model,
    ValueFormatEnum,
)

__all__ = [
    "AnalysisSettings",
    "CriteriaOperatorEnum",
    "DEFAULT_SETTINGS",
    "DealTypeEnum",
    "FinancialCalculations",
    "LoanTypeEnum",
    "Model",
    "ValueFormatEnum",
]
