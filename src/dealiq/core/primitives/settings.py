# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from typing import Optional

from pydantic import Field

from .model import Model
from .types import Percentage


class AnalysisSettings(Model):
    """
    Configuration for deal calculations.

    Every calculation accepts an optional settings object and falls back to
    these defaults, so results are a pure function of (deal, settings).

    Attributes:
        hold_years: Hold period used by ROI and IRR
        projection_years: Default horizon for cash flow projections
        selling_cost_rate: Broker and closing costs at sale, percent of value
        sensitivity_steps: Default number of sweep steps on each side of base
    """

    hold_years: int = Field(default=5, ge=1, description="Hold period in years for ROI/IRR.")
    projection_years: int = Field(
        default=10, ge=1, description="Default number of projected years."
    )
    selling_cost_rate: Percentage = Field(
        default=6.0, description="Selling costs at exit as a percent of sale value."
    )
    sensitivity_steps: int = Field(
        default=4, ge=1, description="Sweep values generated on each side of the base."
    )


DEFAULT_SETTINGS = AnalysisSettings()


def resolve_settings(settings: Optional[AnalysisSettings]) -> AnalysisSettings:
    """Return the given settings or the package defaults."""
    return settings if settings is not None else DEFAULT_SETTINGS
