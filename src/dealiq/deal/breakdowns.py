# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Detail schedules behind a deal's summary figures

Optional line-item backing for numbers a buyer would otherwise type in as
one total: payroll, owned and leased assets, existing debt, leases and
utilities. Totals are derived in ``dealiq.analysis.breakdowns``.
"""

from __future__ import annotations

from datetime import date
from typing import List, Optional

from pydantic import Field

from ..core.primitives import (
    AssetOwnershipEnum,
    DepreciationMethodEnum,
    Model,
    Percentage,
    PositiveFloat,
    PositiveInt,
    WageTypeEnum,
)


class Employee(Model):
    """
    One role on the payroll.

    Attributes:
        count: Number of people in the role
        wage_rate: Hourly rate, or annual salary for salaried roles
        wage_type: Whether ``wage_rate`` is hourly or annual
    """

    id: str = ""
    title: str = ""
    count: PositiveInt = 1
    wage_rate: PositiveFloat = 0.0
    wage_type: WageTypeEnum = WageTypeEnum.HOURLY
    hours_per_week: PositiveFloat = 40.0
    weeks_per_year: PositiveFloat = 52.0


class PayrollBreakdown(Model):
    """Employees plus employer-side payroll tax rates, in percent of wages."""

    employees: List[Employee] = Field(default_factory=list)
    fica_rate: Percentage = 7.65
    futa_rate: Percentage = 0.6
    sui_rate: Percentage = 2.7
    wc_rate: Percentage = 1.5


class Asset(Model):
    id: str = ""
    name: str = ""
    ownership: AssetOwnershipEnum = AssetOwnershipEnum.OWNED
    cost_basis: PositiveFloat = 0.0
    useful_life_years: PositiveInt = 7
    depreciation_method: DepreciationMethodEnum = DepreciationMethodEnum.STRAIGHT_LINE
    year_acquired: Optional[int] = None
    salvage_value: PositiveFloat = 0.0


class InterestItem(Model):
    """An existing debt obligation of the business."""

    id: str = ""
    lender: str = ""
    original_balance: PositiveFloat = 0.0
    current_balance: PositiveFloat = 0.0
    interest_rate: PositiveFloat = 0.0
    annual_interest_paid: PositiveFloat = 0.0
    purpose: str = ""


class LeaseItem(Model):
    """
    A leased location.

    Attributes:
        monthly_rent: Base rent per month
        annual_escalation: Contractual rent increase per year, percent
        triple_net: Tenant pays taxes, insurance and maintenance on top of rent
        cam_charges: Common area maintenance charges per year
    """

    id: str = ""
    location: str = ""
    landlord: str = ""
    monthly_rent: PositiveFloat = 0.0
    lease_start_date: Optional[date] = None
    lease_end_date: Optional[date] = None
    annual_escalation: float = 0.0
    triple_net: bool = False
    cam_charges: PositiveFloat = 0.0
    notes: str = ""


class UtilityItem(Model):
    """Monthly utility costs at one location."""

    id: str = ""
    location: str = ""
    electric: PositiveFloat = 0.0
    gas: PositiveFloat = 0.0
    water: PositiveFloat = 0.0
    trash: PositiveFloat = 0.0
    internet: PositiveFloat = 0.0
    other: PositiveFloat = 0.0


class DealBreakdowns(Model):
    payroll: Optional[PayrollBreakdown] = None
    assets: List[Asset] = Field(default_factory=list)
    interest_items: List[InterestItem] = Field(default_factory=list)
    leases: List[LeaseItem] = Field(default_factory=list)
    utilities: List[UtilityItem] = Field(default_factory=list)
