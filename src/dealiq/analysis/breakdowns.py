# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Detail schedule totals

Annual totals for a deal's optional detail schedules, rounded to whole
dollars, plus a summary that flags schedule-level risks (high workers' comp
rates, assets past their useful life, leases expiring or already expired).
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Dict, List, Optional

from pydantic import Field

from ..core.primitives import AssetOwnershipEnum, DepreciationMethodEnum, Model, WageTypeEnum
from ..deal.breakdowns import (
    Asset,
    DealBreakdowns,
    Employee,
    InterestItem,
    LeaseItem,
    PayrollBreakdown,
    UtilityItem,
)

logger = logging.getLogger(__name__)

# Recovery period per MACRS class, depreciated straight-line
MACRS_LIVES: Dict[DepreciationMethodEnum, int] = {
    DepreciationMethodEnum.MACRS_5: 5,
    DepreciationMethodEnum.MACRS_7: 7,
    DepreciationMethodEnum.MACRS_15: 15,
    DepreciationMethodEnum.MACRS_39: 39,
}

HIGH_WC_RATE = 5.0
DEFAULT_USEFUL_LIFE = 7
LEASE_EXPIRY_WINDOW_MONTHS = 18
DAYS_PER_MONTH = 30


class BreakdownSummary(Model):
    """Roll-up of every detail schedule attached to a deal."""

    headcount: int = 0
    base_wages: float = 0.0
    payroll_total: float = 0.0
    owned_assets: int = 0
    leased_assets: int = 0
    depreciable_basis: float = 0.0
    annual_depreciation: float = 0.0
    annual_interest: float = 0.0
    outstanding_debt: float = 0.0
    annual_lease_cost: float = 0.0
    triple_net_leases: int = 0
    annual_utilities: float = 0.0
    risk_flags: List[str] = Field(default_factory=list)


# --- Payroll ---


def calc_annual_wage(employee: Employee) -> float:
    """Annual base wages for every person in the role."""
    if employee.wage_type is WageTypeEnum.HOURLY:
        return (
            employee.wage_rate
            * employee.hours_per_week
            * employee.weeks_per_year
            * employee.count
        )
    return employee.wage_rate * employee.count


def calc_employer_tax_rate(payroll: PayrollBreakdown) -> float:
    """Combined FICA, FUTA, SUI and workers' comp rate as a fraction."""
    return (payroll.fica_rate + payroll.futa_rate + payroll.sui_rate + payroll.wc_rate) / 100


def calc_payroll_total(payroll: PayrollBreakdown) -> float:
    """Base wages grossed up by employer taxes, rounded to the dollar."""
    wages = sum(calc_annual_wage(employee) for employee in payroll.employees)
    return float(round(wages * (1 + calc_employer_tax_rate(payroll))))


# --- Assets ---


def depreciation_life(asset: Asset) -> int:
    if asset.depreciation_method is DepreciationMethodEnum.STRAIGHT_LINE:
        return asset.useful_life_years
    return MACRS_LIVES[asset.depreciation_method]


def calc_asset_depreciation(asset: Asset) -> float:
    """
    Annual depreciation of one asset, rounded to the dollar.

    Leased assets, assets with no basis above salvage, and straight-line
    assets without a useful life depreciate nothing.
    """
    if asset.ownership is AssetOwnershipEnum.LEASED:
        return 0.0
    basis = asset.cost_basis - asset.salvage_value
    life = depreciation_life(asset)
    if basis <= 0 or life <= 0:
        return 0.0
    return float(round(basis / life))


def calc_total_depreciation(assets: List[Asset]) -> float:
    return sum(calc_asset_depreciation(asset) for asset in assets)


# --- Debt, leases, utilities ---


def calc_total_interest(items: List[InterestItem]) -> float:
    return sum(item.annual_interest_paid for item in items)


def calc_annual_lease_cost(lease: LeaseItem) -> float:
    """Twelve months of base rent plus annual CAM charges."""
    return lease.monthly_rent * 12 + lease.cam_charges


def calc_total_lease_cost(items: List[LeaseItem]) -> float:
    return sum(calc_annual_lease_cost(lease) for lease in items)


def calc_monthly_utilities(item: UtilityItem) -> float:
    return item.electric + item.gas + item.water + item.trash + item.internet + item.other


def calc_total_utilities(items: List[UtilityItem]) -> float:
    """Annual utility cost across all locations."""
    return sum(calc_monthly_utilities(item) * 12 for item in items)


# --- Summary ---


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}{'s' if count != 1 else ''}"


def _months_until(end: date, as_of: date) -> float:
    return (end - as_of).days / DAYS_PER_MONTH


def summarize_breakdowns(
    breakdowns: Optional[DealBreakdowns], as_of: Optional[date] = None
) -> BreakdownSummary:
    """
    Totals and risk flags for a deal's detail schedules.

    Args:
        breakdowns: The deal's schedules; ``None`` gives an empty summary
        as_of: Date that asset ages and lease expiries are measured from
            (default: today)

    Returns:
        BreakdownSummary
    """
    if breakdowns is None:
        return BreakdownSummary()

    as_of = as_of or date.today()
    flags: List[str] = []

    payroll = breakdowns.payroll
    headcount, base_wages, payroll_total = 0, 0.0, 0.0
    if payroll is not None and payroll.employees:
        headcount = sum(employee.count for employee in payroll.employees)
        base_wages = sum(calc_annual_wage(employee) for employee in payroll.employees)
        payroll_total = calc_payroll_total(payroll)
        if payroll.wc_rate > HIGH_WC_RATE:
            flags.append(
                f"Workers' comp rate of {payroll.wc_rate:.1f}% is high; "
                "verify classification codes"
            )

    owned = [a for a in breakdowns.assets if a.ownership is AssetOwnershipEnum.OWNED]
    leased = [a for a in breakdowns.assets if a.ownership is AssetOwnershipEnum.LEASED]
    past_life = [
        a
        for a in owned
        if a.year_acquired is not None
        and as_of.year - a.year_acquired > (a.useful_life_years or DEFAULT_USEFUL_LIFE)
    ]
    if past_life:
        flags.append(
            f"{_plural(len(past_life), 'asset')} past useful life; "
            "potential replacement capex needed"
        )

    expired = [
        lease
        for lease in breakdowns.leases
        if lease.lease_end_date is not None and lease.lease_end_date < as_of
    ]
    expiring = [
        lease
        for lease in breakdowns.leases
        if lease.lease_end_date is not None
        and 0 < _months_until(lease.lease_end_date, as_of) <= LEASE_EXPIRY_WINDOW_MONTHS
    ]
    if expired:
        flags.append(
            f"{_plural(len(expired), 'lease')} already expired; immediate renegotiation risk"
        )
    if expiring:
        flags.append(
            f"{_plural(len(expiring), 'lease')} expiring within "
            f"{LEASE_EXPIRY_WINDOW_MONTHS} months; renewal terms could change costs"
        )

    summary = BreakdownSummary(
        headcount=headcount,
        base_wages=base_wages,
        payroll_total=payroll_total,
        owned_assets=len(owned),
        leased_assets=len(leased),
        depreciable_basis=sum(a.cost_basis for a in owned),
        annual_depreciation=calc_total_depreciation(owned),
        annual_interest=calc_total_interest(breakdowns.interest_items),
        outstanding_debt=sum(item.current_balance for item in breakdowns.interest_items),
        annual_lease_cost=calc_total_lease_cost(breakdowns.leases),
        triple_net_leases=sum(1 for lease in breakdowns.leases if lease.triple_net),
        annual_utilities=calc_total_utilities(breakdowns.utilities),
        risk_flags=flags,
    )
    logger.debug(f"Detail schedules summarized with {len(flags)} risk flags")
    return summary
