# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Sensitivity Analysis - single-variable sweeps

Varies one deal input across a range centered on its current value and
records the effect on the deal type's headline metrics. Every numeric input of
a deal record is sweepable. The registry per deal type is built once from the
record's fields: each entry pairs a stable dotted key
(``financing.interest_rate``) with a getter and setter, so no string paths are
walked at runtime.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional, Type, Union

import pandas as pd
from pydantic import Field
from pydantic.alias_generators import to_snake

from ..core.primitives import AnalysisSettings, DealTypeEnum, Model, ValueFormatEnum, resolve_settings
from ..deal import BusinessDeal, Deal, HybridDeal, RealEstateDeal, deal_price
from ..debt.financing import loan_amount_for_price
from .api import calc_data_metrics
from .results import AnyMetrics

logger = logging.getLogger(__name__)

DealData = Union[RealEstateDeal, BusinessDeal, HybridDeal]


class SensitivityVariable(Model):
    """
    A sweepable deal input.

    Attributes:
        key: Stable dotted identifier, e.g. ``vacancy_rate`` or ``financing.interest_rate``
        label: Display name
        format: Display format, which also selects the step size
        allow_negative: Whether swept values may go below zero (growth rates)
        max_value: Highest value a sweep may reach, if any (percent-of-whole inputs)
        getter: Reads the value from a deal data record
        setter: Returns a copy of a record with the value replaced, keeping
            dependent fields (loan amount) consistent
    """

    key: str
    label: str
    format: ValueFormatEnum
    allow_negative: bool = False
    max_value: Optional[float] = None
    getter: Callable[[DealData], float] = Field(exclude=True, repr=False)
    setter: Callable[[DealData, float], DealData] = Field(exclude=True, repr=False)


class OutputMetric(Model):
    key: str
    label: str
    format: ValueFormatEnum


class SensitivityRow(Model):
    input_value: float
    input_label: str
    is_base: bool
    metrics: Dict[str, Optional[float]]


class SensitivityResult(Model):
    """Sweep result: one row per input value, exactly one flagged as the base case."""

    variable: SensitivityVariable
    output_metrics: List[OutputMetric]
    rows: List[SensitivityRow]

    @property
    def base_row(self) -> SensitivityRow:
        return next(row for row in self.rows if row.is_base)

    def to_frame(self) -> pd.DataFrame:
        """Rows as a DataFrame indexed by input value, one column per output metric label."""
        labels = {metric.key: metric.label for metric in self.output_metrics}
        df = pd.DataFrame(
            [
                {
                    self.variable.label: row.input_label,
                    "Base": row.is_base,
                    **{labels[key]: value for key, value in row.metrics.items()},
                }
                for row in self.rows
            ],
            index=pd.Index([row.input_value for row in self.rows], name=self.variable.key),
        )
        return df


# --- Registry construction ---

_PERCENT = ValueFormatEnum.PERCENT
_CURRENCY = ValueFormatEnum.CURRENCY
_NUMBER = ValueFormatEnum.NUMBER

_FINANCING_FIELDS = (
    "interest_rate",
    "down_payment",
    "loan_amount",
    "loan_term_years",
    "amortization_years",
)
_PRICE_FIELDS = {"purchase_price", "asking_price"}
_TERM_FIELDS = {"loan_term_years", "amortization_years"}
# percent of a whole, swept no higher than 100
_BOUNDED_PERCENT_FIELDS = {"vacancy_rate", "property_management", "down_payment"}

_LABELS: Dict[str, str] = {
    "gross_rental_income": "Gross Rent",
    "other_property_income": "Other Income",
    "other_property_expenses": "Other Expenses",
    "property_management": "Management Fee",
    "cost_of_goods": "Cost of Goods",
    "other_add_backs": "Other Add-Backs",
    "annual_revenue": "Revenue",
    "annual_rent_growth": "Rent Growth",
    "annual_revenue_growth": "Revenue Growth",
    "annual_expense_growth": "Expense Growth",
    "annual_appreciation": "Appreciation",
    "interest": "Interest Add-Back",
    "taxes": "Tax Add-Back",
    "loan_term_years": "Loan Term",
    "amortization_years": "Amortization Period",
}

# Headline inputs listed first; every other numeric field follows in declaration order
_LEADING_KEYS: Dict[DealTypeEnum, List[str]] = {
    DealTypeEnum.REAL_ESTATE: [
        "vacancy_rate",
        "financing.interest_rate",
        "purchase_price",
        "gross_rental_income",
        "annual_rent_growth",
        "annual_appreciation",
        "financing.down_payment",
    ],
    DealTypeEnum.BUSINESS: [
        "annual_revenue",
        "financing.interest_rate",
        "asking_price",
        "operating_expenses",
        "annual_revenue_growth",
        "cost_of_goods",
        "financing.down_payment",
    ],
    DealTypeEnum.HYBRID: [
        "purchase_price",
        "financing.interest_rate",
        "annual_revenue",
        "gross_rental_income",
        "vacancy_rate",
        "annual_revenue_growth",
        "financing.down_payment",
    ],
}


def _is_growth(name: str) -> bool:
    return name.endswith("_growth") or name == "annual_appreciation"


def _format_for(name: str) -> ValueFormatEnum:
    if name in _TERM_FIELDS:
        return _NUMBER
    if _is_growth(name) or name in _BOUNDED_PERCENT_FIELDS or name == "interest_rate":
        return _PERCENT
    return _CURRENCY


def _label_for(name: str) -> str:
    return _LABELS.get(name, name.replace("_", " ").title())


def _variable(key: str, name: str, getter, setter) -> SensitivityVariable:
    return SensitivityVariable(
        key=key,
        label=_label_for(name),
        format=_format_for(name),
        allow_negative=_is_growth(name),
        max_value=100.0 if name in _BOUNDED_PERCENT_FIELDS else None,
        getter=getter,
        setter=setter,
    )


def _field(name: str) -> SensitivityVariable:
    return _variable(
        name,
        name,
        getter=lambda data: getattr(data, name),
        setter=lambda data, value: data.model_copy(update={name: value}),
    )


def _financing_field(name: str) -> SensitivityVariable:
    def setter(data: DealData, value: float) -> DealData:
        if name in _TERM_FIELDS:
            value = int(round(value))
        financing = data.financing.model_copy(update={name: value})
        return data.model_copy(update={"financing": financing})

    return _variable(
        f"financing.{name}", name, getter=lambda data: getattr(data.financing, name), setter=setter
    )


def _price_field(name: str) -> SensitivityVariable:
    """Price input; the loan is resized to keep the down-payment percent."""

    def setter(data: DealData, value: float) -> DealData:
        loan_amount = loan_amount_for_price(value, data.financing.down_payment)
        financing = data.financing.model_copy(update={"loan_amount": loan_amount})
        return data.model_copy(update={name: value, "financing": financing})

    return _variable(name, name, getter=lambda data: getattr(data, name), setter=setter)


def _down_payment_field() -> SensitivityVariable:
    """Down payment percent; the loan is resized against the current price."""

    def setter(data: DealData, value: float) -> DealData:
        loan_amount = loan_amount_for_price(deal_price(data), value)
        financing = data.financing.model_copy(
            update={"down_payment": value, "loan_amount": loan_amount}
        )
        return data.model_copy(update={"financing": financing})

    return _variable(
        "financing.down_payment",
        "down_payment",
        getter=lambda data: data.financing.down_payment,
        setter=setter,
    )


def build_variables(record: Type[DealData], deal_type: DealTypeEnum) -> List[SensitivityVariable]:
    """
    Registry of sweepable inputs for a deal record class.

    Every numeric field of the record and of its financing terms is included.
    Price fields and the down payment get setters that keep the loan amount
    consistent; all other fields are replaced as-is.
    """
    variables: Dict[str, SensitivityVariable] = {}
    for name, info in record.model_fields.items():
        if info.annotation not in (float, int):
            continue
        variables[name] = _price_field(name) if name in _PRICE_FIELDS else _field(name)

    for name in _FINANCING_FIELDS:
        key = f"financing.{name}"
        variables[key] = _down_payment_field() if name == "down_payment" else _financing_field(name)

    leading = _LEADING_KEYS[deal_type]
    ordered = [variables[key] for key in leading]
    ordered.extend(variable for key, variable in variables.items() if key not in leading)
    return ordered


_VARIABLES: Dict[DealTypeEnum, List[SensitivityVariable]] = {
    DealTypeEnum.REAL_ESTATE: build_variables(RealEstateDeal, DealTypeEnum.REAL_ESTATE),
    DealTypeEnum.BUSINESS: build_variables(BusinessDeal, DealTypeEnum.BUSINESS),
    DealTypeEnum.HYBRID: build_variables(HybridDeal, DealTypeEnum.HYBRID),
}


# --- Output metrics per deal type ---

_RATIO = ValueFormatEnum.RATIO

_OUTPUTS: Dict[DealTypeEnum, List[tuple]] = {
    DealTypeEnum.REAL_ESTATE: [
        ("capRate", "Cap Rate", _PERCENT, lambda m: m.cap_rate),
        ("cashOnCash", "Cash-on-Cash", _PERCENT, lambda m: m.cash_on_cash_return),
        ("dscr", "DSCR", _RATIO, lambda m: m.dscr),
        ("noi", "NOI", _CURRENCY, lambda m: m.noi),
        ("cashFlow", "Cash Flow", _CURRENCY, lambda m: m.annual_cash_flow),
        ("irr", "IRR", _PERCENT, lambda m: m.irr),
    ],
    DealTypeEnum.HYBRID: [
        ("capRate", "Cap Rate", _PERCENT, lambda m: m.cap_rate),
        ("cashOnCash", "Cash-on-Cash", _PERCENT, lambda m: m.cash_on_cash_return),
        ("dscr", "DSCR", _RATIO, lambda m: m.dscr),
        ("totalNoi", "Total NOI", _CURRENCY, lambda m: m.total_noi),
        ("cashFlow", "Cash Flow", _CURRENCY, lambda m: m.annual_cash_flow),
        ("sdeMultiple", "SDE Multiple", _RATIO, lambda m: m.sde_multiple),
    ],
    DealTypeEnum.BUSINESS: [
        ("sdeMultiple", "SDE Multiple", _RATIO, lambda m: m.sde_multiple),
        ("roi", "ROI", _PERCENT, lambda m: m.roi),
        ("cashFlow", "Cash Flow", _CURRENCY, lambda m: m.annual_cash_flow),
        ("sde", "SDE", _CURRENCY, lambda m: m.sde),
        ("breakEven", "Break-Even", _CURRENCY, lambda m: m.break_even_revenue),
        ("revMultiple", "Rev Multiple", _RATIO, lambda m: m.revenue_multiple),
    ],
}


def get_variables_for_deal_type(deal_type: DealTypeEnum) -> List[SensitivityVariable]:
    """Catalog of sweepable inputs for a deal type."""
    return list(_VARIABLES[DealTypeEnum(deal_type)])


def get_output_metrics(deal_type: DealTypeEnum) -> List[OutputMetric]:
    """Metrics recorded for each sweep row of a deal type."""
    return [
        OutputMetric(key=key, label=label, format=fmt)
        for key, label, fmt, _ in _OUTPUTS[DealTypeEnum(deal_type)]
    ]


def normalize_field_key(field_key: str) -> str:
    """Accept stored camelCase paths (``financing.interestRate``) as well as snake_case."""
    return ".".join(to_snake(part) for part in field_key.split("."))


def get_variable(deal_type: DealTypeEnum, field_key: str) -> SensitivityVariable:
    """
    Look up a sweepable input by key.

    Raises:
        ValueError: If the key is not a sweepable field for the deal type
    """
    deal_type = DealTypeEnum(deal_type)
    key = normalize_field_key(field_key)
    for variable in _VARIABLES[deal_type]:
        if variable.key == key:
            return variable

    available = ", ".join(v.key for v in _VARIABLES[deal_type])
    raise ValueError(
        f"Invalid sensitivity field '{field_key}' for {deal_type.value} deals. "
        f"Available fields: {available}"
    )


def step_size(base: float, fmt: ValueFormatEnum) -> float:
    """
    Sweep step for a value of the given format.

    Percent inputs step by whole points (2 once the base reaches 10); currency
    inputs step by ~5% of the base rounded to the nearest $1,000, never less
    than $1,000; plain numbers step by ~10% of the base.
    """
    if fmt is ValueFormatEnum.PERCENT:
        return 2.0 if base >= 10 else 1.0
    if fmt is ValueFormatEnum.CURRENCY:
        return float(max(1000, round(base * 0.05 / 1000) * 1000))
    return float(max(1, round(base * 0.1)))


def generate_steps(base: float, variable: SensitivityVariable, steps: int = 4) -> List[float]:
    """
    Values centered on ``base``, ``steps`` on each side.

    Negative values are dropped unless the variable allows them, as are values
    above the variable's ``max_value``; the base value itself is always kept.

    Raises:
        ValueError: If ``steps`` is negative
    """
    if steps < 0:
        raise ValueError(f"Sensitivity steps must be zero or more, got {steps}")

    size = step_size(base, variable.format)
    values: List[float] = []
    for i in range(-steps, steps + 1):
        value = base + i * size
        if i != 0:
            if value < 0 and not variable.allow_negative:
                continue
            if variable.max_value is not None and value > variable.max_value:
                continue
        values.append(value)
    return values


def format_input_value(value: float, fmt: ValueFormatEnum) -> str:
    if fmt is ValueFormatEnum.PERCENT:
        return f"{value:.1f}%"
    if fmt is ValueFormatEnum.CURRENCY:
        sign = "-" if value < 0 else ""
        return f"{sign}${abs(value):,.0f}"
    return f"{value:,g}"


def _extract(deal_type: DealTypeEnum, metrics: AnyMetrics) -> Dict[str, Optional[float]]:
    return {key: extract(metrics) for key, _, _, extract in _OUTPUTS[deal_type]}


def run_sensitivity(
    deal: Deal,
    field_key: str,
    steps: Optional[int] = None,
    settings: Optional[AnalysisSettings] = None,
) -> SensitivityResult:
    """
    Sweep one input of a deal and recompute its headline metrics per value.

    Each value is applied to a copy of the deal data through the variable's
    setter and run through the regular metrics pipeline. The base row uses
    the deal data unchanged, so it matches ``calc_metrics(deal)`` exactly.

    Args:
        deal: Deal to analyze
        field_key: Sweepable field, e.g. ``"vacancy_rate"`` or ``"financing.interestRate"``
        steps: Values on each side of the base (default from settings)
        settings: Optional analysis settings

    Returns:
        SensitivityResult with exactly one base row

    Raises:
        ValueError: If ``field_key`` is not sweepable for the deal type, or
            ``steps`` is negative
    """
    settings = resolve_settings(settings)
    steps = steps if steps is not None else settings.sensitivity_steps
    deal_type = deal.deal_type

    variable = get_variable(deal_type, field_key)
    base_value = variable.getter(deal.data)
    values = generate_steps(base_value, variable, steps)
    base_index = next(i for i, value in enumerate(values) if value == base_value)

    rows: List[SensitivityRow] = []
    for i, value in enumerate(values):
        is_base = i == base_index
        data = deal.data if is_base else variable.setter(deal.data, value)
        metrics = calc_data_metrics(deal_type, data, settings)
        rows.append(
            SensitivityRow(
                input_value=value,
                input_label=format_input_value(value, variable.format),
                is_base=is_base,
                metrics=_extract(deal_type, metrics),
            )
        )

    logger.debug(
        f"Sensitivity sweep of {variable.key} over {len(rows)} values "
        f"({values[0]:,.2f} to {values[-1]:,.2f})"
    )
    return SensitivityResult(
        variable=variable, output_metrics=get_output_metrics(deal_type), rows=rows
    )
