# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""What-if scenarios: partial overrides layered on a base deal record"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional

from pydantic import Field
from pydantic.alias_generators import to_snake

from ..core.primitives import Model

if TYPE_CHECKING:
    from .deal import AnyDealData


class Scenario(Model):
    """
    A named set of field overrides on top of a deal's data.

    Override keys use the same names as the deal record (snake_case or the
    stored camelCase). ``financing`` may be given as a partial mapping.
    """

    id: str = ""
    name: str
    overrides: Dict[str, Any] = Field(default_factory=dict)
    created_at: Optional[str] = None


def apply_scenario(data: "AnyDealData", scenario: Scenario) -> "AnyDealData":
    """
    Return a new deal record with the scenario's overrides applied.

    The result is re-validated, so overrides must respect the record's types.

    Raises:
        ValueError: If an override names a field the record does not have
    """
    merged = data.model_dump()
    fields = type(data).model_fields

    for raw_key, value in scenario.overrides.items():
        key = to_snake(raw_key)
        if key not in fields or key == "type":
            raise ValueError(
                f"Scenario '{scenario.name}' overrides unknown field '{raw_key}' "
                f"for {data.type} deals"
            )
        if key == "financing" and isinstance(value, dict):
            financing = dict(merged["financing"])
            financing.update({to_snake(k): v for k, v in value.items()})
            merged["financing"] = financing
        else:
            merged[key] = value

    return type(data).model_validate(merged)
