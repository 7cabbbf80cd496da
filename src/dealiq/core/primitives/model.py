# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class Model(BaseModel):
    """Base Pydantic model with common configuration.

    Immutable models: every calculation receives a snapshot and returns new
    objects. Attributes are snake_case in Python and camelCase on the wire so
    stored deal records validate unchanged.
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        frozen=True,  # Immutable models; derived values are always recomputed
        extra="forbid",  # Catches typos and missing field definitions immediately
        alias_generator=to_camel,
        populate_by_name=True,
    )
