# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from typing import Annotated, Any, List, Optional, Union

from pydantic import Field, model_validator

from ..core.primitives import DealTypeEnum, Model
from .breakdowns import DealBreakdowns
from .business import BusinessDeal
from .hybrid import HybridDeal
from .real_estate import RealEstateDeal
from .scenario import Scenario

AnyDealData = Annotated[
    Union[RealEstateDeal, BusinessDeal, HybridDeal],
    Field(discriminator="type"),
]


class Deal(Model):
    """
    A saved deal: metadata around one deal data record.

    ``deal_type`` selects the calculation path and must agree with the
    record's own ``type`` tag. Computed metrics are never stored here; they
    are derived from ``data`` on every call.

    Example:
        >>> deal = Deal.from_data(RealEstateDeal(purchase_price=200_000), name="Duplex")
        >>> deal.deal_type
        <DealTypeEnum.REAL_ESTATE: 'real-estate'>
    """

    id: str = ""
    user_id: Optional[str] = None
    name: str = ""
    deal_type: DealTypeEnum
    data: AnyDealData
    scenarios: List[Scenario] = Field(default_factory=list)
    breakdowns: Optional[DealBreakdowns] = None
    notes: str = ""
    tags: List[str] = Field(default_factory=list)
    is_favorite: bool = False
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @model_validator(mode="after")
    def validate_data_matches_type(self) -> "Deal":
        if self.data.type != self.deal_type.value:
            raise ValueError(
                f"deal_type '{self.deal_type.value}' does not match data type '{self.data.type}'"
            )
        return self

    @classmethod
    def from_data(cls, data: Union[RealEstateDeal, BusinessDeal, HybridDeal], **kwargs: Any) -> "Deal":
        """Wrap a data record, taking ``deal_type`` from its tag."""
        return cls(deal_type=DealTypeEnum(data.type), data=data, **kwargs)

    def with_data(self, data: Union[RealEstateDeal, BusinessDeal, HybridDeal]) -> "Deal":
        """Copy of this deal carrying a different data record of the same type."""
        return self.model_copy(update={"data": data})


def deal_price(data: Union[RealEstateDeal, BusinessDeal, HybridDeal]) -> float:
    """Headline price: asking price for businesses, purchase price otherwise."""
    if isinstance(data, BusinessDeal):
        return data.asking_price
    return data.purchase_price
