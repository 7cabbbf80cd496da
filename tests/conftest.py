# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Shared fixtures for dealiq tests.

One representative deal per deal type, plus ``Deal`` wrappers. Fixture values
are chosen so the headline numbers can be checked by hand.
"""

from __future__ import annotations

import pytest

from dealiq.core.primitives import LoanTypeEnum
from dealiq.deal import BusinessDeal, Deal, HybridDeal, RealEstateDeal
from dealiq.debt import FinancingTerms


@pytest.fixture
def re_financing() -> FinancingTerms:
    """$160k conventional loan at 7% over 30 years."""
    return FinancingTerms(
        loan_type=LoanTypeEnum.CONVENTIONAL,
        loan_amount=160_000,
        down_payment=20,
        interest_rate=7,
        loan_term_years=30,
        amortization_years=30,
    )


@pytest.fixture
def re_data(re_financing: FinancingTerms) -> RealEstateDeal:
    """Small rental: $200k price, $25.2k gross income, 5% vacancy."""
    return RealEstateDeal(
        purchase_price=200_000,
        closing_costs=5_000,
        rehab_costs=10_000,
        gross_rental_income=24_000,
        other_income=1_200,
        vacancy_rate=5,
        property_tax=2_400,
        insurance=1_200,
        maintenance=1_500,
        property_management=8,
        utilities=600,
        other_expenses=300,
        financing=re_financing,
        annual_rent_growth=3,
        annual_expense_growth=2,
        annual_appreciation=3,
    )


@pytest.fixture
def business_data() -> BusinessDeal:
    """SBA-financed business: $500k asking, $600k revenue."""
    return BusinessDeal(
        asking_price=500_000,
        closing_costs=15_000,
        annual_revenue=600_000,
        cost_of_goods=180_000,
        operating_expenses=200_000,
        owner_salary=80_000,
        depreciation=10_000,
        amortization=5_000,
        interest=8_000,
        taxes=15_000,
        other_add_backs=12_000,
        financing=FinancingTerms(
            loan_type=LoanTypeEnum.SBA_7A,
            loan_amount=350_000,
            down_payment=10,
            interest_rate=6.5,
            loan_term_years=10,
            amortization_years=10,
        ),
        annual_revenue_growth=5,
        annual_expense_growth=3,
    )


@pytest.fixture
def hybrid_data() -> HybridDeal:
    """Building plus the business operating in it, $500k split 300k/200k."""
    return HybridDeal(
        purchase_price=500_000,
        property_value=300_000,
        business_value=200_000,
        closing_costs=12_000,
        rehab_costs=15_000,
        gross_rental_income=18_000,
        other_property_income=2_000,
        vacancy_rate=5,
        property_tax=3_600,
        insurance=1_800,
        maintenance=2_000,
        property_management=8,
        utilities=1_200,
        other_property_expenses=500,
        annual_revenue=400_000,
        cost_of_goods=120_000,
        business_operating_expenses=150_000,
        owner_salary=60_000,
        depreciation=8_000,
        amortization=4_000,
        interest=6_000,
        taxes=10_000,
        other_add_backs=5_000,
        financing=FinancingTerms(
            loan_type=LoanTypeEnum.SBA_504,
            loan_amount=400_000,
            down_payment=20,
            interest_rate=6,
            loan_term_years=25,
            amortization_years=25,
        ),
        annual_revenue_growth=4,
        annual_rent_growth=3,
        annual_expense_growth=2,
        annual_appreciation=3,
    )


@pytest.fixture
def re_deal(re_data: RealEstateDeal) -> Deal:
    return Deal.from_data(re_data, id="re-1", name="Duplex on Main")


@pytest.fixture
def business_deal(business_data: BusinessDeal) -> Deal:
    return Deal.from_data(business_data, id="biz-1", name="Corner Bakery")


@pytest.fixture
def hybrid_deal(hybrid_data: HybridDeal) -> Deal:
    return Deal.from_data(hybrid_data, id="hyb-1", name="Laundromat and Building")
