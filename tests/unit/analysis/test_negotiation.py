# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Tests for the negotiation analysis.

The real estate fixture (NOI $15,924 on a $200k price) sits just under a
1.25x DSCR, which drives most of the hand-checked expectations below.
"""

import math

import pytest

from dealiq.analysis import calc_data_metrics, calc_metrics
from dealiq.analysis.negotiation import (
    MIN_DSCR,
    PRICE_STEPS,
    build_negotiation_analysis,
    build_negotiation_points,
    build_price_sensitivity,
    calc_max_supportable_price,
    calc_price_gap,
    calc_valuation_range,
    cap_rate_range,
    debt_service_income,
    max_loan_for_payment,
    multiple_range,
)
from dealiq.core.primitives import DealTypeEnum, ImpactEnum, NegotiationCategoryEnum
from dealiq.debt import FinancingTerms
from dealiq.debt.financing import calc_annual_debt_service

RE_NOI = 15_924


def metrics_for(data):
    return calc_data_metrics(data.type, data)


class TestMarketBands:
    @pytest.mark.parametrize(
        "price, low, high",
        [(400_000, 6, 10), (1_000_000, 5, 8), (3_000_000, 4, 7)],
    )
    def test_cap_rate_tiers(self, price, low, high):
        band = cap_rate_range(price)
        assert (band.low, band.high) == (low, high)

    def test_standard_multiple(self):
        band = multiple_range(1_000_000, 250_000)
        assert (band.low, band.high) == (2.0, 3.5)
        assert band.reason == "standard range"

    def test_thin_margin_micro_business(self):
        band = multiple_range(200_000, 20_000)

        assert (band.low, band.high) == (1.0, 2.0)
        assert "thin margins" in band.reason
        assert "micro-business" in band.reason

    def test_large_business(self):
        band = multiple_range(3_000_000, 600_000)
        assert (band.low, band.high) == (2.5, 4.0)

    def test_property_backing_premium(self):
        plain = multiple_range(1_000_000, 250_000)
        backed = multiple_range(1_000_000, 250_000, has_property=True)

        assert backed.low == plain.low + 0.5
        assert "real property backing" in backed.reason


class TestValuation:
    def test_cap_rate_method(self, re_data):
        valuation = calc_valuation_range(DealTypeEnum.REAL_ESTATE, re_data, metrics_for(re_data))

        assert valuation.method == "Cap Rate"
        assert valuation.low == pytest.approx(RE_NOI / 0.10)
        assert valuation.high == pytest.approx(RE_NOI / 0.06)
        assert valuation.details[0] == "NOI: $15,924/yr"

    def test_sde_multiple_method(self, business_deal):
        metrics = calc_metrics(business_deal)
        valuation = calc_valuation_range("business", business_deal.data, metrics)

        # 58% SDE margin earns the premium band
        assert valuation.method == "SDE Multiple"
        assert valuation.low == pytest.approx(350_000 * 2.5)
        assert valuation.high == pytest.approx(350_000 * 4.0)

    def test_dual_method(self, hybrid_deal):
        metrics = calc_metrics(hybrid_deal)
        valuation = calc_valuation_range(DealTypeEnum.HYBRID, hybrid_deal.data, metrics)

        business_low = metrics.sde * 3.0
        property_low = metrics.property_noi / 0.10
        assert valuation.method == "Dual (Property + Business)"
        assert valuation.low == pytest.approx(business_low + property_low)
        assert len(valuation.details) == 3


class TestDebtCapacity:
    def test_loan_round_trip(self, re_financing):
        annual_debt = calc_annual_debt_service(re_financing)
        assert max_loan_for_payment(annual_debt, re_financing) == pytest.approx(160_000)

    def test_zero_rate_loan(self):
        financing = FinancingTerms(interest_rate=0, loan_term_years=10, amortization_years=10)
        assert max_loan_for_payment(12_000, financing) == pytest.approx(120_000)

    def test_no_payment_no_loan(self, re_financing):
        assert max_loan_for_payment(-500, re_financing) == 0.0

    def test_business_income_excludes_owner_salary(self, business_deal):
        metrics = calc_metrics(business_deal)
        income = debt_service_income(DealTypeEnum.BUSINESS, business_deal.data, metrics)
        assert income == pytest.approx(350_000 - 80_000)

    def test_price_below_asking_when_coverage_short(self, re_deal):
        constraint = calc_max_supportable_price(
            DealTypeEnum.REAL_ESTATE, re_deal.data, calc_metrics(re_deal)
        )

        assert constraint.dscr < MIN_DSCR
        assert constraint.max_supportable_price < 200_000
        assert constraint.noi == pytest.approx(RE_NOI)
        assert "1.25x DSCR" in constraint.explanation

    def test_supported_price_carries_min_dscr(self, re_deal):
        constraint = calc_max_supportable_price(
            DealTypeEnum.REAL_ESTATE, re_deal.data, calc_metrics(re_deal)
        )
        price = constraint.max_supportable_price
        financing = re_deal.data.financing.model_copy(update={"loan_amount": price * 0.8})

        assert RE_NOI / calc_annual_debt_service(financing) == pytest.approx(MIN_DSCR)

    def test_business_coverage_uses_debt_service(self, business_deal):
        constraint = calc_max_supportable_price(
            DealTypeEnum.BUSINESS, business_deal.data, calc_metrics(business_deal)
        )
        annual_debt = calc_annual_debt_service(business_deal.data.financing)
        assert constraint.dscr == pytest.approx(270_000 / annual_debt)

    def test_no_income_no_supportable_price(self, re_deal):
        data = re_deal.data.model_copy(update={"gross_rental_income": 0, "other_income": 0})
        metrics = calc_metrics(re_deal.with_data(data))
        constraint = calc_max_supportable_price(DealTypeEnum.REAL_ESTATE, data, metrics)

        assert constraint.max_supportable_price == 0.0
        assert "no price is supportable" in constraint.explanation

    def test_all_cash_deal(self, re_deal):
        financing = re_deal.data.financing.model_copy(
            update={"down_payment": 100, "loan_amount": 0}
        )
        data = re_deal.data.model_copy(update={"financing": financing})
        constraint = calc_max_supportable_price(DealTypeEnum.REAL_ESTATE, data, metrics_for(data))

        assert constraint.dscr == math.inf
        assert constraint.max_supportable_price > 0


class TestPriceGap:
    def test_discount_to_fair_value(self, re_deal):
        metrics = calc_metrics(re_deal)
        valuation = calc_valuation_range(DealTypeEnum.REAL_ESTATE, re_deal.data, metrics)
        constraint = calc_max_supportable_price(DealTypeEnum.REAL_ESTATE, re_deal.data, metrics)
        gap = calc_price_gap(200_000, valuation, constraint)

        fair_mid = (RE_NOI / 0.10 + RE_NOI / 0.06) / 2
        assert gap.fair_value_mid == pytest.approx(fair_mid)
        assert gap.overpay_amount == pytest.approx(200_000 - fair_mid)
        assert gap.overpay_percent == -5.8
        assert gap.suggested_offer_low == pytest.approx(valuation.low)
        assert gap.suggested_offer_high == pytest.approx((valuation.low + fair_mid) / 2)
        assert gap.ceiling_price == pytest.approx(constraint.max_supportable_price)


class TestNegotiationPoints:
    def test_real_estate_points(self, re_deal):
        points = build_negotiation_points(
            DealTypeEnum.REAL_ESTATE, re_deal.data, calc_metrics(re_deal)
        )
        titles = [p.title for p in points]

        assert titles == ["Insufficient Debt Service Coverage", "Below-Target Cash-on-Cash Return"]
        assert points[0].impact is ImpactEnum.HIGH
        assert points[1].impact is ImpactEnum.MEDIUM

    def test_optimistic_vacancy(self, re_deal):
        data = re_deal.data.model_copy(update={"vacancy_rate": 2})
        points = build_negotiation_points(DealTypeEnum.REAL_ESTATE, data, metrics_for(data))
        vacancy = next(p for p in points if p.title == "Optimistic Vacancy Assumption")

        assert vacancy.category is NegotiationCategoryEnum.RISK
        assert "$756/yr" in vacancy.detail

    def test_healthy_business_has_no_points(self, business_deal):
        points = build_negotiation_points(
            DealTypeEnum.BUSINESS, business_deal.data, calc_metrics(business_deal)
        )
        assert points == []

    def test_overpriced_business(self, business_deal):
        data = business_deal.data.model_copy(update={"asking_price": 2_000_000})
        points = build_negotiation_points(DealTypeEnum.BUSINESS, data, metrics_for(data))

        assert points[0].title == "Asking Multiple Above Market Range"
        assert points[0].category is NegotiationCategoryEnum.VALUATION

    def test_high_rate_market_point(self, hybrid_deal):
        financing = hybrid_deal.data.financing.model_copy(update={"interest_rate": 9})
        data = hybrid_deal.data.model_copy(update={"financing": financing})
        points = build_negotiation_points(DealTypeEnum.HYBRID, data, metrics_for(data))

        assert points[-1].title == "Elevated Interest Rate Environment"
        assert points[-1].category is NegotiationCategoryEnum.MARKET


class TestPriceSensitivity:
    def test_prices_around_asking(self, re_deal):
        metrics = calc_metrics(re_deal)
        rows = build_price_sensitivity(DealTypeEnum.REAL_ESTATE, re_deal.data, metrics)

        assert [row.price for row in rows] == [
            160_000, 170_000, 180_000, 190_000, 200_000, 210_000, 220_000
        ]
        assert len(rows) == len(PRICE_STEPS)

    def test_asking_row_matches_metrics(self, re_deal):
        metrics = calc_metrics(re_deal)
        rows = build_price_sensitivity(DealTypeEnum.REAL_ESTATE, re_deal.data, metrics)
        asking = rows[PRICE_STEPS.index(0)]

        assert asking.cash_flow == pytest.approx(metrics.annual_cash_flow)
        assert asking.dscr == pytest.approx(metrics.dscr)
        assert asking.return_metric == pytest.approx(metrics.cash_on_cash_return)
        assert asking.return_label == "Cash-on-Cash"

    def test_lower_price_better_cash_flow(self, business_deal):
        rows = build_price_sensitivity(
            DealTypeEnum.BUSINESS, business_deal.data, calc_metrics(business_deal)
        )
        cash_flow = [row.cash_flow for row in rows]

        assert all(later < earlier for earlier, later in zip(cash_flow, cash_flow[1:]))
        assert rows[0].return_label == "ROI"


class TestNegotiationAnalysis:
    def test_real_estate(self, re_deal):
        analysis = build_negotiation_analysis(re_deal)

        assert analysis.deal_name == "Duplex on Main"
        assert analysis.deal_type_label == "Real Estate"
        assert analysis.asking_price == 200_000
        assert analysis.price_gap.asking_price == 200_000
        assert len(analysis.sensitivity_at_price) == 7

    def test_stress_test_worse(self, hybrid_deal):
        stress = build_negotiation_analysis(hybrid_deal).stress_test

        assert stress.stressed_cash_flow < stress.base_cash_flow
        assert stress.stressed_score <= stress.base_score

    def test_business_asking_price(self, business_deal):
        analysis = build_negotiation_analysis(business_deal)

        assert analysis.deal_type_label == "Business Acquisition"
        assert analysis.asking_price == 500_000
        assert analysis.valuation.method == "SDE Multiple"

    def test_custom_min_dscr(self, re_deal):
        strict = build_negotiation_analysis(re_deal, min_dscr=1.5).dscr_constraint
        loose = build_negotiation_analysis(re_deal).dscr_constraint

        assert strict.min_dscr == 1.5
        assert strict.max_supportable_price < loose.max_supportable_price

    def test_serializes(self, re_deal):
        dumped = build_negotiation_analysis(re_deal).model_dump(by_alias=True)

        assert "priceGap" in dumped
        assert dumped["negotiationPoints"][0]["category"] == "financial"
