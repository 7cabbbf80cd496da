# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Tests for real estate metrics.

Headline figures are checked against hand calculations for the shared
$200k rental fixture; hold-period returns are cross-checked with an
independent loop over the same assumptions.
"""

import math

import pytest

from dealiq.analysis.real_estate import (
    calc_annual_cash_flow,
    calc_cap_rate,
    calc_cash_on_cash,
    calc_dscr,
    calc_effective_gross_income,
    calc_irr,
    calc_monthly_mortgage,
    calc_noi,
    calc_operating_expenses,
    calc_real_estate_metrics,
    calc_roi,
    calc_total_cash_invested,
    project_cash_flows,
)
from dealiq.core.primitives import AnalysisSettings
from dealiq.deal import RealEstateDeal
from dealiq.debt import FinancingTerms, calc_remaining_balance


class TestIncomeAndExpenses:
    def test_monthly_mortgage(self, re_data):
        assert calc_monthly_mortgage(re_data.financing) == pytest.approx(1064.48, abs=0.01)

    def test_effective_gross_income(self, re_data):
        assert calc_effective_gross_income(re_data) == pytest.approx(23_940)

    def test_full_vacancy_zeroes_income(self, re_data):
        vacant = re_data.model_copy(update={"vacancy_rate": 100})
        assert calc_effective_gross_income(vacant) == 0.0

    def test_operating_expenses(self, re_data):
        # Management is 8% of gross income before vacancy
        management = (24_000 + 1_200) * 0.08
        expected = 2_400 + 1_200 + 1_500 + management + 600 + 300
        assert calc_operating_expenses(re_data) == pytest.approx(expected)

    def test_operating_expenses_without_management(self, re_data):
        deal = re_data.model_copy(update={"property_management": 0})
        assert calc_operating_expenses(deal) == 2_400 + 1_200 + 1_500 + 600 + 300

    def test_noi(self, re_data):
        assert calc_noi(re_data) == pytest.approx(23_940 - 8_016)

    def test_noi_can_be_negative(self, re_data):
        deal = re_data.model_copy(update={"gross_rental_income": 1_000, "other_income": 0})
        assert calc_noi(deal) < 0


class TestReturnsAndCoverage:
    def test_cap_rate(self, re_data):
        assert calc_cap_rate(re_data) == pytest.approx(15_924 / 200_000 * 100)

    def test_cap_rate_zero_price(self, re_data):
        assert calc_cap_rate(re_data.model_copy(update={"purchase_price": 0})) == 0.0

    def test_total_cash_invested(self, re_data):
        assert calc_total_cash_invested(re_data) == pytest.approx(40_000 + 5_000 + 10_000)

    def test_annual_cash_flow(self, re_data):
        debt = calc_monthly_mortgage(re_data.financing) * 12
        assert calc_annual_cash_flow(re_data) == pytest.approx(15_924 - debt)

    def test_cash_on_cash(self, re_data):
        expected = calc_annual_cash_flow(re_data) / 55_000 * 100
        assert calc_cash_on_cash(re_data) == pytest.approx(expected)

    def test_cash_on_cash_without_cash_invested(self, re_data):
        deal = re_data.model_copy(
            update={
                "closing_costs": 0,
                "rehab_costs": 0,
                "financing": re_data.financing.model_copy(update={"down_payment": 0}),
            }
        )
        assert calc_cash_on_cash(deal) == 0.0

    def test_dscr(self, re_data):
        debt = calc_monthly_mortgage(re_data.financing) * 12
        assert calc_dscr(re_data) == pytest.approx(15_924 / debt)

    def test_dscr_infinite_without_debt(self, re_data):
        deal = re_data.model_copy(update={"financing": FinancingTerms(down_payment=100)})
        assert calc_dscr(deal) == math.inf


def _manual_projection(deal, years):
    """Independent projection loop used to cross-check hold-period returns."""
    debt = calc_monthly_mortgage(deal.financing) * 12
    income = (deal.gross_rental_income + deal.other_income) * (1 - deal.vacancy_rate / 100)
    expenses = calc_operating_expenses(deal)
    flows = []
    for _ in range(years):
        flows.append(income - expenses - debt)
        income *= 1 + deal.annual_rent_growth / 100
        expenses *= 1 + deal.annual_expense_growth / 100
    return flows


def _sale_equity(deal, years, selling_cost_rate=6.0):
    value = deal.purchase_price * (1 + deal.annual_appreciation / 100) ** years
    return value * (1 - selling_cost_rate / 100) - calc_remaining_balance(
        deal.financing, years * 12
    )


class TestHoldPeriodReturns:
    def test_roi(self, re_data):
        flows = _manual_projection(re_data, 5)
        equity = _sale_equity(re_data, 5)
        expected = (sum(flows) + equity - 55_000) / 55_000 * 100
        assert calc_roi(re_data) == pytest.approx(expected)

    def test_roi_uses_hold_years_from_settings(self, re_data):
        settings = AnalysisSettings(hold_years=10)
        assert calc_roi(re_data, settings=settings) == pytest.approx(calc_roi(re_data, 10))
        assert calc_roi(re_data, 10) != pytest.approx(calc_roi(re_data, 5))

    def test_roi_without_cash_invested(self):
        assert calc_roi(RealEstateDeal()) == 0.0

    def test_irr_zeroes_npv(self, re_data):
        irr = calc_irr(re_data)
        assert irr is not None

        flows = [-55_000, *_manual_projection(re_data, 5)]
        flows[-1] += _sale_equity(re_data, 5)
        npv = sum(cf / (1 + irr / 100) ** t for t, cf in enumerate(flows))
        assert npv == pytest.approx(0.0, abs=1e-3)

    def test_irr_undefined_without_investment(self):
        deal = RealEstateDeal(gross_rental_income=12_000)
        assert calc_irr(deal) is None


class TestProjection:
    def test_years_and_cumulative(self, re_data):
        rows = project_cash_flows(re_data, 10)

        assert [row.year for row in rows] == list(range(1, 11))
        running = 0.0
        for row in rows:
            running += row.cash_flow
            assert row.cumulative_cash_flow == pytest.approx(running)

    def test_first_year_matches_metrics(self, re_data):
        first = project_cash_flows(re_data, 1)[0]
        assert first.noi == pytest.approx(calc_noi(re_data))
        assert first.cash_flow == pytest.approx(calc_annual_cash_flow(re_data))

    def test_growth_compounds_separately(self, re_data):
        rows = project_cash_flows(re_data, 3)
        expected_noi = 23_940 * 1.03**2 - 8_016 * 1.02**2
        assert rows[2].noi == pytest.approx(expected_noi)

    def test_rows_carry_noi_only(self, re_data):
        row = project_cash_flows(re_data, 1)[0]
        assert row.revenue is None and row.ebitda is None


def test_metrics_bundle(re_data):
    metrics = calc_real_estate_metrics(re_data)

    assert metrics.noi == pytest.approx(15_924)
    assert metrics.effective_gross_income == pytest.approx(23_940)
    assert metrics.operating_expenses == pytest.approx(8_016)
    assert metrics.total_cash_invested == pytest.approx(55_000)
    assert metrics.annual_debt_service == pytest.approx(metrics.monthly_mortgage * 12)
    assert metrics.irr == pytest.approx(calc_irr(re_data))
