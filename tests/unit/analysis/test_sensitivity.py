# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Tests for single-variable sensitivity sweeps.

Sweeps must always contain exactly one base row that reproduces the deal's
own metrics, and must move metrics in the economically expected direction.
"""

import pytest

from dealiq.analysis import calc_metrics, run_sensitivity
from dealiq.analysis.sensitivity import (
    format_input_value,
    generate_steps,
    get_output_metrics,
    get_variable,
    get_variables_for_deal_type,
    step_size,
)
from dealiq.core.primitives import DealTypeEnum, ValueFormatEnum
from dealiq.deal import BusinessDeal, HybridDeal, RealEstateDeal


class TestRegistry:
    def test_variables_per_deal_type(self):
        re_keys = {v.key for v in get_variables_for_deal_type(DealTypeEnum.REAL_ESTATE)}
        biz_keys = {v.key for v in get_variables_for_deal_type(DealTypeEnum.BUSINESS)}

        assert {"vacancy_rate", "financing.interest_rate", "purchase_price"} <= re_keys
        assert {"annual_revenue", "asking_price", "cost_of_goods"} <= biz_keys
        assert "vacancy_rate" not in biz_keys

    def test_output_metric_keys(self):
        keys = [m.key for m in get_output_metrics(DealTypeEnum.REAL_ESTATE)]
        assert keys == ["capRate", "cashOnCash", "dscr", "noi", "cashFlow", "irr"]
        assert "breakEven" in [m.key for m in get_output_metrics(DealTypeEnum.BUSINESS)]

    def test_camel_case_key(self):
        variable = get_variable(DealTypeEnum.REAL_ESTATE, "financing.interestRate")
        assert variable.key == "financing.interest_rate"

    def test_unknown_key_lists_available_fields(self):
        with pytest.raises(ValueError, match="Available fields: .*vacancy_rate"):
            get_variable(DealTypeEnum.REAL_ESTATE, "roof_age")

    def test_price_setter_resizes_loan(self, re_data):
        variable = get_variable(DealTypeEnum.REAL_ESTATE, "purchase_price")
        updated = variable.setter(re_data, 250_000)

        assert updated.purchase_price == 250_000
        assert updated.financing.loan_amount == pytest.approx(200_000)
        assert re_data.financing.loan_amount == 160_000

    def test_down_payment_setter_resizes_loan(self, business_data):
        variable = get_variable(DealTypeEnum.BUSINESS, "financing.down_payment")
        updated = variable.setter(business_data, 20)

        assert updated.financing.down_payment == 20
        assert updated.financing.loan_amount == pytest.approx(400_000)

    @pytest.mark.parametrize(
        "deal_type, record",
        [
            (DealTypeEnum.REAL_ESTATE, RealEstateDeal),
            (DealTypeEnum.BUSINESS, BusinessDeal),
            (DealTypeEnum.HYBRID, HybridDeal),
        ],
    )
    def test_every_numeric_field_registered(self, deal_type, record):
        keys = {v.key for v in get_variables_for_deal_type(deal_type)}
        numeric = {
            name for name, info in record.model_fields.items() if info.annotation is float
        }

        assert numeric <= keys
        assert {"financing.loan_amount", "financing.loan_term_years"} <= keys
        assert len(keys) == len(get_variables_for_deal_type(deal_type))

    def test_inferred_formats(self):
        tax = get_variable(DealTypeEnum.REAL_ESTATE, "property_tax")
        assert tax.format is ValueFormatEnum.CURRENCY
        assert get_variable(DealTypeEnum.REAL_ESTATE, "annual_expense_growth").allow_negative
        assert get_variable(DealTypeEnum.HYBRID, "property_management").max_value == 100
        assert (
            get_variable(DealTypeEnum.BUSINESS, "financing.amortizationYears").format
            is ValueFormatEnum.NUMBER
        )

    def test_headline_fields_listed_first(self):
        keys = [v.key for v in get_variables_for_deal_type(DealTypeEnum.REAL_ESTATE)]
        assert keys[:3] == ["vacancy_rate", "financing.interest_rate", "purchase_price"]

    def test_term_setter_keeps_whole_years(self, business_data):
        variable = get_variable(DealTypeEnum.BUSINESS, "financing.loan_term_years")
        updated = variable.setter(business_data, 12.0)

        assert updated.financing.loan_term_years == 12
        assert isinstance(updated.financing.loan_term_years, int)


class TestSteps:
    def test_step_sizes(self):
        assert step_size(5, ValueFormatEnum.PERCENT) == 1.0
        assert step_size(12, ValueFormatEnum.PERCENT) == 2.0
        assert step_size(600_000, ValueFormatEnum.CURRENCY) == 30_000
        assert step_size(8_000, ValueFormatEnum.CURRENCY) == 1_000

    def test_centered_on_base(self):
        variable = get_variable(DealTypeEnum.REAL_ESTATE, "vacancy_rate")
        assert generate_steps(5, variable, 4) == [1, 2, 3, 4, 5, 6, 7, 8, 9]

    def test_negative_values_dropped(self):
        variable = get_variable(DealTypeEnum.REAL_ESTATE, "vacancy_rate")
        assert generate_steps(1, variable, 4) == [0, 1, 2, 3, 4, 5]

    def test_growth_rates_may_go_negative(self):
        variable = get_variable(DealTypeEnum.REAL_ESTATE, "annual_rent_growth")
        assert generate_steps(1, variable, 2) == [-1, 0, 1, 2, 3]

    def test_bounded_percent_capped(self):
        variable = get_variable(DealTypeEnum.REAL_ESTATE, "financing.down_payment")
        values = generate_steps(96, variable, 4)

        assert max(values) <= 100
        assert 96 in values
        assert values[0] == 88

    def test_base_above_cap_kept(self):
        variable = get_variable(DealTypeEnum.REAL_ESTATE, "vacancy_rate")
        assert generate_steps(104, variable, 2) == [100, 104]

    def test_negative_steps_rejected(self):
        variable = get_variable(DealTypeEnum.REAL_ESTATE, "vacancy_rate")
        with pytest.raises(ValueError, match="steps"):
            generate_steps(5, variable, -1)

    def test_format_input_value(self):
        assert format_input_value(6.5, ValueFormatEnum.PERCENT) == "6.5%"
        assert format_input_value(250_000, ValueFormatEnum.CURRENCY) == "$250,000"
        assert format_input_value(-1_500, ValueFormatEnum.CURRENCY) == "-$1,500"


class TestRunSensitivity:
    def test_exactly_one_base_row(self, re_deal):
        result = run_sensitivity(re_deal, "vacancy_rate")

        assert len(result.rows) == 9
        assert sum(row.is_base for row in result.rows) == 1
        assert result.base_row.input_value == re_deal.data.vacancy_rate

    def test_base_row_matches_metrics(self, re_deal):
        metrics = calc_metrics(re_deal)
        base = run_sensitivity(re_deal, "financing.interestRate").base_row

        assert base.metrics["noi"] == metrics.noi
        assert base.metrics["dscr"] == metrics.dscr
        assert base.metrics["irr"] == metrics.irr

    def test_vacancy_up_noi_down(self, re_deal):
        rows = run_sensitivity(re_deal, "vacancy_rate").rows
        noi = [row.metrics["noi"] for row in rows]
        assert all(later < earlier for earlier, later in zip(noi, noi[1:]))

    def test_rate_up_cash_flow_down(self, hybrid_deal):
        rows = run_sensitivity(hybrid_deal, "financing.interest_rate").rows
        cash_flow = [row.metrics["cashFlow"] for row in rows]
        assert all(later < earlier for earlier, later in zip(cash_flow, cash_flow[1:]))

    def test_revenue_up_sde_up(self, business_deal):
        result = run_sensitivity(business_deal, "annualRevenue")
        sde = [row.metrics["sde"] for row in result.rows]

        assert result.rows[0].input_value == 480_000
        assert all(later > earlier for earlier, later in zip(sde, sde[1:]))

    def test_custom_step_count(self, business_deal):
        assert len(run_sensitivity(business_deal, "annual_revenue", steps=2).rows) == 5

    def test_base_value_zero(self, re_deal):
        deal = re_deal.with_data(re_deal.data.model_copy(update={"vacancy_rate": 0}))
        result = run_sensitivity(deal, "vacancy_rate")

        assert [row.input_value for row in result.rows] == [0, 1, 2, 3, 4]
        assert result.rows[0].is_base

    @pytest.mark.parametrize("fixture", ["re_deal", "business_deal", "hybrid_deal"])
    def test_every_registered_field_sweeps(self, request, fixture):
        deal = request.getfixturevalue(fixture)
        for variable in get_variables_for_deal_type(deal.deal_type):
            result = run_sensitivity(deal, variable.key, steps=2)

            assert sum(row.is_base for row in result.rows) == 1, variable.key
            assert result.base_row.input_value == variable.getter(deal.data)

    def test_property_tax_sweep(self, re_deal):
        rows = run_sensitivity(re_deal, "property_tax").rows
        noi = [row.metrics["noi"] for row in rows]

        assert [row.input_value for row in rows] == [400, 1_400, 2_400, 3_400, 4_400, 5_400, 6_400]
        assert all(later < earlier for earlier, later in zip(noi, noi[1:]))

    def test_closing_costs_sweep(self, business_deal):
        result = run_sensitivity(business_deal, "closingCosts")
        assert result.base_row.input_value == 15_000
        assert result.variable.format is ValueFormatEnum.CURRENCY

    def test_down_payment_sweep_stays_financeable(self, re_deal):
        financing = re_deal.data.financing.model_copy(
            update={"down_payment": 96, "loan_amount": 8_000}
        )
        data = re_deal.data.model_copy(update={"financing": financing})
        result = run_sensitivity(re_deal.with_data(data), "financing.down_payment")

        assert max(row.input_value for row in result.rows) == 100
        assert all(row.metrics["dscr"] > 0 for row in result.rows)

    def test_negative_steps(self, re_deal):
        with pytest.raises(ValueError, match="steps"):
            run_sensitivity(re_deal, "vacancy_rate", steps=-1)

    def test_unknown_field(self, business_deal):
        with pytest.raises(ValueError):
            run_sensitivity(business_deal, "vacancy_rate")

    def test_to_frame(self, re_deal):
        result = run_sensitivity(re_deal, "vacancy_rate")
        df = result.to_frame()

        assert len(df) == 9
        assert df.index.name == "vacancy_rate"
        assert df["Base"].sum() == 1
        assert "Cap Rate" in df.columns

    def test_serializes_without_callables(self, re_deal):
        dumped = run_sensitivity(re_deal, "vacancy_rate").model_dump(by_alias=True)
        assert "getter" not in dumped["variable"]
        assert dumped["rows"][0]["isBase"] is False
