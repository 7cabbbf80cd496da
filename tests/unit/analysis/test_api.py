# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""Tests for the dispatching analysis entry points."""

import pytest

from dealiq.analysis import (
    BusinessMetrics,
    HybridMetrics,
    RealEstateMetrics,
    calc_data_metrics,
    calc_metrics,
    project_cash_flows,
    project_data_cash_flows,
    projection_to_frame,
)
from dealiq.core.primitives import AnalysisSettings, DealTypeEnum


class TestCalcMetrics:
    def test_dispatches_on_deal_type(self, re_deal, business_deal, hybrid_deal):
        assert isinstance(calc_metrics(re_deal), RealEstateMetrics)
        assert isinstance(calc_metrics(business_deal), BusinessMetrics)
        assert isinstance(calc_metrics(hybrid_deal), HybridMetrics)

    def test_accepts_wire_value(self, re_data):
        metrics = calc_data_metrics("real-estate", re_data)
        assert metrics.noi == pytest.approx(15_924)

    def test_mismatched_data_rejected(self, re_data):
        with pytest.raises(TypeError, match="BusinessDeal"):
            calc_data_metrics(DealTypeEnum.BUSINESS, re_data)

    def test_recomputed_each_call(self, re_deal):
        first = calc_metrics(re_deal)
        cheaper = calc_metrics(re_deal.with_data(re_deal.data.model_copy(update={"vacancy_rate": 10})))
        assert cheaper.noi < first.noi
        assert calc_metrics(re_deal) == first


class TestProjectCashFlows:
    def test_default_horizon(self, re_deal):
        rows = project_cash_flows(re_deal)
        assert len(rows) == 10

    def test_horizon_from_settings(self, business_deal):
        rows = project_cash_flows(business_deal, settings=AnalysisSettings(projection_years=3))
        assert [row.year for row in rows] == [1, 2, 3]

    def test_explicit_years(self, hybrid_deal):
        assert len(project_cash_flows(hybrid_deal, years=7)) == 7

    def test_cumulative_is_running_sum(self, business_deal):
        rows = project_cash_flows(business_deal)
        running = 0.0
        for row in rows:
            running += row.cash_flow
            assert row.cumulative_cash_flow == pytest.approx(running)

    def test_mismatched_data_rejected(self, business_data):
        with pytest.raises(TypeError):
            project_data_cash_flows(DealTypeEnum.HYBRID, business_data)


class TestProjectionFrame:
    def test_real_estate_columns(self, re_deal):
        df = projection_to_frame(project_cash_flows(re_deal, years=5))

        assert list(df.index) == [1, 2, 3, 4, 5]
        assert "noi" in df.columns
        assert "revenue" not in df.columns

    def test_business_columns(self, business_deal):
        df = projection_to_frame(project_cash_flows(business_deal, years=2))
        assert {"revenue", "ebitda", "cash_flow"} <= set(df.columns)
        assert "noi" not in df.columns

    def test_empty(self):
        assert projection_to_frame([]).empty
