# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
dealiq - Acquisition Deal Calculation Engine

Pure, side-effect-free financial calculations for real estate, small business
and hybrid (property + operating business) acquisitions.

Key Entry Points:
- dealiq.analysis.calc_metrics() - Metrics for any deal type
- dealiq.analysis.project_cash_flows() - Multi-year cash flow projection
- dealiq.analysis.run_sensitivity() - Single-variable sensitivity sweep
- dealiq.analysis.calc_investment_score() - Composite 0-100 deal score
- dealiq.analysis.build_negotiation_analysis() - Evidence for an offer price
- dealiq.debt.generate_amortization_schedule() - Monthly loan schedule

Example Usage:
    ```python
    from dealiq.analysis import calc_metrics, calc_investment_score
    from dealiq.deal import Deal

    deal = Deal.model_validate(record_from_store)
    metrics = calc_metrics(deal)
    score = calc_investment_score(deal)
    print(f"Cap rate: {metrics.cap_rate:.2f}% ({score.label})")
    ```
"""

import importlib
import logging

# Libraries leave handler configuration to the application.
logging.getLogger(__name__).addHandler(logging.NullHandler())


# Public API surface (lazy-loaded on first attribute access)
__all__ = [  # noqa: F822 - lazy loading
    "analysis",
    "core",
    "deal",
    "debt",
]


_LAZY_MODULES = {
    "analysis": "dealiq.analysis",
    "core": "dealiq.core",
    "deal": "dealiq.deal",
    "debt": "dealiq.debt",
}


def __getattr__(name: str):
    module_path = _LAZY_MODULES.get(name)
    if module_path is None:
        raise AttributeError(f"module 'dealiq' has no attribute '{name}'")
    module = importlib.import_module(module_path)
    globals()[name] = module
    return module
