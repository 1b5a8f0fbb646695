"""
Tests for cost estimation.
"""

import pytest

from lexicast.cost import estimate_costs


def test_estimate_costs_ten_minutes():
    est = estimate_costs(10.0)

    assert est["tokens_in"] == pytest.approx(10 * 60 * 32 + 1200)
    assert est["tokens_out"] == pytest.approx(4500)
    assert est["total"] == pytest.approx(est["input_cost"] + est["output_cost"])


def test_estimate_costs_custom_rates():
    est = estimate_costs(1.0, rates={"audio_in_per_mtok": 0.0, "out_per_mtok": 1_000_000.0, "tokens_out_per_min": 2})
    assert est["input_cost"] == 0.0
    assert est["output_cost"] == pytest.approx(2.0)


def test_estimate_costs_negative_duration_clamped():
    assert estimate_costs(-5)["tokens_out"] == 0.0
