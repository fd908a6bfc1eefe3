"""Tests for the weighted ensemble."""

import time
from datetime import date

import numpy as np
import pytest

from nftcast.forecasting import EnsembleForecaster, XGBoostForecaster
from nftcast.types import ForecastPoint, ModelResult

from conftest import make_series


def stub_result(name, prices, confidences, mse, start=date(2025, 2, 1)):
    dates = [date(start.year, start.month + i, 1) for i in range(len(prices))]
    return ModelResult(
        model_name=name,
        predictions=tuple(ForecastPoint(d, p, c) for d, p, c in zip(dates, prices, confidences)),
        accuracy=0.5,
        mse=mse,
    )


class SlowForecaster(XGBoostForecaster):
    def predict(self, prices, horizon, rng):
        time.sleep(2.0)
        return super().predict(prices, horizon, rng)


class TestCombine:
    def test_weighted_sum_of_prices_and_confidences(self):
        results = [
            stub_result("XGBoost", [10.0, 20.0], [0.9, 0.8], 1.0),
            stub_result("LSTM", [30.0, 40.0], [0.8, 0.7], 2.0),
            stub_result("Random Forest", [50.0, 60.0], [0.7, 0.6], 3.0),
            stub_result("ARIMA", [70.0, 80.0], [0.6, 0.5], 6.0),
        ]
        combined = EnsembleForecaster().combine(results)

        assert combined.model_name == "Ensemble"
        assert combined.accuracy == 0.91
        assert combined.prices == pytest.approx(
            [0.3 * 10 + 0.25 * 30 + 0.25 * 50 + 0.2 * 70, 0.3 * 20 + 0.25 * 40 + 0.25 * 60 + 0.2 * 80]
        )
        assert combined.confidences == pytest.approx(
            [0.3 * 0.9 + 0.25 * 0.8 + 0.25 * 0.7 + 0.2 * 0.6, 0.3 * 0.8 + 0.25 * 0.7 + 0.25 * 0.6 + 0.2 * 0.5]
        )
        assert combined.mse == pytest.approx(3.0)

    def test_dates_come_from_first_member(self):
        results = [stub_result(f"m{i}", [1.0], [0.9], 0.0, start=date(2025, 1 + i, 1)) for i in range(4)]
        combined = EnsembleForecaster().combine(results)
        assert combined.predictions[0].date == date(2025, 1, 1)

    def test_weights_sum_to_one(self):
        assert sum(EnsembleForecaster().weights) == pytest.approx(1.0)

    def test_mismatched_horizons_rejected(self):
        results = [stub_result("a", [1.0, 2.0], [0.9, 0.8], 0.0)] * 3 + [stub_result("b", [1.0], [0.9], 0.0)]
        with pytest.raises(ValueError):
            EnsembleForecaster().combine(results)

    def test_missing_member_rejected(self):
        with pytest.raises(ValueError):
            EnsembleForecaster().combine([stub_result("a", [1.0], [0.9], 0.0)] * 3)


class TestEnsembleForecast:
    def test_single_step_predict_is_not_part_of_the_blend(self, rng):
        with pytest.raises(NotImplementedError):
            EnsembleForecaster().predict([1.0, 2.0], 3, rng)

    def test_matches_member_arithmetic(self, linear_series, as_of):
        ensemble = EnsembleForecaster()
        members = ensemble.run_members(linear_series, 5, np.random.default_rng(3), as_of)
        result = ensemble.forecast(linear_series, 5, np.random.default_rng(3), as_of)

        for i, point in enumerate(result.predictions):
            expected = sum(w * m.predictions[i].price for w, m in zip(ensemble.weights, members))
            assert point.price == pytest.approx(expected)
            assert point.date == members[0].predictions[i].date
        assert result.mse == pytest.approx(np.mean([m.mse for m in members]))

    def test_member_order(self, linear_series, rng, as_of):
        members = EnsembleForecaster().run_members(linear_series, 3, rng, as_of)
        assert [m.model_name for m in members] == ["XGBoost", "LSTM", "Random Forest", "ARIMA"]

    def test_seeded_runs_are_reproducible(self, volatile_series, as_of):
        first = EnsembleForecaster().forecast(volatile_series, 6, np.random.default_rng(11), as_of)
        second = EnsembleForecaster().forecast(volatile_series, 6, np.random.default_rng(11), as_of)
        assert first == second

    def test_short_history_still_combines(self, rng, as_of):
        # LSTM falls back, the others run
        series = make_series([40.0, 41.0, 42.0])
        members = EnsembleForecaster().run_members(series, 4, rng, as_of)
        assert members[1].accuracy == 0.75

        result = EnsembleForecaster().forecast(series, 4, rng, as_of)
        assert result.accuracy == 0.91
        assert len(result.predictions) == 4

    def test_empty_history_combines_fallbacks(self, rng, as_of):
        result = EnsembleForecaster().forecast((), 3, rng, as_of)
        assert result.accuracy == 0.91
        assert result.mse == pytest.approx(0.1)
        assert all(p.price >= 13.56 - 1e-9 for p in result.predictions)

    def test_timed_out_member_uses_fallback(self, linear_series, rng, as_of):
        ensemble = EnsembleForecaster(timeout=0.5)
        ensemble.members[0] = SlowForecaster()

        members = ensemble.run_members(linear_series, 3, rng, as_of)

        assert members[0].model_name == "XGBoost"
        assert members[0].accuracy == 0.75
        assert members[0].mse == 0.1
        assert members[1].accuracy == 0.82

    def test_combine_failure_degrades_whole_ensemble(self, linear_series, rng, as_of, monkeypatch):
        ensemble = EnsembleForecaster()

        def broken_combine(results):
            raise ValueError("members disagree")

        monkeypatch.setattr(ensemble, "combine", broken_combine)
        result = ensemble.forecast(linear_series, 5, rng, as_of)

        assert result.model_name == "Ensemble"
        assert result.accuracy == 0.75
        assert result.mse == 0.1
        assert len(result.predictions) == 5
