"""Tests for the forecasting engine interface and the cross-model properties."""

from datetime import date

import numpy as np
import pytest

from nftcast import ForecastingEngine, ModelKind, PricePoint

from conftest import make_series

CONFIDENCE_BOUNDS = {
    ModelKind.GRADIENT: (0.6, 0.95),
    ModelKind.SEQUENTIAL: (0.65, 0.9),
    ModelKind.BOOTSTRAP: (0.7, 0.92),
    ModelKind.AUTOREGRESSIVE: (0.6, 0.88),
}

FALLBACK_CONFIDENCE_BOUNDS = (0.6, 0.9)


class TestConstruction:
    def test_series_is_sorted_and_immutable(self):
        points = [
            PricePoint(date(2024, 3, 1), 12.0),
            PricePoint(date(2024, 1, 1), 10.0),
            PricePoint(date(2024, 2, 1), 11.0),
        ]
        engine = ForecastingEngine(points, seed=0)

        assert isinstance(engine.series, tuple)
        assert [p.price for p in engine.series] == [10.0, 11.0, 12.0]
        assert engine.last_price == 12.0

    def test_duplicate_dates_rejected(self):
        points = [PricePoint(date(2024, 1, 1), 10.0), PricePoint(date(2024, 1, 1), 11.0)]
        with pytest.raises(ValueError, match="Duplicate date"):
            ForecastingEngine(points)

    def test_non_positive_price_rejected(self):
        with pytest.raises(ValueError, match="positive"):
            ForecastingEngine([PricePoint(date(2024, 1, 1), 0.0)])

    def test_negative_volume_rejected(self):
        with pytest.raises(ValueError, match="volume"):
            ForecastingEngine([PricePoint(date(2024, 1, 1), 1.0, volume=-5.0)])

    def test_empty_series_allowed(self):
        engine = ForecastingEngine([], seed=0)
        assert engine.series == ()
        assert engine.last_price is None


class TestForecastInterface:
    def test_accepts_kind_names(self, linear_series, as_of):
        engine = ForecastingEngine(linear_series, seed=1)
        assert engine.forecast("gradient", 2, as_of).model_name == "XGBoost"
        assert engine.forecast(ModelKind.BOOTSTRAP, 2, as_of).model_name == "Random Forest"

    def test_unknown_kind_rejected(self, linear_series):
        with pytest.raises(ValueError):
            ForecastingEngine(linear_series).forecast("prophet", 3)

    @pytest.mark.parametrize("horizon", [0, -1, 2.5, True])
    def test_invalid_horizon_rejected(self, linear_series, horizon):
        with pytest.raises(ValueError):
            ForecastingEngine(linear_series).forecast("gradient", horizon)

    def test_numpy_integer_horizon(self, linear_series, as_of):
        result = ForecastingEngine(linear_series, seed=0).forecast("autoregressive", np.int64(3), as_of)
        assert len(result.predictions) == 3

    def test_labels(self):
        assert [kind.label for kind in ModelKind] == ["XGBoost", "LSTM", "Random Forest", "ARIMA", "Ensemble"]

    def test_forecast_all(self, linear_series, as_of):
        results = ForecastingEngine(linear_series, seed=2).forecast_all(4, as_of)
        assert set(results) == set(ModelKind)
        assert all(len(result.predictions) == 4 for result in results.values())

    def test_same_seed_same_results(self, volatile_series, as_of):
        for kind in ModelKind:
            first = ForecastingEngine(volatile_series, seed=99).forecast(kind, 5, as_of)
            second = ForecastingEngine(volatile_series, seed=99).forecast(kind, 5, as_of)
            assert first == second

    def test_dates_monthly_from_invocation(self, linear_series):
        as_of = date(2025, 6, 10)
        result = ForecastingEngine(linear_series, seed=0).forecast("ensemble", 3, as_of)
        assert [p.date for p in result.predictions] == [date(2025, 7, 10), date(2025, 8, 10), date(2025, 9, 10)]

    def test_default_invocation_date_is_today(self, linear_series):
        result = ForecastingEngine(linear_series, seed=0).forecast("gradient", 1)
        assert result.predictions[0].date > date.today()


class TestOutputProperties:
    @pytest.mark.parametrize("kind", list(CONFIDENCE_BOUNDS))
    @pytest.mark.parametrize("horizon", [1, 5, 12])
    @pytest.mark.parametrize("seed", [0, 1, 2])
    def test_shape_confidence_and_floors(self, volatile_series, kind, horizon, seed, as_of):
        prices = [p.price for p in volatile_series]
        result = ForecastingEngine(volatile_series, seed=seed).forecast(kind, horizon, as_of)

        assert len(result.predictions) == horizon

        dates = [p.date for p in result.predictions]
        assert dates == sorted(set(dates))

        confidences = result.confidences
        assert all(a >= b for a, b in zip(confidences, confidences[1:]))
        low, high = FALLBACK_CONFIDENCE_BOUNDS if result.accuracy == 0.75 else CONFIDENCE_BOUNDS[kind]
        assert all(low - 1e-9 <= c <= high + 1e-9 for c in confidences)

        assert all(price > 0 for price in result.prices)
        if kind == ModelKind.GRADIENT:
            assert all(price >= 0.3 * prices[-1] - 1e-9 for price in result.prices)
        elif kind == ModelKind.SEQUENTIAL:
            assert all(price >= 0.3 * prices[0] - 1e-9 for price in result.prices)
        elif kind == ModelKind.BOOTSTRAP:
            assert all(price >= 0.4 * prices[-1] - 1e-9 for price in result.prices)

    @pytest.mark.parametrize("kind", list(ModelKind))
    def test_empty_series_degrades(self, kind, as_of):
        result = ForecastingEngine([], seed=0).forecast(kind, 6, as_of)

        assert len(result.predictions) == 6
        assert all(price >= 0.3 * 45.2 - 1e-9 for price in result.prices)
        assert result.mse == pytest.approx(0.1)


class TestScenarios:
    def test_linear_series_fixed_accuracy_tags(self, linear_series, as_of):
        engine = ForecastingEngine(linear_series)

        gradient = engine.forecast("gradient", 5, as_of)
        ensemble = engine.forecast("ensemble", 5, as_of)

        assert gradient.accuracy == 0.87
        assert ensemble.accuracy == 0.91
        assert len(gradient.predictions) == 5
        assert len(ensemble.predictions) == 5

    def test_all_models_run_on_linear_series(self, linear_series, as_of):
        results = ForecastingEngine(linear_series, seed=4).forecast_all(5, as_of)
        assert {kind: result.accuracy for kind, result in results.items()} == {
            ModelKind.GRADIENT: 0.87,
            ModelKind.SEQUENTIAL: 0.82,
            ModelKind.BOOTSTRAP: 0.85,
            ModelKind.AUTOREGRESSIVE: 0.79,
            ModelKind.ENSEMBLE: 0.91,
        }

    def test_single_point_sequential_returns_fallback(self, as_of):
        engine = ForecastingEngine(make_series([42.0]), seed=0)
        result = engine.forecast("sequential", 7, as_of)

        assert result.model_name == "LSTM"
        assert result.accuracy == 0.75
        assert result.mse == 0.1
        assert len(result.predictions) == 7
