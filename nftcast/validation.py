"""
Validation module for forecasting models

Holds out the most recent prices, forecasts them from the remaining history and
compares the result with what actually happened. The metrics are reported next
to a model's fixed accuracy tag; they never replace it.
"""

from dataclasses import dataclass
from typing import Dict, Optional, Union, cast
import numpy as np
import logging

from .forecasting.engine import ForecastingEngine
from .types import ModelKind

logger = logging.getLogger(__name__)


@dataclass
class ValidationConfig:
    """Configuration for forecast validation"""

    enable_validation: bool = True
    holdout_periods: int = 3
    min_training_points: int = 2


class ForecastValidator:
    """Generic forecast validation utilities"""

    @staticmethod
    def validate_forecast_model(
        engine: ForecastingEngine,
        model_kind: Union[ModelKind, str],
        config: Optional[ValidationConfig] = None,
    ) -> Optional[Dict[str, float]]:
        """
        Validate one model against the engine's own history

        This method:
        1. Splits the series into training and holdout points
        2. Forecasts the holdout length from the training points only
        3. Compares predictions with the held-out prices by position

        Args:
            engine: Engine whose series and random generator are used
            model_kind: Model to validate
            config: ValidationConfig with validation parameters

        Returns:
            Dictionary with MAPE, MAE, directional_accuracy or None if validation disabled/insufficient data
        """
        config = config or ValidationConfig()
        kind = ModelKind(model_kind)

        if not config.enable_validation:
            return None

        series = engine.series
        train_size = len(series) - config.holdout_periods
        if config.holdout_periods < 1 or train_size < config.min_training_points:
            logger.warning(
                f"  Insufficient data for validation: {len(series)} points "
                f"(need {config.min_training_points + config.holdout_periods})"
            )
            return None

        train_series = series[:train_size]
        holdout_series = series[train_size:]

        # Same random generator and settings, so a seeded engine gives reproducible validation
        train_engine = ForecastingEngine(
            train_series, rng=engine.rng, timeout=engine.timeout, mse_window=engine.mse_window
        )
        result = train_engine.forecast(kind, config.holdout_periods, as_of=train_series[-1].date)

        actual_values = np.array([point.price for point in holdout_series], dtype=float)
        predicted_values = np.array(result.prices, dtype=float)

        metrics = ForecastValidator.calculate_validation_metrics(actual_values, predicted_values)
        logger.debug(
            f"  {result.model_name} validation - MAPE: {metrics['MAPE']:.1f}%, MAE: {metrics['MAE']:.4f}, "
            f"Directional Accuracy: {metrics['directional_accuracy']:.1f}%"
        )
        return metrics

    @staticmethod
    def calculate_validation_metrics(actual: np.ndarray, predicted: np.ndarray) -> Dict[str, float]:
        """
        Calculate standard validation metrics

        Args:
            actual: Array of actual values
            predicted: Array of predicted values

        Returns:
            Dictionary with MAPE, MAE, and directional_accuracy
        """

        # Ensure arrays are same length
        min_length = min(len(actual), len(predicted))
        actual = actual[:min_length]
        predicted = predicted[:min_length]

        if min_length == 0:
            return {"MAPE": float("inf"), "MAE": float("inf"), "directional_accuracy": 0.0}

        # MAPE (Mean Absolute Percentage Error)
        non_zero_mask = actual != 0
        if np.sum(non_zero_mask) > 0:
            mape = np.mean(np.abs((actual[non_zero_mask] - predicted[non_zero_mask]) / actual[non_zero_mask])) * 100
        else:
            mape = float("inf")

        # MAE (Mean Absolute Error)
        mae = np.mean(np.abs(actual - predicted))

        # Directional Accuracy (share of periods where prediction and actual move the same way)
        if len(actual) > 1:
            actual_direction = np.diff(actual) > 0
            predicted_direction = np.diff(predicted) > 0
            directional_accuracy = np.mean(actual_direction == predicted_direction) * 100
        else:
            directional_accuracy = 0.0

        return {
            "MAPE": round(float(mape), 2),
            "MAE": round(float(cast(float, mae)), 4),
            "directional_accuracy": round(float(directional_accuracy), 2),
        }
