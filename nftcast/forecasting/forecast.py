"""
Forecasting Module

Contains the common interface every forecasting method implements. A forecaster
turns a price history into a ModelResult and never raises: any failure is
logged and replaced by the fallback forecast.
"""

import logging
import math
from abc import ABC, abstractmethod
from datetime import date
from typing import List, Optional, Sequence, Tuple

import numpy as np

from ..types import ForecastPoint, HistoricalSeries, ModelResult
from .dates import forecast_dates
from .fallback import FallbackGenerator
from .statistics import mse

logger = logging.getLogger(__name__)

# (price, confidence) for one forecast step
StepForecast = Tuple[float, float]


class InsufficientHistoryError(ValueError):
    """Raised when a series is too short for a forecaster"""


class BaseForecaster(ABC):
    """Abstract base class for all forecasting methods"""

    accuracy: float = 0.0
    min_history: int = 2

    def __init__(self, mse_window: int = 5):
        self.mse_window = mse_window
        self.fallback = FallbackGenerator()

    @abstractmethod
    def get_model_name(self) -> str:
        """Return the display name of the forecasting model"""
        pass

    @abstractmethod
    def predict(self, prices: List[float], horizon: int, rng: np.random.Generator) -> List[StepForecast]:
        """
        Project prices forward

        Returns:
            One (price, confidence) pair per step, step 1 first
        """
        pass

    def forecast(
        self,
        series: HistoricalSeries,
        horizon: int,
        rng: np.random.Generator,
        as_of: Optional[date] = None,
    ) -> ModelResult:
        """Generate a forecast, degrading to the fallback forecast on any failure"""
        model_name = self.get_model_name()
        prices = [point.price for point in series]
        logger.debug(f"Forecasting {horizon} periods with {model_name} from {len(prices)} points")

        try:
            if len(prices) < self.min_history:
                raise InsufficientHistoryError(f"need at least {self.min_history} points, got {len(prices)}")

            steps = self.predict(prices, horizon, rng)
            predictions = self._to_forecast_points(steps, horizon, as_of)
        except InsufficientHistoryError as e:
            logger.warning(f"  {model_name}: {e} - using fallback")
            return self.fallback.generate(model_name, prices, horizon, rng, as_of)
        except Exception as e:
            logger.error(f"  {model_name} prediction error: {e}")
            return self.fallback.generate(model_name, prices, horizon, rng, as_of)

        result = ModelResult(
            model_name=model_name,
            predictions=predictions,
            accuracy=self.accuracy,
            mse=self.score(prices, predictions),
        )
        logger.debug(f"  {model_name} final price: {result.final_price:.4f}, mse: {result.mse:.4f}")
        return result

    def score(self, prices: Sequence[float], predictions: Sequence[ForecastPoint]) -> float:
        """MSE between the most recent actuals and the first predictions"""
        actual = list(prices[-self.mse_window :])
        predicted = [p.price for p in predictions[: self.mse_window]]
        return mse(actual, predicted)

    @staticmethod
    def _to_forecast_points(
        steps: List[StepForecast], horizon: int, as_of: Optional[date]
    ) -> Tuple[ForecastPoint, ...]:
        if len(steps) != horizon:
            raise ValueError(f"expected {horizon} predictions, got {len(steps)}")

        points = []
        for forecast_date, (price, confidence) in zip(forecast_dates(horizon, as_of), steps):
            if not math.isfinite(price) or price <= 0:
                raise ValueError(f"invalid predicted price {price} for {forecast_date}")
            points.append(ForecastPoint(date=forecast_date, price=float(price), confidence=float(confidence)))
        return tuple(points)
