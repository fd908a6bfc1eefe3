import logging
from typing import List

import numpy as np

from .forecast import BaseForecaster, StepForecast
from .statistics import seasonality, trend, volatility

logger = logging.getLogger(__name__)


class XGBoostForecaster(BaseForecaster):
    """Gradient-style projection: recent trend plus annual seasonality and volatility-scaled noise"""

    accuracy = 0.87

    def __init__(self, mse_window: int = 5):
        super().__init__(mse_window)
        self.trend_window = 10
        self.floor_ratio = 0.3

    def get_model_name(self) -> str:
        return "XGBoost"

    def predict(self, prices: List[float], horizon: int, rng: np.random.Generator) -> List[StepForecast]:
        base_price = prices[-1]
        recent_trend = trend(prices[-self.trend_window :])
        price_volatility = volatility(prices)
        logger.debug(f"  trend={recent_trend:.5f}, volatility={price_volatility:.5f}")

        steps = []
        for i in range(1, horizon + 1):
            noise = (rng.random() - 0.5) * price_volatility
            prediction = base_price * (1 + recent_trend * i + seasonality(i) + noise)
            steps.append((max(prediction, base_price * self.floor_ratio), max(0.6, 0.95 - i * 0.05)))

        return steps
