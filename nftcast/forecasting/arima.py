import logging
from typing import List

import numpy as np

from .forecast import BaseForecaster, StepForecast
from .statistics import ar_coefficient, difference, ma_coefficient

logger = logging.getLogger(__name__)


class ArimaForecaster(BaseForecaster):
    """AR(1)/MA(1) recursion on the differenced series"""

    accuracy = 0.79

    def __init__(self, mse_window: int = 5):
        super().__init__(mse_window)
        self.floor_ratio = 0.5
        self.error_scale = 0.05

    def get_model_name(self) -> str:
        return "ARIMA"

    def predict(self, prices: List[float], horizon: int, rng: np.random.Generator) -> List[StepForecast]:
        differenced = difference(prices)
        ar_coeff = ar_coefficient(differenced)
        ma_coeff = ma_coefficient(differenced)
        logger.debug(f"  AR={ar_coeff:.4f}, MA={ma_coeff:.4f}")

        # The AR term always measures against the last actual's predecessor
        previous_actual = prices[-2]
        last_price = prices[-1]
        last_error = 0.0

        steps = []
        for i in range(1, horizon + 1):
            ar_component = ar_coeff * (last_price - previous_actual)
            ma_component = ma_coeff * last_error
            prediction = last_price + ar_component + ma_component

            steps.append((max(prediction, last_price * self.floor_ratio), max(0.6, 0.88 - i * 0.06)))

            last_price = prediction
            last_error = (rng.random() - 0.5) * last_price * self.error_scale

        return steps
