import logging
from typing import List

import numpy as np

from .forecast import BaseForecaster, StepForecast
from .statistics import bootstrap_sample, trend

logger = logging.getLogger(__name__)


class RandomForestForecaster(BaseForecaster):
    """Average of trend projections over bootstrap samples of the history"""

    accuracy = 0.85

    def __init__(self, mse_window: int = 5, num_trees: int = 10):
        super().__init__(mse_window)
        self.num_trees = num_trees
        self.sample_ratio = 0.8
        self.trend_window = 5
        self.noise_range = 0.1
        self.floor_ratio = 0.4

    def get_model_name(self) -> str:
        return "Random Forest"

    def predict_tree(self, prices: List[float], step: int, rng: np.random.Generator) -> float:
        sample_size = int(len(prices) * self.sample_ratio)
        sample = [prices[idx] for idx in bootstrap_sample(len(prices), sample_size, rng)]
        if not sample:
            raise ValueError(f"bootstrap sample of {len(prices)} points is empty")

        recent_trend = trend(sample[-self.trend_window :])
        noise = (rng.random() - 0.5) * self.noise_range
        return sample[-1] * (1 + recent_trend * step + noise)

    def predict(self, prices: List[float], horizon: int, rng: np.random.Generator) -> List[StepForecast]:
        floor_price = prices[-1] * self.floor_ratio

        steps = []
        for i in range(1, horizon + 1):
            tree_predictions = [self.predict_tree(prices, i, rng) for _ in range(self.num_trees)]
            prediction = float(np.mean(tree_predictions))
            steps.append((max(prediction, floor_price), max(0.7, 0.92 - i * 0.03)))

        return steps
