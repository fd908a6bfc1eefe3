import logging
from concurrent.futures import Future, ThreadPoolExecutor, wait
from datetime import date
from typing import Dict, List, Optional, Sequence, cast

import numpy as np

from ..types import ForecastPoint, HistoricalSeries, ModelResult
from .arima import ArimaForecaster
from .forecast import BaseForecaster
from .lstm import LSTMForecaster
from .random_forest import RandomForestForecaster
from .xgboost import XGBoostForecaster

logger = logging.getLogger(__name__)


class EnsembleForecaster(BaseForecaster):
    """
    Fixed-weight blend of the XGBoost, LSTM, Random Forest and ARIMA forecasters.

    Sub-models run concurrently, each with its own random generator seeded from the
    caller's generator, so a seeded run is reproducible regardless of scheduling.
    A sub-model that exceeds the timeout is replaced by its fallback forecast.
    """

    accuracy = 0.91

    def __init__(self, mse_window: int = 5, timeout: Optional[float] = None):
        super().__init__(mse_window)
        self.timeout = timeout
        self.members: List[BaseForecaster] = [
            XGBoostForecaster(mse_window),
            LSTMForecaster(mse_window),
            RandomForestForecaster(mse_window),
            ArimaForecaster(mse_window),
        ]
        self.weights: List[float] = [0.3, 0.25, 0.25, 0.2]

    def get_model_name(self) -> str:
        return "Ensemble"

    def predict(self, prices, horizon, rng):
        """Not used: forecast() blends the members' full results instead of single steps"""
        raise NotImplementedError("EnsembleForecaster combines member forecasts, use forecast()")

    def forecast(
        self,
        series: HistoricalSeries,
        horizon: int,
        rng: np.random.Generator,
        as_of: Optional[date] = None,
    ) -> ModelResult:
        model_name = self.get_model_name()
        prices = [point.price for point in series]
        as_of = as_of if as_of is not None else date.today()

        try:
            member_results = self.run_members(series, horizon, rng, as_of)
            result = self.combine(member_results)
        except Exception as e:
            logger.error(f"  {model_name} prediction error: {e}")
            return self.fallback.generate(model_name, prices, horizon, rng, as_of)

        logger.debug(f"  {model_name} final price: {result.final_price:.4f}, mse: {result.mse:.4f}")
        return result

    def run_members(
        self,
        series: HistoricalSeries,
        horizon: int,
        rng: np.random.Generator,
        as_of: date,
    ) -> List[ModelResult]:
        """Fan out to all member forecasters and wait for every result"""
        seeds = rng.integers(0, 2**32, size=len(self.members))
        member_rngs = [np.random.default_rng(int(seed)) for seed in seeds]

        executor = ThreadPoolExecutor(max_workers=len(self.members), thread_name_prefix="ensemble")
        try:
            futures: Dict[Future, int] = {
                executor.submit(member.forecast, series, horizon, member_rng, as_of): idx
                for idx, (member, member_rng) in enumerate(zip(self.members, member_rngs))
            }
            done, not_done = wait(futures, timeout=self.timeout)
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        results: List[Optional[ModelResult]] = [None] * len(self.members)
        for future in done:
            results[futures[future]] = future.result()

        for future in not_done:
            idx = futures[future]
            member = self.members[idx]
            logger.warning(f"  {member.get_model_name()} timed out after {self.timeout}s - using fallback")
            prices = [point.price for point in series]
            # The timed-out thread still owns its generator
            fallback_rng = np.random.default_rng(int(seeds[idx]))
            results[idx] = member.fallback.generate(member.get_model_name(), prices, horizon, fallback_rng, as_of)

        return cast(List[ModelResult], results)

    def combine(self, member_results: Sequence[ModelResult]) -> ModelResult:
        """Weighted sum of member prices and confidences per period; dates from the first member"""
        if len(member_results) != len(self.weights):
            raise ValueError(f"expected {len(self.weights)} member results, got {len(member_results)}")

        horizon = len(member_results[0].predictions)
        if any(len(result.predictions) != horizon for result in member_results):
            raise ValueError("member forecasts have different horizons")

        predictions = []
        for i in range(horizon):
            price = sum(w * result.predictions[i].price for w, result in zip(self.weights, member_results))
            confidence = sum(w * result.predictions[i].confidence for w, result in zip(self.weights, member_results))
            predictions.append(
                ForecastPoint(date=member_results[0].predictions[i].date, price=price, confidence=confidence)
            )

        return ModelResult(
            model_name=self.get_model_name(),
            predictions=tuple(predictions),
            accuracy=self.accuracy,
            mse=sum(result.mse for result in member_results) / len(member_results),
        )
