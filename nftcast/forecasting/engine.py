import logging
from datetime import date
from typing import Dict, Iterable, Optional, Union

import numpy as np

from ..types import HistoricalSeries, ModelKind, ModelResult, PricePoint
from ..utils import DataValidator
from .arima import ArimaForecaster
from .ensemble import EnsembleForecaster
from .forecast import BaseForecaster
from .lstm import LSTMForecaster
from .random_forest import RandomForestForecaster
from .xgboost import XGBoostForecaster

logger = logging.getLogger(__name__)


class ForecastingEngine:
    """Main forecasting engine that dispatches a fixed price history to the forecasting methods"""

    def __init__(
        self,
        series: Iterable[PricePoint],
        rng: Optional[np.random.Generator] = None,
        seed: Optional[int] = None,
        timeout: Optional[float] = None,
        mse_window: int = 5,
    ):
        self.series: HistoricalSeries = DataValidator.validate_series(series)
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.timeout = timeout
        self.mse_window = mse_window

        self.forecasters: Dict[ModelKind, BaseForecaster] = {
            ModelKind.GRADIENT: XGBoostForecaster(mse_window),
            ModelKind.SEQUENTIAL: LSTMForecaster(mse_window),
            ModelKind.BOOTSTRAP: RandomForestForecaster(mse_window),
            ModelKind.AUTOREGRESSIVE: ArimaForecaster(mse_window),
            ModelKind.ENSEMBLE: EnsembleForecaster(mse_window, timeout=timeout),
        }

        logger.debug(f"Forecasting engine ready with {len(self.series)} historical points")

    @property
    def last_price(self) -> Optional[float]:
        return self.series[-1].price if self.series else None

    def forecast(
        self,
        model_kind: Union[ModelKind, str],
        horizon: int,
        as_of: Optional[date] = None,
    ) -> ModelResult:
        """
        Forecast `horizon` monthly periods with one model

        Args:
            model_kind: One of gradient, sequential, bootstrap, autoregressive, ensemble
            horizon: Number of periods, a positive integer
            as_of: Invocation date; the first forecast is one month later (default: today)

        Returns:
            ModelResult with exactly `horizon` predictions. Forecasting failures are
            never raised; they produce the fallback forecast instead.
        """
        kind = ModelKind(model_kind)
        if isinstance(horizon, bool) or not isinstance(horizon, (int, np.integer)) or horizon < 1:
            raise ValueError(f"Horizon must be a positive integer, got {horizon!r}")

        forecaster = self.forecasters[kind]
        return forecaster.forecast(self.series, int(horizon), self.rng, as_of)

    def forecast_all(self, horizon: int, as_of: Optional[date] = None) -> Dict[ModelKind, ModelResult]:
        """Run every model, including the ensemble, against the same invocation date"""
        as_of = as_of if as_of is not None else date.today()
        return {kind: self.forecast(kind, horizon, as_of) for kind in ModelKind}
