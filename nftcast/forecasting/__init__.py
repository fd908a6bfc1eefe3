"""
Forecasting Modules

Four heuristic forecasters, a fixed-weight ensemble and the fallback forecast,
all behind a common interface.
"""

from .forecast import BaseForecaster
from .engine import ForecastingEngine
from .fallback import FallbackGenerator
from .xgboost import XGBoostForecaster
from .lstm import LSTMForecaster
from .random_forest import RandomForestForecaster
from .arima import ArimaForecaster
from .ensemble import EnsembleForecaster


__all__ = [
    "BaseForecaster",
    "ForecastingEngine",
    "FallbackGenerator",
    "XGBoostForecaster",
    "LSTMForecaster",
    "RandomForestForecaster",
    "ArimaForecaster",
    "EnsembleForecaster",
]
