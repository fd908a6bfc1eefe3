"""
NFT Price Forecasting

Heuristic price forecasts for NFT collections, anchored at marketplace floor prices.
"""

from .data_preparation import DataPreparation
from .forecasting import ForecastingEngine
from .export_results import ResultsExporter
from .marketplace import OpenSeaClient
from .types import ForecastPoint, ModelKind, ModelResult, PricePoint
from .utils import DataValidator

__all__ = [
    "DataPreparation",
    "ForecastingEngine",
    "ResultsExporter",
    "OpenSeaClient",
    "ForecastPoint",
    "ModelKind",
    "ModelResult",
    "PricePoint",
    "DataValidator",
]
