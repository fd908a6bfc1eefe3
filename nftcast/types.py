from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Dict, List, Optional, Tuple

import pandas as pd


@dataclass(frozen=True)
class PricePoint:
    date: date
    price: float
    volume: Optional[float] = None
    market_cap: Optional[float] = None


@dataclass(frozen=True)
class ForecastPoint:
    date: date
    price: float
    confidence: float


@dataclass(frozen=True)
class ModelResult:
    """Output of a single forecaster run"""

    model_name: str
    predictions: Tuple[ForecastPoint, ...]
    accuracy: float
    mse: float

    @property
    def prices(self) -> List[float]:
        return [p.price for p in self.predictions]

    @property
    def confidences(self) -> List[float]:
        return [p.confidence for p in self.predictions]

    @property
    def final_price(self) -> Optional[float]:
        return self.predictions[-1].price if self.predictions else None

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            {
                "date": pd.to_datetime([p.date for p in self.predictions]),
                "price": self.prices,
                "confidence": self.confidences,
                "model": self.model_name,
            }
        )


class ModelKind(str, Enum):
    GRADIENT = "gradient"
    SEQUENTIAL = "sequential"
    BOOTSTRAP = "bootstrap"
    AUTOREGRESSIVE = "autoregressive"
    ENSEMBLE = "ensemble"

    @property
    def label(self) -> str:
        return MODEL_LABELS[self]


MODEL_LABELS: Dict[ModelKind, str] = {
    ModelKind.GRADIENT: "XGBoost",
    ModelKind.SEQUENTIAL: "LSTM",
    ModelKind.BOOTSTRAP: "Random Forest",
    ModelKind.AUTOREGRESSIVE: "ARIMA",
    ModelKind.ENSEMBLE: "Ensemble",
}

# Type aliases
HistoricalSeries = Tuple[PricePoint, ...]
