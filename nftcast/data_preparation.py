"""
Data Preparation Module

Loads a price history from CSV, or builds a synthetic monthly history anchored at
a base price (typically the collection floor price), and turns it into the
immutable series the forecasting engine consumes.
"""

import math
import pandas as pd
import numpy as np
from datetime import date
from pathlib import Path
from typing import Optional, Union
import logging

from .types import HistoricalSeries
from .utils import DataValidator

logger = logging.getLogger(__name__)


class DataPreparation:
    """Handles all data preparation tasks for the forecasting pipeline"""

    def __init__(self, data_file: Optional[Union[str, Path]] = None) -> None:
        self.data_file: Optional[Path] = Path(data_file) if data_file is not None else None

        # Configuration
        self.default_base_price: float = 45.2
        self.default_months: int = 12

        # Initialize utilities
        self.validator: DataValidator = DataValidator()

    def load_history(self) -> HistoricalSeries:
        """Load, validate and clean the price history CSV"""
        if self.data_file is None:
            raise ValueError("No data file configured")
        if not self.data_file.exists():
            raise FileNotFoundError(f"Data file not found: {self.data_file}")

        logger.debug(f"Loading price history from {self.data_file}...")
        raw_data = pd.read_csv(self.data_file)
        self.validator.validate_data(raw_data)

        data = self.validator.prepare_datetime_column(raw_data)
        data = self.validator.clean_data_columns(data)
        logger.debug(f"Price history loaded: {len(data):,} rows")

        return self.validator.frame_to_series(data)

    def generate_mock_history(
        self,
        months: Optional[int] = None,
        base_price: Optional[float] = None,
        rng: Optional[np.random.Generator] = None,
        as_of: Optional[date] = None,
    ) -> HistoricalSeries:
        """
        Synthetic monthly history ending at as_of.

        Produces months + 1 points. Each point mixes a random drift, an annual
        cycle and noise around base_price, floored at 20% of base_price.
        """
        months = self.default_months if months is None else months
        base_price = self.default_base_price if base_price is None else base_price
        rng = rng if rng is not None else np.random.default_rng()
        end = pd.Timestamp(as_of if as_of is not None else date.today())

        if months < 0:
            raise ValueError(f"Months must be non-negative, got {months}")
        if base_price <= 0:
            raise ValueError(f"Base price must be positive, got {base_price}")

        rows = []
        for i in range(months, -1, -1):
            trend = -0.02 + rng.random() * 0.04
            seasonality = math.sin(2 * math.pi * i / 12) * 0.1
            noise = (rng.random() - 0.5) * 0.2
            price = max(base_price * (1 + trend * i + seasonality + noise), base_price * 0.2)

            rows.append(
                {
                    "date": end - pd.DateOffset(months=i),
                    "price": price,
                    "volume": rng.random() * 1000 + 100,
                    "market_cap": price * (rng.random() * 10000 + 5000),
                }
            )

        data = pd.DataFrame(rows).sort_values("date").reset_index(drop=True)
        logger.debug(f"Generated {len(data)} mock history points around base price {base_price:.4f}")
        return self.validator.frame_to_series(data)

    def prepare_history(
        self,
        months: Optional[int] = None,
        base_price: Optional[float] = None,
        rng: Optional[np.random.Generator] = None,
        as_of: Optional[date] = None,
    ) -> HistoricalSeries:
        """Use the configured CSV if there is one, otherwise a mock history"""
        if self.data_file is not None:
            return self.load_history()
        return self.generate_mock_history(months=months, base_price=base_price, rng=rng, as_of=as_of)

    @staticmethod
    def history_frame(series: HistoricalSeries) -> pd.DataFrame:
        return pd.DataFrame(
            {
                "date": pd.to_datetime([point.date for point in series]),
                "price": [point.price for point in series],
                "volume": [point.volume for point in series],
                "market_cap": [point.market_cap for point in series],
            }
        )
