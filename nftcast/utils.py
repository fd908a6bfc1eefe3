"""
Utility functions for the forecasting pipeline
"""

import math
import numpy as np
import pandas as pd
from typing import Iterable, List, Tuple
import logging

from .types import HistoricalSeries, PricePoint

logger = logging.getLogger(__name__)


class DataValidator:
    """Validates price history integrity before forecasting"""

    @staticmethod
    def validate_data(data: pd.DataFrame) -> None:
        """Validate that required columns exist"""
        required_columns: List[str] = ["date", "price"]
        missing_columns = [col for col in required_columns if col not in data.columns]
        if missing_columns:
            raise ValueError(f"Missing required columns: {missing_columns}")

    @staticmethod
    def prepare_datetime_column(data: pd.DataFrame) -> pd.DataFrame:
        """Convert date column to datetime and handle invalid dates"""
        data = data.copy()
        data["date"] = pd.to_datetime(data["date"], errors="coerce")

        invalid_dates_mask = data["date"].isna()
        if invalid_dates_mask.sum() > 0:
            logger.warning(f"Removing {invalid_dates_mask.sum()} rows with invalid dates")
            data = pd.DataFrame(data[~invalid_dates_mask])

        return data

    @staticmethod
    def clean_data_columns(data: pd.DataFrame) -> pd.DataFrame:
        """Coerce numeric columns, drop unusable prices, sort and de-duplicate dates"""
        data = data.copy()
        data["price"] = pd.to_numeric(data["price"], errors="coerce")
        for col in ["volume", "market_cap"]:
            if col in data.columns:
                data[col] = pd.to_numeric(data[col], errors="coerce")

        invalid_price_mask = ~np.isfinite(data["price"]) | (data["price"] <= 0)
        if invalid_price_mask.sum() > 0:
            logger.warning(f"Removing {invalid_price_mask.sum()} rows with missing, non-finite or non-positive prices")
            data = pd.DataFrame(data[~invalid_price_mask])

        # Optional columns are blanked rather than dropping the price
        for col in ["volume", "market_cap"]:
            if col in data.columns:
                invalid_mask = np.isinf(data[col]) | (data[col] < 0)
                if invalid_mask.sum() > 0:
                    logger.warning(f"Clearing {invalid_mask.sum()} negative or non-finite {col} values")
                    data[col] = data[col].astype(float).mask(invalid_mask)

        data["date"] = data["date"].dt.normalize()
        duplicate_mask = data["date"].duplicated(keep="last")
        if duplicate_mask.sum() > 0:
            logger.warning(f"Removing {duplicate_mask.sum()} rows with duplicate dates")
            data = pd.DataFrame(data[~duplicate_mask])

        return data.sort_values("date").reset_index(drop=True)

    @staticmethod
    def frame_to_series(data: pd.DataFrame) -> HistoricalSeries:
        """Convert a cleaned DataFrame into an immutable series of PricePoints"""
        points = []
        for row in data.itertuples(index=False):
            volume = getattr(row, "volume", None)
            market_cap = getattr(row, "market_cap", None)
            points.append(
                PricePoint(
                    date=pd.Timestamp(row.date).date(),
                    price=float(row.price),
                    volume=None if volume is None or pd.isna(volume) else float(volume),
                    market_cap=None if market_cap is None or pd.isna(market_cap) else float(market_cap),
                )
            )
        return tuple(points)

    @staticmethod
    def validate_series(points: Iterable[PricePoint]) -> HistoricalSeries:
        """Sort a series by date and reject duplicates or invalid values"""
        series: Tuple[PricePoint, ...] = tuple(sorted(points, key=lambda p: p.date))

        for previous, current in zip(series, series[1:]):
            if previous.date == current.date:
                raise ValueError(f"Duplicate date in price history: {current.date}")

        for point in series:
            if not math.isfinite(point.price) or point.price <= 0:
                raise ValueError(f"Price must be positive, got {point.price} on {point.date}")
            for name in ("volume", "market_cap"):
                value = getattr(point, name)
                if value is not None and value < 0:
                    raise ValueError(f"{name} must be non-negative, got {value} on {point.date}")

        return series
