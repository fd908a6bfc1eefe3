from datetime import date

import numpy as np
import pandas as pd
import pytest

from nftcast.types import PricePoint

AS_OF = date(2025, 1, 15)


class ConstantRandom:
    """Stand-in for np.random.Generator whose uniform draws are fixed"""

    def __init__(self, value: float = 0.5):
        self.value = value

    def random(self) -> float:
        return self.value


def make_series(prices, start: str = "2024-01-01"):
    dates = pd.date_range(start=start, periods=len(prices), freq="MS")
    return tuple(PricePoint(date=d.date(), price=float(p)) for d, p in zip(dates, prices))


@pytest.fixture
def as_of() -> date:
    return AS_OF


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(42)


@pytest.fixture
def linear_series():
    """12 monthly points rising linearly from 40 to 45"""
    return make_series(np.linspace(40.0, 45.0, 12))


@pytest.fixture
def volatile_series():
    rng = np.random.default_rng(7)
    return make_series(50 * np.exp(np.cumsum(rng.normal(0, 0.08, 24))))
