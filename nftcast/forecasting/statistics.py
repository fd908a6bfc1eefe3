"""
Statistics helpers shared by the forecasters.

All functions take plain sequences of prices and return floats or lists, so they
can be reused without building DataFrames.
"""

import math
from typing import List, Sequence

import numpy as np

MA_COEFFICIENT = 0.3
DEFAULT_VOLATILITY = 0.1
DEFAULT_AR_COEFFICIENT = 0.5
AR_CLAMP = 0.9


def _slope(x: Sequence[float], y: Sequence[float]) -> float:
    """Ordinary least squares slope of y against x"""
    x_arr = np.asarray(x, dtype=float)
    y_arr = np.asarray(y, dtype=float)
    x_centered = x_arr - x_arr.mean()
    denominator = float(np.sum(x_centered**2))
    if denominator == 0:
        return 0.0
    return float(np.sum(x_centered * (y_arr - y_arr.mean())) / denominator)


def trend(prices: Sequence[float]) -> float:
    """Per-step drift: OLS slope against index, relative to the last price"""
    if len(prices) < 2:
        return 0.0
    return _slope(range(len(prices)), prices) / float(prices[-1])


def seasonality(period: int) -> float:
    return math.sin(2 * math.pi * period / 12) * 0.02


def volatility(prices: Sequence[float]) -> float:
    """Population standard deviation of period-over-period returns"""
    if len(prices) < 2:
        return DEFAULT_VOLATILITY
    values = np.asarray(prices, dtype=float)
    returns = np.diff(values) / values[:-1]
    return float(np.std(returns))


def difference(prices: Sequence[float]) -> List[float]:
    return np.diff(np.asarray(prices, dtype=float)).tolist()


def ar_coefficient(diffs: Sequence[float]) -> float:
    """Lag-1 regression slope of a differenced series, clamped to [-0.9, 0.9]"""
    if len(diffs) < 2:
        return DEFAULT_AR_COEFFICIENT
    slope = _slope(diffs[:-1], diffs[1:])
    return max(-AR_CLAMP, min(AR_CLAMP, slope))


def ma_coefficient(diffs: Sequence[float]) -> float:
    # Not estimated
    return MA_COEFFICIENT


def bootstrap_sample(population_size: int, sample_size: int, rng: np.random.Generator) -> List[int]:
    """Draw distinct indices from [0, population_size), returned in draw order"""
    if sample_size > population_size:
        raise ValueError(f"Cannot draw {sample_size} distinct indices from {population_size}")
    return rng.choice(population_size, size=sample_size, replace=False).tolist()


def mse(actual: Sequence[float], predicted: Sequence[float]) -> float:
    """
    Mean squared error of two position-aligned sequences.

    Returns 0.0 for empty input and for sequences of different length.
    """
    if len(actual) != len(predicted) or len(actual) == 0:
        return 0.0
    errors = np.asarray(actual, dtype=float) - np.asarray(predicted, dtype=float)
    return float(np.mean(errors**2))
