from datetime import date
from typing import List, Optional

import pandas as pd


def forecast_dates(horizon: int, as_of: Optional[date] = None) -> List[date]:
    """Monthly dates starting one month after as_of (default: today)"""
    start = pd.Timestamp(as_of if as_of is not None else date.today())
    return [(start + pd.DateOffset(months=i)).date() for i in range(1, horizon + 1)]
