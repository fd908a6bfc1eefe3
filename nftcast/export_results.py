"""
Export Results Module

Combines price history and model forecasts into flat tables and exports them.
"""

import pandas as pd
from pathlib import Path
from typing import Dict, Iterable, Union
import logging

from .data_preparation import DataPreparation
from .types import HistoricalSeries, ModelResult

logger = logging.getLogger(__name__)


class ResultsExporter:
    """Handles result tables and CSV exports"""

    def __init__(self, output_dir: Union[str, Path] = "."):
        self.output_dir = Path(output_dir)

    def create_final_dataset(self, history: HistoricalSeries, results: Iterable[ModelResult]) -> pd.DataFrame:
        """Long-format table of history rows followed by every model's forecast rows"""
        history_data = DataPreparation.history_frame(history)[["date", "price"]].copy()
        history_data["confidence"] = 1.0
        history_data["model"] = "Historical"
        history_data["is_forecast"] = False

        frames = [history_data]
        for result in results:
            forecast_data = result.to_frame()
            forecast_data["is_forecast"] = True
            frames.append(forecast_data)

        final_data = pd.concat(frames, ignore_index=True)
        final_data["date"] = pd.to_datetime(final_data["date"]).dt.strftime("%Y-%m-%d")

        logger.debug(f"Final dataset: {len(final_data):,} rows")
        return final_data

    def summarize(self, results: Iterable[ModelResult]) -> pd.DataFrame:
        """One row per model with its tags and final projected point"""
        rows = []
        for result in results:
            last = result.predictions[-1] if result.predictions else None
            rows.append(
                {
                    "model": result.model_name,
                    "accuracy": result.accuracy,
                    "mse": result.mse,
                    "final_price": last.price if last else None,
                    "final_confidence": last.confidence if last else None,
                }
            )
        return pd.DataFrame(rows, columns=["model", "accuracy", "mse", "final_price", "final_confidence"])

    def export_all_results(self, history: HistoricalSeries, results: Iterable[ModelResult]) -> Dict[str, Path]:
        """Write forecast.csv and model_summary.csv to the output directory"""
        results = list(results)
        self.output_dir.mkdir(parents=True, exist_ok=True)

        forecast_file = self.output_dir / "forecast.csv"
        summary_file = self.output_dir / "model_summary.csv"

        self.create_final_dataset(history, results).to_csv(forecast_file, index=False)
        logger.info(f"✓ Forecasts exported to {forecast_file}")

        self.summarize(results).to_csv(summary_file, index=False)
        logger.info(f"✓ Model summary exported to {summary_file}")

        return {"forecast": forecast_file, "summary": summary_file}
