"""
NFT Price Forecasting - Main Script

This script orchestrates the forecasting run:
1. Data Preparation: load a price history CSV, or build a mock history anchored at a
   base price (optionally the collection floor price resolved from OpenSea)
2. Forecasting: run the heuristic models and the weighted ensemble
3. Results Export: write the combined history/forecast table and a model summary
"""

import logging
import sys
from datetime import date
from typing import Optional

import click
import numpy as np
from tqdm import tqdm

from nftcast import DataPreparation, ForecastingEngine, ModelKind, OpenSeaClient, ResultsExporter
from nftcast.marketplace import MarketplaceError
from nftcast.validation import ForecastValidator, ValidationConfig

logger = logging.getLogger(__name__)


@click.command()
@click.option(
    "--model",
    "-m",
    type=click.Choice([kind.value for kind in ModelKind] + ["all"], case_sensitive=False),
    default="all",
    help="Forecasting model to use",
)
@click.option("--horizon", "-h", type=click.IntRange(min=1), default=5, help="Months to forecast")
@click.option("--data-file", type=click.Path(dir_okay=False), default=None, help="Price history CSV (date, price)")
@click.option("--months", type=click.IntRange(min=0), default=12, help="Months of mock history")
@click.option("--base-price", type=float, default=None, help="Anchor price for mock history")
@click.option("--identifier", "-i", default=None, help="OpenSea asset URL or collection slug to anchor on")
@click.option("--seed", type=int, default=None, help="Random seed for reproducible runs")
@click.option("--timeout", type=float, default=None, help="Ensemble deadline per run, in seconds")
@click.option("--validate", is_flag=True, default=False, help="Report holdout validation metrics")
@click.option("--holdout", type=click.IntRange(min=1), default=3, help="Points held out for validation")
@click.option("--export-dir", type=click.Path(file_okay=False), default=None, help="Write CSV results here")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Debug logging")
def main(
    model: str,
    horizon: int,
    data_file: Optional[str],
    months: int,
    base_price: Optional[float],
    identifier: Optional[str],
    seed: Optional[int],
    timeout: Optional[float],
    validate: bool,
    holdout: int,
    export_dir: Optional[str],
    verbose: bool,
) -> None:
    """
    Run heuristic NFT price forecasts.

    History → Models → Ensemble
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        force=True,
    )

    try:
        rng = np.random.default_rng(seed)
        as_of = date.today()

        logger.info("=" * 60)
        logger.info("STEP 1: DATA PREPARATION")
        logger.info("=" * 60)

        if identifier and data_file is None:
            floor_price = OpenSeaClient().resolve_floor_price(identifier)
            if floor_price > 0:
                base_price = floor_price
            else:
                logger.warning("No floor price available - using default base price")

        data_prep = DataPreparation(data_file=data_file)
        history = data_prep.prepare_history(months=months, base_price=base_price, rng=rng, as_of=as_of)
        logger.info(f"History: {len(history)} points")

        logger.info("=" * 60)
        logger.info("STEP 2: FORECASTING")
        logger.info("=" * 60)

        engine = ForecastingEngine(history, rng=rng, timeout=timeout)
        kinds = list(ModelKind) if model.lower() == "all" else [ModelKind(model.lower())]

        results = []
        for kind in tqdm(kinds, desc="Running forecasters", disable=len(kinds) == 1):
            result = engine.forecast(kind, horizon, as_of=as_of)
            results.append(result)

            summary = ", ".join(f"{p.date:%Y-%m}: {p.price:.4f} ({p.confidence:.0%})" for p in result.predictions)
            logger.info(f"{result.model_name:<14} accuracy={result.accuracy:.2f} mse={result.mse:.4f} | {summary}")

            if validate:
                metrics = ForecastValidator.validate_forecast_model(
                    engine, kind, ValidationConfig(holdout_periods=holdout)
                )
                if metrics:
                    logger.info(
                        f"{'':<14} holdout MAPE={metrics['MAPE']:.1f}% MAE={metrics['MAE']:.4f} "
                        f"direction={metrics['directional_accuracy']:.1f}%"
                    )

        if export_dir is not None:
            logger.info("=" * 60)
            logger.info("STEP 3: RESULTS EXPORT")
            logger.info("=" * 60)
            ResultsExporter(export_dir).export_all_results(history, results)

    except MarketplaceError as e:
        logger.error(f"Marketplace lookup failed: {e}")
        sys.exit(2)
    except (ValueError, FileNotFoundError) as e:
        logger.error(f"Forecast run failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
