"""
End-to-end forecast evaluation: load sales, backtest models, compare.

CLI
---
retail-forecast-eval --config evaluation_config.yaml --set evaluation.horizon=13
"""

import argparse
import functools
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd

from retail_forecast.data.loaders import DataLoader
from retail_forecast.data.structs import ObservationSeries
from retail_forecast.evaluation.backtest import BacktestResult, BacktestRunner, ModelFactory
from retail_forecast.evaluation.comparison import ModelComparator
from retail_forecast.models import FEATURE_MODELS, create_model
from retail_forecast.utils.config_manager import DEFAULT_CONFIG, ConfigManager, parse_override
from retail_forecast.utils.logging_config import get_logger, setup_logging
from retail_forecast.utils.serialization import save_frame, save_json

logger = logging.getLogger(__name__)


@dataclass
class EvaluationReport:
    """Outcome of one evaluation run."""
    backtest: BacktestResult
    comparison: pd.DataFrame
    best_model: Optional[str]
    output_dir: Optional[Path] = None


def build_model_factories(
    model_configs: List[Dict[str, Any]],
    feature_config: Optional[Dict[str, Any]] = None,
) -> Dict[str, ModelFactory]:
    """
    Turn the `models` config section into label -> factory pairs.

    Each entry has a registry `name`, optional constructor `params` and an
    optional display `label` (defaults to the name). Feature-based models
    receive `feature_config` unless their params set one.
    """
    factories: Dict[str, ModelFactory] = {}
    for entry in model_configs:
        name = entry["name"]
        label = entry.get("label", name)
        if label in factories:
            raise ValueError(f"Duplicate model label: {label}")
        params = dict(entry.get("params") or {})
        if name in FEATURE_MODELS and feature_config is not None:
            params.setdefault("feature_config", feature_config)
        # Fail on unknown names or bad params before any fitting starts
        create_model(name, **params)
        factories[label] = functools.partial(create_model, name, **params)
    return factories


def load_collection(data_config: Dict[str, Any]) -> List[ObservationSeries]:
    """Load the configured table and split it into per-key series."""
    loader = DataLoader()
    df = loader.load_table(data_config["path"], schema=data_config.get("schema"))
    return loader.to_series_collection(
        df,
        time_column=data_config["time_column"],
        value_column=data_config["value_column"],
        key_columns=data_config.get("key_columns"),
        agg=data_config.get("aggregation", "sum"),
        date_format=data_config.get("date_format"),
    )


def run_evaluation(
    config: Dict[str, Any],
    collection: Optional[Sequence[ObservationSeries]] = None,
) -> EvaluationReport:
    """
    Backtest every configured model on every series and compare them.

    Args:
        config: Evaluation configuration (see config/evaluation_config.yaml)
        collection: Pre-built series; loaded from config['data'] if None

    Returns:
        EvaluationReport with per-series metrics and the model comparison
    """
    eval_config = config.get("evaluation", {})
    factories = build_model_factories(config["models"], config.get("features"))

    if collection is None:
        collection = load_collection(config["data"])
    logger.info(f"Evaluating {len(factories)} models on {len(collection)} series")

    runner = BacktestRunner(skip_invalid=eval_config.get("skip_invalid", True))
    backtest = runner.evaluate_collection(
        collection,
        factories,
        horizon=eval_config["horizon"],
        n_folds=eval_config.get("n_folds", 1),
        step=eval_config.get("step"),
    )

    comparator = ModelComparator()
    comparison = comparator.summarize(backtest)
    best = comparator.best_model(backtest) if backtest.results else None

    report = EvaluationReport(backtest=backtest, comparison=comparison, best_model=best)

    output_dir = config.get("output", {}).get("dir")
    if output_dir:
        report.output_dir = write_outputs(report, Path(output_dir), config)

    return report


def write_outputs(report: EvaluationReport, output_dir: Path, config: Dict[str, Any]) -> Path:
    """Write metrics.csv, comparison.csv and summary.json."""
    output_dir.mkdir(parents=True, exist_ok=True)

    save_frame(report.backtest.to_frame(), output_dir / "metrics.csv", index=False)
    save_frame(report.comparison, output_dir / "comparison.csv")
    save_json(
        {
            "best_model": report.best_model,
            "comparison": report.comparison.reset_index().to_dict(orient="records"),
            "backtest": report.backtest.to_dict(),
            "config": config,
        },
        output_dir / "summary.json",
    )

    logger.info(f"Evaluation outputs written to {output_dir}")
    return output_dir


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Backtest and compare sales forecasting models.")
    parser.add_argument("--config-dir", default=None, help="Directory holding configs and schemas/")
    parser.add_argument("--config", default=DEFAULT_CONFIG, help="Config file name")
    parser.add_argument("--log-level", default=None, help="Override the configured log level")
    parser.add_argument(
        "--set",
        dest="overrides",
        action="append",
        default=[],
        metavar="PATH=VALUE",
        help="Override a config value by dotted path (repeatable)",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)

    manager = ConfigManager(config_dir=args.config_dir)
    overrides: Dict[str, Any] = {}
    for text in args.overrides:
        overrides.update(parse_override(text))
    config = manager.load_evaluation_config(args.config, overrides=overrides)

    log_config = config.get("logging", {})
    setup_logging(
        log_level=args.log_level or log_config.get("level", "INFO"),
        log_dir=log_config.get("dir"),
    )
    cli_logger = get_logger("retail_forecast.cli")

    report = run_evaluation(config)

    if report.comparison.empty:
        cli_logger.error("No series could be evaluated; see skipped entries in the log")
        return 1

    print("\nModel comparison (mean over series and folds)")
    print(report.comparison.round(4).to_string())
    print(f"\nBest model by RMSE: {report.best_model}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
