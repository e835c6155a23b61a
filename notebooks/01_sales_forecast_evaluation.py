# 01_sales_forecast_evaluation.py
import marimo

__generated_with = "0.1.0"
app = marimo.App(width="medium")

@app.cell
def __():
    import marimo as mo
    from pathlib import Path
    import sys

    # Add project root to path
    project_root = Path(__file__).parent.parent.resolve()
    if str(project_root) not in sys.path:
        sys.path.insert(0, str(project_root))

    from retail_forecast.data.splitters import TimeSeriesSplitter
    from retail_forecast.features.engineering import FeatureBuilder
    from retail_forecast.pipeline import run_evaluation, load_collection
    from retail_forecast.utils.config_manager import ConfigManager
    from retail_forecast.utils.logging_config import setup_logging

    setup_logging(log_level="INFO")

    mo.md("# Retail Sales Forecast Evaluation")
    return ConfigManager, FeatureBuilder, Path, TimeSeriesSplitter, load_collection, mo, project_root, run_evaluation, setup_logging, sys


@app.cell
def __(mo):
    mo.md("## 1. Configuration")
    return


@app.cell
def __(ConfigManager, project_root):
    manager = ConfigManager(config_dir=str(project_root / "config"))
    CONFIG = manager.load_evaluation_config("evaluation_config.yaml")
    print(f"Data: {CONFIG['data']['path']}")
    print(f"Horizon: {CONFIG['evaluation']['horizon']} periods, "
          f"{CONFIG['evaluation'].get('n_folds', 1)} fold(s)")
    print(f"Models: {[m.get('label', m['name']) for m in CONFIG['models']]}")
    return CONFIG, manager


@app.cell
def __(mo):
    mo.md("## 2. Load Series")
    return


@app.cell
def __(CONFIG, load_collection):
    collection = load_collection(CONFIG["data"])
    lengths = [len(s) for s in collection]
    print(f"Loaded {len(collection)} series "
          f"(length min {min(lengths)}, max {max(lengths)})")
    return collection, lengths


@app.cell
def __(mo):
    mo.md("## 3. Train / Validation Split and Features")
    return


@app.cell
def __(CONFIG, FeatureBuilder, TimeSeriesSplitter, collection, mo):
    # Preview on the longest series
    example = max(collection, key=len)
    split = TimeSeriesSplitter().split(example, CONFIG["evaluation"]["horizon"])
    print(f"Series {example.key!r}: train {len(split.train)} / validation {len(split.validation)}")
    print(f"Validation window: {split.metadata['validation_start']} -> {split.metadata['validation_end']}")

    builder = FeatureBuilder(CONFIG.get("features"))
    features = builder.build(split.train).to_frame()
    mo.ui.table(features.tail(12).reset_index())
    return builder, example, features, split


@app.cell
def __(mo):
    mo.md("## 4. Backtest & Model Comparison")
    return


@app.cell
def __(CONFIG, collection, mo, run_evaluation):
    report = run_evaluation(CONFIG, collection=collection)
    print(f"Scored {len(report.backtest.results)} forecasts, "
          f"skipped {len(report.backtest.skipped)}")
    print(f"Best model by RMSE: {report.best_model}")
    mo.ui.table(report.comparison.round(4).reset_index())
    return report,


@app.cell
def __(mo, report):
    mo.md("## 5. Skipped Series")
    mo.ui.table(report.backtest.skipped) if report.backtest.skipped else mo.md("None.")
    return


if __name__ == "__main__":
    app.run()
