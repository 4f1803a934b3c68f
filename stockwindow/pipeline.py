# stockwindow/pipeline.py
"""
End-to-end run: split -> scale -> window -> train -> predict -> score -> plot.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Dict, Optional

import numpy as np
import pandas as pd
from sklearn.metrics import mean_absolute_error, mean_squared_error

from stockwindow import scaling
from stockwindow.data import split_series
from stockwindow.models import build_lstm, predict_windows, save_artifacts, train_model
from stockwindow.plots import plot_actual_vs_pred, plot_predictions
from stockwindow.reports import write_experiment_report
from stockwindow.windows import build_windows, target_days, truncate_to_window_multiple

logger = logging.getLogger(__name__)


@dataclass
class WindowedSplit:
    X: np.ndarray
    y: np.ndarray
    days: np.ndarray


@dataclass
class ExperimentResult:
    scaler: scaling.ScalerState
    split_at: int
    train: WindowedSplit
    test: WindowedSplit
    train_pred: np.ndarray
    test_pred: np.ndarray
    metrics: Dict[str, Dict[str, float]]
    model: object = None
    config: object = None
    artifacts: Dict[str, str] = field(default_factory=dict)


def prepare_windows(prices, config):
    """
    Split, fit the scaler on the train prefix only, scale both splits with
    that state, truncate each to a multiple of the window and build pairs.
    """
    prices = np.asarray(prices, dtype=float).reshape(-1)
    train_raw, test_raw = split_series(prices, config.split_ratio)
    split_at = len(train_raw)

    scaler = scaling.fit(train_raw, config.target_min, config.target_max)
    train_scaled = scaler.transform(train_raw)
    test_scaled = scaler.transform(test_raw)

    T = config.window_size
    splits = {}
    for name, scaled, offset in (("train", train_scaled, 0), ("test", test_scaled, split_at)):
        X, y = build_windows(truncate_to_window_multiple(scaled, T), T)
        if len(y) == 0:
            raise ValueError(
                f"{name} split has {len(scaled)} values, not enough for one window of size {T}"
            )
        splits[name] = WindowedSplit(X=X, y=y, days=target_days(len(y), T, offset))

    logger.info(
        "Windows: train=%d test=%d (window=%d, split at day %d)",
        len(splits["train"].y), len(splits["test"].y), T, split_at,
    )
    return scaler, split_at, splits["train"], splits["test"]


def score(y_true, y_pred) -> Dict[str, float]:
    mse = mean_squared_error(y_true, y_pred)
    return {
        "rmse": float(np.sqrt(mse)),
        "mae": float(mean_absolute_error(y_true, y_pred)),
        "n": int(len(y_true)),
    }


def run_experiment(
    prices,
    config,
    name: str = "series",
    outputs_dir: Optional[str] = None,
    plots_dir: Optional[str] = None,
    models_dir: Optional[str] = None,
) -> ExperimentResult:
    prices = np.asarray(prices, dtype=float).reshape(-1)
    scaler, split_at, train, test = prepare_windows(prices, config)

    model = build_lstm(config.window_size, config.lstm_units, config.learning_rate)
    train_model(model, train.X, train.y, batch_size=config.batch_size, epochs=config.epochs)

    train_pred = scaler.inverse_transform(predict_windows(model, train.X))
    test_pred = scaler.inverse_transform(predict_windows(model, test.X))

    # window outputs were scaled from the raw prices at the same days
    metrics = {
        "train": score(prices[train.days], train_pred),
        "test": score(prices[test.days], test_pred),
    }
    logger.info("Test RMSE %.4f, MAE %.4f", metrics["test"]["rmse"], metrics["test"]["mae"])

    result = ExperimentResult(
        scaler=scaler,
        split_at=split_at,
        train=train,
        test=test,
        train_pred=train_pred,
        test_pred=test_pred,
        metrics=metrics,
        model=model,
        config=config,
    )

    if plots_dir is not None:
        result.artifacts["predictions_plot"] = plot_predictions(
            prices, train.days, train_pred, test.days, test_pred,
            plots_dir, title=f"{name} – LSTM window forecast", split_at=split_at,
        )
        result.artifacts["test_plot"] = plot_actual_vs_pred(
            prices[test.days], test_pred, title=f"{name} – LSTM", plots_dir=plots_dir,
        )

    if outputs_dir is not None:
        os.makedirs(outputs_dir, exist_ok=True)
        metrics_path = os.path.join(outputs_dir, "metrics.csv")
        rows = [{"split": split, **values} for split, values in metrics.items()]
        pd.DataFrame(rows).to_csv(metrics_path, index=False)
        result.artifacts["metrics"] = metrics_path

        pred_path = os.path.join(outputs_dir, "test_predictions.csv")
        pd.DataFrame(
            {"day": test.days, "actual": prices[test.days], "predicted": test_pred}
        ).to_csv(pred_path, index=False)
        result.artifacts["test_predictions"] = pred_path

        result.artifacts["report"] = write_experiment_report(
            metrics_path,
            plots_dir or "plots",
            os.path.join(outputs_dir, "report.md"),
            config=config,
        )

    if models_dir is not None:
        model_path, scaler_path = save_artifacts(model, scaler, name, models_dir)
        result.artifacts["model"] = str(model_path)
        result.artifacts["scaler"] = str(scaler_path)

    return result
