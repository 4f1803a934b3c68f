# stockwindow/plots.py

import os

import matplotlib.pyplot as plt
import numpy as np


def plot_predictions(
    prices,
    train_days,
    train_pred,
    test_days,
    test_pred,
    plots_dir: str,
    title: str = "LSTM window forecast",
    split_at=None,
):
    """
    Full price series with train and test predictions drawn at their absolute
    day indices.
    """
    os.makedirs(plots_dir, exist_ok=True)

    prices = np.asarray(prices, dtype=float).flatten()

    plt.figure(figsize=(16, 6))
    plt.plot(np.arange(len(prices)), prices, label="Actual", color="tab:blue", linewidth=1.5)
    plt.plot(train_days, train_pred, label="Train prediction", color="tab:green", linewidth=1.5, alpha=0.8)
    plt.plot(test_days, test_pred, label="Test prediction", color="tab:orange", linewidth=2, alpha=0.8)

    if split_at is not None:
        plt.axvline(split_at, color="gray", linestyle="--", alpha=0.5, label="Train/test split")

    plt.title(title, fontsize=16)
    plt.xlabel("Day", fontsize=12)
    plt.ylabel("Price", fontsize=12)
    plt.grid(True, alpha=0.3)
    plt.legend(loc="upper left", fontsize=12)

    out_path = os.path.join(plots_dir, "predictions_lstm.png")
    plt.savefig(out_path, dpi=150, bbox_inches="tight")
    plt.close()
    print(f"Saved plot to {out_path}")
    return out_path


def plot_actual_vs_pred(y_true, y_pred, title: str, plots_dir: str):
    os.makedirs(plots_dir, exist_ok=True)

    y_true = np.array(y_true).flatten()
    y_pred = np.array(y_pred).flatten()

    plt.figure(figsize=(16, 6))
    plt.plot(y_true, label="Actual", color="tab:blue", linewidth=1.5)
    plt.plot(y_pred, label="LSTM Predicted", color="tab:orange", linewidth=2, alpha=0.8)

    # error band
    error = np.abs(y_true - y_pred)
    plt.fill_between(
        np.arange(len(y_true)),
        y_true - error,
        y_true + error,
        color="tab:orange",
        alpha=0.08,
        label="|Error band|",
    )

    plt.title(f"{title} – Test Set", fontsize=16)
    plt.xlabel("Test window index", fontsize=12)
    plt.ylabel("Price", fontsize=12)
    plt.grid(True, alpha=0.3)
    plt.legend(loc="upper left", fontsize=12)

    mae = float(np.mean(error)) if len(error) else float("nan")
    plt.annotate(
        f"Test length: {len(y_true)} points\nMean abs error: {mae:.2f}",
        xy=(0.01, 0.02),
        xycoords="axes fraction",
        fontsize=9,
        alpha=0.8,
        bbox=dict(boxstyle="round", fc="white", ec="gray", alpha=0.6),
    )

    out_path = os.path.join(plots_dir, "actual_vs_pred_lstm.png")
    plt.savefig(out_path, dpi=150, bbox_inches="tight")
    plt.close()
    print(f"Saved plot to {out_path}")
    return out_path
