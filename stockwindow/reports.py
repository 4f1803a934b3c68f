# stockwindow/reports.py

import os

import pandas as pd


def write_experiment_report(metrics_path: str, plots_dir: str, out_path: str, config=None):
    metrics = pd.read_csv(metrics_path)

    out_dir = os.path.dirname(out_path)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)

    with open(out_path, "w") as f:
        f.write("# LSTM Window Forecast Report\n\n")

        if config is not None:
            f.write("## Run parameters\n\n")
            params = pd.DataFrame(
                [{"parameter": k, "value": v} for k, v in config.model_dump().items()]
            )
            f.write(params.to_markdown(index=False))
            f.write("\n\n")

        f.write("## Metrics (price units)\n\n")
        f.write(metrics.to_markdown(index=False))
        f.write("\n\n")

        test_rows = metrics[metrics["split"] == "test"]
        if not test_rows.empty:
            row = test_rows.iloc[0]
            f.write(f"Test RMSE ≈ {row['rmse']:.3f}, MAE ≈ {row['mae']:.3f} over {int(row['n'])} windows.\n\n")

        f.write("## Plots\n\n")
        f.write(
            f"- `{os.path.join(plots_dir, 'predictions_lstm.png')}` – full series with train "
            "and test predictions at their day indices.\n"
        )
        f.write(
            f"- `{os.path.join(plots_dir, 'actual_vs_pred_lstm.png')}` – test windows only, "
            "with error band.\n"
        )

    print(f"Saved report to {out_path}")
    return out_path
