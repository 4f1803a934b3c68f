# train.py

import logging
import os

import numpy as np
import pandas as pd

from config import (
    END_DATE,
    FETCH_TIMEOUT_S,
    MODELS_DIR,
    OUTPUTS_DIR,
    PLOTS_DIR,
    PRICES_URL,
    START_DATE,
    STOCK_SYMBOL,
    PipelineConfig,
)
from stockwindow.data import (
    load_close_prices,
    load_price_series_from_file,
    load_price_series_from_url,
)
from stockwindow.models import make_forecast
from stockwindow.pipeline import run_experiment


def load_prices():
    """
    PRICES_FILE, then PRICES_URL, then yfinance closes for STOCK_SYMBOL.
    Returns (name, prices).
    """
    prices_file = os.getenv("PRICES_FILE", "")
    prices_url = os.getenv("PRICES_URL", PRICES_URL)
    symbol = os.getenv("STOCK_SYMBOL", STOCK_SYMBOL)

    if prices_file:
        return symbol, load_price_series_from_file(prices_file)
    if prices_url:
        return symbol, load_price_series_from_url(prices_url, timeout=FETCH_TIMEOUT_S)
    return symbol, load_close_prices(symbol, START_DATE, END_DATE).to_numpy()


def build_config() -> PipelineConfig:
    overrides = {}
    if os.getenv("EPOCHS"):
        overrides["epochs"] = int(os.environ["EPOCHS"])
    if os.getenv("WINDOW_SIZE"):
        overrides["window_size"] = int(os.environ["WINDOW_SIZE"])
    if os.getenv("FORECAST_HORIZON"):
        overrides["forecast_horizon"] = int(os.environ["FORECAST_HORIZON"])
    return PipelineConfig(**overrides)


def forecast_future(result, prices, horizon_days=None) -> pd.DataFrame:
    if horizon_days is None:
        horizon_days = result.config.forecast_horizon
    T = result.test.X.shape[1]
    last_window = result.scaler.transform(np.asarray(prices, dtype=float)[-T:])
    rows = []
    for h in range(1, horizon_days + 1):
        y_hat_scaled = make_forecast(result.model, last_window, horizon=h)
        rows.append({"horizon": h, "forecast": float(result.scaler.inverse_transform([y_hat_scaled])[0])})
    return pd.DataFrame(rows)


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    config = build_config()
    name, prices = load_prices()
    print(f"Loaded {len(prices)} prices for {name}")

    result = run_experiment(
        prices,
        config,
        name=name,
        outputs_dir=OUTPUTS_DIR,
        plots_dir=PLOTS_DIR,
        models_dir=MODELS_DIR,
    )

    future = forecast_future(result, prices)
    out_path = os.path.join(OUTPUTS_DIR, "future_forecast_lstm.csv")
    future.to_csv(out_path, index=False)
    print(f"Saved future forecast to {out_path}")

    for split, values in result.metrics.items():
        print(f"{split:>5}: RMSE={values['rmse']:.4f} MAE={values['mae']:.4f} n={values['n']}")


if __name__ == "__main__":
    main()
