# app.py

from datetime import date
from typing import List

import numpy as np
import pandas as pd
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field, conint

from config import MODELS_DIR, START_DATE, STOCK_SYMBOL
from stockwindow import models as model_store
from stockwindow.data import load_close_prices
from stockwindow.models import make_forecast, model_window_size

app = FastAPI(
    title="Stock Window Forecast API",
    description="Forecast future stock prices with a sliding-window LSTM.",
    version="1.0.0",
)


class ForecastRequest(BaseModel):
    ticker: str = Field(default=STOCK_SYMBOL, json_schema_extra={"example": "AAPL"})
    days: conint(ge=1, le=30) = Field(default=7, json_schema_extra={"example": 7})


class ForecastPoint(BaseModel):
    horizon: int
    date: date
    forecast: float


class ForecastResponse(BaseModel):
    ticker: str
    days: int
    window_size: int
    points: List[ForecastPoint]


def get_latest_data(ticker: str) -> pd.Series:
    end_date = date.today().strftime("%Y-%m-%d")
    try:
        return load_close_prices(ticker, START_DATE, end_date)
    except ValueError:
        raise HTTPException(status_code=404, detail=f"No data found for ticker {ticker}.")


def load_trained_model(ticker: str):
    try:
        return model_store.load_trained_model(ticker, MODELS_DIR)
    except FileNotFoundError as e:
        raise HTTPException(status_code=500, detail=str(e))


def load_scaler(ticker: str):
    try:
        return model_store.load_scaler(ticker, MODELS_DIR)
    except FileNotFoundError as e:
        raise HTTPException(status_code=500, detail=str(e))


def build_latest_window_scaled(closes: pd.Series, scaler, window_size: int) -> np.ndarray:
    """
    Latest window_size closes scaled with the training scaler: shape (window_size,)
    """
    values = np.asarray(closes, dtype=float)
    if len(values) < window_size:
        raise HTTPException(
            status_code=400,
            detail=f"Not enough data to build window_size={window_size} window.",
        )
    return scaler.transform(values[-window_size:])


def business_day_dates_after(last_timestamp: pd.Timestamp, n: int) -> List[date]:
    start = last_timestamp + pd.Timedelta(days=1)
    return list(pd.bdate_range(start=start, periods=n).date)


@app.get("/health")
def health():
    return {"status": "ok"}


@app.post("/forecast", response_model=ForecastResponse)
def forecast(req: ForecastRequest):
    closes = get_latest_data(req.ticker)
    scaler = load_scaler(req.ticker)
    model = load_trained_model(req.ticker)

    # the window length is fixed by the trained model, not by config
    window_size = model_window_size(model)
    X_last = build_latest_window_scaled(closes, scaler, window_size)
    dates = business_day_dates_after(closes.index[-1], req.days)

    points: List[ForecastPoint] = []
    for h in range(1, req.days + 1):
        y_hat_scaled = make_forecast(model, X_last, horizon=h)
        y_hat = float(scaler.inverse_transform([y_hat_scaled])[0])
        points.append(ForecastPoint(horizon=h, date=dates[h - 1], forecast=y_hat))

    return ForecastResponse(
        ticker=req.ticker.upper(),
        days=req.days,
        window_size=window_size,
        points=points,
    )


@app.get("/")
def root():
    return {
        "message": "Stock Window Forecast API is running.",
        "endpoints": ["/health", "/forecast"],
    }
