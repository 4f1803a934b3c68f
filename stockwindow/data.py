# stockwindow/data.py

import logging
import math
from pathlib import Path
from typing import Tuple

import numpy as np
import pandas as pd
import requests
import yfinance as yf

from stockwindow.errors import DataParseError

logger = logging.getLogger(__name__)


# ---------- Parsing ----------

def parse_price_text(text: str) -> np.ndarray:
    """
    Parse newline-delimited prices, one float per line, no header.

    Blank lines are skipped. Any other line that is not a finite number
    aborts the whole load with DataParseError.
    """
    prices = []
    for line_no, line in enumerate(text.splitlines(), start=1):
        raw = line.strip()
        if not raw:
            continue
        try:
            value = float(raw)
        except ValueError:
            raise DataParseError(line_no, raw) from None
        if not math.isfinite(value):
            raise DataParseError(line_no, raw)
        prices.append(value)
    return np.array(prices, dtype=float)


# ---------- Data loading ----------

def load_price_series_from_url(url: str, timeout: float = 30) -> np.ndarray:
    """
    Download a newline-delimited price file. HTTP errors propagate unchanged.
    """
    logger.info("Fetching prices from %s", url)
    resp = requests.get(url, timeout=timeout)
    resp.raise_for_status()
    prices = parse_price_text(resp.text)
    logger.info("Loaded %d prices", len(prices))
    return prices


def load_price_series_from_file(path) -> np.ndarray:
    raw = Path(path).read_bytes()
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as e:
        line_no = raw[:e.start].count(b"\n") + 1
        bad = raw[e.start:e.end].decode("utf-8", errors="backslashreplace")
        raise DataParseError(line_no, bad, reason="cannot decode") from e
    return parse_price_text(text)


def load_close_prices(stock_symbol: str, start_date: str, end_date: str) -> pd.Series:
    """
    Download daily closes for the given symbol and date range.
    Sorted DatetimeIndex, no NaNs.
    """
    df = yf.download(
        stock_symbol,
        start=start_date,
        end=end_date,
        auto_adjust=False,
        progress=False,
    )
    if df is None or len(df) == 0:
        raise ValueError(f"No data downloaded for symbol {stock_symbol}")

    # yfinance may return ('Close', 'AAPL') style MultiIndex columns
    if isinstance(df.columns, pd.MultiIndex):
        df.columns = df.columns.get_level_values(0)

    close = df["Close"].astype(float).dropna().sort_index()
    close.name = "close"
    return close


# ---------- Temporal split ----------

def split_index(length: int, split_ratio: float) -> int:
    return int(length * split_ratio)


def split_series(sequence, split_ratio: float = 2 / 3) -> Tuple[np.ndarray, np.ndarray]:
    """
    Train = prefix, test = suffix. Never shuffled.
    """
    if not 0.0 < split_ratio < 1.0:
        raise ValueError(f"split_ratio must be in (0, 1), got {split_ratio}")

    values = np.asarray(sequence, dtype=float).reshape(-1)
    idx = split_index(len(values), split_ratio)
    return values[:idx], values[idx:]
