# config.py

from datetime import date

from pydantic import BaseModel, Field, model_validator

STOCK_SYMBOL = "AAPL"
START_DATE = "2015-01-01"
END_DATE = date.today().strftime("%Y-%m-%d")  # auto-updates each day

# newline-delimited prices, one float per line; empty means use yfinance
PRICES_URL = ""
FETCH_TIMEOUT_S = 30

WINDOW_SIZE = 7
SPLIT_RATIO = 2 / 3
TARGET_MIN = -1.0
TARGET_MAX = 1.0

LSTM_UNITS = 32
LSTM_EPOCHS = 100
LSTM_BATCH_SIZE = 6
LEARNING_RATE = 0.04

FORECAST_HORIZON_DAYS = 30

OUTPUTS_DIR = "outputs"
PLOTS_DIR = "plots"
MODELS_DIR = "models"


class PipelineConfig(BaseModel):
    """Run parameters passed explicitly to every pipeline step."""

    window_size: int = Field(default=WINDOW_SIZE, ge=1)
    split_ratio: float = Field(default=SPLIT_RATIO, gt=0.0, lt=1.0)
    target_min: float = TARGET_MIN
    target_max: float = TARGET_MAX
    batch_size: int = Field(default=LSTM_BATCH_SIZE, ge=1)
    epochs: int = Field(default=LSTM_EPOCHS, ge=1)
    learning_rate: float = Field(default=LEARNING_RATE, gt=0.0)
    lstm_units: int = Field(default=LSTM_UNITS, ge=1)
    forecast_horizon: int = Field(default=FORECAST_HORIZON_DAYS, ge=1)

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_target_bounds(self):
        if not self.target_min < self.target_max:
            raise ValueError("target_min must be below target_max")
        return self
