# stockwindow/models.py
"""
Model helpers for the sliding-window forecaster (Keras 3 compatible).
"""

from __future__ import annotations

import logging
from pathlib import Path

import joblib
import numpy as np

# Keras 3 imports (NOT tf_keras)
from keras import Input
from keras.layers import LSTM, Dense
from keras.models import Sequential
from keras.models import load_model as keras_load_model
from keras.optimizers import Adam

from stockwindow.scaling import ScalerState

logger = logging.getLogger(__name__)


def build_lstm(window_size: int, lstm_units: int = 32, learning_rate: float = 0.04) -> Sequential:
    model = Sequential()
    model.add(Input(shape=(window_size, 1)))
    model.add(LSTM(lstm_units))
    model.add(Dense(1))
    model.compile(optimizer=Adam(learning_rate=learning_rate), loss="mse")
    return model


def as_model_input(X) -> np.ndarray:
    """(n, window) or (window,) -> (n, window, 1)"""
    X = np.asarray(X, dtype="float32")
    if X.ndim == 1:
        X = X[np.newaxis, :]
    if X.ndim == 2:
        X = X[..., np.newaxis]
    return X


def train_model(model, X, y, batch_size: int = 6, epochs: int = 100):
    # batches must keep temporal order, so no shuffling
    history = model.fit(
        as_model_input(X),
        np.asarray(y, dtype="float32"),
        batch_size=batch_size,
        epochs=epochs,
        shuffle=False,
        verbose=0,
    )
    losses = history.history.get("loss", [])
    if losses:
        logger.info("Trained %d epochs, final loss %.6f", len(losses), losses[-1])
    return model


def model_window_size(model) -> int:
    """Window length the model was built for: input_shape is (batch, window, 1)."""
    return int(model.input_shape[1])


def predict_windows(model, X) -> np.ndarray:
    X = np.asarray(X)
    if len(X) == 0:
        return np.empty(0, dtype=float)
    return np.asarray(model.predict(as_model_input(X), verbose=0), dtype=float).reshape(-1)


def make_forecast(model, X_last, horizon: int = 1) -> float:
    """
    Predict `horizon` steps past the end of `X_last` by feeding each
    prediction back into the window.
    """
    if horizon < 1:
        raise ValueError(f"horizon must be >= 1, got {horizon}")

    current_window = as_model_input(X_last)
    last_pred = None

    for _ in range(horizon):
        y_hat = float(np.asarray(model.predict(current_window, verbose=0)).reshape(-1)[0])
        last_pred = y_hat

        # autoregressive roll-forward
        new_step = np.full((1, 1, 1), y_hat, dtype=current_window.dtype)
        current_window = np.concatenate([current_window[:, 1:, :], new_step], axis=1)

    return float(last_pred)


# ---------- Persistence ----------

def get_model_path(name: str, models_dir: str | Path = "models") -> Path:
    models_dir = Path(models_dir)
    models_dir.mkdir(parents=True, exist_ok=True)
    return models_dir / f"{name.upper()}_lstm.keras"


def get_scaler_path(name: str, models_dir: str | Path = "models") -> Path:
    return Path(models_dir) / f"{name.upper()}_scaler.pkl"


def save_artifacts(model, scaler: ScalerState, name: str, models_dir: str | Path = "models"):
    model_path = get_model_path(name, models_dir)
    scaler_path = get_scaler_path(name, models_dir)
    model.save(model_path)
    joblib.dump(scaler, scaler_path)
    logger.info("Saved model to %s and scaler to %s", model_path, scaler_path)
    return model_path, scaler_path


def load_trained_model(name: str, models_dir: str | Path = "models"):
    p = get_model_path(name, models_dir)
    if not p.exists():
        raise FileNotFoundError(f"Model not found: {p}. Train first (python train.py).")
    # compile=False avoids metric warnings & reduces load issues
    return keras_load_model(p, compile=False)


def load_scaler(name: str, models_dir: str | Path = "models") -> ScalerState:
    p = get_scaler_path(name, models_dir)
    if not p.exists():
        raise FileNotFoundError(f"Scaler not found: {p}. Train first (python train.py).")
    return joblib.load(p)
