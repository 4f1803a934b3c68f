import numpy as np
import pytest

from stockwindow import scaling
from stockwindow.models import (
    build_lstm,
    load_scaler,
    load_trained_model,
    make_forecast,
    model_window_size,
    predict_windows,
    save_artifacts,
    train_model,
)


class StepModel:
    """Predicts last value + 1."""

    def predict(self, X, verbose=0):
        return X[:, -1, :] + 1.0


def test_make_forecast_rolls_window_forward():
    window = np.array([1.0, 2.0, 3.0, 4.0, 5.0])
    assert make_forecast(StepModel(), window, horizon=1) == pytest.approx(6.0)
    assert make_forecast(StepModel(), window, horizon=3) == pytest.approx(8.0)


def test_make_forecast_rejects_bad_horizon():
    with pytest.raises(ValueError):
        make_forecast(StepModel(), np.zeros(5), horizon=0)


def test_predict_windows_empty():
    assert predict_windows(StepModel(), np.empty((0, 5))).shape == (0,)


def test_build_and_train_lstm_shapes():
    model = build_lstm(window_size=4, lstm_units=4, learning_rate=0.01)
    X = np.random.default_rng(0).uniform(-1, 1, size=(12, 4))
    y = X[:, -1]

    train_model(model, X, y, batch_size=6, epochs=1)
    preds = predict_windows(model, X)
    assert preds.shape == (12,)


def test_artifacts_round_trip(tmp_path):
    model = build_lstm(window_size=3, lstm_units=2)
    scaler = scaling.fit([1.0, 5.0])

    model_path, scaler_path = save_artifacts(model, scaler, "demo", tmp_path)
    assert model_path.name == "DEMO_lstm.keras"
    assert scaler_path.name == "DEMO_scaler.pkl"

    assert load_scaler("demo", tmp_path) == scaler
    loaded = load_trained_model("demo", tmp_path)
    X = np.zeros((1, 3))
    np.testing.assert_allclose(predict_windows(loaded, X), predict_windows(model, X), rtol=1e-5)


def test_missing_artifacts(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_trained_model("missing", tmp_path)
    with pytest.raises(FileNotFoundError):
        load_scaler("missing", tmp_path)


def test_model_window_size_survives_reload(tmp_path):
    model = build_lstm(window_size=5, lstm_units=2)
    save_artifacts(model, scaling.fit([1.0, 2.0]), "demo", tmp_path)

    assert model_window_size(model) == 5
    assert model_window_size(load_trained_model("demo", tmp_path)) == 5
