import numpy as np
import pandas as pd
import pytest

from config import PipelineConfig
from stockwindow import pipeline
from stockwindow.errors import DegenerateRangeError


class History:
    def __init__(self, epochs):
        self.history = {"loss": [0.0] * epochs}


class PersistenceModel:
    """Predicts the last value of each window; records what it was trained on."""

    def __init__(self):
        self.fit_kwargs = None
        self.fit_X = None

    def fit(self, X, y, **kwargs):
        self.fit_X = X
        self.fit_kwargs = kwargs
        return History(kwargs.get("epochs", 1))

    def predict(self, X, verbose=0):
        return X[:, -1, :]

    def save(self, path):
        with open(path, "w") as f:
            f.write("fake")


@pytest.fixture
def fake_model(monkeypatch):
    model = PersistenceModel()
    monkeypatch.setattr(pipeline, "build_lstm", lambda *args, **kwargs: model)
    return model


def _prices(n=120):
    return 100 + 10 * np.sin(np.linspace(0, 12, n)) + np.linspace(0, 20, n)


def test_run_experiment_trains_in_order(fake_model):
    config = PipelineConfig(window_size=7, batch_size=6, epochs=3)
    result = pipeline.run_experiment(_prices(), config)

    assert fake_model.fit_kwargs["shuffle"] is False
    assert fake_model.fit_kwargs["batch_size"] == 6
    assert fake_model.fit_kwargs["epochs"] == 3
    assert fake_model.fit_X.shape == (len(result.train.y), 7, 1)
    np.testing.assert_allclose(fake_model.fit_X[:, :, 0], result.train.X, rtol=1e-6)


def test_run_experiment_predictions_in_price_units(fake_model):
    prices = _prices()
    config = PipelineConfig(window_size=7, epochs=1)
    result = pipeline.run_experiment(prices, config)

    # persistence model: prediction for day d is the price of day d - 1
    np.testing.assert_allclose(result.test_pred, prices[result.test.days - 1], rtol=1e-5)
    assert len(result.test_pred) == len(result.test.days)
    assert result.metrics["test"]["n"] == len(result.test.days)
    assert result.metrics["test"]["rmse"] >= result.metrics["test"]["mae"] >= 0


def test_run_experiment_writes_artifacts(fake_model, tmp_path):
    config = PipelineConfig(window_size=7, epochs=1)
    result = pipeline.run_experiment(
        _prices(),
        config,
        name="demo",
        outputs_dir=str(tmp_path / "outputs"),
        plots_dir=str(tmp_path / "plots"),
        models_dir=str(tmp_path / "models"),
    )

    metrics = pd.read_csv(result.artifacts["metrics"])
    assert set(metrics["split"]) == {"train", "test"}
    assert (tmp_path / "plots" / "predictions_lstm.png").exists()
    assert (tmp_path / "plots" / "actual_vs_pred_lstm.png").exists()
    assert (tmp_path / "outputs" / "report.md").read_text().startswith("# LSTM Window Forecast Report")
    assert (tmp_path / "models" / "DEMO_lstm.keras").exists()
    assert (tmp_path / "models" / "DEMO_scaler.pkl").exists()


def test_too_short_test_split(fake_model):
    config = PipelineConfig(window_size=7, split_ratio=0.9)
    with pytest.raises(ValueError, match="test split"):
        pipeline.run_experiment(np.arange(40, dtype=float), config)


def test_constant_train_split(fake_model):
    prices = np.concatenate([np.full(60, 5.0), np.linspace(5, 10, 30)])
    with pytest.raises(DegenerateRangeError):
        pipeline.run_experiment(prices, PipelineConfig(split_ratio=0.5))


def test_config_validation():
    with pytest.raises(ValueError):
        PipelineConfig(target_min=1.0, target_max=-1.0)
    with pytest.raises(ValueError):
        PipelineConfig(window_size=0)
    with pytest.raises(ValueError):
        PipelineConfig(split_ratio=1.0)
