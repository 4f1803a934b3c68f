"""Sliding-window LSTM forecasting of daily stock prices."""
