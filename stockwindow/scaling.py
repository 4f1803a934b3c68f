# stockwindow/scaling.py
"""
Min-max scaling fitted on the training split only.

The state is captured once by `fit` and reused unchanged for every later
`transform` / `inverse_transform`, including on the test split. Values that
fall outside the fitted range map outside [target_min, target_max] and are
never clamped.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from stockwindow.errors import DegenerateRangeError


@dataclass(frozen=True)
class ScalerState:
    data_min: float
    data_max: float
    target_min: float = -1.0
    target_max: float = 1.0

    def transform(self, sequence) -> np.ndarray:
        return transform(self, sequence)

    def inverse_transform(self, sequence) -> np.ndarray:
        return inverse_transform(self, sequence)


def fit(sequence, target_min: float = -1.0, target_max: float = 1.0) -> ScalerState:
    values = np.asarray(sequence, dtype=float)
    if values.size == 0:
        raise ValueError("cannot fit scaler on an empty sequence")
    if not np.isfinite(values).all():
        raise ValueError("cannot fit scaler on a sequence containing NaN or inf")
    if not target_min < target_max:
        raise ValueError(f"target_min ({target_min}) must be below target_max ({target_max})")

    data_min = float(values.min())
    data_max = float(values.max())
    if data_min == data_max:
        raise DegenerateRangeError(
            f"all {values.size} values equal {data_min}; min-max range is zero"
        )
    if not np.isfinite(data_max - data_min):
        raise ValueError(f"min-max range {data_min}..{data_max} overflows")

    return ScalerState(
        data_min=data_min,
        data_max=data_max,
        target_min=float(target_min),
        target_max=float(target_max),
    )


def transform(state: ScalerState, sequence) -> np.ndarray:
    values = np.asarray(sequence, dtype=float)
    return state.target_min + (values - state.data_min) * (state.target_max - state.target_min) / (
        state.data_max - state.data_min
    )


def inverse_transform(state: ScalerState, sequence) -> np.ndarray:
    values = np.asarray(sequence, dtype=float)
    return state.data_min + (values - state.target_min) * (state.data_max - state.data_min) / (
        state.target_max - state.target_min
    )
