"""Evaluation helpers."""

from __future__ import annotations

from typing import Any

import numpy as np


def accuracy(predicts: Any, answers: Any) -> float:
    """Fraction of positions where predictions equal answers."""
    predicted = np.asarray(predicts)
    expected = np.asarray(answers)
    if predicted.shape != expected.shape:
        raise ValueError(f"shape mismatch: {predicted.shape} != {expected.shape}")
    if predicted.size == 0:
        raise ValueError("cannot compute accuracy of empty tensors")
    return float(np.count_nonzero(predicted == expected)) / predicted.size