"""Small descriptive statistics helpers used by the forecast services."""

from collections.abc import Sequence

import numpy as np
import numpy.typing as npt


def mean(values: Sequence[float] | npt.NDArray[np.float64]) -> float:
    """Arithmetic mean, 0 for an empty sequence."""
    arr = np.asarray(values, dtype=float)
    if arr.size == 0:
        return 0.0
    return float(arr.mean())


def sample_standard_deviation(
    values: Sequence[float] | npt.NDArray[np.float64],
) -> float:
    """Sample standard deviation (divisor n - 1).

    Returns 0 when fewer than two values are given.
    """
    arr = np.asarray(values, dtype=float)
    if arr.size < 2:
        return 0.0
    return float(arr.std(ddof=1))
