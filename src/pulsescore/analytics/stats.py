"""Small numeric helpers shared by the scoring engines."""

from __future__ import annotations

import math
from typing import Iterable

import numpy as np


def median(values: Iterable[float]) -> float | None:
    """Median of *values* (mean of the two middle values for even counts).

    Returns None for empty input.
    """
    arr = np.fromiter(values, dtype=np.float64)
    if arr.size == 0:
        return None
    return float(np.median(arr))


def clamp(value: float, lo: float = 0.0, hi: float = 100.0) -> float:
    return max(lo, min(hi, value))


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round with ties going up, e.g. 2.5 -> 3.0 and 0.25 -> 0.3 (at 1 digit).

    Unlike round(), which sends ties to the even neighbour.
    """
    factor = 10.0 ** ndigits
    return math.floor(value * factor + 0.5) / factor
