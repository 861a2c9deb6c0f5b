from __future__ import annotations

from typing import List, Sequence, Tuple

import numpy as np

from .errors import QLConfigError
from .state import QLInput


def chain_inputs(num_states: int, reward: float = 1.0) -> List[QLInput]:
    """Edges 0->1->...->num_states-1 with a constant reward."""
    if num_states < 2:
        raise QLConfigError("a chain needs at least two states")
    return [QLInput(i, i + 1, reward) for i in range(num_states - 1)]


def normalize(values: Sequence[float]) -> np.ndarray:
    """Min-max normalization into [0, 1].

    A constant series maps to zeros.
    """
    x = np.asarray(values, dtype=float)
    if x.size == 0:
        raise ValueError("values must be non-empty")
    lo, hi = float(x.min()), float(x.max())
    if hi - lo <= 0.0:
        return np.zeros_like(x)
    return (x - lo) / (hi - lo)


def discretize(features: np.ndarray, n_steps: int) -> List[Tuple[int, ...]]:
    """Map rows of normalized features onto integer levels floor(n_steps * x).

    Values equal to 1.0 are clamped into the top level ``n_steps - 1``.
    """
    if n_steps <= 0:
        raise ValueError("n_steps must be positive")
    f = np.atleast_2d(np.asarray(features, dtype=float))
    levels = np.clip(np.floor(n_steps * f).astype(int), 0, n_steps - 1)
    return [tuple(int(v) for v in row) for row in levels]


def encode(levels: Sequence[int], n_steps: int) -> int:
    """Encode a vector of levels as a single base-``n_steps`` integer.

    encode([l0, l1, ...]) = l0 + l1 * n_steps + l2 * n_steps^2 + ...
    """
    code = 0
    base = 1
    for lv in levels:
        code += base * int(lv)
        base *= n_steps
    return code
