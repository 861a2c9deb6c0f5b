from __future__ import annotations

from typing import Iterable

import numpy as np

from Space.errors import QLConfigError
from Space.state import QLInput


class QLPolicy:
    """Reward, probability and Q-value tables indexed by (from, to) state ids.

    The tables are num_states x num_states; pairs that were never registered
    read as 0.0. Only the Q-values change during training.
    """

    def __init__(self, num_states: int, inputs: Iterable[QLInput]):
        if int(num_states) < 1:
            raise QLConfigError(f"cannot create a policy with {num_states} states")
        self.num_states = int(num_states)
        self._reward = np.zeros((self.num_states, self.num_states), dtype=float)
        self._probability = np.zeros((self.num_states, self.num_states), dtype=float)
        self._q = np.zeros((self.num_states, self.num_states), dtype=float)

        for e in inputs:
            if not (0 <= e.from_id < self.num_states and 0 <= e.to_id < self.num_states):
                raise QLConfigError(f"edge {e.from_id}->{e.to_id} is out of range [0, {self.num_states})")
            self._reward[e.from_id, e.to_id] = float(e.reward)
            self._probability[e.from_id, e.to_id] = float(e.probability)

    def _check(self, from_id: int, to_id: int) -> None:
        # numpy would silently wrap negative indices
        if not (0 <= from_id < self.num_states and 0 <= to_id < self.num_states):
            raise IndexError(f"({from_id}, {to_id}) is out of range [0, {self.num_states})")

    def R(self, from_id: int, to_id: int) -> float:
        self._check(from_id, to_id)
        return float(self._reward[from_id, to_id])

    def P(self, from_id: int, to_id: int) -> float:
        self._check(from_id, to_id)
        return float(self._probability[from_id, to_id])

    def Q(self, from_id: int, to_id: int) -> float:
        self._check(from_id, to_id)
        return float(self._q[from_id, to_id])

    def set_q(self, from_id: int, to_id: int, value: float) -> None:
        self._check(from_id, to_id)
        self._q[from_id, to_id] = value

    def snapshot(self) -> "QLPolicy":
        """Independent copy of the policy; later Q updates do not reach it."""
        other = QLPolicy.__new__(QLPolicy)
        other.num_states = self.num_states
        other._reward = self._reward.copy()
        other._probability = self._probability.copy()
        other._q = self._q.copy()
        return other

    def q_table(self) -> np.ndarray:
        """Copy of the Q-value matrix."""
        return self._q.copy()

    def __str__(self) -> str:
        rows = ["Q-values"]
        for i, j in zip(*np.nonzero(self._q)):
            rows.append(f"{i}->{j}: {self._q[i, j]:.4f}")
        return "\n".join(rows)
