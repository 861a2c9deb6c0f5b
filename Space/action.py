from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class QLAction:
    """Directed transition between two states of the search space.

    Attributes
    ----------
    from_id: int
        Identifier of the source state.
    to_id: int
        Identifier of the destination state.
    reward: float
        Credit (or penalty) collected when taking the transition.
    probability: float
        Probability of the transition. Not used by the update rule.
    """

    from_id: int
    to_id: int
    reward: float = 1.0
    probability: float = 1.0

    def __str__(self) -> str:
        return f"{self.from_id}->{self.to_id}"
