from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence, Tuple

from .action import QLAction
from .errors import QLConfigError


@dataclass(frozen=True)
class QLInput:
    """Edge record used to build both the search space and the policy.

    Attributes
    ----------
    from_id: int
        Identifier of the source state.
    to_id: int
        Identifier of the destination state.
    reward: float
        Reward for moving from ``from_id`` to ``to_id``.
    probability: float
        Probability of moving from ``from_id`` to ``to_id``.
    """

    from_id: int
    to_id: int
    reward: float = 1.0
    probability: float = 1.0

    def to_action(self) -> QLAction:
        return QLAction(self.from_id, self.to_id, self.reward, self.probability)


@dataclass(frozen=True, eq=False)
class QLState:
    """Node of the search space.

    A state is identified by its id and owns the actions leaving it. Whether a
    state is a goal is decided by the search space, not by its actions.

    Attributes
    ----------
    id: int
        Identifier, also the position of the state in its search space.
    actions: Tuple[QLAction, ...]
        Outgoing transitions, in insertion order.
    property: Any
        Domain value attached to the state (e.g. a discretized feature vector).
    """

    id: int
    actions: Tuple[QLAction, ...] = field(default_factory=tuple)
    property: Any = None

    def __post_init__(self) -> None:
        if int(self.id) < 0:
            raise QLConfigError(f"state id {self.id} is out of range")
        if self.actions is None:
            raise QLConfigError("cannot create a state with undefined actions")
        actions = tuple(self.actions)
        for a in actions:
            if a.from_id != self.id:
                raise QLConfigError(f"action {a} does not leave state {self.id}")
        object.__setattr__(self, "actions", actions)

    def targets(self) -> Sequence[int]:
        return [a.to_id for a in self.actions]

    def __str__(self) -> str:
        return f"state: {self.id} " + " ".join(str(a) for a in self.actions)
