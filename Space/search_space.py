from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, List, Protocol, Sequence, Union
import logging

import numpy as np

from .action import QLAction
from .errors import QLConfigError
from .state import QLInput, QLState


logger = logging.getLogger(__name__)

Neighbors = Callable[[int, int], bool]


class QValues(Protocol):
    """Anything exposing Q-values indexed by (from, to) state ids."""

    def Q(self, from_id: int, to_id: int) -> float:
        ...


def index_distance(bound: int) -> Neighbors:
    """Connectivity rule allowing moves between states at most ``bound`` ids apart."""
    if int(bound) < 1:
        raise QLConfigError(f"neighbors bound {bound} must be >= 1")
    bound = int(bound)

    def _within(from_id: int, to_id: int) -> bool:
        return abs(from_id - to_id) <= bound

    return _within


def _any_move(from_id: int, to_id: int) -> bool:
    return True


def _as_goal_ids(goals: Union[int, Iterable[int]]) -> List[int]:
    if isinstance(goals, (int, np.integer)):
        return [int(goals)]
    if goals is None:
        return []
    return [int(g) for g in goals]


class QLSpace:
    """Search space of the Q-learning algorithm.

    Holds every state (indexed by id), the set of goal ids and the rule that
    decides which transitions are reachable. The structure is read-only once
    built; only the policy values change during training.

    Parameters
    ----------
    states: Sequence[QLState]
        States of the space; ``states[i].id`` must equal ``i``.
    goals: int or Iterable[int]
        Identifier(s) of the goal states.
    neighbors: int, callable or None
        Either a bound on the id distance of a move (see ``index_distance``),
        a predicate ``(from_id, to_id) -> bool``, or None to allow every move.
    """

    def __init__(
        self,
        states: Sequence[QLState],
        goals: Union[int, Iterable[int]],
        neighbors: Union[int, Neighbors, None] = None,
    ):
        states = list(states)
        if not states:
            raise QLConfigError("cannot create a search space with no states")
        for i, st in enumerate(states):
            if st.id != i:
                raise QLConfigError(f"state at position {i} has id {st.id}")
            for a in st.actions:
                if not 0 <= a.to_id < len(states):
                    raise QLConfigError(f"action {a} targets an undefined state")

        goal_ids = _as_goal_ids(goals)
        if not goal_ids:
            raise QLConfigError("cannot create a search space with undefined goals")
        for g in goal_ids:
            if not 0 <= g < len(states):
                raise QLConfigError(f"goal {g} is out of range [0, {len(states)})")

        if neighbors is None:
            rule: Neighbors = _any_move
        elif callable(neighbors):
            rule = neighbors
        else:
            rule = index_distance(neighbors)

        self._states: List[QLState] = states
        self._goals = frozenset(goal_ids)
        self._neighbors = rule
        self._non_goal: List[QLState] = [s for s in states if s.id not in self._goals]
        if not self._non_goal:
            raise QLConfigError("every state is a goal, no episode can start")
        logger.debug("search space with %d states, goals %s", len(states), sorted(self._goals))

    @classmethod
    def build(
        cls,
        num_states: int,
        goals: Union[int, Iterable[int]],
        inputs: Iterable[QLInput],
        features: Iterable[Any],
        neighbors: Union[int, Neighbors, None] = None,
    ) -> "QLSpace":
        """Build the states from a feature sequence (one per state) and input edges."""
        if int(num_states) < 1:
            raise QLConfigError(f"cannot create a search space with {num_states} states")
        features = list(features)
        if len(features) != num_states:
            raise QLConfigError(f"{len(features)} features for {num_states} states")

        by_source: Dict[int, Dict[int, QLAction]] = {}
        for e in inputs:
            if not (0 <= e.from_id < num_states and 0 <= e.to_id < num_states):
                raise QLConfigError(f"edge {e.from_id}->{e.to_id} is out of range [0, {num_states})")
            by_source.setdefault(e.from_id, {})[e.to_id] = e.to_action()

        states = [
            QLState(i, tuple(by_source.get(i, {}).values()), prop)
            for i, prop in enumerate(features)
        ]
        return cls(states, goals, neighbors)

    # --------- queries ----------
    def __len__(self) -> int:
        return len(self._states)

    @property
    def goals(self) -> frozenset:
        return self._goals

    @property
    def states(self) -> Sequence[QLState]:
        return tuple(self._states)

    @property
    def non_goal_states(self) -> Sequence[QLState]:
        return tuple(self._non_goal)

    def state(self, state_id: int) -> QLState:
        if not 0 <= state_id < len(self._states):
            raise IndexError(f"state id {state_id} is out of range [0, {len(self._states)})")
        return self._states[state_id]

    def is_goal(self, state: QLState) -> bool:
        return state.id in self._goals

    def next_states(self, state: QLState) -> List[QLState]:
        """States reachable from ``state``, in the order of its actions."""
        if self.is_goal(state):
            return []
        return [
            self._states[a.to_id]
            for a in state.actions
            if self._neighbors(state.id, a.to_id)
        ]

    def init(self, rng: np.random.Generator) -> QLState:
        """Uniformly random non-goal state used to start an episode."""
        return self._non_goal[int(rng.integers(len(self._non_goal)))]

    def max_q(self, state: QLState, policy: QValues) -> float:
        """Largest Q-value of the moves out of ``state``, 0.0 when there is none."""
        states = self.next_states(state)
        if not states:
            return 0.0
        return max(policy.Q(state.id, s.id) for s in states)

    def __str__(self) -> str:
        lines = [str(s) for s in self._states]
        lines.append("goals: " + " ".join(str(g) for g in sorted(self._goals)))
        return "\n".join(lines)
