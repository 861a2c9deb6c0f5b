from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Optional, Sequence, Tuple, Union
import logging

import numpy as np

from Space.errors import ModelUnavailableError, QLConfigError
from Space.logging import EpisodeLifecycleLogger
from Space.search_space import QLSpace
from Space.state import QLInput, QLState
from algos.QL_config import QLConfig
from algos.QL_policy import QLPolicy
from analysis.Metrics import TrainingMetrics


logger = logging.getLogger(__name__)


class TrainingStatus(Enum):
    IDLE = "idle"
    RUNNING = "running"
    CONVERGED = "converged"  # coverage reached min_coverage, model available
    EXHAUSTED = "exhausted"  # all episodes run, coverage too low


class EpisodeOutcome(Enum):
    GOAL = "goal"
    DEAD_END = "dead_end"
    EXHAUSTED = "exhausted"  # step budget used up


@dataclass(frozen=True)
class QLModel:
    """Outcome of a successful training run.

    Attributes
    ----------
    best_policy: QLPolicy
        Policy holding the Q-values learned during training.
    coverage: float
        Ratio of training episodes that reached a goal state.
    """

    best_policy: QLPolicy
    coverage: float

    def __str__(self) -> str:
        return f"Optimal policy: {self.best_policy}\nTraining coverage: {self.coverage}"


@dataclass(frozen=True)
class EpisodeResult:
    start: QLState
    final: QLState
    steps: int
    outcome: EpisodeOutcome

    @property
    def completed(self) -> bool:
        return self.outcome is EpisodeOutcome.GOAL


def best_move(policy: QLPolicy, state: QLState, states: Sequence[QLState]) -> QLState:
    """Candidate with the highest reward from ``state``; first one wins ties."""
    if not states:
        raise ValueError("states must be non-empty")
    best_s = states[0]
    best_r = policy.R(state.id, best_s.id)
    for s in states[1:]:
        r = policy.R(state.id, s.id)
        if r > best_r:
            best_r = r
            best_s = s
    return best_s


class QLearning:
    """Tabular Q-learning over a search space of states.

    Each episode starts from a random non-goal state and walks greedily by
    reward, updating

        Q'(s, s') = Q(s, s') + alpha * (R(s, s') + gamma * max Q(s', .) - Q(s, s'))

    until a goal is reached, no move is left or the step budget is spent.
    Training yields a model only if the ratio of episodes that reached a goal
    (coverage) is at least ``config.min_coverage``. The caller is expected to
    check ``model`` before calling ``predict``.
    """

    def __init__(
        self,
        config: QLConfig,
        space: QLSpace,
        policy: QLPolicy,
        rng: Optional[np.random.Generator] = None,
        seed: Optional[int] = None,
        lifecycle: Optional[EpisodeLifecycleLogger] = None,
    ):
        if config is None:
            raise QLConfigError("cannot create a Q-learning model with undefined configuration")
        if space is None:
            raise QLConfigError("cannot create a Q-learning model with undefined search space")
        if policy is None:
            raise QLConfigError("cannot create a Q-learning model with undefined policy")
        if policy.num_states != len(space):
            raise QLConfigError(f"policy has {policy.num_states} states, search space {len(space)}")

        self.config = config
        self.space = space
        self.policy = policy
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.lifecycle = lifecycle
        self.metrics = TrainingMetrics()
        self.status = TrainingStatus.IDLE
        self.model: Optional[QLModel] = None

    @classmethod
    def build(
        cls,
        config: QLConfig,
        num_states: int,
        goals: Union[int, Iterable[int]],
        inputs: Iterable[QLInput],
        features: Iterable[Any],
        rng: Optional[np.random.Generator] = None,
        seed: Optional[int] = None,
        lifecycle: Optional[EpisodeLifecycleLogger] = None,
    ) -> "QLearning":
        """Create the search space and the policy from raw parameters."""
        inputs = list(inputs) if inputs is not None else []
        features = list(features) if features is not None else []
        if not inputs:
            raise QLConfigError("cannot initialize Q-learning with undefined input")
        if int(num_states) <= 2:
            raise QLConfigError(f"cannot initialize Q-learning with {num_states} states")
        if not features:
            raise QLConfigError("cannot initialize Q-learning with undefined features")

        space = QLSpace.build(num_states, goals, inputs, features, config.neighbors)
        policy = QLPolicy(num_states, inputs)
        return cls(config, space, policy, rng=rng, seed=seed, lifecycle=lifecycle)

    # --------- training ----------
    def train(self) -> Optional[QLModel]:
        """Run ``num_episodes`` episodes and accept or reject the policy.

        Calling it again keeps learning on the same policy; coverage is
        computed over the latest run only. The model holds a snapshot of the
        policy taken when the run ends.
        """
        self.status = TrainingStatus.RUNNING
        self.metrics = TrainingMetrics()
        for n in range(int(self.config.num_episodes)):
            res = self._episode(n)
            self.metrics.log_episode(
                episode=n,
                start_id=res.start.id,
                final_id=res.final.id,
                steps=res.steps,
                outcome=res.outcome.value,
            )
            logger.debug("Episode # %d completed: %s", n, res.completed)

        coverage = self.metrics.coverage
        if coverage >= self.config.min_coverage:
            self.model = QLModel(self.policy.snapshot(), coverage)
            self.status = TrainingStatus.CONVERGED
        else:
            self.model = None
            self.status = TrainingStatus.EXHAUSTED
        logger.info(
            "Q-learning training %s: coverage %.3f (min %.3f) over %d episodes",
            self.status.value, coverage, self.config.min_coverage, self.config.num_episodes,
        )
        return self.model

    def _episode(self, episode: int) -> EpisodeResult:
        start = self.space.init(self.rng)
        if self.lifecycle is not None:
            self.lifecycle.start(episode, start.id)

        current = start
        steps = 0
        while True:
            states = self.space.next_states(current)
            if not states:
                outcome = EpisodeOutcome.DEAD_END
                break
            if steps >= self.config.episode_length:
                outcome = EpisodeOutcome.EXHAUSTED
                break

            nxt = best_move(self.policy, current, states)
            if self.space.is_goal(nxt):
                current = nxt
                steps += 1
                outcome = EpisodeOutcome.GOAL
                break

            self._update(current, nxt)
            if self.lifecycle is not None:
                self.lifecycle.move(episode, current.id, nxt.id, self.policy.Q(current.id, nxt.id))
            current = nxt
            steps += 1

        if self.lifecycle is not None:
            if outcome is EpisodeOutcome.GOAL:
                self.lifecycle.goal(episode, current.id)
            elif outcome is EpisodeOutcome.DEAD_END:
                self.lifecycle.dead_end(episode, current.id)
            else:
                self.lifecycle.exhausted(episode, current.id, reason=f"{steps} steps")
        return EpisodeResult(start, current, steps, outcome)

    def _update(self, state: QLState, next_state: QLState) -> None:
        r = self.policy.R(state.id, next_state.id)
        q = self.policy.Q(state.id, next_state.id)
        target = r + self.config.gamma * self.space.max_q(next_state, self.policy)
        self.policy.set_q(state.id, next_state.id, q + self.config.alpha * (target - q))

    # --------- prediction ----------
    def predict(self, probe: QLState) -> QLState:
        return self.predict_with_steps(probe)[0]

    def predict_with_steps(self, probe: QLState) -> Tuple[QLState, int]:
        """Greedy rollout from ``probe`` using the trained policy.

        Follows the highest-reward move for at most ``episode_length`` steps
        and stops early where no move is left (goal states return at once).
        The probe is resolved by id against this search space.
        """
        if self.model is None:
            raise ModelUnavailableError("no trained model, training did not reach the minimum coverage")
        if probe is None:
            raise ValueError("cannot predict from an undefined state")
        if not 0 <= probe.id < len(self.space):
            raise ValueError(f"state {probe.id} does not belong to the search space")

        policy = self.model.best_policy
        state = self.space.state(probe.id)
        steps = 0
        while steps < self.config.episode_length:
            states = self.space.next_states(state)
            if not states:
                break
            state = best_move(policy, state, states)
            steps += 1
        return state, steps

    def __str__(self) -> str:
        return f"{self.policy}\n{self.space}"
