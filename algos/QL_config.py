from __future__ import annotations

from dataclasses import dataclass, fields
import numbers
from typing import Any, Dict

import yaml

from Space.errors import QLConfigError


@dataclass(frozen=True)
class QLConfig:
    """Hyperparameters of the Q-learning trainer.

    Attributes
    ----------
    alpha: float
        Learning rate, in (0, 1].
    gamma: float
        Discount factor, in (0, 1].
    episode_length: int
        Maximum number of moves in one episode.
    num_episodes: int
        Number of episodes of a training run.
    min_coverage: float
        Minimum ratio of episodes reaching a goal for the model to be accepted.
    neighbors: int
        Largest id distance between two states connected by a move.
    """

    alpha: float = 0.1
    gamma: float = 0.9
    episode_length: int = 10
    num_episodes: int = 50
    min_coverage: float = 0.9
    neighbors: int = 1

    def __post_init__(self) -> None:
        for name in ("alpha", "gamma", "min_coverage"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, numbers.Real):
                raise QLConfigError(f"{name} {value!r} must be a real number")
            object.__setattr__(self, name, float(value))
        for name in ("episode_length", "num_episodes", "neighbors"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, numbers.Integral):
                raise QLConfigError(f"{name} {value!r} must be an integer")
            object.__setattr__(self, name, int(value))

        if not 0.0 < self.alpha <= 1.0:
            raise QLConfigError(f"alpha {self.alpha} is out of range (0, 1]")
        if not 0.0 < self.gamma <= 1.0:
            raise QLConfigError(f"gamma {self.gamma} is out of range (0, 1]")
        if self.episode_length <= 0:
            raise QLConfigError(f"episode_length {self.episode_length} must be positive")
        if self.num_episodes <= 0:
            raise QLConfigError(f"num_episodes {self.num_episodes} must be positive")
        if not 0.0 <= self.min_coverage <= 1.0:
            raise QLConfigError(f"min_coverage {self.min_coverage} is out of range [0, 1]")
        if self.neighbors < 1:
            raise QLConfigError(f"neighbors {self.neighbors} must be >= 1")

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "QLConfig":
        """Build from a mapping, ignoring unknown keys."""
        names = {f.name for f in fields(cls)}
        kwargs = {k: v for k, v in (raw or {}).items() if k in names}
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def _load_yaml(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def load_config(path: str, section: str = "qlearning") -> QLConfig:
    """Read a QLConfig from a YAML file.

    The hyperparameters are read from ``section`` when the file has one,
    otherwise from the top level.
    """
    raw = _load_yaml(path)
    if not isinstance(raw, dict):
        raise QLConfigError(f"{path} does not hold a mapping")
    body = raw.get(section, raw)
    return QLConfig.from_dict(body)
