from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Dict, List, Optional
import json


GOAL = "goal"


@dataclass
class EpisodeRecord:
    episode: int
    start_id: int
    final_id: int
    steps: int
    outcome: str


@dataclass
class TrainingMetrics:
    """Per-episode records of one training run and their aggregates."""

    episodes: List[EpisodeRecord] = field(default_factory=list)
    coverage_history: List[float] = field(default_factory=list)

    total_steps: int = 0
    total_completed: int = 0

    def log_episode(
        self,
        *,
        episode: int,
        start_id: int,
        final_id: int,
        steps: int,
        outcome: str,
    ) -> None:
        self.episodes.append(
            EpisodeRecord(
                episode=episode,
                start_id=start_id,
                final_id=final_id,
                steps=steps,
                outcome=outcome,
            )
        )
        self.total_steps += steps
        if outcome == GOAL:
            self.total_completed += 1
        # running coverage, one point per episode
        self.coverage_history.append(self.total_completed / float(len(self.episodes)))

    @property
    def num_episodes(self) -> int:
        return len(self.episodes)

    @property
    def completed(self) -> int:
        return self.total_completed

    @property
    def coverage(self) -> float:
        if not self.episodes:
            return 0.0
        return self.total_completed / float(len(self.episodes))

    def outcome_counts(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for rec in self.episodes:
            counts[rec.outcome] = counts.get(rec.outcome, 0) + 1
        return counts

    @property
    def mean_steps_to_goal(self) -> Optional[float]:
        steps = [rec.steps for rec in self.episodes if rec.outcome == GOAL]
        if not steps:
            return None
        return sum(steps) / float(len(steps))

    def summary(self) -> Dict[str, object]:
        return {
            "episodes": self.num_episodes,
            "completed": self.completed,
            "coverage": self.coverage,
            "total_steps": self.total_steps,
            "mean_steps_to_goal": self.mean_steps_to_goal,
            "outcomes": self.outcome_counts(),
        }

    def to_json(self, include_episodes: bool = False) -> str:
        obj: Dict[str, object] = dict(self.summary())
        if include_episodes:
            obj["episode_records"] = [asdict(rec) for rec in self.episodes]
        return json.dumps(obj, indent=2)
