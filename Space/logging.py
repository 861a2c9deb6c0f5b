from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional
import json
import time


TERMINAL_EVENTS = ("goal", "dead_end", "exhausted")


@dataclass
class EpisodeEvent:
    event: str
    state: int
    ts: float = field(default_factory=time.time)
    step: Optional[int] = None
    q: Optional[float] = None
    reason: str = ""

    def as_dict(self) -> Dict[str, object]:
        out: Dict[str, object] = {"ts": self.ts, "event": self.event, "state": self.state}
        if self.step is not None:
            out["step"] = self.step
        if self.q is not None:
            out["q"] = self.q
        if self.reason:
            out["reason"] = self.reason
        return out


@dataclass
class EpisodeLifecycleLogger:
    """Trace of training episodes: start, moves, then goal/dead end/exhausted.

    Move counts are always kept; with ``record_moves=False`` the individual
    move events are skipped so long runs only keep start and terminal events.
    """

    events: Dict[int, List[EpisodeEvent]] = field(default_factory=dict)
    moves: Dict[int, int] = field(default_factory=dict)
    record_moves: bool = True

    def _append(self, episode: int, ev: EpisodeEvent) -> None:
        self.events.setdefault(episode, []).append(ev)

    def start(self, episode: int, state_id: int) -> None:
        self.moves[episode] = 0
        self._append(episode, EpisodeEvent("start", state_id))

    def move(self, episode: int, from_id: int, to_id: int, q: float) -> int:
        n = self.moves.get(episode, 0) + 1
        self.moves[episode] = n
        if self.record_moves:
            # state is the destination of the move
            self._append(episode, EpisodeEvent("move", to_id, step=n, q=q))
        return n

    def goal(self, episode: int, state_id: int) -> None:
        self._append(episode, EpisodeEvent("goal", state_id))

    def dead_end(self, episode: int, state_id: int) -> None:
        self._append(episode, EpisodeEvent("dead_end", state_id))

    def exhausted(self, episode: int, state_id: int, reason: Optional[str] = None) -> None:
        self._append(episode, EpisodeEvent("exhausted", state_id, reason=reason or ""))

    def last_event(self, episode: int) -> Optional[str]:
        evs = self.events.get(episode)
        return evs[-1].event if evs else None

    def outcomes(self) -> Dict[str, int]:
        """Number of episodes per terminal event."""
        counts = {name: 0 for name in TERMINAL_EVENTS}
        for evs in self.events.values():
            if evs and evs[-1].event in counts:
                counts[evs[-1].event] += 1
        return counts

    def to_json(self) -> str:
        return json.dumps(
            {str(ep): [ev.as_dict() for ev in evs] for ep, evs in self.events.items()},
            indent=2,
        )
