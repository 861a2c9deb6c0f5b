from __future__ import annotations

import json
import os
import sys
from typing import Any, Dict, List, Optional

import yaml

# Ensure project root is importable when running as a script
CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, os.pardir))
if PROJECT_ROOT not in sys.path:
	sys.path.append(PROJECT_ROOT)

from Space import EpisodeLifecycleLogger
from Space.utils import chain_inputs
from algos.QL_config import QLConfig
from algos.Q_learning import QLearning


# ---------- defaults ----------
CONFIG: Dict[str, Any] = {
	"qlearning": {
		"alpha": 0.1,
		"gamma": 0.9,
		"episode_length": 10,
		"num_episodes": 50,
		"min_coverage": 0.9,
		"neighbors": 1,
	},
	"space": {
		"num_states": 4,
		"goals": [3],
		"reward": 1.0,
	},
}
# ------------------------------


def load_yaml(path: str) -> Dict:
	with open(path, "r", encoding="utf-8") as f:
		return yaml.safe_load(f) or {}


def _merged(raw: Dict[str, Any]) -> Dict[str, Any]:
	out: Dict[str, Any] = {}
	for section, defaults in CONFIG.items():
		out[section] = {**defaults, **(raw.get(section) or {})}
	return out


def path_q_values(trainer: QLearning, num_states: int) -> List[float]:
	"""Q-values of the chain edges i -> i+1, in path order."""
	return [trainer.policy.Q(i, i + 1) for i in range(num_states - 1)]


def run_experiment_01(
	cfg_path: Optional[str] = None,
	seed: int = 42,
	summary_json_path: Optional[str] = None,
	lifecycle_json_path: Optional[str] = None,
) -> Dict[str, Any]:
	raw = _merged(load_yaml(cfg_path) if cfg_path else {})
	config = QLConfig.from_dict(raw["qlearning"])
	space_cfg = raw["space"]
	num_states = int(space_cfg["num_states"])

	lifecycle = EpisodeLifecycleLogger() if lifecycle_json_path else None
	trainer = QLearning.build(
		config,
		num_states=num_states,
		goals=space_cfg["goals"],
		inputs=chain_inputs(num_states, float(space_cfg["reward"])),
		features=[f"s{i}" for i in range(num_states)],
		seed=seed,
		lifecycle=lifecycle,
	)
	model = trainer.train()

	summary: Dict[str, Any] = {
		"config": config.to_dict(),
		"status": trainer.status.value,
		"model": model is not None,
		"coverage": trainer.metrics.coverage,
		"metrics": trainer.metrics.summary(),
		"q_values": path_q_values(trainer, num_states),
	}
	if model is not None:
		final, steps = trainer.predict_with_steps(trainer.space.state(0))
		summary["prediction"] = {"from": 0, "to": final.id, "steps": steps}

	if summary_json_path:
		os.makedirs(os.path.dirname(summary_json_path) or ".", exist_ok=True)
		with open(summary_json_path, "w", encoding="utf-8") as f:
			json.dump(summary, f, indent=2)
	if lifecycle is not None:
		os.makedirs(os.path.dirname(lifecycle_json_path) or ".", exist_ok=True)
		with open(lifecycle_json_path, "w", encoding="utf-8") as f:
			f.write(lifecycle.to_json())
	return summary


if __name__ == "__main__":
	out = run_experiment_01(
		cfg_path=os.path.join("data", "ql_chain.yaml"),
		summary_json_path=os.path.join("data", "Result_exp01.json"),
	)
	print(f"Experiment 01 - {out['status']} coverage={out['coverage']:.2f} q={out['q_values']}")
	print("Saved summary to: data/Result_exp01.json")
