from __future__ import annotations

import json
import os
import sys
from typing import Any, Dict, List, Optional, Tuple

import numpy as np
import yaml

# Ensure project root is importable when running as a script
CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, os.pardir))
if PROJECT_ROOT not in sys.path:
	sys.path.append(PROJECT_ROOT)

from Space import QLInput
from Space.utils import discretize, encode, normalize
from algos.QL_config import QLConfig
from algos.Q_learning import QLearning


CONFIG: Dict[str, Any] = {
	"qlearning": {
		"alpha": 0.2,
		"gamma": 0.9,
		"episode_length": 30,
		"num_episodes": 200,
		"min_coverage": 0.3,
		"neighbors": 2,
	},
	"space": {
		"num_states": 24,
		"num_goals": 3,
		"n_steps": 4,
	},
}


def load_yaml(path: str) -> Dict:
	with open(path, "r", encoding="utf-8") as f:
		return yaml.safe_load(f) or {}


def simulate_option(num_states: int, rng: np.random.Generator) -> Tuple[np.ndarray, np.ndarray]:
	"""Synthetic option data, one row per state.

	Features are (time decay, relative volatility, volatility by volume,
	price relative to strike), each normalized into [0, 1]. The second array is
	the normalized option price variation.
	"""
	decay = np.arange(1, num_states + 1, dtype=float) / num_states
	walks = rng.normal(size=(num_states, 3)).cumsum(axis=0)
	features = np.column_stack([decay] + [normalize(walks[:, k]) for k in range(3)])
	variation = normalize(rng.normal(size=num_states).cumsum())
	return features, variation


def option_inputs(variation: np.ndarray, neighbors: int) -> List[QLInput]:
	"""Edges toward states at most ``neighbors`` apart, rewarded by their price variation."""
	n = len(variation)
	inputs: List[QLInput] = []
	for i in range(n):
		targets = [j for j in range(max(0, i - neighbors), min(n, i + neighbors + 1)) if j != i]
		for j in targets:
			inputs.append(QLInput(i, j, reward=float(variation[j]), probability=1.0 / len(targets)))
	return inputs


def run_experiment_02(
	cfg_path: Optional[str] = None,
	seed: int = 7,
	summary_json_path: Optional[str] = None,
) -> Dict[str, Any]:
	raw = load_yaml(cfg_path) if cfg_path else {}
	ql_raw = {**CONFIG["qlearning"], **(raw.get("qlearning") or {})}
	space_cfg = {**CONFIG["space"], **(raw.get("space") or {})}
	config = QLConfig.from_dict(ql_raw)

	num_states = int(space_cfg["num_states"])
	n_steps = int(space_cfg["n_steps"])
	rng = np.random.default_rng(seed)

	features, variation = simulate_option(num_states, rng)
	levels = discretize(features, n_steps)
	goals = sorted(int(g) for g in np.argsort(variation)[-int(space_cfg["num_goals"]):])

	trainer = QLearning.build(
		config,
		num_states=num_states,
		goals=goals,
		inputs=option_inputs(variation, config.neighbors),
		features=levels,
		rng=rng,
	)
	model = trainer.train()

	predictions: Dict[int, int] = {}
	if model is not None:
		for st in trainer.space.non_goal_states:
			predictions[st.id] = trainer.predict(st).id

	summary: Dict[str, Any] = {
		"config": config.to_dict(),
		"goals": goals,
		"encoded_states": [encode(lv, n_steps) for lv in levels],
		"status": trainer.status.value,
		"model": model is not None,
		"coverage": trainer.metrics.coverage,
		"metrics": trainer.metrics.summary(),
		"predictions": predictions,
	}
	if summary_json_path:
		os.makedirs(os.path.dirname(summary_json_path) or ".", exist_ok=True)
		with open(summary_json_path, "w", encoding="utf-8") as f:
			json.dump(summary, f, indent=2)
	return summary


if __name__ == "__main__":
	out = run_experiment_02(
		cfg_path=os.path.join("data", "ql_option.yaml"),
		summary_json_path=os.path.join("data", "Result_exp02.json"),
	)
	print(f"Experiment 02 - {out['status']} coverage={out['coverage']:.2f} goals={out['goals']}")
	print("Saved summary to: data/Result_exp02.json")
