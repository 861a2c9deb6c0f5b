import json
import os

from experiments.experiment01 import run_experiment_01


PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))


def test_experiment01(tmp_path):
    """Four state chain trained from data/ql_chain.yaml"""
    summary_path = tmp_path / "exp01.json"
    lifecycle_path = tmp_path / "exp01_lifecycle.json"
    out = run_experiment_01(
        cfg_path=os.path.join(PROJECT_ROOT, "data", "ql_chain.yaml"),
        summary_json_path=str(summary_path),
        lifecycle_json_path=str(lifecycle_path),
    )
    assert out["model"] is True
    assert out["status"] == "converged"
    assert out["coverage"] == 1.0
    assert out["prediction"] == {"from": 0, "to": 3, "steps": 3}
    assert out["q_values"][2] == 0.0
    assert out["q_values"][1] > 0.0

    saved = json.loads(summary_path.read_text(encoding="utf-8"))
    assert saved["metrics"]["episodes"] == 50
    assert len(json.loads(lifecycle_path.read_text(encoding="utf-8"))) == 50


def test_experiment01_defaults():
    out = run_experiment_01(seed=1)
    assert out["config"]["num_episodes"] == 50
    assert out["coverage"] == 1.0
