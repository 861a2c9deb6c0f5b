import json
import os

from experiments.experiment02 import run_experiment_02


PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))


def test_experiment02():
    out = run_experiment_02(cfg_path=os.path.join(PROJECT_ROOT, "data", "ql_option.yaml"))
    assert 0.0 <= out["coverage"] <= 1.0
    assert out["status"] in ("converged", "exhausted")
    assert len(out["goals"]) == 3
    assert len(out["encoded_states"]) == 24
    assert out["model"] == (out["coverage"] >= out["config"]["min_coverage"])
    if out["model"]:
        assert set(out["predictions"]) == set(range(24)) - set(out["goals"])


def test_experiment02_summary_file(tmp_path):
    """Option space trained from data/ql_option.yaml, summary written to disk"""
    summary_path = tmp_path / "exp02.json"
    out = run_experiment_02(
        cfg_path=os.path.join(PROJECT_ROOT, "data", "ql_option.yaml"),
        summary_json_path=str(summary_path),
    )
    saved = json.loads(summary_path.read_text(encoding="utf-8"))
    assert saved["goals"] == out["goals"]
    assert saved["metrics"]["episodes"] == 200
