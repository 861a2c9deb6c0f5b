import numpy as np
import pytest

from Space import QLConfigError
from algos.QL_config import QLConfig, load_config


def test_defaults_are_valid():
    cfg = QLConfig()
    assert cfg.alpha == 0.1
    assert cfg.gamma == 0.9
    assert cfg.to_dict()["episode_length"] == 10


@pytest.mark.parametrize(
    "kwargs",
    [
        dict(alpha=0.0),
        dict(alpha=1.5),
        dict(gamma=0.0),
        dict(gamma=1.01),
        dict(episode_length=0),
        dict(num_episodes=0),
        dict(min_coverage=-0.1),
        dict(min_coverage=1.1),
        dict(neighbors=0),
        dict(alpha="x"),
        dict(gamma=None),
        dict(min_coverage=True),
        dict(episode_length="10"),
        dict(episode_length=2.5),
        dict(num_episodes=True),
        dict(neighbors=1.0),
    ],
)
def test_invalid_values(kwargs):
    with pytest.raises(QLConfigError):
        QLConfig(**kwargs)


def test_boundaries_accepted():
    cfg = QLConfig(alpha=1.0, gamma=1.0, min_coverage=0.0, episode_length=1, num_episodes=1)
    assert cfg.min_coverage == 0.0
    assert QLConfig(min_coverage=1.0).min_coverage == 1.0


def test_from_dict_ignores_unknown_keys():
    cfg = QLConfig.from_dict({"alpha": 0.3, "epsilon": 0.2, "neighbors": 2})
    assert cfg.alpha == 0.3
    assert cfg.neighbors == 2


def test_from_dict_wraps_type_errors():
    with pytest.raises(QLConfigError):
        QLConfig.from_dict({"alpha": "fast"})


def test_load_config_section(tmp_path):
    path = tmp_path / "ql.yaml"
    path.write_text("qlearning:\n  alpha: 0.5\n  num_episodes: 7\nspace:\n  num_states: 4\n", encoding="utf-8")
    cfg = load_config(str(path))
    assert cfg.alpha == 0.5
    assert cfg.num_episodes == 7


def test_load_config_top_level(tmp_path):
    path = tmp_path / "ql.yaml"
    path.write_text("gamma: 0.5\nmin_coverage: 0.2\n", encoding="utf-8")
    cfg = load_config(str(path))
    assert cfg.gamma == 0.5
    assert cfg.min_coverage == 0.2


def test_load_config_rejects_non_mapping(tmp_path):
    path = tmp_path / "ql.yaml"
    path.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(QLConfigError):
        load_config(str(path))


def test_quoted_yaml_value_rejected_at_construction(tmp_path):
    path = tmp_path / "ql.yaml"
    path.write_text('qlearning:\n  episode_length: "10"\n  num_episodes: 5\n', encoding="utf-8")
    with pytest.raises(QLConfigError):
        load_config(str(path))


def test_values_are_normalized():
    cfg = QLConfig(alpha=1, gamma=1, min_coverage=0, episode_length=np.int64(4), neighbors=np.int32(2))
    assert isinstance(cfg.alpha, float) and cfg.alpha == 1.0
    assert isinstance(cfg.min_coverage, float)
    assert type(cfg.episode_length) is int and cfg.episode_length == 4
    assert type(cfg.neighbors) is int and cfg.neighbors == 2
