import pytest

from Space import QLConfigError, QLInput
from algos.QL_policy import QLPolicy


def _policy():
    return QLPolicy(4, [QLInput(0, 1, reward=2.0, probability=0.5), QLInput(1, 2), QLInput(2, 3, reward=-1.0)])


def test_registered_rewards():
    policy = _policy()
    assert policy.R(0, 1) == 2.0
    assert policy.R(1, 2) == 1.0
    assert policy.R(2, 3) == -1.0
    assert policy.P(0, 1) == 0.5
    assert policy.P(1, 2) == 1.0


def test_unregistered_pairs_default_to_zero():
    policy = _policy()
    for i in range(4):
        for j in range(4):
            assert policy.Q(i, j) == 0.0
    assert policy.R(1, 0) == 0.0
    assert policy.R(3, 3) == 0.0
    assert policy.P(3, 0) == 0.0


def test_set_q_read_after_write():
    policy = _policy()
    policy.set_q(0, 1, 0.42)
    assert policy.Q(0, 1) == 0.42
    # no bounds on the value itself
    policy.set_q(3, 0, -17.5)
    assert policy.Q(3, 0) == -17.5
    assert policy.Q(0, 3) == 0.0


@pytest.mark.parametrize("pair", [(-1, 0), (0, -1), (4, 0), (0, 4)])
def test_out_of_range_access(pair):
    policy = _policy()
    with pytest.raises(IndexError):
        policy.Q(*pair)
    with pytest.raises(IndexError):
        policy.R(*pair)
    with pytest.raises(IndexError):
        policy.set_q(*pair, 1.0)


def test_invalid_construction():
    with pytest.raises(QLConfigError):
        QLPolicy(0, [])
    with pytest.raises(QLConfigError):
        QLPolicy(3, [QLInput(0, 3)])


def test_duplicate_edges_last_wins():
    policy = QLPolicy(3, [QLInput(0, 1, reward=1.0), QLInput(0, 1, reward=5.0)])
    assert policy.R(0, 1) == 5.0


def test_q_table_is_a_copy():
    policy = _policy()
    table = policy.q_table()
    table[0, 1] = 9.0
    assert policy.Q(0, 1) == 0.0
    assert table.shape == (4, 4)


def test_str_lists_non_zero_q_values():
    policy = _policy()
    policy.set_q(1, 2, 0.5)
    text = str(policy)
    assert "1->2: 0.5000" in text
    assert "0->1" not in text


def test_snapshot_is_independent():
    policy = _policy()
    policy.set_q(0, 1, 0.3)
    copy = policy.snapshot()
    policy.set_q(0, 1, 0.9)
    assert copy.Q(0, 1) == 0.3
    assert copy.R(0, 1) == 2.0
    assert copy.P(0, 1) == 0.5
    assert copy.num_states == 4
