import hashlib

import pytest

from jobtools.errors import InvalidRequest
from jobtools.jobset.sampler import sample


POOL = [f"sim.mu2e.pileup.v1.{i:06d}_{i:08d}.art" for i in range(20)]


def _first_pick(index, pool):
    h = hashlib.sha256((str(index) + "".join(pool)).encode("utf-8")).hexdigest()
    return pool[int(h[:8], 16) % len(pool)]


def test_zero_count_takes_everything_in_order():
    assert sample(3, 0, POOL) == POOL


def test_same_arguments_same_draw():
    assert sample(5, 7, POOL) == sample(5, 7, POOL)


def test_draw_has_no_repeats_and_stays_in_pool():
    drawn = sample(11, 12, POOL)
    assert len(drawn) == 12
    assert len(set(drawn)) == 12
    assert set(drawn) <= set(POOL)


def test_full_draw_is_a_permutation():
    drawn = sample(2, len(POOL), POOL)
    assert sorted(drawn) == sorted(POOL)


def test_first_draw_follows_digest_of_index_and_pool():
    for index in (0, 1, 42, 1000):
        assert sample(index, 1, POOL)[0] == _first_pick(index, POOL)


def test_second_draw_hashes_the_remaining_pool():
    first, second = sample(9, 2, POOL)
    remaining = [f for f in POOL if f != first]
    assert second == _first_pick(9, remaining)


def test_draws_depend_on_index():
    draws = {tuple(sample(i, 3, POOL)) for i in range(10)}
    assert len(draws) > 1


def test_input_list_is_not_modified():
    pool = list(POOL)
    sample(1, 5, pool)
    assert pool == POOL


def test_overdraw_fails():
    with pytest.raises(InvalidRequest):
        sample(0, 5, ["a", "b", "c"])


def test_negative_count_fails():
    with pytest.raises(InvalidRequest):
        sample(0, -1, ["a"])
