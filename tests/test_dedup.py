"""
Tests for duplicate removal.
"""

import math
import random
from datetime import datetime

import pytest

from pptops.config import MISSING_HASH_KEY
from pptops.ranking.dedup import is_better, remove_duplicates


class TestRemoveDuplicates:
    """Tests for remove_duplicates function."""

    def test_empty_input(self):
        assert remove_duplicates([]) == {}

    def test_keeps_highest_pp_per_hash(self, make_entry):
        low = make_entry(150.0, beatmap_hash="x" * 32)
        high = make_entry(220.0, beatmap_hash="x" * 32)

        result = remove_duplicates([low, high])

        assert len(result) == 1
        assert result["x" * 32].pp == 220.0

    def test_keeps_highest_pp_regardless_of_order(self, make_entry):
        low = make_entry(150.0, beatmap_hash="x" * 32)
        high = make_entry(220.0, beatmap_hash="x" * 32)

        assert remove_duplicates([high, low])["x" * 32] is high
        assert remove_duplicates([low, high])["x" * 32] is high

    def test_distinct_hashes_kept_separately(self, make_entry):
        entries = [
            make_entry(100.0, beatmap_hash="a" * 32),
            make_entry(200.0, beatmap_hash="b" * 32),
            make_entry(300.0, beatmap_hash="c" * 32),
        ]
        result = remove_duplicates(entries)
        assert set(result) == {"a" * 32, "b" * 32, "c" * 32}

    def test_missing_hashes_share_one_slot(self, make_entry):
        entries = [
            make_entry(100.0, beatmap_hash=None),
            make_entry(250.0, beatmap_hash=None),
            make_entry(180.0, beatmap_hash=None),
        ]
        result = remove_duplicates(entries)
        assert list(result) == [MISSING_HASH_KEY]
        assert result[MISSING_HASH_KEY].pp == 250.0

    def test_nan_never_beats_a_number(self, make_entry):
        undefined = make_entry(float("nan"))
        defined = make_entry(10.0)

        assert remove_duplicates([undefined, defined])["a" * 32] is defined
        assert remove_duplicates([defined, undefined])["a" * 32] is defined


class TestIsBetter:
    """Tests for the per-group tie-break."""

    def test_higher_pp_wins(self, make_entry):
        assert is_better(make_entry(2.0), make_entry(1.0))
        assert not is_better(make_entry(1.0), make_entry(2.0))

    def test_equal_pp_prefers_earlier_play(self, make_entry):
        early = make_entry(100.0, timestamp=datetime(2023, 1, 1))
        late = make_entry(100.0, timestamp=datetime(2024, 1, 1))
        assert is_better(early, late)
        assert not is_better(late, early)

    def test_equal_pp_and_time_uses_replay_hash(self, make_entry):
        first = make_entry(100.0, replay_hash="0" * 32)
        second = make_entry(100.0, replay_hash="f" * 32)
        assert is_better(first, second)
        assert not is_better(second, first)


class TestDeduplicationProperties:
    """Property-style checks over shuffled inputs."""

    @pytest.mark.parametrize("seed", range(5))
    def test_one_entry_per_hash_with_max_pp(self, make_entry, seed):
        rng = random.Random(seed)
        hashes = ["a" * 32, "b" * 32, "c" * 32, None]
        entries = [
            make_entry(round(rng.uniform(0, 1000), 2), beatmap_hash=rng.choice(hashes),
                       replay_hash=f"{i:032d}")
            for i in range(40)
        ]

        result = remove_duplicates(entries)

        for key, best in result.items():
            group = [e for e in entries if e.dedup_key == key]
            assert all(best.pp >= e.pp for e in group)
        assert len(result) == len({e.dedup_key for e in entries})

    @pytest.mark.parametrize("seed", range(5))
    def test_winner_independent_of_input_order(self, make_entry, seed):
        entries = [
            make_entry(100.0, replay_hash="1" * 32),
            make_entry(100.0, replay_hash="2" * 32),
            make_entry(90.0, replay_hash="3" * 32),
            make_entry(math.nan, replay_hash="4" * 32),
        ]
        shuffled = entries[:]
        random.Random(seed).shuffle(shuffled)

        assert remove_duplicates(shuffled)["a" * 32] is entries[0]
