"""Shared test fixtures and factories for the pptops test suite."""

from datetime import datetime

import pytest

from pptops.models import (
    BeatmapEntry,
    Mods,
    PerformanceResult,
    RankedStatus,
    ScoredEntry,
    ScoreRecord,
)


# --- Factory Helpers ---


def build_score(
    beatmap_hash="a" * 32,
    mods=Mods.NoMod,
    perfect_combo=False,
    timestamp=datetime(2024, 1, 1, 12, 0, 0),
    replay_hash=None,
    count_miss=0,
):
    """Create a ScoreRecord with sensible defaults."""
    return ScoreRecord(
        beatmap_hash=beatmap_hash,
        count_300=500,
        count_100=10,
        count_50=0,
        count_miss=count_miss,
        max_combo=700,
        mods=mods,
        perfect_combo=perfect_combo,
        timestamp=timestamp,
        replay_hash=replay_hash,
    )


def build_beatmap(
    beatmap_hash="a" * 32,
    status=RankedStatus.LOVED,
    folder_name="123 Artist - Title",
    file_name="Artist - Title (Mapper) [Insane].osu",
    artist="Artist",
    title="Title",
    difficulty_name="Insane",
):
    """Create a BeatmapEntry with sensible defaults."""
    return BeatmapEntry(
        beatmap_hash=beatmap_hash,
        status=status,
        folder_name=folder_name,
        file_name=file_name,
        artist=artist,
        title=title,
        difficulty_name=difficulty_name,
    )


def build_entry(
    pp,
    beatmap_hash="a" * 32,
    stars=5.0,
    perfect_combo=False,
    mods=Mods.NoMod,
    timestamp=datetime(2024, 1, 1, 12, 0, 0),
    replay_hash=None,
    title="Title",
):
    """Create a ScoredEntry whose score and beatmap share a hash."""
    return ScoredEntry(
        score=build_score(
            beatmap_hash=beatmap_hash,
            mods=mods,
            perfect_combo=perfect_combo,
            timestamp=timestamp,
            replay_hash=replay_hash,
        ),
        beatmap=build_beatmap(beatmap_hash=beatmap_hash, title=title),
        performance=PerformanceResult(pp=pp, stars=stars),
    )


class FakeEvaluator:
    """Evaluator returning canned results, keyed by .osu content."""

    def __init__(self, results=None, default=PerformanceResult(pp=100.0, stars=5.0)):
        self.results = results or {}
        self.default = default
        self.calls = []

    def __call__(self, content, mods, max_combo, n_misses, n300, n100, n50):
        self.calls.append((content, mods, max_combo, n_misses, n300, n100, n50))
        result = self.results.get(content, self.default)
        if isinstance(result, Exception):
            raise result
        return result


# --- Fixtures ---


@pytest.fixture
def make_score():
    return build_score


@pytest.fixture
def make_beatmap():
    return build_beatmap


@pytest.fixture
def make_entry():
    return build_entry


@pytest.fixture
def songs_folder(tmp_path):
    """Provide an empty Songs folder inside a temporary directory."""
    folder = tmp_path / "Songs"
    folder.mkdir()
    return folder


def write_osu_file(songs_folder, beatmap, content=b"osu file format v14\n"):
    """Place a .osu file where the matcher will look for the beatmap."""
    folder = songs_folder / beatmap.folder_name
    folder.mkdir(parents=True, exist_ok=True)
    path = folder / beatmap.file_name
    path.write_bytes(content)
    return path


@pytest.fixture
def make_evaluator():
    return FakeEvaluator


@pytest.fixture
def place_osu_file():
    return write_osu_file
