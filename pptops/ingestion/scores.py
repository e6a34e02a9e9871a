"""
Score Store (scores.db)

This module decodes the local scores.db into per-beatmap groups of
ScoreRecord.

Usage:
    from pptops.ingestion.scores import load_scores
    store = load_scores(Path("scores.db"))
    for group in store:
        print(group.beatmap_hash, len(group.scores))
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path

from pptops.ingestion.binary import BinaryReader, DatabaseLoadError
from pptops.models import Mods, ScoreRecord
from pptops.utils import setup_logging

# --- Module Logger ---
logger = setup_logging(__name__)


@dataclass(frozen=True)
class ScoreGroup:
    """All local scores recorded under one beatmap hash."""

    beatmap_hash: str | None
    scores: tuple[ScoreRecord, ...]


class ScoreStore:
    """Read-only, ordered collection of score groups from scores.db."""

    def __init__(self, groups: Iterable[ScoreGroup], version: int = 0):
        self._groups = tuple(groups)
        self.version = version

    def __len__(self) -> int:
        return len(self._groups)

    def __iter__(self) -> Iterator[ScoreGroup]:
        return iter(self._groups)

    @property
    def groups(self) -> tuple[ScoreGroup, ...]:
        return self._groups

    @property
    def score_count(self) -> int:
        return sum(len(group.scores) for group in self._groups)


def _read_score(reader: BinaryReader) -> ScoreRecord:
    mode = reader.read_byte()
    reader.read_int()  # game version
    beatmap_hash = reader.read_string()
    player_name = reader.read_string()
    replay_hash = reader.read_string()
    count_300 = reader.read_short()
    count_100 = reader.read_short()
    count_50 = reader.read_short()
    count_geki = reader.read_short()
    count_katu = reader.read_short()
    count_miss = reader.read_short()
    score = reader.read_int()
    max_combo = reader.read_short()
    perfect_combo = reader.read_bool()
    raw_mods = reader.read_uint()
    reader.read_string()  # life bar graph, always empty
    timestamp = reader.read_datetime()
    reader.read_int()  # always -1
    online_score_id = reader.read_long()

    if raw_mods & Mods.Target:
        reader.read_double()  # target practice accuracy

    return ScoreRecord(
        beatmap_hash=beatmap_hash,
        count_300=count_300,
        count_100=count_100,
        count_50=count_50,
        count_miss=count_miss,
        max_combo=max_combo,
        mods=Mods.from_bits(raw_mods),
        perfect_combo=perfect_combo,
        timestamp=timestamp,
        count_geki=count_geki,
        count_katu=count_katu,
        score=score,
        mode=mode,
        player_name=player_name,
        replay_hash=replay_hash,
        online_score_id=online_score_id,
    )


def parse_scores(reader: BinaryReader) -> ScoreStore:
    """
    Decode a full scores.db file.

    Args:
        reader: Reader positioned at the start of the file

    Returns:
        ScoreStore with groups in file order

    Raises:
        DatabaseLoadError: If the data is truncated or malformed
    """
    version = reader.read_int()
    beatmap_count = reader.read_int()
    if beatmap_count < 0:
        raise DatabaseLoadError(f"Negative beatmap count {beatmap_count} in {reader.source}")

    groups = []
    for _ in range(beatmap_count):
        beatmap_hash = reader.read_string()
        score_count = reader.read_int()
        if score_count < 0:
            raise DatabaseLoadError(
                f"Negative score count {score_count} for beatmap {beatmap_hash} in {reader.source}"
            )
        scores = tuple(_read_score(reader) for _ in range(score_count))
        groups.append(ScoreGroup(beatmap_hash=beatmap_hash, scores=scores))

    if reader.remaining:
        logger.debug(f"Ignoring {reader.remaining} trailing bytes after offset {reader.offset} in {reader.source}")

    return ScoreStore(groups, version=version)


def load_scores(path: Path) -> ScoreStore:
    """
    Load the score store from disk.

    Raises:
        DatabaseLoadError: If the file is missing, unreadable or malformed
    """
    reader = BinaryReader.from_path(path)
    store = parse_scores(reader)
    logger.info(f"{path} found with {store.score_count} scores on {len(store)} beatmaps")
    return store
