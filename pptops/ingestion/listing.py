"""
Beatmap Listing (osu!.db)

This module decodes the osu!.db beatmap listing into an immutable table of
BeatmapEntry records, indexed by beatmap hash.

Usage:
    from pptops.ingestion.listing import load_listing
    listing = load_listing(Path("osu!.db"))
    entry = listing.find("d41d8cd98f00b204e9800998ecf8427e")
"""

from collections.abc import Iterable, Iterator, Mapping
from datetime import datetime
from pathlib import Path
from types import MappingProxyType

from pptops.config import (
    OSU_DB_ENTRY_SIZE_VERSION,
    OSU_DB_FLOAT_DIFFICULTY_VERSION,
    OSU_DB_FLOAT_STARS_VERSION,
)
from pptops.ingestion.binary import BinaryReader, DatabaseLoadError
from pptops.models import BeatmapEntry, RankedStatus
from pptops.utils import setup_logging

# --- Module Logger ---
logger = setup_logging(__name__)

TIMING_POINT_SIZE = 17  # Double BPM, Double offset, Bool inherited
STAR_RATING_TABLES = 4  # osu!, taiko, catch, mania


class BeatmapListing:
    """
    Read-only table of beatmaps from osu!.db.

    Lookup by hash returns the first entry in listing order when several
    entries share a hash. A missing hash matches the first entry that has
    no hash either.
    """

    def __init__(
        self,
        beatmaps: Iterable[BeatmapEntry],
        version: int = 0,
        player_name: str | None = None,
        folder_count: int = 0,
    ):
        self._beatmaps = tuple(beatmaps)
        self.version = version
        self.player_name = player_name
        self.folder_count = folder_count

        index: dict[str, BeatmapEntry] = {}
        self._hashless: BeatmapEntry | None = None
        for beatmap in self._beatmaps:
            if beatmap.beatmap_hash is not None:
                index.setdefault(beatmap.beatmap_hash, beatmap)
            elif self._hashless is None:
                self._hashless = beatmap
        self._by_hash = MappingProxyType(index)

    def __len__(self) -> int:
        return len(self._beatmaps)

    def __iter__(self) -> Iterator[BeatmapEntry]:
        return iter(self._beatmaps)

    @property
    def beatmaps(self) -> tuple[BeatmapEntry, ...]:
        return self._beatmaps

    @property
    def by_hash(self) -> Mapping[str, BeatmapEntry]:
        return self._by_hash

    def find(self, beatmap_hash: str | None) -> BeatmapEntry | None:
        if beatmap_hash is None:
            return self._hashless
        return self._by_hash.get(beatmap_hash)


def _read_beatmap(reader: BinaryReader, version: int) -> BeatmapEntry:
    """Decode one beatmap entry, keeping only the fields the ranking needs."""
    if version < OSU_DB_ENTRY_SIZE_VERSION:
        reader.read_int()  # entry size in bytes

    artist = reader.read_string()
    artist_unicode = reader.read_string()
    title = reader.read_string()
    title_unicode = reader.read_string()
    creator = reader.read_string()
    difficulty_name = reader.read_string()
    reader.read_string()  # audio file name
    beatmap_hash = reader.read_string()
    file_name = reader.read_string()
    status = RankedStatus.from_byte(reader.read_byte())
    reader.skip(2 * 3)  # hitcircle, slider and spinner counts
    reader.read_long()  # last modification time

    float_difficulty = version >= OSU_DB_FLOAT_DIFFICULTY_VERSION
    reader.skip(4 * 4 if float_difficulty else 4)  # AR, CS, HP, OD
    reader.read_double()  # slider velocity

    if float_difficulty:
        float_stars = version >= OSU_DB_FLOAT_STARS_VERSION
        for _ in range(STAR_RATING_TABLES):
            for _ in range(reader.read_int()):
                reader.read_star_pair(float_stars)

    reader.read_int()  # drain time
    reader.read_int()  # total time
    reader.read_int()  # preview time
    timing_points = reader.read_int()
    reader.skip(timing_points * TIMING_POINT_SIZE)

    beatmap_id = reader.read_int()
    beatmapset_id = reader.read_int()
    reader.read_int()  # thread id
    reader.skip(4)  # grades for each mode
    reader.read_short()  # local offset
    reader.read_single()  # stack leniency
    mode = reader.read_byte()
    reader.read_string()  # song source
    reader.read_string()  # song tags
    reader.read_short()  # online offset
    reader.read_string()  # title font
    reader.read_bool()  # unplayed
    reader.read_long()  # last played
    reader.read_bool()  # osz2
    folder_name = reader.read_string()
    reader.read_long()  # last checked against the online repository
    reader.skip(5)  # ignore sound, ignore skin, disable storyboard, disable video, visual override

    if not float_difficulty:
        reader.read_short()  # unknown

    reader.read_int()  # last modification time (?)
    reader.read_byte()  # mania scroll speed

    return BeatmapEntry(
        beatmap_hash=beatmap_hash,
        status=status,
        folder_name=folder_name,
        file_name=file_name,
        artist=artist,
        title=title,
        difficulty_name=difficulty_name,
        artist_unicode=artist_unicode,
        title_unicode=title_unicode,
        creator=creator,
        beatmap_id=beatmap_id,
        beatmapset_id=beatmapset_id,
        mode=mode,
    )


def parse_listing(reader: BinaryReader) -> BeatmapListing:
    """
    Decode a full osu!.db file.

    Args:
        reader: Reader positioned at the start of the file

    Returns:
        BeatmapListing with every beatmap in file order

    Raises:
        DatabaseLoadError: If the data is truncated or malformed
    """
    version = reader.read_int()
    folder_count = reader.read_int()
    reader.read_bool()  # account unlocked
    unlock_date: datetime = reader.read_datetime()
    player_name = reader.read_string()
    beatmap_count = reader.read_int()
    if beatmap_count < 0:
        raise DatabaseLoadError(f"Negative beatmap count {beatmap_count} in {reader.source}")

    logger.debug(f"osu!.db version {version}, account unlock date {unlock_date:%Y-%m-%d}")

    beatmaps = [_read_beatmap(reader, version) for _ in range(beatmap_count)]
    reader.read_int()  # user permissions
    if reader.remaining:
        logger.debug(f"Ignoring {reader.remaining} trailing bytes after offset {reader.offset} in {reader.source}")

    return BeatmapListing(
        beatmaps,
        version=version,
        player_name=player_name,
        folder_count=folder_count,
    )


def load_listing(path: Path) -> BeatmapListing:
    """
    Load the beatmap listing from disk.

    Raises:
        DatabaseLoadError: If the file is missing, unreadable or malformed
    """
    reader = BinaryReader.from_path(path)
    listing = parse_listing(reader)
    logger.info(f"{path} found with {len(listing)} beatmaps")
    return listing
