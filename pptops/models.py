"""
Data model for osu! Local Tops.

Records loaded from the databases (ScoreRecord, BeatmapEntry) are frozen
dataclasses and are never modified after load. ScoredEntry instances are
created by the matcher and replaced, never mutated, by deduplication.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum, IntFlag

from pptops.config import (
    MISSING_HASH_KEY,
    MOD_SEPARATOR,
    NO_MOD_LABEL,
    TOP_PLAYS,
    UNKNOWN_ARTIST,
    UNKNOWN_DIFFICULTY,
    UNKNOWN_FILE,
    UNKNOWN_FOLDER,
    UNKNOWN_TITLE,
)


# https://github.com/ppy/osu-api/wiki#mods
class Mods(IntFlag):
    """Legacy osu! modifier bitset."""

    NoMod = 0
    NoFail = 1 << 0
    Easy = 1 << 1
    TouchDevice = 1 << 2
    Hidden = 1 << 3
    HardRock = 1 << 4
    SuddenDeath = 1 << 5
    DoubleTime = 1 << 6
    Relax = 1 << 7
    HalfTime = 1 << 8
    Nightcore = 1 << 9  # Only set along with DoubleTime, i.e. NC gives 576
    Flashlight = 1 << 10
    Autoplay = 1 << 11
    SpunOut = 1 << 12
    Relax2 = 1 << 13  # Autopilot
    Perfect = 1 << 14  # Only set along with SuddenDeath, i.e. PF gives 16416
    Key4 = 1 << 15
    Key5 = 1 << 16
    Key6 = 1 << 17
    Key7 = 1 << 18
    Key8 = 1 << 19
    FadeIn = 1 << 20
    Random = 1 << 21
    Cinema = 1 << 22
    Target = 1 << 23
    Key9 = 1 << 24
    KeyCoop = 1 << 25
    Key1 = 1 << 26
    Key3 = 1 << 27
    Key2 = 1 << 28
    ScoreV2 = 1 << 29
    Mirror = 1 << 30

    @classmethod
    def from_bits(cls, bits: int) -> "Mods":
        """Build a mod set from raw bits, dropping bits with no known mod."""
        known = 0
        for member in cls.__members__.values():
            known |= member.value
        return cls(bits & known)

    def names(self) -> list[str]:
        """Names of the set mods, in bit order."""
        return [
            name for name, member in type(self).__members__.items()
            if member.value and member.value & self.value == member.value
        ]

    def display_name(self) -> str:
        names = self.names()
        return MOD_SEPARATOR.join(names) if names else NO_MOD_LABEL


class RankedStatus(IntEnum):
    """Ranked status byte as stored in osu!.db."""

    UNKNOWN = 0
    UNSUBMITTED = 1
    PENDING = 2  # also WIP and graveyard
    UNUSED = 3
    RANKED = 4
    APPROVED = 5
    QUALIFIED = 6
    LOVED = 7

    @classmethod
    def from_byte(cls, value: int) -> "RankedStatus":
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN


@dataclass(frozen=True)
class ScoreRecord:
    """A single local play from scores.db."""

    beatmap_hash: str | None
    count_300: int
    count_100: int
    count_50: int
    count_miss: int
    max_combo: int
    mods: Mods
    perfect_combo: bool
    timestamp: datetime
    count_geki: int = 0
    count_katu: int = 0
    score: int = 0
    mode: int = 0
    player_name: str | None = None
    replay_hash: str | None = None
    online_score_id: int = 0

    @property
    def dedup_key(self) -> str:
        return self.beatmap_hash if self.beatmap_hash is not None else MISSING_HASH_KEY


@dataclass(frozen=True)
class BeatmapEntry:
    """A single difficulty from osu!.db."""

    beatmap_hash: str | None
    status: RankedStatus
    folder_name: str | None
    file_name: str | None
    artist: str | None = None
    title: str | None = None
    difficulty_name: str | None = None
    artist_unicode: str | None = None
    title_unicode: str | None = None
    creator: str | None = None
    beatmap_id: int = 0
    beatmapset_id: int = 0
    mode: int = 0

    @property
    def relative_path(self) -> tuple[str, str]:
        """Folder and file name under the Songs folder, with placeholders for missing values."""
        return (self.folder_name or UNKNOWN_FOLDER, self.file_name or UNKNOWN_FILE)

    @property
    def display_artist(self) -> str:
        return self.artist or UNKNOWN_ARTIST

    @property
    def display_title(self) -> str:
        return self.title or UNKNOWN_TITLE

    @property
    def display_difficulty(self) -> str:
        return self.difficulty_name or UNKNOWN_DIFFICULTY


@dataclass(frozen=True)
class PerformanceResult:
    pp: float
    stars: float


@dataclass(frozen=True)
class ScoredEntry:
    """A score joined with its beatmap and computed performance."""

    score: ScoreRecord
    beatmap: BeatmapEntry
    performance: PerformanceResult

    @property
    def pp(self) -> float:
        return self.performance.pp

    @property
    def stars(self) -> float:
        return self.performance.stars

    @property
    def dedup_key(self) -> str:
        return self.score.dedup_key


@dataclass(frozen=True)
class RankedReport:
    """Sorted unique entries plus the totals written to the report."""

    entries: tuple[ScoredEntry, ...]
    weighted_pp: float
    bonus_pp: float
    pfc_count: int
    top_plays: int = TOP_PLAYS

    @property
    def total_pp(self) -> float:
        return self.weighted_pp + self.bonus_pp

    @property
    def top(self) -> tuple[ScoredEntry, ...]:
        return self.entries[: self.top_plays]
