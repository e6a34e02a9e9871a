"""
Score Matcher

Joins each local score with its beatmap from the listing, filters out
ranked beatmaps, computes performance and rejects broken calculations.

Every score produces a MatchResult; process_scores() decides what gets
logged and what is kept.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from pptops.config import PP_CEILING, SONGS_FOLDER
from pptops.ingestion.listing import BeatmapListing
from pptops.ingestion.scores import ScoreStore
from pptops.models import BeatmapEntry, ScoredEntry, ScoreRecord, RankedStatus
from pptops.ranking.performance import EvaluationError, PerformanceEvaluator
from pptops.utils import setup_logging

# --- Module Logger ---
logger = setup_logging(__name__)


class MatchStatus(Enum):
    SCORED = "scored"
    SKIPPED = "skipped"
    OUTLIER = "outlier"


class SkipReason(Enum):
    BEATMAP_NOT_FOUND = "Beatmap not found"
    RANKED = "Beatmap is ranked"
    CONTENT_UNREADABLE = "Beatmap file unreadable"
    EVALUATION_FAILED = "Performance calculation failed"


@dataclass(frozen=True)
class MatchResult:
    status: MatchStatus
    entry: ScoredEntry | None = None
    reason: SkipReason | None = None
    detail: str = ""

    @classmethod
    def skipped(cls, reason: SkipReason, detail: str = "") -> "MatchResult":
        return cls(MatchStatus.SKIPPED, reason=reason, detail=detail)


def is_outlier(pp: float) -> bool:
    """True for performance values at or above the sanity ceiling."""
    return pp >= PP_CEILING


def beatmap_path(beatmap: BeatmapEntry, songs_folder: Path = SONGS_FOLDER) -> Path:
    folder, file_name = beatmap.relative_path
    return Path(songs_folder) / folder / file_name


def match_score(
    score: ScoreRecord,
    listing: BeatmapListing,
    evaluator: PerformanceEvaluator,
    songs_folder: Path = SONGS_FOLDER,
) -> MatchResult:
    """
    Run one score through lookup, eligibility, evaluation and the outlier guard.

    Args:
        score: Score record from the score store
        listing: Beatmap listing to look the score's hash up in
        evaluator: Callable computing pp and stars from beatmap content
        songs_folder: Root folder holding beatmap folders

    Returns:
        MatchResult with a ScoredEntry when the score survives every step
    """
    beatmap = listing.find(score.beatmap_hash)
    if beatmap is None:
        return MatchResult.skipped(SkipReason.BEATMAP_NOT_FOUND, f"hash {score.beatmap_hash}")

    if beatmap.status == RankedStatus.RANKED:
        return MatchResult.skipped(SkipReason.RANKED)

    path = beatmap_path(beatmap, songs_folder)
    try:
        content = path.read_bytes()
    except OSError as e:
        return MatchResult.skipped(SkipReason.CONTENT_UNREADABLE, f"{path}: {e}")

    try:
        performance = evaluator(
            content,
            score.mods,
            score.max_combo,
            score.count_miss,
            score.count_300,
            score.count_100,
            score.count_50,
        )
    except EvaluationError as e:
        return MatchResult.skipped(SkipReason.EVALUATION_FAILED, f"{path}: {e}")

    if is_outlier(performance.pp):
        return MatchResult(MatchStatus.OUTLIER)

    return MatchResult(
        MatchStatus.SCORED,
        entry=ScoredEntry(score=score, beatmap=beatmap, performance=performance),
    )


def process_scores(
    store: ScoreStore,
    listing: BeatmapListing,
    evaluator: PerformanceEvaluator,
    songs_folder: Path = SONGS_FOLDER,
) -> list[ScoredEntry]:
    """
    Match every score in the store and collect the scored entries.

    Skips are logged and never stop the run.
    """
    scored = []
    skipped = 0
    total_groups = len(store)

    for map_index, group in enumerate(store):
        logger.debug(f"Processing beatmap in database {map_index}/{total_groups}")
        for score_index, score in enumerate(group.scores):
            logger.debug(f"Processing score in beatmap {score_index}/{len(group.scores)}")
            result = match_score(score, listing, evaluator, songs_folder)

            if result.status is MatchStatus.SCORED:
                scored.append(result.entry)
            elif result.status is MatchStatus.OUTLIER:
                continue
            elif result.reason is SkipReason.RANKED:
                logger.debug(f"Skipping score on ranked beatmap {score.beatmap_hash}")
            else:
                skipped += 1
                detail = f" ({result.detail})" if result.detail else ""
                logger.warning(f"{result.reason.value}{detail}")

    logger.debug(f"Skipped {skipped} scores")
    return scored
