"""
Ranking Engine for osu! Local Tops

This module turns the local score history into a ranked pp report:
- Match scores to beatmaps and compute pp (pptops.ranking.matcher)
- Keep the best score per beatmap (pptops.ranking.dedup)
- Sort, weight and total the unique scores
- Write the top plays to a timestamped text file

Usage:
    python -m pptops
    OR
    from pptops.ranking import run_tops, rank_entries
"""

import sys
from collections.abc import Iterable, Sequence
from datetime import datetime
from pathlib import Path

import numpy as np
import pandas as pd

from pptops.config import (
    BONUS_DECAY,
    BONUS_PP_MAX,
    BONUS_SCORE_CAP,
    LOG_PREVIEW_ROWS,
    OSU_DB_FILE,
    PFC_STAR_MAX,
    PFC_STAR_MIN,
    SCORES_DB_FILE,
    SONGS_FOLDER,
    TOP_PLAYS,
    WEIGHT_DECAY,
)
from pptops.ingestion.binary import DatabaseLoadError
from pptops.ingestion.listing import load_listing
from pptops.ingestion.scores import load_scores
from pptops.models import RankedReport, ScoredEntry
from pptops.ranking.dedup import remove_duplicates
from pptops.ranking.matcher import process_scores
from pptops.ranking.performance import PerformanceEvaluator, RosuEvaluator
from pptops.utils import atomic_write_text, setup_logging, unique_report_path

# --- Module Logger ---
logger = setup_logging(__name__)

RANKING_COLUMNS = [
    'key', 'pp', 'stars', 'perfect_combo', 'artist', 'title', 'difficulty', 'mods'
]


def weighted_pp(pp_values: Sequence[float], decay: float = WEIGHT_DECAY) -> float:
    """
    Sum pp values weighted by rank: the i-th best (0-based) counts decay**i.

    Args:
        pp_values: pp values already sorted best first

    Returns:
        Weighted total (0.0 for no values)
    """
    values = np.asarray(pp_values, dtype=float)
    weights = decay ** np.arange(len(values))
    return float(np.dot(values, weights))


def bonus_pp(unique_count: int) -> float:
    """Bonus pp for the number of distinct beatmaps, saturating at BONUS_SCORE_CAP."""
    return BONUS_PP_MAX * (1 - BONUS_DECAY ** min(BONUS_SCORE_CAP, unique_count))


def ranking_frame(entries: Sequence[ScoredEntry]) -> pd.DataFrame:
    """One row per entry, in the order given; the index is the position in entries."""
    rows = [
        {
            'key': entry.dedup_key,
            'pp': entry.pp,
            'stars': entry.stars,
            'perfect_combo': entry.score.perfect_combo,
            'artist': entry.beatmap.display_artist,
            'title': entry.beatmap.display_title,
            'difficulty': entry.beatmap.display_difficulty,
            'mods': entry.score.mods.display_name(),
        }
        for entry in entries
    ]
    df = pd.DataFrame(rows, columns=RANKING_COLUMNS)
    df['pp'] = df['pp'].astype(float)
    df['stars'] = df['stars'].astype(float)
    df['perfect_combo'] = df['perfect_combo'].astype(bool)
    return df


def rank_entries(unique_entries: Iterable[ScoredEntry], top_plays: int = TOP_PLAYS) -> RankedReport:
    """
    Sort unique entries by pp and compute the report totals.

    Undefined (NaN) pp values compare equal to each other and sort last
    instead of raising. Ties on pp are broken by beatmap hash so the order
    never depends on how the entries were collected.

    Args:
        unique_entries: At most one entry per beatmap hash
        top_plays: Number of plays the report lists

    Returns:
        RankedReport with entries best first
    """
    entries = list(unique_entries)
    df = ranking_frame(entries)
    df = df.sort_values(
        ['pp', 'key'], ascending=[False, True], na_position='last', kind='mergesort'
    )
    ordered = tuple(entries[i] for i in df.index)

    in_star_range = (df['stars'] >= PFC_STAR_MIN) & (df['stars'] < PFC_STAR_MAX)
    pfc_count = int((in_star_range & df['perfect_combo']).sum())

    return RankedReport(
        entries=ordered,
        weighted_pp=weighted_pp(df['pp'].to_numpy()),
        bonus_pp=bonus_pp(len(ordered)),
        pfc_count=pfc_count,
        top_plays=top_plays,
    )


def render_report(report: RankedReport) -> str:
    """Format the report file contents."""
    lines = [
        f"Total pp: {report.total_pp:.2f}",
        f"Total pp (without bonus pp): {report.weighted_pp:.2f}",
        f"Bonus pp: {report.bonus_pp:.2f}",
        f"9* PFCs: {report.pfc_count}",
    ]
    for rank, entry in enumerate(report.top, start=1):
        beatmap = entry.beatmap
        lines.append(
            f"{rank:3d}. {beatmap.display_artist}\t{beatmap.display_title} "
            f"[{beatmap.display_difficulty}]"
        )
        lines.append(f"     {entry.pp:.2f}pp {entry.score.mods.display_name()}")
    return "\n".join(lines) + "\n"


def write_report(report: RankedReport, folder: Path | None = None, now: datetime | None = None) -> Path:
    """Write the report to a new timestamped file and return its path."""
    path = unique_report_path(folder or Path.cwd(), now)
    atomic_write_text(render_report(report), path)
    logger.info(f"{path.name} written with top {len(report.top)} plays")
    return path


def run_tops(
    evaluator: PerformanceEvaluator,
    scores_db: Path = SCORES_DB_FILE,
    osu_db: Path = OSU_DB_FILE,
    songs_folder: Path = SONGS_FOLDER,
    output_folder: Path | None = None,
) -> tuple[RankedReport, Path]:
    """
    Run the whole pipeline: load, match, deduplicate, rank and write.

    Raises:
        DatabaseLoadError: If either database cannot be loaded. Nothing is
            processed or written in that case.
    """
    logger.info(f"Reading {scores_db}")
    store = load_scores(scores_db)
    logger.info(f"Reading {osu_db}")
    listing = load_listing(osu_db)

    logger.info("Processing maps and scores with pp calc")
    scored = process_scores(store, listing, evaluator, songs_folder)
    logger.info(f"Processed {len(scored)} scores")

    logger.info("Removing duplicates through pp sort")
    unique = remove_duplicates(scored)
    logger.info(f"Down to {len(unique)} scores")

    report = rank_entries(unique.values())
    logger.info(f"Total pp (without bonus pp): {report.weighted_pp:.2f}")
    logger.info(f"Bonus pp: {report.bonus_pp:.2f}")
    logger.info(f"9* PFCs: {report.pfc_count}")

    if report.entries:
        preview = ranking_frame(report.entries[:LOG_PREVIEW_ROWS])
        preview.insert(0, 'rank', range(1, len(preview) + 1))
        logger.info(f"Top {len(preview)} plays:")
        logger.info("\n" + preview.drop(columns=['key']).to_string(index=False))

    path = write_report(report, output_folder)
    return report, path


def main() -> int:
    try:
        report, path = run_tops(RosuEvaluator())
    except DatabaseLoadError as e:
        logger.error(f"Could not load databases: {e}")
        return 1

    logger.info(f"Done: {report.total_pp:.2f}pp total, report at {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
