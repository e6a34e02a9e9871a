"""
Duplicate Removal

Keeps the single best-performing entry per beatmap hash.
"""

import math
from collections.abc import Iterable

from pptops.models import ScoredEntry


def _pp_key(entry: ScoredEntry) -> float:
    """Undefined pp values lose against any defined value."""
    return -math.inf if math.isnan(entry.pp) else entry.pp


def is_better(candidate: ScoredEntry, current: ScoredEntry) -> bool:
    """
    Decide whether candidate should replace current within a hash group.

    Higher pp wins. Equal pp goes to the earlier play, then to the lower
    replay hash, so the winner does not depend on input order.
    """
    candidate_pp, current_pp = _pp_key(candidate), _pp_key(current)
    if candidate_pp != current_pp:
        return candidate_pp > current_pp
    if candidate.score.timestamp != current.score.timestamp:
        return candidate.score.timestamp < current.score.timestamp
    return (candidate.score.replay_hash or "") < (current.score.replay_hash or "")


def remove_duplicates(entries: Iterable[ScoredEntry]) -> dict[str, ScoredEntry]:
    """
    Group entries by beatmap hash and keep the best one per group.

    Scores without a hash all share the MISSING_HASH_KEY slot.

    Args:
        entries: Scored entries, possibly several per beatmap

    Returns:
        Mapping of hash (or MISSING_HASH_KEY) to the best entry. Iteration
        order is not meaningful; rank with the engine before reporting.
    """
    best: dict[str, ScoredEntry] = {}
    for entry in entries:
        key = entry.dedup_key
        current = best.get(key)
        if current is None or is_better(entry, current):
            best[key] = entry
    return best
