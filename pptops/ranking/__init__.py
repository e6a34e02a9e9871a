"""
Ranking

Modules:
- performance: pp and star rating calculation through rosu-pp
- matcher: Join scores to beatmaps and compute pp
- dedup: Keep the best score per beatmap
- engine: Sort, total and write the report
"""


def __getattr__(name):
    """Lazy imports to avoid RuntimeWarning when running modules directly."""
    if name == "rank_entries":
        from pptops.ranking.engine import rank_entries
        return rank_entries
    if name == "run_tops":
        from pptops.ranking.engine import run_tops
        return run_tops
    if name == "remove_duplicates":
        from pptops.ranking.dedup import remove_duplicates
        return remove_duplicates
    if name == "process_scores":
        from pptops.ranking.matcher import process_scores
        return process_scores
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
