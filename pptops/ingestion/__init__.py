"""
Database Ingestion

Modules:
- binary: Primitive reader for the osu! binary encoding
- listing: Decode osu!.db into a beatmap listing
- scores: Decode scores.db into per-beatmap score groups
"""


def __getattr__(name):
    """Lazy imports to avoid RuntimeWarning when running modules directly."""
    if name == "load_listing":
        from pptops.ingestion.listing import load_listing
        return load_listing
    if name == "load_scores":
        from pptops.ingestion.scores import load_scores
        return load_scores
    if name == "DatabaseLoadError":
        from pptops.ingestion.binary import DatabaseLoadError
        return DatabaseLoadError
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
