"""
osu! Local Tops - Core Package

This package contains the core modules for:
- Reading the local score and beatmap databases (pptops.ingestion)
- Performance calculation, deduplication and ranking (pptops.ranking)
- Shared configuration and utilities
"""

from pptops.config import *
