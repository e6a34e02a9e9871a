"""
Central configuration for osu! Local Tops.

All shared constants and configuration values should be defined here
to avoid duplication and ensure consistency across modules.
"""

from pathlib import Path

# --- Input Files (relative to the working directory) ---
OSU_DB_FILE = Path("osu!.db")
SCORES_DB_FILE = Path("scores.db")
SONGS_FOLDER = Path("Songs")

# --- Report Output ---
REPORT_PREFIX = "tops_"
REPORT_SUFFIX = ".txt"
REPORT_TIMESTAMP_FORMAT = "%Y-%m-%dT%H-%M-%S"
TOP_PLAYS = 100  # Number of plays listed in the report
LOG_PREVIEW_ROWS = 20  # Rows of the ranking table echoed to the log

# --- Performance Filtering ---
PP_CEILING = 2000.0  # Anything at or above this is a broken calculation

# --- Weighting System ---
# https://osu.ppy.sh/wiki/en/Performance_points/Weighting_system
WEIGHT_DECAY = 0.95
BONUS_PP_MAX = 417 - 1 / 3
BONUS_DECAY = 0.995
BONUS_SCORE_CAP = 1000  # Bonus pp stops growing after this many unique maps

# --- 9* Perfect Full Combo Statistic ---
PFC_STAR_MIN = 9.0  # inclusive
PFC_STAR_MAX = 10.0  # exclusive

# --- Database Format Versions ---
OSU_DB_ENTRY_SIZE_VERSION = 20191106  # Entry size prefix dropped from here on
OSU_DB_FLOAT_DIFFICULTY_VERSION = 20140609  # AR/CS/HP/OD stored as Single
OSU_DB_FLOAT_STARS_VERSION = 20250107  # Star rating pairs stored as Int-Float

# --- Display Fallbacks ---
UNKNOWN_FOLDER = "Unknown Folder"
UNKNOWN_FILE = "Unknown File"
UNKNOWN_ARTIST = "Unknown Artist"
UNKNOWN_TITLE = "Unknown Title"
UNKNOWN_DIFFICULTY = "Unknown Difficulty"
NO_MOD_LABEL = "NoMod"
MOD_SEPARATOR = " | "

# Scores without a beatmap hash all share this deduplication slot
MISSING_HASH_KEY = "unknown"
