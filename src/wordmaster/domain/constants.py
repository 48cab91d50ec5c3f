"""Centralized constants for wordmaster.

Scheduling parameters and defaults live here so every layer
imports from a single source of truth.
"""

# ---------- SM-2 ----------
DEFAULT_EASINESS_FACTOR = 2.5
MIN_EASINESS_FACTOR = 1.3
PASSING_QUALITY = 3
MIN_QUALITY = 0
MAX_QUALITY = 5
FIRST_INTERVAL_DAYS = 1
SECOND_INTERVAL_DAYS = 6
LAPSE_INTERVAL_DAYS = 1

# ---------- Answer buttons ----------
QUALITY_FAIL = 1
QUALITY_HARD = 3
QUALITY_EASY = 5

# ---------- Proficiency tiers (repetitions strictly greater than) ----------
MASTERED_AFTER_REPETITIONS = 5
REVIEW_AFTER_REPETITIONS = 2

# ---------- Queue Builder ----------
DEFAULT_FALLBACK_QUEUE_SIZE = 10

# ---------- Stats ----------
DEFAULT_DAILY_GOAL = 20

# ---------- Export ----------
CSV_HEADERS = ["Term", "Definition", "Example", "Translation", "Phonetic"]
