"""Centralized constants for Sandstone.

All scheduler tuning values live here so every layer imports from a single
source of truth.
"""

# ---------- Ease factor ----------
MIN_EASE_FACTOR = 1.3
MAX_EASE_FACTOR = 3.0
DEFAULT_EASE_FACTOR = 2.5

# ---------- Intervals (days) ----------
DEFAULT_INTERVAL = 1
SECOND_INTERVAL = 6
MAX_INTERVAL = 365
RELEARN_DECAY = 0.8

# ---------- Ratings ----------
MIN_QUALITY = 0
MAX_QUALITY = 5
PASSING_QUALITY = 3

# ---------- Card progression ----------
LEARNING_THRESHOLD = 3  # repetitions to graduate from learning
MASTERY_THRESHOLD = 5  # repetitions to consider mastered

# ---------- FSRS-inspired scalars ----------
STABILITY_BASE = 0.5
STABILITY_LAPSE_DECAY = 0.7
DIFFICULTY_BASE = 0.3
MAX_STABILITY_BONUS = 1.2
STABILITY_BONUS_STEP = 0.05

# ---------- Ease penalties ----------
BASE_EASE_PENALTY = 0.2
LAPSE_EASE_PENALTY = 0.05

# ---------- Difficulty labels ----------
EASY_EASE_THRESHOLD = 2.3
MEDIUM_EASE_THRESHOLD = 1.8

# ---------- Study modes ----------
CRAM_CARD_LIMIT = 50
LEARN_CARD_LIMIT = 20
DEFAULT_UPCOMING_DAYS = 7
