"""
Standings engine constants.

The numbers here define how raw league results are presented: the baseline
rating, the character sheet stat range, XP pacing and achievement thresholds.
They are display policy rather than tuned parameters, so changing one changes
what every player sees on the next computation.
"""

# =============================================================================
# Scoring
# =============================================================================

# Points awarded when no rule produced any points for a placement and the
# league has no explicit participation rule. Everyone who plays scores >= 1.
PARTICIPATION_FLOOR_POINTS = 1

# =============================================================================
# Rating / form
# =============================================================================

# Elo-like rating: BASE + (win_rate - 0.5) * SPREAD
DEFAULT_RATING = 1500
RATING_SPREAD = 1000

# How many results the "recent form" strip shows
RECENT_FORM_WINDOW = 5

# How many games a player profile lists, newest first
RECENT_GAMES_WINDOW = 10

WIN_TOKEN = "W"
LOSS_TOKEN = "L"

# =============================================================================
# Character sheets
# =============================================================================

STAT_MIN = 8
STAT_MAX = 20

# Denominators for each stat (value / max -> percentage of the stat range)
STAT_MAXIMUMS = {
    "power": 300,          # total points
    "consistency": 60,     # closeness of win rate to 60%
    "victory_rate": 100,   # win rate percentage
    "experience": 120,     # games played * 10
}

# Win rate (percent) the consistency stat is centred on
CONSISTENCY_TARGET_WIN_RATE = 60

# Average placement the adaptability stat is centred on (4-player pods)
ADAPTABILITY_TARGET_PLACEMENT = 2.5

XP_PER_POINT = 10
XP_PER_LEVEL = 200

# Badge shown when no achievement threshold is met (thresholds: character.py)
DEFAULT_ACHIEVEMENT = "Rising Star"

# =============================================================================
# Presentation
# =============================================================================

UNKNOWN_PLAYER_NAME = "Unknown Player"

TREND_UP = "up"
TREND_DOWN = "down"
TREND_SAME = "same"
