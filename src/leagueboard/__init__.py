"""
Leagueboard - Tournament League Standings Engine

Turns raw per-game placement records into league standings, Elo-like
ratings, win/loss streaks, and RPG-style character sheets.

Main components:
- records: Typed game records, scoring rule compilation and the record
  store adapters (SQL, in-memory, cached)
- scoring: Per-game point evaluation and points recalculation
- standings: Aggregation, ranking, rating/form and character sheets
- db: SQLAlchemy models and session management
"""

__version__ = "1.0.0"
