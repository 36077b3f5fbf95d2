"""
Unit tests for rating, streak and form metrics.
"""

from datetime import date, timedelta

import pytest

from leagueboard.standings.aggregator import GameResult
from leagueboard.standings.rating import (
    best_streak,
    current_streak,
    elo_rating,
    recent_form,
    round_half_up,
    summarise_form,
)


def _history(tokens):
    """Build a chronological history from a string like "WWLWW"."""
    start = date(2024, 1, 1)
    return [
        GameResult(game_id=i, played_on=start + timedelta(days=i), place=1 if t == "W" else 3, points=1)
        for i, t in enumerate(tokens)
    ]


class TestEloRating:

    @pytest.mark.parametrize("wins,games,expected", [
        (0, 0, 1500),
        (2, 4, 1500),
        (3, 4, 1750),
        (4, 4, 2000),
        (0, 4, 1000),
        (1, 3, 1333),
        (2, 3, 1667),
    ])
    def test_values(self, wins, games, expected):
        assert elo_rating(wins, games) == expected

    def test_bounds(self):
        for games in range(1, 12):
            for wins in range(games + 1):
                assert 1000 <= elo_rating(wins, games) <= 2000


class TestStreaks:

    def test_mixed_history(self):
        history = _history("WWLWW")

        assert current_streak(history) == 2
        assert best_streak(history) == 2
        assert recent_form(history) == ["W", "W", "L", "W", "W"]

    def test_ends_with_loss(self):
        history = _history("WWWL")

        assert current_streak(history) == 0
        assert best_streak(history) == 3

    def test_current_never_exceeds_best(self):
        for tokens in ("", "W", "L", "LWWW", "WLWLW", "WWWWLWW"):
            history = _history(tokens)
            assert current_streak(history) <= best_streak(history)

    def test_empty_history(self):
        assert current_streak([]) == 0
        assert best_streak([]) == 0
        assert recent_form([]) == []


class TestRecentForm:

    def test_only_last_five(self):
        assert recent_form(_history("LLWWLWW")) == ["W", "W", "L", "W", "W"]

    def test_shorter_history(self):
        assert recent_form(_history("WL")) == ["W", "L"]

    def test_zero_window(self):
        assert recent_form(_history("WL"), window=0) == []


class TestSummariseForm:

    def test_summary(self):
        form = summarise_form(_history("WWLWW"))

        assert form.elo_rating == 1800
        assert form.current_streak == 2
        assert form.best_streak == 2
        assert form.recent_form == ("W", "W", "L", "W", "W")

    def test_no_games(self):
        form = summarise_form([])

        assert form.elo_rating == 1500
        assert form.recent_form == ()


class TestRoundHalfUp:

    @pytest.mark.parametrize("value,expected", [(2.5, 3), (2.4, 2), (3.5, 4), (-2.5, -3), (666.5, 667)])
    def test_values(self, value, expected):
        assert round_half_up(value) == expected
