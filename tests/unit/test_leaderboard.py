"""
Unit tests for leaderboard assembly.
"""

from datetime import date

import pytest

from leagueboard.standings.leaderboard import build_leaderboard, win_rate_percent

NAMES = {10: "Alice", 11: "Bob", 12: "Carol", 13: "Dan", 14: "Erin"}


class TestBuildLeaderboard:

    @pytest.fixture
    def entries(self, league_store):
        return build_leaderboard(league_store.fetch_games(1), NAMES)

    def test_order(self, entries):
        assert [e.name for e in entries] == ["Alice", "Carol", "Bob", "Dan", "Erin"]
        assert [e.rank for e in entries] == [1, 2, 3, 4, 5]

    def test_leader_metrics(self, entries):
        alice = entries[0]

        assert alice.total_points == 7
        assert alice.games_played == 3
        assert alice.wins == 2
        assert alice.losses == 1
        assert alice.win_rate == 66.7
        assert alice.elo_rating == 1667
        assert alice.current_streak == 1
        assert alice.best_streak == 1
        assert alice.recent_form == ("W", "L", "W")
        assert alice.last_active == date(2024, 1, 19)
        assert alice.gold_objectives == 1

    def test_player_without_games(self, entries):
        erin = entries[-1]

        assert erin.total_points == 0
        assert erin.games_played == 0
        assert erin.win_rate == 0.0
        assert erin.elo_rating == 1500
        assert erin.recent_form == ()
        assert erin.last_active is None

    def test_limit(self, league_store):
        entries = build_leaderboard(league_store.fetch_games(1), NAMES, limit=2)
        assert [e.name for e in entries] == ["Alice", "Carol"]

    def test_unknown_player_name(self, make_game):
        entries = build_leaderboard([make_game(1, [(99, 1, 3), (10, 2, 1)])], {10: "Alice"})
        assert entries[0].name == "Unknown Player"

    def test_previous_ranks_give_trend(self, league_store):
        entries = build_leaderboard(league_store.fetch_games(1), NAMES, previous_ranks={12: 4, 10: 1})
        carol = entries[1]

        assert carol.trend == "up"
        assert carol.previous_rank == 4
        assert entries[0].trend == "same"

    def test_empty_league(self):
        assert build_leaderboard([], {}) == []

    def test_to_dict(self, entries):
        payload = entries[0].to_dict()

        assert payload["playerId"] == 10
        assert payload["points"] == 7
        assert payload["lastActive"] == "2024-01-19"
        assert payload["recentForm"] == ["W", "L", "W"]


class TestWinRatePercent:

    @pytest.mark.parametrize("wins,games,expected", [
        (0, 0, 0.0),
        (2, 3, 66.7),
        (1, 3, 33.3),
        (1, 8, 12.5),
        (3, 3, 100.0),
    ])
    def test_values(self, wins, games, expected):
        assert win_rate_percent(wins, games) == expected
