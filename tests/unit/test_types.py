"""
Unit tests for the typed league records.
"""

import pytest

from leagueboard.records.types import GameKind, GameRecord, Placement


class TestPlacement:

    def test_objectives_are_read_only(self):
        placement = Placement(player_id=1, place=1, points=5, objectives={"gold": 1})

        with pytest.raises(TypeError):
            placement.objectives["gold"] = 3
        assert placement.objectives == {"gold": 1}

    def test_caller_dict_is_copied(self):
        objectives = {"silver": 1}
        placement = Placement(player_id=1, place=2, objectives=objectives)
        objectives["silver"] = 9

        assert placement.objectives == {"silver": 1}

    def test_hashable(self):
        first = Placement(player_id=1, place=1, points=5, objectives={"gold": 1})
        second = Placement(player_id=1, place=1, points=5, objectives={"gold": 1})

        assert first == second
        assert len({first, second}) == 1


class TestGameRecord:

    @pytest.fixture
    def game(self):
        return GameRecord(
            id=1,
            league_id=1,
            kind=GameKind.COMMANDER,
            played_on=None,
            placements=(Placement(player_id=10, place=1),),
            objective_claims={"silver": [10, 11]},
        )

    def test_claims_are_read_only_tuples(self, game):
        assert game.objective_claims == {"silver": (10, 11)}
        with pytest.raises(TypeError):
            game.objective_claims["gold"] = (10,)

    def test_hashable(self, game):
        assert hash(game) == hash(game)
        assert game in {game}
