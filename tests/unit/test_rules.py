"""
Unit tests for scoring rule compilation.

Rule names are compiled once, when a rule is loaded:
- "Placement 1st" / "placement 2" -> PlacementBonus
- "Gold Objective(s)"             -> ObjectiveBonus("gold")
- "Participation ..."             -> Participation
- anything else                   -> UnrecognisedRule
"""

import pytest

from leagueboard.records.rules import (
    active_rules,
    build_rule,
    compile_rule_kind,
    objective_tag,
    ordinal,
)
from leagueboard.records.types import (
    GameKind,
    ObjectiveBonus,
    Participation,
    PlacementBonus,
    UnrecognisedRule,
)


class TestCompileRuleKind:
    """Tests for compile_rule_kind."""

    @pytest.mark.parametrize("name,place", [
        ("Placement 1st", 1),
        ("Placement 2nd", 2),
        ("Placement 3rd", 3),
        ("Placement 4th", 4),
        ("placement 2", 2),
        ("PLACEMENT 11TH", 11),
    ])
    def test_placement_rules(self, name, place):
        assert compile_rule_kind(name) == PlacementBonus(place=place)

    def test_placement_suffix_is_lenient(self):
        """A mismatched ordinal suffix still names the place."""
        assert compile_rule_kind("Placement 2st") == PlacementBonus(place=2)

    def test_placement_zero_is_unrecognised(self):
        assert compile_rule_kind("Placement 0th") == UnrecognisedRule()

    @pytest.mark.parametrize("name,tag", [
        ("Gold Objective", "gold"),
        ("Silver Objectives", "silver"),
        ("bronze objective", "bronze"),
    ])
    def test_objective_rules(self, name, tag):
        assert compile_rule_kind(name) == ObjectiveBonus(tag=tag)

    @pytest.mark.parametrize("name", ["Participation", "Participation Bonus", "draft participation"])
    def test_participation_rules(self, name):
        assert compile_rule_kind(name) == Participation()

    @pytest.mark.parametrize("name", ["Winner", "", "First Blood", "Placement"])
    def test_unknown_names(self, name):
        assert compile_rule_kind(name) == UnrecognisedRule()


class TestObjectiveTag:
    """Tests for objective tag normalization."""

    def test_rule_name(self):
        assert objective_tag("Gold Objective") == "gold"

    def test_camel_case_payload_key(self):
        assert objective_tag("goldObjectives") == "gold"
        assert objective_tag("silverObjective") == "silver"

    def test_bare_tag(self):
        assert objective_tag("Silver") == "silver"


class TestOrdinal:

    @pytest.mark.parametrize("n,expected", [
        (1, "1st"), (2, "2nd"), (3, "3rd"), (4, "4th"),
        (11, "11th"), (12, "12th"), (13, "13th"), (21, "21st"), (23, "23rd"),
    ])
    def test_suffixes(self, n, expected):
        assert ordinal(n) == expected


class TestBuildRule:

    def test_kind_is_compiled(self):
        rule = build_rule("Placement 2nd", 1, league_id=3, game_kind=GameKind.COMMANDER)

        assert rule.kind == PlacementBonus(place=2)
        assert rule.league_id == 3
        assert rule.game_kind is GameKind.COMMANDER
        assert rule.active

    def test_active_rules_filters_inactive(self):
        rules = [
            build_rule("Gold Objective", 5),
            build_rule("Silver Objective", 2, active=False),
        ]
        assert [r.name for r in active_rules(rules)] == ["Gold Objective"]
