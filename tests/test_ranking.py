"""Tests for bid-order ranking and eligibility functions."""

import pytest

from src.auction_manager.models import Player, Team, TeamLeader
from src.auction_manager.ranking import (
    can_afford,
    eligible_teams_sorted,
    sort_players_by_tier,
    sort_teams_by_points,
    starting_price,
    tier_rank,
)


# ── Helpers ──────────────────────────────────────────────────────────

def _make_team(lid, points, members=0, tier=None):
    team = Team(
        leader=TeamLeader(
            id=lid,
            name=f"Leader {lid}",
            initial_points=points + members * 10,
            current_points=points + members * 10,
            tier=tier,
        )
    )
    for i in range(members):
        player = Player(id=f"{lid}_p{i}", name=f"P{i}", tier="Gold 1", main_role="Top")
        team = team.with_award(player, 10)
    return team


def _ids(teams):
    return [t.leader.id for t in teams]


# ── tier_rank ────────────────────────────────────────────────────────

class TestTierRank:
    @pytest.mark.parametrize(
        "tier, expected",
        [
            ("Challenger", 100),
            ("Grandmaster", 95),
            ("Master", 90),
            ("Diamond 1", 85),
            ("Diamond 4", 82),
            ("Emerald 2", 74),
            ("Gold 1", 55),
            ("Iron 4", 22),
        ],
    )
    def test_known_tiers(self, tier, expected):
        assert tier_rank(tier) == expected

    def test_higher_is_stronger(self):
        assert tier_rank("Diamond 4") > tier_rank("Emerald 1")
        assert tier_rank("Silver 1") > tier_rank("Bronze 1")

    def test_missing_tier_is_weakest(self):
        assert tier_rank(None) == 0
        assert tier_rank("") == 0
        assert tier_rank(None) < tier_rank("Iron 4")

    def test_unknown_tier_is_weakest(self):
        assert tier_rank("Wood 9") == 0


# ── can_afford ───────────────────────────────────────────────────────

class TestCanAfford:
    def test_exact_points_can_afford(self):
        leader = TeamLeader(id="t", name="T", initial_points=300, current_points=300)
        assert can_afford(leader, 300)

    def test_short_by_one_cannot(self):
        leader = TeamLeader(id="t", name="T", initial_points=300, current_points=299)
        assert not can_afford(leader, 300)


# ── eligible_teams_sorted ────────────────────────────────────────────

class TestEligibleTeamsSorted:
    def test_points_descending(self):
        teams = [_make_team("a", 300), _make_team("b", 500), _make_team("c", 400)]
        assert _ids(eligible_teams_sorted(teams)) == ["b", "c", "a"]

    def test_fewer_members_first_on_point_tie(self):
        teams = [_make_team("a", 500, members=2), _make_team("b", 500, members=0)]
        assert _ids(eligible_teams_sorted(teams)) == ["b", "a"]

    def test_weaker_tier_first_on_full_tie(self):
        teams = [
            _make_team("a", 500, tier="Diamond 1"),
            _make_team("b", 500, tier="Gold 2"),
        ]
        assert _ids(eligible_teams_sorted(teams)) == ["b", "a"]

    def test_missing_tier_before_any_tier(self):
        teams = [_make_team("a", 500, tier="Iron 4"), _make_team("b", 500)]
        assert _ids(eligible_teams_sorted(teams)) == ["b", "a"]

    def test_points_outrank_member_count(self):
        teams = [_make_team("a", 400, members=0), _make_team("b", 500, members=3)]
        assert _ids(eligible_teams_sorted(teams)) == ["b", "a"]

    def test_full_teams_removed(self):
        teams = [_make_team("a", 900, members=4), _make_team("b", 100)]
        assert _ids(eligible_teams_sorted(teams)) == ["b"]

    def test_custom_roster_cap(self):
        teams = [_make_team("a", 900, members=2), _make_team("b", 100)]
        assert _ids(eligible_teams_sorted(teams, roster_cap=2)) == ["b"]

    def test_stable_for_identical_keys(self):
        teams = [_make_team("a", 500), _make_team("b", 500), _make_team("c", 300)]
        assert _ids(eligible_teams_sorted(teams)) == ["a", "b", "c"]

    def test_does_not_mutate_input(self):
        teams = [_make_team("a", 300), _make_team("b", 500)]
        eligible_teams_sorted(teams)
        assert _ids(teams) == ["a", "b"]

    def test_empty(self):
        assert eligible_teams_sorted([]) == []


# ── starting_price ───────────────────────────────────────────────────

class TestStartingPrice:
    def test_minimum_current_points(self):
        teams = [_make_team("a", 500), _make_team("b", 500), _make_team("c", 300)]
        assert starting_price(teams) == 300

    def test_single_team(self):
        assert starting_price([_make_team("a", 750)]) == 750

    def test_empty_is_zero(self):
        assert starting_price([]) == 0


# ── Display sorting ──────────────────────────────────────────────────

class TestDisplaySorting:
    def test_players_strongest_first(self):
        players = [
            Player(id="1", name="A", tier="Gold 1", main_role="Top"),
            Player(id="2", name="B", tier="Challenger", main_role="Mid"),
            Player(id="3", name="C", tier="Diamond 3", main_role="ADC"),
        ]
        assert [p.id for p in sort_players_by_tier(players)] == ["2", "3", "1"]

    def test_teams_richest_first(self):
        teams = [_make_team("a", 100), _make_team("b", 300), _make_team("c", 200)]
        assert _ids(sort_teams_by_points(teams)) == ["b", "c", "a"]
