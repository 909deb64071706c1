"""Bid-order ranking and eligibility - pure functions, no side effects."""

from typing import Iterable, List, Optional

from src.auction_manager.config import ROSTER_CAP, TIER_ORDER
from src.auction_manager.models import Player, Team, TeamLeader


def tier_rank(tier: Optional[str]) -> int:
    """Ordinal strength of a tier label (higher = stronger).

    Missing or unknown tiers rank 0, below every real tier.
    """
    if not tier:
        return 0
    return TIER_ORDER.get(tier, 0)


def can_afford(leader: TeamLeader, price: int) -> bool:
    """A leader holding exactly ``price`` points can still bid."""
    return leader.current_points >= price


def eligible_teams_sorted(
    teams: Iterable[Team], roster_cap: int = ROSTER_CAP
) -> List[Team]:
    """Teams below the roster cap, in bid order.

    Sort keys, in order:
        1. current points, descending
        2. roster size, ascending (fewer members bid first)
        3. leader tier, ascending (weaker leaders bid first)
    """
    eligible = [t for t in teams if not t.is_full(roster_cap)]
    return sorted(
        eligible,
        key=lambda t: (
            -t.leader.current_points,
            t.member_count,
            tier_rank(t.leader.tier),
        ),
    )


def starting_price(eligible_teams: Iterable[Team]) -> int:
    """Lowest budget among eligible teams, so every one of them can open."""
    return min((t.leader.current_points for t in eligible_teams), default=0)


def sort_players_by_tier(players: Iterable[Player]) -> List[Player]:
    """Strongest tier first (display only)."""
    return sorted(players, key=lambda p: tier_rank(p.tier), reverse=True)


def sort_teams_by_points(teams: Iterable[Team]) -> List[Team]:
    """Richest leader first (display only)."""
    return sorted(teams, key=lambda t: t.leader.current_points, reverse=True)
