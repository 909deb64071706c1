"""Auction data models - immutable value records for players, teams and rounds."""

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Dict, FrozenSet, List, Optional, Tuple

IDLE = "idle"
IN_PROGRESS = "in_progress"


@dataclass(frozen=True)
class Player:
    """A draftable player."""

    id: str
    name: str
    tier: str
    main_role: str
    sub_role: str = ""

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "name": self.name,
            "tier": self.tier,
            "mainRole": self.main_role,
            "subRole": self.sub_role,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "Player":
        return cls(
            id=data["id"],
            name=data["name"],
            tier=data.get("tier", ""),
            main_role=data.get("mainRole", ""),
            sub_role=data.get("subRole") or "",
        )


@dataclass(frozen=True)
class TeamLeader:
    """A team leader and their points budget."""

    id: str
    name: str
    initial_points: int
    current_points: int
    tier: Optional[str] = None

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "name": self.name,
            "initialPoints": self.initial_points,
            "currentPoints": self.current_points,
            "tier": self.tier,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "TeamLeader":
        initial = data.get("initialPoints", 0)
        return cls(
            id=data["id"],
            name=data["name"],
            initial_points=initial,
            current_points=data.get("currentPoints", initial),
            tier=data.get("tier") or None,
        )


@dataclass(frozen=True)
class TeamMember:
    """A player awarded to a team."""

    player: Player
    price: int
    pick_order: int


@dataclass(frozen=True)
class Team:
    """A leader plus the members they have won so far."""

    leader: TeamLeader
    members: Tuple[TeamMember, ...] = ()
    total_spent: int = 0

    @property
    def member_count(self) -> int:
        return len(self.members)

    def is_full(self, roster_cap: int) -> bool:
        return len(self.members) >= roster_cap

    def has_player(self, player_id: str) -> bool:
        return any(m.player.id == player_id for m in self.members)

    def with_award(self, player: Player, price: int) -> "Team":
        """Return a copy charged ``price`` with ``player`` appended."""
        member = TeamMember(
            player=player, price=price, pick_order=len(self.members) + 1
        )
        return replace(
            self,
            leader=replace(
                self.leader, current_points=self.leader.current_points - price
            ),
            members=self.members + (member,),
            total_spent=self.total_spent + price,
        )

    def without_player(self, player_id: str) -> "Team":
        """Return a copy with the player's membership refunded and removed.

        Remaining members are renumbered so pick orders stay 1..n.
        """
        removed = next(m for m in self.members if m.player.id == player_id)
        kept = [m for m in self.members if m.player.id != player_id]
        return replace(
            self,
            leader=replace(
                self.leader,
                current_points=self.leader.current_points + removed.price,
            ),
            members=tuple(
                replace(m, pick_order=i) for i, m in enumerate(kept, start=1)
            ),
            total_spent=self.total_spent - removed.price,
        )


@dataclass(frozen=True)
class Round:
    """One auction round: a fixed bid order and a decaying price."""

    starting_price: int
    current_price: int
    price_decrement: int
    bid_order: Tuple[Team, ...]
    current_bidder_index: int = 0
    passed_in_cycle: FrozenSet[str] = frozenset()
    auto_passed: FrozenSet[str] = frozenset()

    @property
    def current_bidder(self) -> Team:
        return self.bid_order[self.current_bidder_index]


@dataclass(frozen=True)
class AuctionHistoryItem:
    """Append-only record of a single award."""

    player: Player
    winner: TeamLeader
    price: int
    timestamp: str

    @classmethod
    def create(cls, player: Player, winner: TeamLeader, price: int):
        return cls(
            player=player,
            winner=winner,
            price=price,
            timestamp=datetime.now().isoformat(),
        )


@dataclass(frozen=True)
class AuctionState:
    """Complete auction state - the value every engine operation returns."""

    status: str = IDLE
    players: Tuple[Player, ...] = ()
    available_players: Tuple[Player, ...] = ()
    teams: Tuple[Team, ...] = ()
    current_round: Optional[Round] = None
    selected_player: Optional[Player] = None
    auction_history: Tuple[AuctionHistoryItem, ...] = ()

    @property
    def is_in_progress(self) -> bool:
        return self.status == IN_PROGRESS

    @property
    def assigned_players(self) -> Tuple[Player, ...]:
        available_ids = {p.id for p in self.available_players}
        return tuple(p for p in self.players if p.id not in available_ids)

    def is_player_available(self, player_id: str) -> bool:
        return any(p.id == player_id for p in self.available_players)

    def get_player(self, player_id: str) -> Optional[Player]:
        return next((p for p in self.players if p.id == player_id), None)

    def get_team(self, leader_id: str) -> Optional[Team]:
        return next((t for t in self.teams if t.leader.id == leader_id), None)

    def replace_team(self, team: Team) -> Tuple[Team, ...]:
        """Teams tuple with ``team`` swapped in by leader id."""
        return tuple(
            team if t.leader.id == team.leader.id else t for t in self.teams
        )


@dataclass(frozen=True)
class SavedMember:
    player_id: str
    price: int
    pick_order: int


@dataclass(frozen=True)
class SavedTeam:
    leader_id: str
    current_points: int
    members: Tuple[SavedMember, ...] = ()
    total_spent: int = 0


@dataclass(frozen=True)
class Snapshot:
    """Persisted auction progress: budgets, rosters and assigned players."""

    teams: Tuple[SavedTeam, ...] = ()
    assigned_player_ids: Tuple[str, ...] = ()

    @classmethod
    def from_state(cls, state: AuctionState) -> "Snapshot":
        return cls(
            teams=tuple(
                SavedTeam(
                    leader_id=team.leader.id,
                    current_points=team.leader.current_points,
                    members=tuple(
                        SavedMember(
                            player_id=m.player.id,
                            price=m.price,
                            pick_order=m.pick_order,
                        )
                        for m in team.members
                    ),
                    total_spent=team.total_spent,
                )
                for team in state.teams
            ),
            assigned_player_ids=tuple(p.id for p in state.assigned_players),
        )

    def to_dict(self) -> Dict:
        return {
            "teams": [
                {
                    "leaderId": team.leader_id,
                    "currentPoints": team.current_points,
                    "members": [
                        {
                            "playerId": m.player_id,
                            "price": m.price,
                            "pickOrder": m.pick_order,
                        }
                        for m in team.members
                    ],
                    "totalSpent": team.total_spent,
                }
                for team in self.teams
            ],
            "assignedPlayerIds": list(self.assigned_player_ids),
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "Snapshot":
        teams: List[SavedTeam] = []
        for td in data.get("teams", []):
            teams.append(
                SavedTeam(
                    leader_id=td["leaderId"],
                    current_points=td["currentPoints"],
                    members=tuple(
                        SavedMember(
                            player_id=md["playerId"],
                            price=md["price"],
                            pick_order=md["pickOrder"],
                        )
                        for md in td.get("members", [])
                    ),
                    total_spent=td.get("totalSpent", 0),
                )
            )
        return cls(
            teams=tuple(teams),
            assigned_player_ids=tuple(data.get("assignedPlayerIds", [])),
        )
