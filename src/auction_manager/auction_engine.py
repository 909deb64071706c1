"""Auction engine - descending-price round state machine.

Every operation takes the current AuctionState, builds a new one and
returns it. Operations whose preconditions are not met return the state
unchanged. After an award or an undo the engine writes a snapshot to the
entity store; a failed write is reported but never rolls the state back.
"""

import logging
from dataclasses import replace
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence, Union

from src.auction_manager.config import (
    DEFAULT_PRICE_DECREMENT,
    MIN_ELIGIBLE_TEAMS,
    ROSTER_CAP,
)
from src.auction_manager.entity_store import EntityStore
from src.auction_manager.models import (
    IDLE,
    IN_PROGRESS,
    AuctionHistoryItem,
    AuctionState,
    Player,
    Round,
    SavedTeam,
    Snapshot,
    Team,
    TeamMember,
)
from src.auction_manager.ranking import (
    can_afford,
    eligible_teams_sorted,
    starting_price,
)

logger = logging.getLogger(__name__)


class AwardTransition(Enum):
    """Where the engine goes after a successful award."""

    NEXT_ROUND = "next_round"
    IDLE = "idle"


class AuctionEngine:
    """Owns the live round and funnels every auction mutation.

    Args:
        store: Entity store to load records from and persist snapshots to.
        roster_cap: Members per team before it stops bidding.
        min_eligible_teams: Eligible teams needed to open a round.
        on_persist_error: Called with the exception when a snapshot write
            fails. The in-memory state is kept either way.
    """

    def __init__(
        self,
        store: EntityStore,
        roster_cap: int = ROSTER_CAP,
        min_eligible_teams: int = MIN_ELIGIBLE_TEAMS,
        on_persist_error: Optional[Callable[[Exception], None]] = None,
    ):
        self.store = store
        self.roster_cap = roster_cap
        self.min_eligible_teams = max(1, min_eligible_teams)
        self.on_persist_error = on_persist_error
        self._state = AuctionState()
        self._award_transitions: Dict[
            AwardTransition, Callable[[AuctionState, int, int], AuctionState]
        ] = {
            AwardTransition.NEXT_ROUND: self._open_chained_round,
            AwardTransition.IDLE: self._close_after_award,
        }

    def current_state(self) -> AuctionState:
        return self._state

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------
    def load(self) -> AuctionState:
        """Rebuild state from the store, reconciling any saved snapshot.

        Members whose player no longer exists are dropped and their price
        is refunded to the leader. Snapshot entries for deleted leaders are
        ignored. The engine always comes back idle.
        """
        players = self.store.list_players()
        leaders = self.store.list_team_leaders()
        snapshot = self.store.load_auction_snapshot()

        teams = [Team(leader=leader) for leader in leaders]
        available = list(players)

        if snapshot is not None:
            players_by_id = {p.id: p for p in players}
            saved_by_leader = {st.leader_id: st for st in snapshot.teams}
            teams = [
                self._restore_team(team, saved_by_leader.get(team.leader.id), players_by_id)
                for team in teams
            ]
            assigned_ids = set(snapshot.assigned_player_ids)
            available = [p for p in players if p.id not in assigned_ids]

        self._state = AuctionState(
            status=IDLE,
            players=tuple(players),
            available_players=tuple(available),
            teams=tuple(teams),
        )
        logger.info(
            "Loaded auction: %d players (%d available), %d teams",
            len(players),
            len(available),
            len(teams),
        )
        return self._state

    def _restore_team(
        self,
        team: Team,
        saved: Optional[SavedTeam],
        players_by_id: Dict[str, Player],
    ) -> Team:
        if saved is None:
            return team

        members: List[TeamMember] = []
        refund = 0
        for sm in saved.members:
            player = players_by_id.get(sm.player_id)
            if player is None:
                logger.debug(
                    "Dropping missing player %s from team %s",
                    sm.player_id,
                    team.leader.id,
                )
                refund += sm.price
                continue
            members.append(
                TeamMember(player=player, price=sm.price, pick_order=sm.pick_order)
            )

        return Team(
            leader=replace(
                team.leader, current_points=saved.current_points + refund
            ),
            members=tuple(members),
            total_spent=sum(m.price for m in members),
        )

    # ------------------------------------------------------------------
    # Round control
    # ------------------------------------------------------------------
    def start_round(
        self, price_decrement: int = DEFAULT_PRICE_DECREMENT
    ) -> AuctionState:
        """Open a round at the lowest budget among eligible teams."""
        state = self._state
        if state.is_in_progress:
            logger.info("Round already in progress; start ignored")
            return state
        if price_decrement <= 0:
            logger.warning("Price decrement must be positive, got %s", price_decrement)
            return state

        bid_order = eligible_teams_sorted(state.teams, self.roster_cap)
        if len(bid_order) < self.min_eligible_teams:
            logger.info(
                "Cannot start round: %d eligible teams (need %d)",
                len(bid_order),
                self.min_eligible_teams,
            )
            return state

        price = starting_price(bid_order)
        new_round = Round(
            starting_price=price,
            current_price=price,
            price_decrement=price_decrement,
            bid_order=tuple(bid_order),
        )
        logger.info(
            "Round started at %d (decrement %d), bid order: %s",
            price,
            price_decrement,
            ", ".join(t.leader.name for t in bid_order),
        )
        return self._commit(
            replace(
                state,
                status=IN_PROGRESS,
                current_round=new_round,
                selected_player=None,
            )
        )

    def set_price_decrement(self, decrement: int) -> AuctionState:
        state = self._state
        if state.current_round is None or decrement <= 0:
            return state
        return self._commit(
            replace(
                state,
                current_round=replace(state.current_round, price_decrement=decrement),
            )
        )

    def select_player(
        self, player: Union[Player, str, None]
    ) -> AuctionState:
        """Point at the player the current bidder would take; None clears."""
        state = self._state
        if player is None:
            return self._commit(replace(state, selected_player=None))

        player_id = player if isinstance(player, str) else player.id
        if not state.is_player_available(player_id):
            logger.warning("Player %s is not available for selection", player_id)
            return state

        return self._commit(
            replace(state, selected_player=state.get_player(player_id))
        )

    def cancel_round(self) -> AuctionState:
        if self._state.is_in_progress:
            logger.info("Round cancelled")
        return self._commit(
            replace(self._state, status=IDLE, current_round=None, selected_player=None)
        )

    # ------------------------------------------------------------------
    # Bidding
    # ------------------------------------------------------------------
    def pick_player(self) -> AuctionState:
        """Award the selected player to the current bidder at the current price."""
        state = self._state
        current = state.current_round
        player = state.selected_player
        if current is None or player is None:
            return state

        if not state.is_player_available(player.id):
            logger.warning("Player %s has already been assigned", player.id)
            return state

        team = state.get_team(current.current_bidder.leader.id)
        if team is None:
            logger.warning(
                "Current bidder %s no longer exists", current.current_bidder.leader.id
            )
            return state

        price = current.current_price
        if team.is_full(self.roster_cap) or not can_afford(team.leader, price):
            logger.warning(
                "%s cannot take %s at %d (points %d, members %d)",
                team.leader.name,
                player.name,
                price,
                team.leader.current_points,
                team.member_count,
            )
            return state

        awarded = team.with_award(player, price)
        state = replace(
            state,
            teams=state.replace_team(awarded),
            available_players=tuple(
                p for p in state.available_players if p.id != player.id
            ),
            selected_player=None,
            auction_history=state.auction_history
            + (AuctionHistoryItem.create(player, awarded.leader, price),),
        )
        logger.info(
            "Award: %s -> %s for %d (pick %d, %d points left)",
            player.name,
            awarded.leader.name,
            price,
            awarded.member_count,
            awarded.leader.current_points,
        )

        transition = self._transition_after_award(state)
        state = self._award_transitions[transition](state, price, current.price_decrement)
        self._commit(state)
        self._persist(state)
        return state

    def pass_turn(self) -> AuctionState:
        """Current bidder passes; move on or decay the price."""
        state = self._state
        current = state.current_round
        if current is None:
            return state

        passed = set(current.passed_in_cycle)
        passed.add(current.current_bidder.leader.id)
        auto_passed = set(current.auto_passed)

        next_index = None
        for index in range(current.current_bidder_index + 1, len(current.bid_order)):
            leader = current.bid_order[index].leader
            if leader.id in passed:
                continue
            if can_afford(leader, current.current_price):
                next_index = index
                break
            logger.debug("Auto-pass: %s cannot afford %d", leader.name, current.current_price)
            passed.add(leader.id)
            auto_passed.add(leader.id)

        if next_index is not None:
            return self._commit(
                replace(
                    state,
                    current_round=replace(
                        current,
                        current_bidder_index=next_index,
                        passed_in_cycle=frozenset(passed),
                        auto_passed=frozenset(auto_passed),
                    ),
                    selected_player=None,
                )
            )

        return self._commit(self._decay_price(state, current))

    # ------------------------------------------------------------------
    # Undo
    # ------------------------------------------------------------------
    def undo_award(self, team_id: str, player_id: str) -> AuctionState:
        """Reverse an award outside of a round. History is left untouched."""
        state = self._state
        if state.is_in_progress:
            logger.info("Cannot undo an award while a round is in progress")
            return state

        team = state.get_team(team_id)
        if team is None or not team.has_player(player_id):
            logger.warning("No award of player %s to team %s", player_id, team_id)
            return state

        refunded = team.without_player(player_id)
        assigned_ids = {p.id for p in state.assigned_players} - {player_id}
        state = replace(
            state,
            teams=state.replace_team(refunded),
            available_players=tuple(
                p for p in state.players if p.id not in assigned_ids
            ),
        )
        logger.info(
            "Undo: player %s returned from %s (%d points now)",
            player_id,
            refunded.leader.name,
            refunded.leader.current_points,
        )
        self._commit(state)
        self._persist(state)
        return state

    def reset_auction(self) -> AuctionState:
        """Wipe all awards: clear the snapshot, restore budgets, reload."""
        try:
            self.store.clear_auction_snapshot()
            self.store.reset_team_leader_points()
        except OSError as e:
            self._report_persist_error(e)
        return self.load()

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------
    def _transition_after_award(self, state: AuctionState) -> AwardTransition:
        eligible = eligible_teams_sorted(state.teams, self.roster_cap)
        if state.available_players and len(eligible) >= self.min_eligible_teams:
            return AwardTransition.NEXT_ROUND
        return AwardTransition.IDLE

    def _open_chained_round(
        self, state: AuctionState, price: int, decrement: int
    ) -> AuctionState:
        """Start the next round at the last award price.

        The richest eligible leader bids first; if even they cannot afford
        the award price the opening cycle counts as fully passed.
        """
        bid_order = tuple(eligible_teams_sorted(state.teams, self.roster_cap))
        chained = Round(
            starting_price=price,
            current_price=price,
            price_decrement=decrement,
            bid_order=bid_order,
        )
        if not can_afford(bid_order[0].leader, price):
            logger.info("Nobody can afford %d; decaying the chained round", price)
            return self._decay_price(state, chained)

        logger.info(
            "Next round opened at %d, bid order: %s",
            price,
            ", ".join(t.leader.name for t in bid_order),
        )
        return replace(state, status=IN_PROGRESS, current_round=chained)

    def _close_after_award(
        self, state: AuctionState, price: int, decrement: int
    ) -> AuctionState:
        logger.info("Auction idle: no eligible teams or no players left")
        return self._close_round(state)

    def _decay_price(self, state: AuctionState, current: Round) -> AuctionState:
        """Drop the price after a full cycle and rescan from the top."""
        new_price = current.current_price - current.price_decrement
        if new_price <= 0:
            logger.info("Price fell to %d; round ends with no award", new_price)
            return self._close_round(state)

        next_cycle = self._open_cycle(
            current.bid_order, current.starting_price, new_price, current.price_decrement
        )
        if next_cycle is None:
            logger.info("Nobody can afford %d; round ends with no award", new_price)
            return self._close_round(state)

        logger.info(
            "Price drops to %d; %s to bid",
            new_price,
            next_cycle.current_bidder.leader.name,
        )
        return replace(
            state, status=IN_PROGRESS, current_round=next_cycle, selected_player=None
        )

    @staticmethod
    def _open_cycle(
        bid_order: Sequence[Team], start: int, price: int, decrement: int
    ) -> Optional[Round]:
        """A fresh price cycle with priced-out leaders auto-passed, or None."""
        auto_passed = frozenset(
            t.leader.id for t in bid_order if not can_afford(t.leader, price)
        )
        first = next(
            (i for i, t in enumerate(bid_order) if t.leader.id not in auto_passed),
            None,
        )
        if first is None:
            return None
        return Round(
            starting_price=start,
            current_price=price,
            price_decrement=decrement,
            bid_order=tuple(bid_order),
            current_bidder_index=first,
            passed_in_cycle=auto_passed,
            auto_passed=auto_passed,
        )

    @staticmethod
    def _close_round(state: AuctionState) -> AuctionState:
        return replace(state, status=IDLE, current_round=None, selected_player=None)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------
    def _commit(self, state: AuctionState) -> AuctionState:
        self._state = state
        return state

    def _persist(self, state: AuctionState):
        try:
            self.store.save_auction_snapshot(Snapshot.from_state(state))
        except OSError as e:
            self._report_persist_error(e)

    def _report_persist_error(self, error: Exception):
        logger.warning("Failed to persist auction state: %s", error)
        if self.on_persist_error is not None:
            self.on_persist_error(error)
