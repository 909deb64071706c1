"""Line-oriented console for running an auction.

Usage:
    python -m src.auction_manager.console [store_dir]

Commands:
    status | teams | history | help | quit
    players [query]          available players, filtered by name or role
    start [decrement]        open a round
    decrement N|+|-          change the decrement of the running round
    select <player_id>|none  choose the player to take
    pick                     current bidder takes the selected player
    pass                     current bidder passes
    cancel                   abandon the round
    undo <leader_id> <player_id>
    export <path>            write the award log to CSV
    reset                    wipe all awards and restore budgets
"""

import logging
import sys
from pathlib import Path
from typing import List

from src.auction_manager.auction_engine import AuctionEngine
from src.auction_manager.config import (
    DEFAULT_PRICE_DECREMENT,
    MIN_PRICE_DECREMENT,
    PRICE_DECREMENT_STEP,
)
from src.auction_manager.entity_store import EntityStore
from src.auction_manager.models import AuctionState
from src.auction_manager.ranking import sort_players_by_tier, sort_teams_by_points
from src.auction_manager.reports import export_history_csv
from src.logging_config import setup_logging

logger = logging.getLogger(__name__)


def normalize_price_decrement(value: int) -> int:
    """Clamp a requested decrement to the configured floor."""
    return max(MIN_PRICE_DECREMENT, int(value))


class AuctionConsole:
    """Parses commands, forwards them to the engine and renders the result."""

    def __init__(self, engine: AuctionEngine):
        self.engine = engine
        self.messages: List[str] = []
        self.engine.on_persist_error = self._on_persist_error

    def handle(self, line: str) -> str:
        """Run one command line and return the text to display."""
        parts = line.strip().split()
        if not parts:
            return ""

        command, args = parts[0].lower(), parts[1:]
        handler = getattr(self, f"_cmd_{command}", None)
        if handler is None:
            return f"Unknown command: {command} (try 'help')"

        try:
            output = handler(args)
        except ValueError as e:
            return f"Invalid arguments for {command}: {e}"

        if self.messages:
            output = "\n".join(self.messages + [output])
            self.messages.clear()
        return output

    def _on_persist_error(self, error: Exception):
        self.messages.append(f"Warning: could not save auction state ({error})")

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    def _cmd_help(self, args):
        return __doc__.split("Commands:", 1)[1].rstrip()

    def _cmd_status(self, args):
        return render_state(self.engine.current_state())

    def _cmd_players(self, args):
        state = self.engine.current_state()
        players = state.available_players
        if args:
            query = " ".join(args).lower()
            players = [
                p
                for p in players
                if query in p.name.lower()
                or query in (p.main_role.lower(), p.sub_role.lower())
            ]
        lines = [
            f"{p.id}  {p.name}  [{p.tier}] {p.main_role}"
            + (f"/{p.sub_role}" if p.sub_role else "")
            for p in sort_players_by_tier(players)
        ]
        return "\n".join(lines) or "No players available"

    def _cmd_teams(self, args):
        state = self.engine.current_state()
        lines = []
        for team in sort_teams_by_points(state.teams):
            roster = ", ".join(
                f"{m.pick_order}. {m.player.name} ({m.price})" for m in team.members
            )
            lines.append(
                f"{team.leader.id}  {team.leader.name}: "
                f"{team.leader.current_points}/{team.leader.initial_points} "
                f"[{roster}]"
            )
        return "\n".join(lines) or "No teams"

    def _cmd_history(self, args):
        state = self.engine.current_state()
        lines = [
            f"{i}. {item.player.name} -> {item.winner.name} for {item.price}"
            for i, item in enumerate(state.auction_history, start=1)
        ]
        return "\n".join(lines) or "No awards yet"

    def _cmd_start(self, args):
        requested = int(args[0]) if args else DEFAULT_PRICE_DECREMENT
        before = self.engine.current_state()
        state = self.engine.start_round(normalize_price_decrement(requested))
        if state is before:
            return "Cannot start a round now"
        return render_state(state)

    def _cmd_decrement(self, args):
        if not args:
            raise ValueError("expected a number, + or -")
        current = self.engine.current_state().current_round
        if current is None:
            return "No round in progress"

        if args[0] == "+":
            requested = current.price_decrement + PRICE_DECREMENT_STEP
        elif args[0] == "-":
            requested = current.price_decrement - PRICE_DECREMENT_STEP
        else:
            requested = int(args[0])
        state = self.engine.set_price_decrement(normalize_price_decrement(requested))
        return render_state(state)

    def _cmd_select(self, args):
        if not args:
            raise ValueError("expected a player id or 'none'")
        target = None if args[0].lower() == "none" else args[0]
        before = self.engine.current_state()
        state = self.engine.select_player(target)
        if target is not None and state is before:
            return f"Player {target} is not available"
        return render_state(state)

    def _cmd_pick(self, args):
        before = self.engine.current_state()
        state = self.engine.pick_player()
        if state is before:
            return "Nothing to pick: select an available player during a round"
        return render_state(state)

    def _cmd_pass(self, args):
        return render_state(self.engine.pass_turn())

    def _cmd_cancel(self, args):
        return render_state(self.engine.cancel_round())

    def _cmd_undo(self, args):
        if len(args) != 2:
            raise ValueError("expected <leader_id> <player_id>")
        before = self.engine.current_state()
        state = self.engine.undo_award(args[0], args[1])
        if state is before:
            return "Nothing to undo"
        return render_state(state)

    def _cmd_export(self, args):
        if not args:
            raise ValueError("expected an output path")
        path = export_history_csv(self.engine.current_state(), Path(args[0]))
        return f"Award log written to {path}"

    def _cmd_reset(self, args):
        return render_state(self.engine.reset_auction())


def render_state(state: AuctionState) -> str:
    """Plain-text view of the auction state."""
    lines = [
        f"Status: {state.status}  "
        f"({len(state.available_players)} available, "
        f"{len(state.assigned_players)} assigned)"
    ]
    current = state.current_round
    if current is not None:
        lines.append(
            f"Price: {current.current_price} "
            f"(start {current.starting_price}, -{current.price_decrement}/cycle)"
        )
        for i, team in enumerate(current.bid_order):
            if i == current.current_bidder_index:
                marker = ">"
            elif team.leader.id in current.auto_passed:
                marker = "x"
            elif team.leader.id in current.passed_in_cycle:
                marker = "-"
            else:
                marker = " "
            lines.append(
                f" {marker} {team.leader.name} ({team.leader.current_points})"
            )
    if state.selected_player is not None:
        lines.append(f"Selected: {state.selected_player.name}")
    return "\n".join(lines)


def main(argv: List[str]) -> int:
    setup_logging()

    store_dir = Path(argv[1]) if len(argv) > 1 else None
    engine = AuctionEngine(EntityStore(storage_dir=store_dir))
    engine.load()
    console = AuctionConsole(engine)

    print(render_state(engine.current_state()))
    for line in sys.stdin:
        if line.strip().lower() in ("quit", "exit"):
            break
        output = console.handle(line)
        if output:
            print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
