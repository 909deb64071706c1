"""Tests for the auction console command layer."""

import pandas as pd
import pytest

from src.auction_manager.auction_engine import AuctionEngine
from src.auction_manager.config import MIN_PRICE_DECREMENT
from src.auction_manager.console import (
    AuctionConsole,
    normalize_price_decrement,
    render_state,
)
from src.auction_manager.entity_store import EntityStore
from src.auction_manager.models import Player, TeamLeader


def _make_console(seed_store, points=(500, 500, 300), player_count=4):
    leaders = [
        TeamLeader(id=f"t{i}", name=f"Leader {i}", initial_points=p, current_points=p)
        for i, p in enumerate(points)
    ]
    players = [
        Player(id=f"p{i}", name=f"Player {i}", tier="Gold 1", main_role="Mid")
        for i in range(player_count)
    ]
    engine = AuctionEngine(seed_store(leaders, players))
    engine.load()
    return AuctionConsole(engine)


class _FailingStore(EntityStore):
    def save_auction_snapshot(self, snapshot):
        raise OSError("disk full")


# ── normalize_price_decrement ────────────────────────────────────────

class TestNormalizePriceDecrement:
    @pytest.mark.parametrize(
        "value, expected",
        [(5, MIN_PRICE_DECREMENT), (0, MIN_PRICE_DECREMENT), (-50, MIN_PRICE_DECREMENT),
         (10, 10), (150, 150)],
    )
    def test_floor(self, value, expected):
        assert normalize_price_decrement(value) == expected


# ── Dispatch ─────────────────────────────────────────────────────────

class TestDispatch:
    def test_blank_line(self, seed_store):
        assert _make_console(seed_store).handle("   ") == ""

    def test_unknown_command(self, seed_store):
        assert "Unknown command: bid" in _make_console(seed_store).handle("bid")

    def test_help_lists_commands(self, seed_store):
        output = _make_console(seed_store).handle("help")
        assert "start [decrement]" in output
        assert "undo" in output

    def test_bad_number(self, seed_store):
        output = _make_console(seed_store).handle("start lots")
        assert output.startswith("Invalid arguments for start")

    def test_commands_are_case_insensitive(self, seed_store):
        assert _make_console(seed_store).handle("STATUS").startswith("Status: idle")


# ── Round commands ───────────────────────────────────────────────────

class TestRoundCommands:
    def test_start_applies_decrement_floor(self, seed_store):
        console = _make_console(seed_store)
        console.handle("start 5")
        assert console.engine.current_state().current_round.price_decrement == 10

    def test_start_default_decrement(self, seed_store):
        console = _make_console(seed_store)
        output = console.handle("start")
        assert "Price: 300" in output
        assert console.engine.current_state().current_round.price_decrement == 100

    def test_start_twice(self, seed_store):
        console = _make_console(seed_store)
        console.handle("start")
        assert console.handle("start") == "Cannot start a round now"

    def test_decrement_requires_value(self, seed_store):
        console = _make_console(seed_store)
        console.handle("start")
        assert console.handle("decrement").startswith("Invalid arguments")

    def test_decrement_changes_round(self, seed_store):
        console = _make_console(seed_store)
        console.handle("start")
        console.handle("decrement 50")
        assert console.engine.current_state().current_round.price_decrement == 50

    def test_decrement_steps(self, seed_store):
        console = _make_console(seed_store)
        console.handle("start 20")
        console.handle("decrement +")
        assert console.engine.current_state().current_round.price_decrement == 30
        console.handle("decrement -")
        console.handle("decrement -")
        console.handle("decrement -")
        assert console.engine.current_state().current_round.price_decrement == 10

    def test_decrement_when_idle(self, seed_store):
        assert _make_console(seed_store).handle("decrement +") == "No round in progress"

    def test_select_unknown_player(self, seed_store):
        console = _make_console(seed_store)
        console.handle("start")
        assert console.handle("select p99") == "Player p99 is not available"

    def test_select_and_clear(self, seed_store):
        console = _make_console(seed_store)
        console.handle("start")
        assert "Selected: Player 1" in console.handle("select p1")
        console.handle("select none")
        assert console.engine.current_state().selected_player is None

    def test_pick_without_selection(self, seed_store):
        console = _make_console(seed_store)
        console.handle("start")
        assert console.handle("pick").startswith("Nothing to pick")

    def test_pick_records_history(self, seed_store):
        console = _make_console(seed_store)
        console.handle("start")
        console.handle("select p0")
        console.handle("pick")
        assert console.handle("history") == "1. Player 0 -> Leader 0 for 300"

    def test_pass_moves_bidder(self, seed_store):
        console = _make_console(seed_store)
        console.handle("start")
        console.handle("pass")
        assert console.engine.current_state().current_round.current_bidder_index == 1

    def test_cancel(self, seed_store):
        console = _make_console(seed_store)
        console.handle("start")
        assert console.handle("cancel").startswith("Status: idle")


# ── Post-round commands ──────────────────────────────────────────────

class TestAdminCommands:
    def test_history_empty(self, seed_store):
        assert _make_console(seed_store).handle("history") == "No awards yet"

    def test_undo_argument_count(self, seed_store):
        output = _make_console(seed_store).handle("undo t0")
        assert output.startswith("Invalid arguments for undo")

    def test_undo_nothing(self, seed_store):
        assert _make_console(seed_store).handle("undo t0 p0") == "Nothing to undo"

    def test_undo_after_award(self, seed_store):
        console = _make_console(seed_store)
        console.handle("start")
        console.handle("select p0")
        console.handle("pick")
        console.handle("cancel")

        console.handle("undo t0 p0")

        state = console.engine.current_state()
        assert state.is_player_available("p0")
        assert state.get_team("t0").leader.current_points == 500

    def test_players_and_teams_listing(self, seed_store):
        console = _make_console(seed_store)
        assert "p0  Player 0  [Gold 1] Mid" in console.handle("players")
        assert console.handle("teams").splitlines()[0].startswith("t0  Leader 0: 500/500")

    def test_players_filter_by_name(self, seed_store):
        output = _make_console(seed_store).handle("players player 2")
        assert output == "p2  Player 2  [Gold 1] Mid"

    def test_players_filter_by_role(self, seed_store):
        leaders = [TeamLeader(id="t0", name="Leader 0", initial_points=500, current_points=500)]
        players = [
            Player(id="p0", name="Faker", tier="Challenger", main_role="Mid"),
            Player(id="p1", name="Zeus", tier="Diamond 1", main_role="Top", sub_role="Jungle"),
            Player(id="p2", name="Oner", tier="Master", main_role="Jungle"),
        ]
        engine = AuctionEngine(seed_store(leaders, players))
        engine.load()
        console = AuctionConsole(engine)

        lines = console.handle("players JUNGLE").splitlines()

        assert [line.split()[0] for line in lines] == ["p2", "p1"]
        assert console.handle("players support") == "No players available"

    def test_export(self, seed_store, tmp_path):
        console = _make_console(seed_store)
        console.handle("start")
        console.handle("select p2")
        console.handle("pick")

        output = console.handle(f"export {tmp_path / 'awards.csv'}")

        assert output.startswith("Award log written to")
        assert pd.read_csv(tmp_path / "awards.csv")["player_id"].tolist() == ["p2"]

    def test_reset(self, seed_store):
        console = _make_console(seed_store)
        console.handle("start")
        console.handle("select p0")
        console.handle("pick")

        console.handle("reset")

        state = console.engine.current_state()
        assert len(state.available_players) == 4
        assert all(t.member_count == 0 for t in state.teams)

    def test_persist_failure_warns(self, seed_store, store):
        console = _make_console(seed_store)
        console.engine.store = _FailingStore(store.storage_dir)
        console.handle("start")
        console.handle("select p0")

        output = console.handle("pick")

        assert output.startswith("Warning: could not save auction state")
        assert console.engine.current_state().get_team("t0").member_count == 1


# ── render_state ─────────────────────────────────────────────────────

class TestRenderState:
    def test_marks_current_and_passed(self, seed_store):
        console = _make_console(seed_store)
        console.handle("start")
        console.handle("pass")

        lines = render_state(console.engine.current_state()).splitlines()

        assert lines[2] == " - Leader 0 (500)"
        assert lines[3] == " > Leader 1 (500)"
        assert lines[4] == "   Leader 2 (300)"
