"""Entity store - players, team leaders and the auction snapshot as JSON files."""

import json
import logging
import uuid
from dataclasses import replace
from pathlib import Path
from typing import Dict, List, Optional

from src.auction_manager.config import (
    AUCTION_STATE_FILE,
    DEFAULT_INITIAL_POINTS,
    PLAYERS_FILE,
    STORE_DIR,
    TEAM_LEADERS_FILE,
)
from src.auction_manager.models import Player, Snapshot, TeamLeader

logger = logging.getLogger(__name__)


def _new_id(prefix: str) -> str:
    return f"{prefix}{uuid.uuid4().hex[:12]}"


class EntityStore:
    """Reads and writes auction records under a single storage directory.

    Layout:
        players.json        list of Player records
        team_leaders.json   list of TeamLeader records
        auction_state.json  the current Snapshot (absent when no auction)
    """

    def __init__(self, storage_dir: Optional[Path] = None):
        self.storage_dir = storage_dir or STORE_DIR
        self.storage_dir.mkdir(parents=True, exist_ok=True)

    @property
    def players_path(self) -> Path:
        return self.storage_dir / PLAYERS_FILE

    @property
    def team_leaders_path(self) -> Path:
        return self.storage_dir / TEAM_LEADERS_FILE

    @property
    def snapshot_path(self) -> Path:
        return self.storage_dir / AUCTION_STATE_FILE

    # ------------------------------------------------------------------
    # Players
    # ------------------------------------------------------------------
    def list_players(self) -> List[Player]:
        return [Player.from_dict(d) for d in self._read_records(self.players_path)]

    def get_player(self, player_id: str) -> Optional[Player]:
        return next((p for p in self.list_players() if p.id == player_id), None)

    def create_player(
        self, name: str, tier: str, main_role: str, sub_role: str = ""
    ) -> Player:
        """Add a player with a generated id and return it."""
        if not name or not name.strip():
            raise ValueError("Player name cannot be empty")

        player = Player(
            id=_new_id("p"),
            name=name.strip(),
            tier=tier,
            main_role=main_role,
            sub_role=sub_role or "",
        )
        players = self.list_players()
        players.append(player)
        self._write_records(self.players_path, [p.to_dict() for p in players])
        logger.info("Created player %s (%s)", player.name, player.id)
        return player

    def update_player(self, player: Player) -> Optional[Player]:
        """Replace the stored player with the same id.

        Returns:
            The updated record, or None if no player has that id.
        """
        players = self.list_players()
        for i, existing in enumerate(players):
            if existing.id == player.id:
                players[i] = player
                self._write_records(
                    self.players_path, [p.to_dict() for p in players]
                )
                logger.info("Updated player %s", player.id)
                return player

        logger.warning("Player not found for update: %s", player.id)
        return None

    def delete_player(self, player_id: str) -> Optional[Player]:
        """Remove a player. Returns the deleted record, or None if not found."""
        players = self.list_players()
        target = next((p for p in players if p.id == player_id), None)
        if target is None:
            logger.warning("Player not found for delete: %s", player_id)
            return None

        self._write_records(
            self.players_path,
            [p.to_dict() for p in players if p.id != player_id],
        )
        logger.info("Deleted player %s", player_id)
        return target

    # ------------------------------------------------------------------
    # Team leaders
    # ------------------------------------------------------------------
    def list_team_leaders(self) -> List[TeamLeader]:
        return [
            TeamLeader.from_dict(d)
            for d in self._read_records(self.team_leaders_path)
        ]

    def get_team_leader(self, leader_id: str) -> Optional[TeamLeader]:
        return next(
            (t for t in self.list_team_leaders() if t.id == leader_id), None
        )

    def create_team_leader(
        self,
        name: str,
        initial_points: int = DEFAULT_INITIAL_POINTS,
        current_points: Optional[int] = None,
        tier: Optional[str] = None,
    ) -> TeamLeader:
        """Add a team leader. ``current_points`` defaults to the full budget."""
        if not name or not name.strip():
            raise ValueError("Team leader name cannot be empty")
        if initial_points < 0:
            raise ValueError(
                f"initial_points must be non-negative, got {initial_points}"
            )

        leader = TeamLeader(
            id=_new_id("t"),
            name=name.strip(),
            initial_points=initial_points,
            current_points=(
                initial_points if current_points is None else current_points
            ),
            tier=tier or None,
        )
        leaders = self.list_team_leaders()
        leaders.append(leader)
        self._write_records(
            self.team_leaders_path, [t.to_dict() for t in leaders]
        )
        logger.info(
            "Created team leader %s (%s) with %d points",
            leader.name,
            leader.id,
            leader.initial_points,
        )
        return leader

    def update_team_leader(self, leader: TeamLeader) -> Optional[TeamLeader]:
        """Replace the stored leader with the same id, or None if not found."""
        leaders = self.list_team_leaders()
        for i, existing in enumerate(leaders):
            if existing.id == leader.id:
                leaders[i] = leader
                self._write_records(
                    self.team_leaders_path, [t.to_dict() for t in leaders]
                )
                logger.info("Updated team leader %s", leader.id)
                return leader

        logger.warning("Team leader not found for update: %s", leader.id)
        return None

    def delete_team_leader(self, leader_id: str) -> Optional[TeamLeader]:
        """Remove a leader. Returns the deleted record, or None if not found."""
        leaders = self.list_team_leaders()
        target = next((t for t in leaders if t.id == leader_id), None)
        if target is None:
            logger.warning("Team leader not found for delete: %s", leader_id)
            return None

        self._write_records(
            self.team_leaders_path,
            [t.to_dict() for t in leaders if t.id != leader_id],
        )
        logger.info("Deleted team leader %s", leader_id)
        return target

    def reset_team_leader_points(self) -> List[TeamLeader]:
        """Restore every leader's current points to their initial budget."""
        leaders = [
            replace(t, current_points=t.initial_points)
            for t in self.list_team_leaders()
        ]
        self._write_records(
            self.team_leaders_path, [t.to_dict() for t in leaders]
        )
        logger.info("Reset points for %d team leaders", len(leaders))
        return leaders

    # ------------------------------------------------------------------
    # Auction snapshot
    # ------------------------------------------------------------------
    def load_auction_snapshot(self) -> Optional[Snapshot]:
        """Load the saved auction snapshot.

        Returns:
            Snapshot if one is saved and readable, None otherwise.
        """
        if not self.snapshot_path.exists():
            return None

        try:
            with open(self.snapshot_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.warning("Corrupt auction snapshot %s: %s", self.snapshot_path, e)
            return None

        if data is None:
            return None

        try:
            snapshot = Snapshot.from_dict(data)
        except (KeyError, TypeError, AttributeError) as e:
            logger.warning(
                "Malformed auction snapshot %s: %s", self.snapshot_path, e
            )
            return None

        logger.info(
            "Loaded auction snapshot: %d teams, %d assigned players",
            len(snapshot.teams),
            len(snapshot.assigned_player_ids),
        )
        return snapshot

    def save_auction_snapshot(self, snapshot: Snapshot) -> Path:
        """Write the snapshot, replacing any previous one."""
        with open(self.snapshot_path, "w", encoding="utf-8") as f:
            json.dump(snapshot.to_dict(), f, indent=2)

        logger.debug(
            "Saved auction snapshot (%d assigned players) to %s",
            len(snapshot.assigned_player_ids),
            self.snapshot_path,
        )
        return self.snapshot_path

    def clear_auction_snapshot(self) -> bool:
        """Delete the saved snapshot. Returns False if there was none."""
        if not self.snapshot_path.exists():
            return False

        self.snapshot_path.unlink()
        logger.info("Cleared auction snapshot")
        return True

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _read_records(self, filepath: Path) -> List[Dict]:
        """Read a JSON list of records; missing or corrupt files read as empty."""
        if not filepath.exists():
            return []

        try:
            with open(filepath, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.warning("Corrupt record file %s: %s", filepath, e)
            return []

        if not isinstance(data, list):
            logger.warning("Expected a list of records in %s", filepath)
            return []
        return data

    def _write_records(self, filepath: Path, records: List[Dict]):
        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(records, f, indent=2, ensure_ascii=False)
