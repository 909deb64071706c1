"""Award log and team standings as pandas DataFrames."""

import logging
from pathlib import Path
from typing import Dict

import pandas as pd

from src.auction_manager.models import AuctionState
from src.auction_manager.ranking import sort_teams_by_points

logger = logging.getLogger(__name__)

HISTORY_COLUMNS = [
    "pick", "player_id", "player", "tier", "main_role",
    "winner_id", "winner", "price", "timestamp",
]

TEAM_SUMMARY_COLUMNS = [
    "leader_id", "leader", "initial_points", "current_points",
    "total_spent", "members", "roster",
]


def history_frame(state: AuctionState) -> pd.DataFrame:
    """One row per award, in award order."""
    rows = [
        {
            "pick": i,
            "player_id": item.player.id,
            "player": item.player.name,
            "tier": item.player.tier,
            "main_role": item.player.main_role,
            "winner_id": item.winner.id,
            "winner": item.winner.name,
            "price": item.price,
            "timestamp": item.timestamp,
        }
        for i, item in enumerate(state.auction_history, start=1)
    ]
    return pd.DataFrame(rows, columns=HISTORY_COLUMNS)


def team_summary_frame(state: AuctionState) -> pd.DataFrame:
    """One row per team, richest leader first."""
    rows = [
        {
            "leader_id": team.leader.id,
            "leader": team.leader.name,
            "initial_points": team.leader.initial_points,
            "current_points": team.leader.current_points,
            "total_spent": team.total_spent,
            "members": team.member_count,
            "roster": ", ".join(m.player.name for m in team.members),
        }
        for team in sort_teams_by_points(state.teams)
    ]
    return pd.DataFrame(rows, columns=TEAM_SUMMARY_COLUMNS)


def build_auction_summary(state: AuctionState) -> Dict:
    """Summary dict for display and for conservation checks."""
    teams = team_summary_frame(state)
    history = history_frame(state)

    if teams.empty:
        points_balanced = True
    else:
        points_balanced = bool(
            (teams["total_spent"] + teams["current_points"]
             == teams["initial_points"]).all()
        )

    return {
        "status": state.status,
        "total_players": len(state.players),
        "available_players": len(state.available_players),
        "assigned_players": len(state.assigned_players),
        "awards": len(history),
        "points_spent": int(teams["total_spent"].sum()) if not teams.empty else 0,
        # Undone awards stay in the log, so this can exceed points_spent
        "awarded_points": int(history["price"].sum()) if not history.empty else 0,
        "points_balanced": points_balanced,
        "teams": teams.to_dict(orient="records"),
    }


def export_history_csv(state: AuctionState, filepath: Path) -> Path:
    """Write the award log to CSV and return the path."""
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)
    df = history_frame(state)
    df.to_csv(filepath, index=False)
    logger.info("Exported %d awards to %s", len(df), filepath)
    return filepath
