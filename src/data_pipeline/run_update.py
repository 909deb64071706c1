"""Import player and team-leader CSVs into the auction entity store.

Usage:
    python -m src.data_pipeline.run_update [data_dir] [store_dir] [--replace]

Examples:
    python -m src.data_pipeline.run_update
    python -m src.data_pipeline.run_update /path/to/csvs data/store --replace
"""

import logging
import sys
from pathlib import Path

import pandas as pd

from src.auction_manager.entity_store import EntityStore
from src.data_pipeline.cleaning import RosterCleaner
from src.data_pipeline.config import RAW_DATA_DIR
from src.data_pipeline.ingestion import RosterIngester
from src.logging_config import setup_logging

logger = logging.getLogger(__name__)


def _optional(val) -> str:
    """Return "" for NaN/None/pd.NA, else the value as a string."""
    if val is None or pd.isna(val):
        return ""
    return str(val)


def run_import(
    data_dir: Path | None = None,
    store: EntityStore | None = None,
    replace: bool = False,
) -> dict[str, int]:
    """Load roster CSVs, clean them and write them to the entity store.

    Args:
        data_dir: Directory containing players.csv and team_leaders.csv.
            Defaults to ``data/raw``.
        store: Target entity store. Defaults to the project store.
        replace: Delete all existing players and leaders (and the auction
            snapshot) before importing. Otherwise names already in the
            store are skipped.

    Returns:
        Counts: players_added, players_skipped, leaders_added, leaders_skipped.

    Raises:
        FileNotFoundError: If the data directory doesn't exist.
    """
    if data_dir is None:
        data_dir = RAW_DATA_DIR
    if store is None:
        store = EntityStore()

    if not data_dir.is_dir():
        raise FileNotFoundError(f"Data directory not found: {data_dir}")

    logger.info("Starting roster import (data: %s)", data_dir)

    # 1. Ingest
    logger.info("Step 1/3: Ingesting CSV files...")
    raw = RosterIngester(data_dir).read_all()

    # 2. Clean
    logger.info("Step 2/3: Cleaning data...")
    cleaned = RosterCleaner().clean_all(raw)

    # 3. Write to the store
    logger.info("Step 3/3: Writing records to %s...", store.storage_dir)
    if replace:
        for player in store.list_players():
            store.delete_player(player.id)
        for leader in store.list_team_leaders():
            store.delete_team_leader(leader.id)
        store.clear_auction_snapshot()

    counts = {
        "players_added": 0,
        "players_skipped": 0,
        "leaders_added": 0,
        "leaders_skipped": 0,
    }

    existing_players = {p.name for p in store.list_players()}
    for _, row in cleaned["players"].iterrows():
        if row["Name"] in existing_players:
            counts["players_skipped"] += 1
            continue
        store.create_player(
            name=row["Name"],
            tier=row["Tier"],
            main_role=row["Main Role"],
            sub_role=_optional(row["Sub Role"]),
        )
        counts["players_added"] += 1

    existing_leaders = {t.name for t in store.list_team_leaders()}
    for _, row in cleaned["team_leaders"].iterrows():
        if row["Name"] in existing_leaders:
            counts["leaders_skipped"] += 1
            continue
        store.create_team_leader(
            name=row["Name"],
            initial_points=int(row["Points"]),
            tier=_optional(row["Tier"]) or None,
        )
        counts["leaders_added"] += 1

    logger.info(
        "Import complete: %d players added (%d skipped), "
        "%d team leaders added (%d skipped)",
        counts["players_added"],
        counts["players_skipped"],
        counts["leaders_added"],
        counts["leaders_skipped"],
    )
    return counts


if __name__ == "__main__":
    setup_logging()

    args = [a for a in sys.argv[1:] if a != "--replace"]
    data_dir = Path(args[0]) if len(args) > 0 else None
    store_dir = Path(args[1]) if len(args) > 1 else None

    try:
        counts = run_import(
            data_dir,
            EntityStore(storage_dir=store_dir),
            replace="--replace" in sys.argv[1:],
        )
        print(f"Import complete: {counts}")
    except Exception:
        logger.exception("Import failed")
        sys.exit(1)
