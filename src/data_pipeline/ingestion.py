"""CSV ingestion for player and team-leader roster sheets.

Handles the quirks of hand-maintained spreadsheets:
- Headers with stray whitespace or different capitalisation
- Fully blank rows
- Comma-formatted point budgets (e.g., "3,000")
- Optional columns missing entirely (Sub Role, leader Tier)
"""

import logging
from pathlib import Path

import pandas as pd

from src.data_pipeline.config import FILE_NAMES, PLAYER_COLUMNS, TEAM_LEADER_COLUMNS

logger = logging.getLogger(__name__)


class IngestionError(Exception):
    """Raised when CSV ingestion fails."""


def _parse_points(value):
    """Parse a points string that may contain commas (e.g., '3,000' -> 3000.0)."""
    if pd.isna(value):
        return value
    if isinstance(value, (int, float)):
        return float(value)
    s = str(value).replace(",", "").strip().strip('"')
    if s == "" or s.isspace():
        return float("nan")
    try:
        return float(s)
    except ValueError:
        return float("nan")


class RosterIngester:
    """Reads the player and team-leader CSVs for an auction.

    Each read method returns a DataFrame with the canonical column names
    from config, string columns stripped and blank rows removed.
    """

    def __init__(self, data_dir: Path):
        self.data_dir = Path(data_dir)

    def _resolve_path(self, file_key: str) -> Path:
        """Build the full file path for a given file key, raising if missing."""
        filepath = self.data_dir / FILE_NAMES[file_key]
        if not filepath.exists():
            raise FileNotFoundError(f"Expected file not found: {filepath}")
        return filepath

    def read_players(self) -> pd.DataFrame:
        """Read the players sheet.

        Returns DataFrame with columns:
            Name, Tier, Main Role, Sub Role
        """
        filepath = self._resolve_path("players")
        logger.info("Reading players: %s", filepath.name)

        df = self._read_sheet(filepath, PLAYER_COLUMNS)
        logger.info("Loaded %d player rows", len(df))
        return df

    def read_team_leaders(self) -> pd.DataFrame:
        """Read the team-leader sheet.

        Returns DataFrame with columns:
            Name, Points (float, NaN when unparseable), Tier
        """
        filepath = self._resolve_path("team_leaders")
        logger.info("Reading team leaders: %s", filepath.name)

        df = self._read_sheet(filepath, TEAM_LEADER_COLUMNS)
        df["Points"] = df["Points"].apply(_parse_points).astype(float)
        logger.info("Loaded %d team leader rows", len(df))
        return df

    def _read_sheet(self, filepath: Path, columns: list[str]) -> pd.DataFrame:
        df = pd.read_csv(filepath, dtype=str, quotechar='"', skip_blank_lines=True)

        # Match headers case/whitespace-insensitively
        lookup = {c.strip().lower(): c for c in df.columns}
        if "name" not in lookup:
            raise ValueError(f"{filepath.name} has no Name column")
        df = df.rename(
            columns={lookup[c.lower()]: c for c in columns if c.lower() in lookup}
        )
        for col in columns:
            if col not in df.columns:
                df[col] = pd.NA
        df = df[columns].copy()

        for col in columns:
            df[col] = df[col].str.strip().str.strip('"')

        df = df.dropna(how="all").reset_index(drop=True)
        return df

    def read_all(self) -> dict[str, pd.DataFrame]:
        """Read both sheets.

        Returns:
            dict with keys: 'players', 'team_leaders'

        Raises:
            IngestionError: if either file cannot be read.
        """
        try:
            return {
                "players": self.read_players(),
                "team_leaders": self.read_team_leaders(),
            }
        except Exception as e:
            raise IngestionError(f"Failed to read CSV files: {e}") from e
