"""Data cleaning for roster CSV data.

Standardizes what people actually type into the sheets:
- Tier labels ("d1", "Plat 2", "GM") -> canonical tiers ("Diamond 1", ...)
- Role spellings ("jg", "bot", "sup") -> canonical roles
- Player and leader names (whitespace, curly quotes)
"""

import logging
import re
from typing import Optional

import pandas as pd

from src.auction_manager.config import TIER_ORDER
from src.data_pipeline.config import ROLE_ALIASES, TIER_FAMILY_ALIASES

logger = logging.getLogger(__name__)

# Tier family (case-insensitive) -> canonical family name
_TIER_FAMILIES = {
    label.split()[0].lower(): label.split()[0] for label in TIER_ORDER
}

# Regex: family letters, optional space, optional division digit
_TIER_PATTERN = re.compile(r"^([A-Za-z ]+?)\s*([1-4])?$")


class RosterCleaner:
    """Cleans and standardizes roster sheets before import."""

    # ------------------------------------------------------------------
    # Value helpers
    # ------------------------------------------------------------------
    @staticmethod
    def normalize_name(name: str) -> Optional[str]:
        """Normalize a player or leader name.

        - Strips quotes and extra whitespace
        - Standardizes apostrophes
        - Returns None for blank values
        """
        if pd.isna(name):
            return None

        name = str(name).strip().strip('"')
        if name == "":
            return None

        name = name.replace("’", "'")
        name = name.replace("‘", "'")

        return " ".join(name.split())

    @staticmethod
    def standardize_tier(tier: str) -> Optional[str]:
        """Map a tier spelling to its canonical label.

        Examples:
            "diamond 1"  -> "Diamond 1"
            "D1"         -> "Diamond 1"
            "plat2"      -> "Platinum 2"
            "GM"         -> "Grandmaster"
            "Gold"       -> None (division required below Master)
        """
        if pd.isna(tier):
            return None

        m = _TIER_PATTERN.match(str(tier).strip())
        if not m:
            return None

        family_key = " ".join(m.group(1).lower().split())
        family = _TIER_FAMILIES.get(family_key) or TIER_FAMILY_ALIASES.get(family_key)
        if family is None:
            return None

        label = f"{family} {m.group(2)}" if m.group(2) else family
        return label if label in TIER_ORDER else None

    @staticmethod
    def standardize_role(role: str) -> str:
        """Map a role spelling to its canonical role; "" when blank or unknown."""
        if pd.isna(role):
            return ""
        return ROLE_ALIASES.get(str(role).strip().lower(), "")

    # ------------------------------------------------------------------
    # DataFrame-level cleaning
    # ------------------------------------------------------------------
    def clean_players(self, df: pd.DataFrame) -> pd.DataFrame:
        """Clean the players sheet.

        Rows without a name, tier or main role are dropped with a warning.
        Duplicate names keep the first row.
        """
        out = df.copy()
        out["Name"] = out["Name"].apply(self.normalize_name)
        out["Tier"] = out["Tier"].apply(self.standardize_tier)
        out["Main Role"] = out["Main Role"].apply(self.standardize_role)
        out["Sub Role"] = out["Sub Role"].apply(self.standardize_role)

        invalid = out["Name"].isna() | out["Tier"].isna() | (out["Main Role"] == "")
        if invalid.any():
            logger.warning(
                "Dropping %d player rows with missing name, tier or role: %s",
                invalid.sum(),
                df.loc[invalid, "Name"].tolist(),
            )
            out = out[~invalid].copy()

        # A sub role equal to the main role carries no information
        out.loc[out["Sub Role"] == out["Main Role"], "Sub Role"] = ""

        out = self._drop_duplicate_names(out, "player")
        logger.info("Cleaned players: %d rows", len(out))
        return out

    def clean_team_leaders(self, df: pd.DataFrame) -> pd.DataFrame:
        """Clean the team-leader sheet.

        Rows without a name or with a missing/non-positive budget are
        dropped. An unrecognized leader tier becomes None rather than
        dropping the leader, since tier only breaks bid-order ties.
        """
        out = df.copy()
        out["Name"] = out["Name"].apply(self.normalize_name)
        out["Tier"] = out["Tier"].apply(self.standardize_tier)

        invalid = out["Name"].isna() | out["Points"].isna() | (out["Points"] <= 0)
        if invalid.any():
            logger.warning(
                "Dropping %d team leader rows with missing name or points: %s",
                invalid.sum(),
                df.loc[invalid, "Name"].tolist(),
            )
            out = out[~invalid].copy()

        out = out.astype({"Points": int})
        out = self._drop_duplicate_names(out, "team leader")
        logger.info("Cleaned team leaders: %d rows", len(out))
        return out

    def clean_all(self, data: dict[str, pd.DataFrame]) -> dict[str, pd.DataFrame]:
        """Clean both DataFrames returned by RosterIngester.read_all()."""
        return {
            "players": self.clean_players(data["players"]),
            "team_leaders": self.clean_team_leaders(data["team_leaders"]),
        }

    @staticmethod
    def _drop_duplicate_names(df: pd.DataFrame, kind: str) -> pd.DataFrame:
        dupes = df["Name"].duplicated(keep="first")
        if dupes.any():
            logger.warning(
                "Dropping %d duplicate %s rows: %s",
                dupes.sum(),
                kind,
                df.loc[dupes, "Name"].tolist(),
            )
        return df[~dupes].reset_index(drop=True)
