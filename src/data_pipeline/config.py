from pathlib import Path

# Base project directory
PROJECT_ROOT = Path(__file__).parent.parent.parent

# Data directories
DATA_DIR = PROJECT_ROOT / "data"
RAW_DATA_DIR = DATA_DIR / "raw"

# Roster CSV file names
FILE_NAMES = {
    "players": "players.csv",
    "team_leaders": "team_leaders.csv",
}

# Expected CSV headers
PLAYER_COLUMNS = ["Name", "Tier", "Main Role", "Sub Role"]
TEAM_LEADER_COLUMNS = ["Name", "Points", "Tier"]

# Short tier prefixes -> full tier family
TIER_FAMILY_ALIASES = {
    "c": "Challenger",
    "chall": "Challenger",
    "gm": "Grandmaster",
    "grand master": "Grandmaster",
    "m": "Master",
    "d": "Diamond",
    "dia": "Diamond",
    "e": "Emerald",
    "em": "Emerald",
    "p": "Platinum",
    "plat": "Platinum",
    "g": "Gold",
    "s": "Silver",
    "b": "Bronze",
    "i": "Iron",
}

# Role spellings -> canonical role
ROLE_ALIASES = {
    "top": "Top",
    "jungle": "Jungle",
    "jg": "Jungle",
    "jng": "Jungle",
    "mid": "Mid",
    "middle": "Mid",
    "adc": "ADC",
    "bot": "ADC",
    "bottom": "ADC",
    "support": "Support",
    "sup": "Support",
    "supp": "Support",
}
