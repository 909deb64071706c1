from pathlib import Path

# Base project directory
PROJECT_ROOT = Path(__file__).parent.parent.parent

# Data directories
DATA_DIR = PROJECT_ROOT / "data"
STORE_DIR = DATA_DIR / "store"

# Entity store file names
PLAYERS_FILE = "players.json"
TEAM_LEADERS_FILE = "team_leaders.json"
AUCTION_STATE_FILE = "auction_state.json"

# Auction rules
ROSTER_CAP = 4
MIN_ELIGIBLE_TEAMS = 1
DEFAULT_INITIAL_POINTS = 3000

# Price decrement controls (floor is enforced by the caller, not the engine)
DEFAULT_PRICE_DECREMENT = 100
MIN_PRICE_DECREMENT = 10
PRICE_DECREMENT_STEP = 10

# Tier ranking (higher = stronger)
TIER_ORDER = {
    "Challenger": 100,
    "Grandmaster": 95,
    "Master": 90,
    "Diamond 1": 85,
    "Diamond 2": 84,
    "Diamond 3": 83,
    "Diamond 4": 82,
    "Emerald 1": 75,
    "Emerald 2": 74,
    "Emerald 3": 73,
    "Emerald 4": 72,
    "Platinum 1": 65,
    "Platinum 2": 64,
    "Platinum 3": 63,
    "Platinum 4": 62,
    "Gold 1": 55,
    "Gold 2": 54,
    "Gold 3": 53,
    "Gold 4": 52,
    "Silver 1": 45,
    "Silver 2": 44,
    "Silver 3": 43,
    "Silver 4": 42,
    "Bronze 1": 35,
    "Bronze 2": 34,
    "Bronze 3": 33,
    "Bronze 4": 32,
    "Iron 1": 25,
    "Iron 2": 24,
    "Iron 3": 23,
    "Iron 4": 22,
}
