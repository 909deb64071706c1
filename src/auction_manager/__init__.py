from src.auction_manager.auction_engine import AuctionEngine, AwardTransition
from src.auction_manager.entity_store import EntityStore
from src.auction_manager.models import (
    AuctionHistoryItem,
    AuctionState,
    Player,
    Round,
    Snapshot,
    Team,
    TeamLeader,
    TeamMember,
)

__all__ = [
    "AuctionEngine",
    "AuctionHistoryItem",
    "AuctionState",
    "AwardTransition",
    "EntityStore",
    "Player",
    "Round",
    "Snapshot",
    "Team",
    "TeamLeader",
    "TeamMember",
]
