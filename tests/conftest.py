"""Shared fixtures for the auction test suite."""

import json

import pytest

from src.auction_manager.entity_store import EntityStore


# ------------------------------------------------------------------
# Store fixtures – each test gets its own temporary directory
# ------------------------------------------------------------------

@pytest.fixture
def store(tmp_path):
    """Empty entity store in a temporary directory."""
    return EntityStore(storage_dir=tmp_path / "store")


@pytest.fixture
def seed_store(store):
    """Write leaders and players straight to the store's JSON files."""

    def _seed(leaders, players):
        with open(store.team_leaders_path, "w", encoding="utf-8") as f:
            json.dump([t.to_dict() for t in leaders], f)
        with open(store.players_path, "w", encoding="utf-8") as f:
            json.dump([p.to_dict() for p in players], f)
        return store

    return _seed
