"""
Async SQLite trait store.

Each character's traits are stored as one JSON object so a save replaces
the whole set in a single statement.
"""

from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Any

import aiosqlite

from companion.store.base import TraitStore
from companion.store.nudge import NudgeRule

log = logging.getLogger(__name__)

DEFAULT_DB_PATH = "data/companion.db"
DEFAULT_TIMEOUT = 5.0
_SELECTED_KEY = "selected_character"


class SQLiteTraitStore(TraitStore):
    """Persists per-character traits and the selected character."""

    def __init__(self, config: dict[str, Any], rule: NudgeRule | None = None) -> None:
        super().__init__(config, rule)
        self._db_path = str(config.get("db_path", DEFAULT_DB_PATH))
        self._timeout = float(config.get("timeout", DEFAULT_TIMEOUT))
        self._db: aiosqlite.Connection | None = None

    async def start(self) -> None:
        """Create the database and tables if they don't exist."""
        if self._db_path != ":memory:":
            Path(self._db_path).parent.mkdir(parents=True, exist_ok=True)
        self._db = await aiosqlite.connect(self._db_path, timeout=self._timeout)
        await self._db.execute("""
            CREATE TABLE IF NOT EXISTS personality (
                character   TEXT    PRIMARY KEY,
                traits      TEXT    NOT NULL DEFAULT '{}',
                updated_at  REAL    NOT NULL
            )
        """)
        await self._db.execute("""
            CREATE TABLE IF NOT EXISTS preferences (
                key    TEXT PRIMARY KEY,
                value  TEXT NOT NULL
            )
        """)
        await self._db.commit()
        log.info("Trait store opened: %s", self._db_path)

    def _conn(self) -> aiosqlite.Connection:
        if self._db is None:
            raise RuntimeError("Database not initialized — call start() first")
        return self._db

    async def load(self, character: str) -> dict[str, Any]:
        cursor = await self._conn().execute(
            "SELECT traits FROM personality WHERE character = ?",
            (character,),
        )
        row = await cursor.fetchone()
        if not row:
            return self.default_traits()
        try:
            traits = json.loads(row[0])
        except json.JSONDecodeError:
            log.warning("Corrupt trait record for %s, using defaults", character)
            return self.default_traits()
        if not isinstance(traits, dict):
            log.warning("Trait record for %s is not an object, using defaults", character)
            return self.default_traits()
        return traits

    async def save(self, character: str, traits: dict[str, Any]) -> bool:
        db = self._conn()
        try:
            await db.execute(
                """
                INSERT INTO personality (character, traits, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(character) DO UPDATE SET
                    traits = excluded.traits,
                    updated_at = excluded.updated_at
                """,
                (character, json.dumps(traits), time.time()),
            )
            await db.commit()
        except aiosqlite.Error as e:
            log.error("Failed to save traits for %s: %s", character, e)
            # Drop the uncommitted upsert so later reads and commits never see it
            await db.rollback()
            return False
        return True

    async def get_selected_character(self) -> str:
        cursor = await self._conn().execute(
            "SELECT value FROM preferences WHERE key = ?",
            (_SELECTED_KEY,),
        )
        row = await cursor.fetchone()
        return row[0] if row else self.default_character

    async def set_selected_character(self, character: str) -> None:
        db = self._conn()
        await db.execute(
            "INSERT OR REPLACE INTO preferences (key, value) VALUES (?, ?)",
            (_SELECTED_KEY, character),
        )
        await db.commit()

    async def stop(self) -> None:
        """Cleanly close the database connection."""
        if self._db:
            await self._db.close()
            self._db = None
