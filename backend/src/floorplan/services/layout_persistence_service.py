"""Service for persisting the area registry in a SQLite key-value slot."""

import json
import logging
import os
import sqlite3
from datetime import datetime, timezone
from typing import Optional, Sequence

from pydantic import ValidationError

from floorplan.core.errors import MalformedPersistedState
from floorplan.models.layout import AreaRegistry
from floorplan.services.area_registry import default_registry, ensure_areas

logger = logging.getLogger(__name__)


class LayoutPersistenceService:
    """Load and save the full area registry under a single storage key."""

    def __init__(self, db_path: str, storage_key: str, area_names: Sequence[str]):
        self.db_path = db_path
        self.storage_key = storage_key
        self.area_names = list(area_names)
        self.init_db()

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(self.db_path)

    def init_db(self) -> None:
        """Create the database file and the slot table if needed."""
        dir_path = os.path.dirname(self.db_path)
        if dir_path:
            os.makedirs(dir_path, exist_ok=True)

        conn = self._connect()
        try:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS layout_slots (
                    key TEXT PRIMARY KEY,
                    data TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
                """
            )
            conn.commit()
        finally:
            conn.close()

        logger.info(f"Initialized layout database at {self.db_path}")

    def _read_slot(self) -> Optional[str]:
        conn = self._connect()
        try:
            row = conn.execute(
                "SELECT data FROM layout_slots WHERE key = ?", (self.storage_key,)
            ).fetchone()
        finally:
            conn.close()
        return row[0] if row else None

    def decode(self, raw: str) -> AreaRegistry:
        """Decode the slot contents.

        Raises:
            MalformedPersistedState: If the JSON or its shape is invalid.
        """
        try:
            data = json.loads(raw)
        except (TypeError, ValueError) as e:
            raise MalformedPersistedState(f"Invalid JSON: {e}") from e

        if not isinstance(data, dict):
            raise MalformedPersistedState(f"Expected an object, got {type(data).__name__}")

        try:
            registry = AreaRegistry.from_storage(data)
        except ValidationError as e:
            raise MalformedPersistedState(str(e)) from e

        return ensure_areas(registry, self.area_names)

    def load(self) -> AreaRegistry:
        """Read the registry, falling back to defaults when absent or unparsable."""
        try:
            raw = self._read_slot()
        except sqlite3.Error as e:
            logger.warning(f"Could not read layout slot {self.storage_key}: {e}")
            return default_registry(self.area_names)

        if raw is None:
            logger.info(f"No saved layout under {self.storage_key}, using defaults")
            return default_registry(self.area_names)

        try:
            registry = self.decode(raw)
        except MalformedPersistedState as e:
            logger.warning(f"Saved layout under {self.storage_key} is malformed, using defaults: {e}")
            return default_registry(self.area_names)

        logger.info(f"Loaded layout for {len(registry.areas)} areas from {self.storage_key}")
        return registry

    def save(self, registry: AreaRegistry) -> bool:
        """Overwrite the slot with the full registry. Returns False on storage errors."""
        data_json = json.dumps(registry.to_storage())
        updated_at = datetime.now(timezone.utc).isoformat()

        conn = self._connect()
        try:
            conn.execute(
                """
                INSERT INTO layout_slots (key, data, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET data = excluded.data, updated_at = excluded.updated_at
                """,
                (self.storage_key, data_json, updated_at),
            )
            conn.commit()
            logger.debug(f"Saved layout under {self.storage_key} ({len(data_json)} bytes)")
            return True
        except sqlite3.Error as e:
            conn.rollback()
            logger.error(f"Error saving layout under {self.storage_key}: {e}", exc_info=True)
            return False
        finally:
            conn.close()

    def clear(self) -> bool:
        """Delete the slot. Returns False if there was nothing to delete."""
        conn = self._connect()
        try:
            cursor = conn.execute("DELETE FROM layout_slots WHERE key = ?", (self.storage_key,))
            conn.commit()
            deleted = cursor.rowcount > 0
        finally:
            conn.close()

        if deleted:
            logger.info(f"Deleted saved layout under {self.storage_key}")
        return deleted
