"""
Profile stores - Persist the whole learner profile as one JSON blob.

The blob lives under a single key in a local key/value table
(~/.empowerjourney/journey.db by default), wrapped in a versioned envelope:

    {"schema_version": 1, "profile": {...}}

Writes replace the blob in one statement, so a profile is never partially
stored.
"""

import json
import logging
import sqlite3
from pathlib import Path
from typing import Optional, Protocol

import pydantic

from empowerjourney.errors import PersistenceFailure
from empowerjourney.schemas import ProfileAggregate


logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1
DEFAULT_STORAGE_KEY = "empowermentJourneyData"
DEFAULT_DATA_DIR = Path.home() / ".empowerjourney"
DEFAULT_DB_PATH = DEFAULT_DATA_DIR / "journey.db"


class ProfileStore(Protocol):
    """Persistence port used by LearningJourney."""

    def load(self) -> Optional[ProfileAggregate]:
        ...

    def save(self, profile: ProfileAggregate) -> None:
        ...

    def clear(self) -> None:
        ...


def encode_profile(profile: ProfileAggregate) -> str:
    """Serialize a profile inside the versioned envelope."""
    return json.dumps(
        {"schema_version": SCHEMA_VERSION, "profile": profile.model_dump(mode="json")},
        ensure_ascii=False,
    )


def decode_profile(blob: str) -> ProfileAggregate:
    """
    Parse a stored blob back into a profile.

    Raises:
        PersistenceFailure: if the blob is not JSON, comes from a newer
            schema, or does not validate
    """
    try:
        data = json.loads(blob)
    except json.JSONDecodeError as e:
        raise PersistenceFailure(f"Stored profile is not valid JSON: {e}") from e

    if not isinstance(data, dict) or "profile" not in data:
        raise PersistenceFailure("Stored profile has no envelope")
    version = data.get("schema_version")
    if not isinstance(version, int) or version > SCHEMA_VERSION:
        raise PersistenceFailure(
            f"Stored profile schema version {version} is not supported (max {SCHEMA_VERSION})"
        )

    try:
        return ProfileAggregate.model_validate(data["profile"])
    except pydantic.ValidationError as e:
        raise PersistenceFailure(f"Stored profile is invalid: {e}") from e


class MemoryProfileStore:
    """In-process store holding the encoded blob, for tests and dry runs."""

    def __init__(self):
        self.blob: Optional[str] = None
        self.saves = 0

    def load(self) -> Optional[ProfileAggregate]:
        if self.blob is None:
            return None
        return decode_profile(self.blob)

    def save(self, profile: ProfileAggregate) -> None:
        self.blob = encode_profile(profile)
        self.saves += 1

    def clear(self) -> None:
        self.blob = None


class SqliteProfileStore:
    """
    Store the profile blob in a SQLite key/value table.

    Each method opens its own connection, so the store can be shared
    between the coordinator and a CLI invocation.
    """

    def __init__(self, db_path: Optional[Path] = None, key: str = DEFAULT_STORAGE_KEY):
        """
        Initialize profile store.

        Args:
            db_path: Path to the database (default: ~/.empowerjourney/journey.db)
            key: Storage key the profile blob lives under
        """
        self.db_path = Path(db_path) if db_path else DEFAULT_DB_PATH
        self.key = key
        self._ensure_database()

    def _ensure_database(self):
        """Create database and table if they don't exist."""
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(str(self.db_path))
        except (OSError, sqlite3.Error) as e:
            raise PersistenceFailure(f"Cannot open profile store {self.db_path}: {e}") from e
        try:
            conn.executescript("""
                CREATE TABLE IF NOT EXISTS local_storage (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
                );
            """)
            conn.commit()
        except sqlite3.Error as e:
            raise PersistenceFailure(f"Cannot initialize profile store: {e}") from e
        finally:
            conn.close()

    def _get_connection(self) -> sqlite3.Connection:
        """Get a new database connection."""
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        return conn

    def load(self) -> Optional[ProfileAggregate]:
        """Load the stored profile, or None if nothing was saved yet."""
        try:
            conn = self._get_connection()
            try:
                row = conn.execute(
                    "SELECT value FROM local_storage WHERE key = ?", (self.key,)
                ).fetchone()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise PersistenceFailure(f"Cannot read profile: {e}") from e

        if not row:
            logger.debug("No stored profile under %s", self.key)
            return None
        return decode_profile(row["value"])

    def save(self, profile: ProfileAggregate) -> None:
        """Replace the stored profile."""
        blob = encode_profile(profile)
        try:
            conn = self._get_connection()
            try:
                conn.execute(
                    """INSERT INTO local_storage (key, value, updated_at)
                       VALUES (?, ?, CURRENT_TIMESTAMP)
                       ON CONFLICT(key) DO UPDATE SET
                         value = excluded.value,
                         updated_at = excluded.updated_at""",
                    (self.key, blob)
                )
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise PersistenceFailure(f"Cannot write profile: {e}") from e

    def clear(self) -> None:
        """Remove the stored profile."""
        try:
            conn = self._get_connection()
            try:
                conn.execute("DELETE FROM local_storage WHERE key = ?", (self.key,))
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise PersistenceFailure(f"Cannot clear profile: {e}") from e
