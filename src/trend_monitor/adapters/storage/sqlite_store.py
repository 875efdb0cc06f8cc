"""SQLite-backed time series store."""

import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator, Optional

from trend_monitor.core.entities import Item, Observation, Snapshot
from trend_monitor.core.errors import StorageError
from trend_monitor.core.interfaces import Clock, TimeSeriesStore

logger = logging.getLogger(__name__)

# Fixed width so that text order matches time order.
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%f"

SCHEMA = """
CREATE TABLE IF NOT EXISTS items (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    title       TEXT NOT NULL,
    author      TEXT,
    url         TEXT UNIQUE NOT NULL,
    uses_count  INTEGER NOT NULL DEFAULT 0 CHECK (uses_count >= 0),
    category    TEXT,
    created_at  TEXT NOT NULL,
    updated_at  TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_items_category ON items(category);
CREATE INDEX IF NOT EXISTS idx_items_updated ON items(updated_at);

CREATE TABLE IF NOT EXISTS snapshots (
    id           INTEGER PRIMARY KEY AUTOINCREMENT,
    item_id      INTEGER NOT NULL REFERENCES items(id) ON DELETE CASCADE,
    uses_count   INTEGER NOT NULL CHECK (uses_count >= 0),
    recorded_at  TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_snapshots_item_recorded ON snapshots(item_id, recorded_at);
"""

ITEM_COLUMNS = "id, title, author, url, uses_count, category, created_at, updated_at"


def format_timestamp(value: datetime) -> str:
    """Render a datetime as UTC text; naive values are taken to be UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime(TIMESTAMP_FORMAT)


def parse_timestamp(value: str) -> datetime:
    return datetime.strptime(value, TIMESTAMP_FORMAT).replace(tzinfo=timezone.utc)


class SQLiteTimeSeriesStore(TimeSeriesStore):
    """Items and snapshots in a local SQLite database.

    Every operation opens its own connection, so one store can be shared
    between threads. record_observation runs as a single write transaction
    (BEGIN IMMEDIATE) around a native upsert on the unique url, which keeps
    concurrent observations of one url from both creating an item and makes
    the item update and its snapshot visible together.
    """

    def __init__(
        self, db_path: Path, clock: Optional[Clock] = None, busy_timeout: float = 30.0
    ) -> None:
        """Initialize the store with a database path.

        Args:
            db_path: Path to the SQLite database file (must be a real file,
                each operation connects separately).
            clock: Source of the current time, UTC.
            busy_timeout: Seconds to wait for a competing writer's lock.
        """
        super().__init__(clock)
        self.db_path = Path(db_path)
        self.busy_timeout = busy_timeout

    @contextmanager
    def _connect(self, operation: str, key: object = None) -> Iterator[sqlite3.Connection]:
        try:
            conn = sqlite3.connect(
                self.db_path, timeout=self.busy_timeout, isolation_level=None
            )
        except sqlite3.Error as e:
            raise StorageError(operation, key, e) from e

        try:
            conn.row_factory = sqlite3.Row
            conn.execute("PRAGMA foreign_keys = ON")
            yield conn
        except sqlite3.Error as e:
            if conn.in_transaction:
                conn.rollback()
            raise StorageError(operation, key, e) from e
        finally:
            conn.close()

    def init_db(self) -> None:
        """Create tables and indexes if they don't exist."""
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError("init_db", str(self.db_path), e) from e
        with self._connect("init_db", str(self.db_path)) as conn:
            conn.execute("PRAGMA journal_mode = WAL")
            conn.executescript(SCHEMA)
        logger.debug("Initialized time series store at %s", self.db_path)

    def record_observation(
        self, url: str, title: str, author: str, uses_count: int, category: str
    ) -> int:
        observation = Observation(
            url=url, title=title, author=author or "", uses_count=uses_count, category=category
        )
        now = format_timestamp(self.clock())

        with self._connect("record_observation", url) as conn:
            conn.execute("BEGIN IMMEDIATE")
            row = conn.execute(
                """
                INSERT INTO items (title, author, url, uses_count, category, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(url) DO UPDATE SET
                    title = excluded.title,
                    author = excluded.author,
                    uses_count = excluded.uses_count,
                    category = excluded.category,
                    updated_at = excluded.updated_at
                RETURNING id
                """,
                (
                    observation.title,
                    observation.author,
                    observation.url,
                    observation.uses_count,
                    observation.category,
                    now,
                    now,
                ),
            ).fetchall()[0]
            item_id = row["id"]
            conn.execute(
                "INSERT INTO snapshots (item_id, uses_count, recorded_at) VALUES (?, ?, ?)",
                (item_id, observation.uses_count, now),
            )
            conn.execute("COMMIT")

        return item_id

    def get_item_by_url(self, url: str) -> Optional[Item]:
        with self._connect("get_item_by_url", url) as conn:
            row = conn.execute(
                f"SELECT {ITEM_COLUMNS} FROM items WHERE url = ?", (url,)
            ).fetchone()
        return self._row_to_item(row) if row else None

    def list_by_category(self, category: str, limit: int) -> list[Item]:
        with self._connect("list_by_category", category) as conn:
            rows = conn.execute(
                f"""
                SELECT {ITEM_COLUMNS}
                FROM items
                WHERE category = ?
                ORDER BY updated_at DESC, id ASC
                LIMIT ?
                """,
                (category, limit if limit > 0 else -1),
            ).fetchall()
        return [self._row_to_item(row) for row in rows]

    def earliest_snapshot_since(self, item_id: int, cutoff: datetime) -> Optional[Snapshot]:
        with self._connect("earliest_snapshot_since", item_id) as conn:
            row = conn.execute(
                """
                SELECT id, item_id, uses_count, recorded_at
                FROM snapshots
                WHERE item_id = ? AND recorded_at >= ?
                ORDER BY recorded_at ASC, id ASC
                LIMIT 1
                """,
                (item_id, format_timestamp(cutoff)),
            ).fetchone()
        return self._row_to_snapshot(row) if row else None

    def list_snapshots(self, item_id: int) -> list[Snapshot]:
        with self._connect("list_snapshots", item_id) as conn:
            rows = conn.execute(
                """
                SELECT id, item_id, uses_count, recorded_at
                FROM snapshots
                WHERE item_id = ?
                ORDER BY recorded_at ASC, id ASC
                """,
                (item_id,),
            ).fetchall()
        return [self._row_to_snapshot(row) for row in rows]

    def _row_to_item(self, row: sqlite3.Row) -> Item:
        return Item(
            id=row["id"],
            title=row["title"],
            author=row["author"] or "",
            url=row["url"],
            uses_count=row["uses_count"],
            category=row["category"] or "",
            created_at=parse_timestamp(row["created_at"]),
            updated_at=parse_timestamp(row["updated_at"]),
        )

    def _row_to_snapshot(self, row: sqlite3.Row) -> Snapshot:
        return Snapshot(
            id=row["id"],
            item_id=row["item_id"],
            uses_count=row["uses_count"],
            recorded_at=parse_timestamp(row["recorded_at"]),
        )
