import json
from datetime import datetime, timedelta, timezone
from pathlib import Path

import aiosqlite

from config import settings
from db.models import SCHEMA, Refresh, RefreshStatus, Snapshot


def _now() -> datetime:
    return datetime.now(timezone.utc)


class SnapshotStore:
    """Last good copy of each fetched sheet, plus a log of refresh attempts."""

    def __init__(self, db_path: Path | str | None = None, max_entries: int | None = None):
        path = db_path or settings.database_path
        self.db_path = Path(path) if isinstance(path, str) else path
        self.max_entries = max_entries or settings.snapshot_max_entries
        self._connection: aiosqlite.Connection | None = None

    async def connect(self) -> None:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._connection = await aiosqlite.connect(self.db_path)
        self._connection.row_factory = aiosqlite.Row
        await self._connection.executescript(SCHEMA)
        await self._connection.commit()

    async def close(self) -> None:
        if self._connection:
            await self._connection.close()
            self._connection = None

    @property
    def conn(self) -> aiosqlite.Connection:
        if not self._connection:
            raise RuntimeError("Database not connected")
        return self._connection

    # === Snapshots ===

    async def save_snapshot(self, key: str, rows: list[dict[str, str]]) -> None:
        cursor = await self.conn.execute("SELECT 1 FROM snapshots WHERE cache_key = ?", (key,))
        exists = await cursor.fetchone() is not None

        if not exists:
            cursor = await self.conn.execute("SELECT COUNT(*) FROM snapshots")
            count = (await cursor.fetchone())[0]
            overflow = count - self.max_entries + 1
            if overflow > 0:
                await self.conn.execute(
                    """
                    DELETE FROM snapshots WHERE cache_key IN (
                        SELECT cache_key FROM snapshots ORDER BY saved_at, rowid LIMIT ?
                    )
                    """,
                    (overflow,),
                )

        await self.conn.execute(
            """
            INSERT INTO snapshots (cache_key, rows, saved_at) VALUES (?, ?, ?)
            ON CONFLICT(cache_key) DO UPDATE SET rows = excluded.rows, saved_at = excluded.saved_at
            """,
            (key, json.dumps(rows), _now().isoformat()),
        )
        await self.conn.commit()

    async def load_snapshot(self, key: str) -> Snapshot | None:
        cursor = await self.conn.execute("SELECT * FROM snapshots WHERE cache_key = ?", (key,))
        row = await cursor.fetchone()
        if not row:
            return None
        try:
            rows = json.loads(row["rows"])
        except json.JSONDecodeError:
            return None
        return Snapshot(
            key=row["cache_key"],
            rows=rows if isinstance(rows, list) else [],
            saved_at=datetime.fromisoformat(row["saved_at"]),
        )

    async def invalidate(self, pattern: str) -> int:
        cursor = await self.conn.execute(
            "DELETE FROM snapshots WHERE instr(cache_key, ?) > 0", (pattern,)
        )
        await self.conn.commit()
        return cursor.rowcount

    async def count_snapshots(self) -> int:
        cursor = await self.conn.execute("SELECT COUNT(*) FROM snapshots")
        return (await cursor.fetchone())[0]

    # === Refreshes ===

    async def start_refresh(self, cache_key: str) -> int:
        cursor = await self.conn.execute(
            "INSERT INTO refreshes (cache_key, status, started_at) VALUES (?, ?, ?)",
            (cache_key, RefreshStatus.RUNNING.value, _now().isoformat()),
        )
        await self.conn.commit()
        return cursor.lastrowid  # type: ignore

    async def finish_refresh(
        self,
        refresh_id: int,
        status: RefreshStatus,
        rows_loaded: int = 0,
        error_message: str | None = None,
    ) -> bool:
        cursor = await self.conn.execute(
            """
            UPDATE refreshes SET status = ?, rows_loaded = ?,
            error_message = ?, finished_at = ?
            WHERE id = ?
            """,
            (
                status.value,
                rows_loaded,
                error_message,
                _now().isoformat(),
                refresh_id,
            ),
        )
        await self.conn.commit()
        return cursor.rowcount > 0

    async def get_recent_refreshes(self, limit: int = 10) -> list[Refresh]:
        cursor = await self.conn.execute(
            "SELECT * FROM refreshes ORDER BY started_at DESC, id DESC LIMIT ?",
            (limit,),
        )
        rows = await cursor.fetchall()
        return [self._row_to_refresh(row) for row in rows]

    async def get_recent_failures(self, hours: int = 1) -> int:
        cutoff = (_now() - timedelta(hours=hours)).isoformat()
        cursor = await self.conn.execute(
            "SELECT COUNT(*) FROM refreshes WHERE status = ? AND started_at > ?",
            (RefreshStatus.FAILED.value, cutoff),
        )
        return (await cursor.fetchone())[0]

    def _row_to_refresh(self, row: aiosqlite.Row) -> Refresh:
        return Refresh(
            id=row["id"],
            cache_key=row["cache_key"],
            status=RefreshStatus(row["status"]),
            rows_loaded=row["rows_loaded"],
            error_message=row["error_message"],
            started_at=datetime.fromisoformat(row["started_at"]),
            finished_at=datetime.fromisoformat(row["finished_at"]) if row["finished_at"] else None,
        )
