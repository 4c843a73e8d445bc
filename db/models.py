from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class RefreshStatus(Enum):
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class Snapshot:
    key: str
    rows: list[dict[str, str]]
    saved_at: datetime


@dataclass
class Refresh:
    id: int | None
    cache_key: str
    status: RefreshStatus
    rows_loaded: int
    error_message: str | None
    started_at: datetime
    finished_at: datetime | None


SCHEMA = """
CREATE TABLE IF NOT EXISTS snapshots (
    cache_key TEXT PRIMARY KEY,
    rows TEXT NOT NULL DEFAULT '[]',
    saved_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS refreshes (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    cache_key TEXT NOT NULL,
    status TEXT DEFAULT 'running',
    rows_loaded INTEGER DEFAULT 0,
    error_message TEXT,
    started_at TEXT NOT NULL,
    finished_at TEXT
);

CREATE INDEX IF NOT EXISTS idx_snapshots_saved_at ON snapshots(saved_at);
CREATE INDEX IF NOT EXISTS idx_refreshes_started ON refreshes(started_at);
"""
