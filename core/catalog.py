import logging
from enum import Enum

import httpx

from core.cache import ResponseCache
from core.listing import Listing, distinct_categories, distinct_locations, normalize_listings
from core.sheets import SheetsClient
from db.models import RefreshStatus
from db.store import SnapshotStore

log = logging.getLogger(__name__)


class ListingSource(Enum):
    NONE = "none"
    REMOTE = "remote"
    SNAPSHOT = "snapshot"
    EMPTY = "empty"


class Catalog:
    """In-memory listing dataset fed from the sheet.

    Fresh rows come through the response cache. When the sheet cannot be
    fetched the last persisted snapshot is served instead, and failing that
    an empty catalog.
    """

    def __init__(
        self,
        client: SheetsClient,
        cache: ResponseCache,
        store: SnapshotStore | None = None,
    ):
        self.client = client
        self.cache = cache
        self.store = store
        self.listings: list[Listing] = []
        self.categories: list[str] = []
        self.locations: list[str] = []
        self.source = ListingSource.NONE
        self.last_error: str | None = None

    @property
    def cache_key(self) -> str:
        return self.client.cache_key

    async def load(self) -> list[Listing]:
        key = self.cache_key
        try:
            rows = await self.cache.get_or_fetch(key, self._fetch_remote)
        except (httpx.HTTPError, ValueError) as e:
            log.error(f"Failed to fetch listings for {key}: {e}")
            self.last_error = str(e)
            await self._load_fallback(key)
        else:
            self.last_error = None
            self._apply(rows, ListingSource.REMOTE)
        return self.listings

    async def refresh(self, drop_snapshot: bool = False) -> list[Listing]:
        self.cache.invalidate(self.cache_key)
        if drop_snapshot and self.store:
            dropped = await self.store.invalidate(self.cache_key)
            log.info(f"Dropped {dropped} snapshot(s) for {self.cache_key}")
        return await self.load()

    async def _fetch_remote(self) -> list[dict[str, str]]:
        refresh_id = await self.store.start_refresh(self.cache_key) if self.store else None
        try:
            rows = await self.client.fetch_rows()
        except (httpx.HTTPError, ValueError) as e:
            if refresh_id is not None:
                await self.store.finish_refresh(  # type: ignore[union-attr]
                    refresh_id, RefreshStatus.FAILED, error_message=str(e)
                )
            raise

        if self.store:
            await self.store.save_snapshot(self.cache_key, rows)
            await self.store.finish_refresh(
                refresh_id, RefreshStatus.COMPLETED, rows_loaded=len(rows)  # type: ignore[arg-type]
            )
        return rows

    async def _load_fallback(self, key: str) -> None:
        snapshot = await self.store.load_snapshot(key) if self.store else None
        if snapshot:
            log.warning(f"Serving snapshot of {key} saved at {snapshot.saved_at.isoformat()}")
            self._apply(snapshot.rows, ListingSource.SNAPSHOT)
        else:
            self._apply([], ListingSource.EMPTY)

    def _apply(self, rows: list[dict[str, str]], source: ListingSource) -> None:
        self.listings = normalize_listings(rows)
        self.categories = distinct_categories(self.listings)
        self.locations = distinct_locations(self.listings)
        self.source = source

    async def close(self) -> None:
        await self.client.close()
