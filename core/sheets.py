import logging
from typing import Any
from urllib.parse import quote

import httpx

from config import settings

log = logging.getLogger(__name__)


def parse_sheet_values(payload: dict[str, Any]) -> list[dict[str, str]]:
    """Turn a Sheets ``values`` response into one dict per row.

    The first row is the header. Blank header cells become ``col_<i>``,
    rows with no cells are skipped and short rows are padded with "".
    """
    values = payload.get("values") if isinstance(payload, dict) else None
    if not isinstance(values, list) or len(values) < 2:
        return []

    headers = [str(h).strip() if h is not None else "" for h in values[0]]
    headers = [h or f"col_{i}" for i, h in enumerate(headers)]

    rows = []
    for row in values[1:]:
        if not isinstance(row, list) or not row:
            continue
        record = {}
        for i, header in enumerate(headers):
            cell = row[i] if i < len(row) else ""
            record[header] = str(cell if cell is not None else "").strip()
        rows.append(record)
    return rows


class SheetsClient:
    def __init__(
        self,
        sheet_id: str | None = None,
        api_key: str | None = None,
        sheet_range: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.sheet_id = sheet_id or settings.sheet_id
        self.api_key = api_key or settings.google_api_key
        self.sheet_range = sheet_range or settings.sheet_range
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def cache_key(self) -> str:
        return f"sheet:{self.sheet_id or ''}:{self.sheet_range}"

    async def _get_client(self) -> httpx.AsyncClient:
        if not self._client:
            self._client = httpx.AsyncClient(
                timeout=settings.sheets_timeout_seconds,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    async def fetch_rows(self) -> list[dict[str, str]]:
        if not self.sheet_id or not self.api_key:
            raise ValueError("Missing sheet_id or google_api_key")

        client = await self._get_client()
        url = f"{settings.sheets_endpoint}/{self.sheet_id}/values/{quote(self.sheet_range)}"
        resp = await client.get(url, params={"key": self.api_key})
        resp.raise_for_status()

        try:
            payload = resp.json()
        except ValueError as e:
            raise ValueError(f"Sheets response is not JSON: {e}") from e

        rows = parse_sheet_values(payload)
        log.info(f"Fetched {len(rows)} rows from sheet {self.sheet_id}")
        return rows
