"""Spreadsheet web-app backend client."""

from dataclasses import dataclass

import httpx

from habit_tracker.adapters.http import bearer_headers, decode_json, send
from habit_tracker.domain.dates import normalize_date_key
from habit_tracker.domain.errors import NetworkError, ParseError
from habit_tracker.domain.records import DayRecord
from habit_tracker.services.sources import RecordBackend


@dataclass
class HttpxSpreadsheetBackend(RecordBackend):
    """Backend that talks to a spreadsheet script deployed as a web app."""

    endpoint: str
    http_client: httpx.AsyncClient
    requires_credential: bool = False

    @classmethod
    def create(cls, endpoint: str) -> "HttpxSpreadsheetBackend":
        """Create a client with a managed httpx session."""
        # Script web apps answer through a redirect to a content host.
        return cls(
            endpoint=endpoint,
            http_client=httpx.AsyncClient(follow_redirects=True),
        )

    async def fetch_all(self, credential: str | None) -> dict[str, DayRecord]:
        """Return every row keyed by normalized date."""
        response = await send(
            self.http_client,
            "GET",
            self.endpoint,
            params={"action": "getAll"},
            headers=bearer_headers(credential),
            timeout=15,
        )
        data = _unwrap(decode_json(response))
        return _records_from_data(data)

    async def fetch_record(
        self, date_key: str, credential: str | None = None
    ) -> DayRecord | None:
        """Return a single day's row, if present."""
        response = await send(
            self.http_client,
            "GET",
            self.endpoint,
            params={"action": "get", "date": date_key},
            headers=bearer_headers(credential),
            timeout=15,
        )
        data = _unwrap(decode_json(response))
        if data is None:
            return None
        if not isinstance(data, dict):
            raise ParseError("Expected a row object")
        return _record_from_row(data, fallback_date=date_key)

    async def save_record(self, record: DayRecord, credential: str | None) -> None:
        """Upsert a row; the script assigns ``updatedAt`` itself."""
        response = await send(
            self.http_client,
            "POST",
            self.endpoint,
            json={
                "date": record.date,
                "title": record.title,
                "level": record.level,
                "content": record.content,
            },
            headers=bearer_headers(credential),
            timeout=15,
        )
        _unwrap(decode_json(response))

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


def _unwrap(payload: object) -> object:
    if not isinstance(payload, dict) or "success" not in payload:
        raise ParseError("Missing response envelope")
    if not payload.get("success"):
        raise NetworkError(str(payload.get("error") or "Spreadsheet request failed"))
    return payload.get("data")


def _records_from_data(data: object) -> dict[str, DayRecord]:
    if data is None:
        return {}
    records: dict[str, DayRecord] = {}
    if isinstance(data, dict):
        for raw_date, row in data.items():
            if not isinstance(row, dict):
                raise ParseError(f"Row for {raw_date} is not an object")
            record = _record_from_row(row, fallback_date=raw_date)
            records[record.date] = record
        return records
    if isinstance(data, list):
        for row in data:
            if not isinstance(row, dict):
                raise ParseError("Row is not an object")
            record = _record_from_row(row)
            records[record.date] = record
        return records
    raise ParseError("Unexpected data shape")


def _record_from_row(row: dict[str, object], fallback_date: object = None) -> DayRecord:
    try:
        date_key = normalize_date_key(row.get("date") or fallback_date)
        return DayRecord.from_payload(date_key, row)
    except (TypeError, ValueError) as exc:
        raise ParseError(f"Malformed row: {row!r}") from exc
