"""Version-controlled document store client (GitHub contents API)."""

import base64
import binascii
import json
from dataclasses import dataclass

import httpx

from habit_tracker.adapters.http import bearer_headers, decode_json
from habit_tracker.domain.errors import NetworkError, ParseError, StaleVersionError
from habit_tracker.domain.records import (
    DayRecord,
    records_from_mapping,
    records_to_mapping,
)
from habit_tracker.services.sources import RecordBackend

_STALE_STATUS = 409
_NOT_FOUND_STATUS = 404


@dataclass
class HttpxDocumentStoreBackend(RecordBackend):
    """Backend storing the full mapping as one JSON file in a repository."""

    endpoint: str
    path: str
    http_client: httpx.AsyncClient
    branch: str | None = None
    requires_credential: bool = True

    @classmethod
    def create(
        cls, endpoint: str, path: str, branch: str | None = None
    ) -> "HttpxDocumentStoreBackend":
        """Create a client with a managed httpx session."""
        return cls(
            endpoint=endpoint.rstrip("/"),
            path=path.lstrip("/"),
            branch=branch,
            http_client=httpx.AsyncClient(),
        )

    @property
    def contents_url(self) -> str:
        """URL of the stored document."""
        return f"{self.endpoint}/contents/{self.path}"

    async def fetch_document(
        self, credential: str | None, missing_ok: bool = False
    ) -> tuple[dict[str, DayRecord], str | None]:
        """Return the stored records and their version token.

        With ``missing_ok`` a missing document reads as an empty mapping without
        a token; otherwise it is a ``NetworkError``.
        """
        params = {"ref": self.branch} if self.branch else None
        try:
            response = await self.http_client.get(
                self.contents_url,
                params=params,
                headers=self._headers(credential),
                timeout=15,
            )
        except httpx.HTTPError as exc:
            raise NetworkError(f"GET {self.contents_url} failed: {exc}") from exc
        if response.status_code == _NOT_FOUND_STATUS and missing_ok:
            return {}, None
        if response.is_error:
            raise NetworkError(
                f"GET {self.contents_url} returned {response.status_code}"
            )

        payload = decode_json(response)
        if not isinstance(payload, dict):
            raise ParseError("Unexpected contents payload")
        try:
            raw = base64.b64decode(str(payload.get("content") or ""))
            records = records_from_mapping(json.loads(raw or b"{}"))
        except (binascii.Error, TypeError, ValueError) as exc:
            raise ParseError("Stored document is not valid JSON") from exc
        sha = payload.get("sha")
        return records, str(sha) if sha else None

    async def fetch_all(self, credential: str | None) -> dict[str, DayRecord]:
        """Return every stored record."""
        records, _ = await self.fetch_document(credential)
        return records

    async def save_record(self, record: DayRecord, credential: str | None) -> None:
        """Read the document, upsert the record, and write it back.

        The write is conditioned on the version token that was read; a
        concurrent writer turns it into ``StaleVersionError``. There is no
        retry.
        """
        records, sha = await self.fetch_document(credential, missing_ok=True)
        records[record.date] = record
        await self.put_document(
            records, sha, credential, message=f"Update record for {record.date}"
        )

    async def put_document(
        self,
        records: dict[str, DayRecord],
        sha: str | None,
        credential: str | None,
        message: str,
    ) -> None:
        """Write the full mapping, conditioned on ``sha`` when given."""
        encoded = json.dumps(
            records_to_mapping(records), ensure_ascii=False, indent=2, sort_keys=True
        ).encode("utf-8")
        body: dict[str, object] = {
            "message": message,
            "content": base64.b64encode(encoded).decode("ascii"),
        }
        if sha:
            body["sha"] = sha
        if self.branch:
            body["branch"] = self.branch
        try:
            response = await self.http_client.put(
                self.contents_url,
                json=body,
                headers=self._headers(credential),
                timeout=15,
            )
        except httpx.HTTPError as exc:
            raise NetworkError(f"PUT {self.contents_url} failed: {exc}") from exc
        if response.status_code == _STALE_STATUS:
            raise StaleVersionError(f"{self.path} changed since it was read")
        if response.is_error:
            raise NetworkError(
                f"PUT {self.contents_url} returned {response.status_code}"
            )

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    @staticmethod
    def _headers(credential: str | None) -> dict[str, str]:
        return {"Accept": "application/vnd.github+json", **bearer_headers(credential)}
