"""Client for the widget's static data files."""

from dataclasses import dataclass

import httpx

from habit_tracker.adapters.http import decode_json, send
from habit_tracker.domain.errors import NetworkError
from habit_tracker.services.sources import StaticFiles

_NOT_FOUND_STATUS = 404


@dataclass
class HttpxStaticFiles(StaticFiles):
    """Fetches ``data/index.json`` and per-day markdown files over HTTP."""

    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, base_url: str) -> "HttpxStaticFiles":
        """Create a client with a managed httpx session."""
        return cls(base_url=base_url.rstrip("/"), http_client=httpx.AsyncClient())

    async def fetch_index(self) -> object:
        """Return the decoded bootstrap mapping."""
        response = await send(
            self.http_client, "GET", f"{self.base_url}/data/index.json", timeout=10
        )
        return decode_json(response)

    async def fetch_day_markdown(self, date_key: str) -> str | None:
        """Return the day's markdown; a missing file is not an error."""
        url = f"{self.base_url}/data/{date_key}.md"
        try:
            response = await self.http_client.get(url, timeout=10)
        except httpx.HTTPError as exc:
            raise NetworkError(f"GET {url} failed: {exc}") from exc
        if response.status_code == _NOT_FOUND_STATUS:
            return None
        if response.is_error:
            raise NetworkError(f"GET {url} returned {response.status_code}")
        return response.text

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
