"""Shared httpx helpers that map transport failures onto tracker errors."""

from typing import Any

import httpx

from habit_tracker.domain.errors import NetworkError, ParseError


def bearer_headers(credential: str | None) -> dict[str, str]:
    """Return an Authorization header when a credential is present."""
    if not credential:
        return {}
    return {"Authorization": f"Bearer {credential}"}


async def send(
    http_client: httpx.AsyncClient, method: str, url: str, **kwargs: Any
) -> httpx.Response:
    """Send a request and raise NetworkError for transport or status failures."""
    try:
        response = await http_client.request(method, url, **kwargs)
        response.raise_for_status()
    except httpx.HTTPError as exc:
        raise NetworkError(f"{method} {url} failed: {exc}") from exc
    return response


def decode_json(response: httpx.Response) -> object:
    """Decode a JSON body, raising ParseError on malformed content."""
    try:
        return response.json()
    except ValueError as exc:
        raise ParseError(f"Malformed JSON from {response.request.url}") from exc
