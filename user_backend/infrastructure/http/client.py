from __future__ import annotations

from typing import Optional

import httpx

_client: Optional[httpx.AsyncClient] = None

DEFAULT_TIMEOUT_SECONDS = 10.0


async def open_http_client(timeout: float = DEFAULT_TIMEOUT_SECONDS) -> httpx.AsyncClient:
    """Create the single AsyncClient shared by the gateway and email adapters."""
    global _client
    if _client is None:
        _client = httpx.AsyncClient(
            timeout=timeout,
            headers={"Accept": "application/json"},
        )
    return _client


def get_http_client() -> httpx.AsyncClient:
    """Return the shared client. Must have been opened at startup."""
    if _client is None:
        raise RuntimeError(
            "HTTP client not opened yet. Call open_http_client() at startup."
        )
    return _client


async def close_http_client() -> None:
    """Close and drop the shared client."""
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None


async def post_envelope(
    client: httpx.AsyncClient, url: str, body: dict
) -> tuple[dict | None, str | None]:
    """
    POST ``body`` as JSON to a collaborator speaking the
    ``{error, error_msg, data}`` envelope.

    Returns (envelope, None) when the collaborator answered 2xx with a JSON
    object, else (None, reason). The caller decides what a non-zero
    ``error`` means.
    """
    try:
        resp = await client.post(url, json=body)
    except httpx.HTTPError as e:
        return None, f"HTTP error: {e!r}"
    if not (200 <= resp.status_code < 300):
        return None, f"responded {resp.status_code}: {resp.text[:200]}"
    try:
        envelope = resp.json()
    except ValueError:
        return None, f"non-JSON body: {resp.text[:200]}"
    if not isinstance(envelope, dict):
        return None, "envelope is not a JSON object"
    return envelope, None
