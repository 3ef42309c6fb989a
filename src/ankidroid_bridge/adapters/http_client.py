"""httpx wrapper.

Why a wrapper:
- Standardizes timeouts, headers and base URL for the companion service.
- Eases testing: tests inject an `httpx.MockTransport` instead of a network.
"""

from __future__ import annotations

import httpx

from ankidroid_bridge.core.config import BridgeSettings


def build_async_client(
    settings: BridgeSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create an `httpx.AsyncClient` pointed at the companion service.

    Why a builder:
    - Centralizes timeouts/headers so every call behaves the same.
    - One place to plug a test transport.
    """

    settings = settings or BridgeSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        base_url=settings.collaborator_url,
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        headers=headers,
        transport=transport,
    )
