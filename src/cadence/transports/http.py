"""HTTP fetcher for :class:`~cadence.resource.AsyncResource`, built on httpx.

Failures are classified into the cadence error taxonomy:

- the request could not be sent or no response arrived -> ``TransportError``
- the server answered with a non-2xx status -> ``UnsuccessfulOutcome``
- the body is not valid JSON -> ``DecodeError``
"""

from __future__ import annotations

import json as _json
from collections.abc import AsyncIterator, Mapping
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any

import httpx

from cadence.config import HTTP_TIMEOUT, HTTP_VERIFY
from cadence.errors import DecodeError, TransportError, UnsuccessfulOutcome


@dataclass(frozen=True)
class HttpRequest:
    """Request descriptor. Two requests with equal fields are the same request.

    Mapping fields may hold plain dicts; the hash is computed from a
    canonical JSON rendering so equal requests hash equal and can key a
    dict or set.
    """

    url: str
    method: str = "GET"
    headers: Mapping[str, str] | None = None
    params: Mapping[str, Any] | None = None
    json: Any = None
    content: bytes | str | None = None

    def __hash__(self) -> int:
        return hash(
            (
                self.url,
                self.method,
                _canonical(self.headers),
                _canonical(self.params),
                _canonical(self.json),
                self.content,
            )
        )


def _canonical(value: Any) -> str:
    if isinstance(value, Mapping):
        value = dict(value)
    return _json.dumps(value, sort_keys=True, default=str)


class HttpFetcher:
    """Perform an :class:`HttpRequest` and decode the JSON response.

    Args:
        base_url: Prefix for relative request URLs.
        timeout: Request timeout in seconds.
        verify: Verify TLS certificates.
        client: Shared ``httpx.AsyncClient``. When omitted, a client is
                opened per request.
    """

    def __init__(
        self,
        *,
        base_url: str = "",
        timeout: float = HTTP_TIMEOUT,
        verify: bool = HTTP_VERIFY,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = (base_url or "").rstrip("/")
        self._timeout = timeout
        self._verify = verify
        self._client = client

    async def __call__(self, request: HttpRequest | str) -> Any:
        if isinstance(request, str):
            request = HttpRequest(request)
        url = self._resolve(request.url)

        try:
            async with self._session() as c:
                r = await c.request(
                    request.method,
                    url,
                    headers=dict(request.headers) if request.headers else None,
                    params=dict(request.params) if request.params else None,
                    json=request.json,
                    content=request.content,
                )
                r.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            raise UnsuccessfulOutcome(f"HTTP error! status: {status}", status=status) from e
        except httpx.HTTPError as e:
            raise TransportError(f"Failed to reach {url}: {e}") from e

        if not r.content:
            return None
        try:
            return r.json()
        except (_json.JSONDecodeError, UnicodeDecodeError) as e:
            raise DecodeError(f"Invalid JSON: {e}", status=r.status_code) from e

    def _resolve(self, url: str) -> str:
        if not self._base_url or "://" in url:
            return url
        return f"{self._base_url}/{url.lstrip('/')}"

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._client is not None:
            yield self._client
            return
        async with httpx.AsyncClient(timeout=self._timeout, verify=self._verify) as c:
            yield c
