# Copyright 2026 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#
# SPDX-License-Identifier: Apache-2.0

"""HTTP document fetching for POM files.

The engine only depends on the :class:`DocumentFetcher` protocol; the
httpx-backed :class:`HttpDocumentFetcher` is the production
implementation.  A failed fetch is fatal for the whole run and is never
retried; the operator reruns once the remote is reachable again.

Usage::

    from licensegate.net import HttpDocumentFetcher, http_client

    async with http_client(timeout=30.0) as client:
        fetcher = HttpDocumentFetcher(client)
        text = await fetcher.fetch('https://repo1.maven.org/.../foo-1.0.pom')
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Final, Protocol, runtime_checkable

import httpx

from licensegate.errors import UnreachableManifest
from licensegate.logging import get_logger

log = get_logger('licensegate.net')

#: Default per-request timeout in seconds.
DEFAULT_TIMEOUT: Final[float] = 30.0

#: Default connection pool size.
DEFAULT_POOL_SIZE: Final[int] = 8


@runtime_checkable
class DocumentFetcher(Protocol):
    """Capability to retrieve a remote document as text."""

    async def fetch(self, url: str) -> str:
        """Return the body of *url*.

        Raises:
            UnreachableManifest: On any network or HTTP error.
        """
        ...


@asynccontextmanager
async def http_client(
    *,
    pool_size: int = DEFAULT_POOL_SIZE,
    timeout: float = DEFAULT_TIMEOUT,
    transport: httpx.AsyncBaseTransport | None = None,
) -> AsyncIterator[httpx.AsyncClient]:
    """Yield a configured :class:`httpx.AsyncClient`.

    Args:
        pool_size: Maximum number of open connections.
        timeout: Request timeout in seconds.
        transport: Optional transport override (tests pass an
            :class:`httpx.MockTransport`).
    """
    limits = httpx.Limits(max_connections=pool_size, max_keepalive_connections=pool_size)
    async with httpx.AsyncClient(
        limits=limits,
        timeout=httpx.Timeout(timeout),
        follow_redirects=True,
        transport=transport,
    ) as client:
        yield client


class HttpDocumentFetcher:
    """:class:`DocumentFetcher` backed by an :class:`httpx.AsyncClient`.

    Args:
        client: An open client, usually from :func:`http_client`.
    """

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def fetch(self, url: str) -> str:
        """Fetch *url*, raising :class:`UnreachableManifest` on failure."""
        try:
            resp = await self._client.get(url)
            resp.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            log.debug('fetch_failed', url=url, error=str(exc))
            raise UnreachableManifest(url, '', reason=str(exc) or type(exc).__name__) from exc
        log.debug('fetched', url=url, status=resp.status_code, size=len(resp.text))
        return resp.text


__all__ = [
    'DEFAULT_POOL_SIZE',
    'DEFAULT_TIMEOUT',
    'DocumentFetcher',
    'HttpDocumentFetcher',
    'http_client',
]
