"""Asynchronous client for the puzzle site -- mirrors :class:`~aocfetch.client.sync_client.OriginClient`.

:class:`AsyncOriginClient` wraps :class:`httpx.AsyncClient` and offers the
same single-GET :meth:`~AsyncOriginClient.fetch`. Cancelling the task that
awaits ``fetch`` aborts the in-flight request; the
:class:`asyncio.CancelledError` is not converted into an origin error.
"""

from __future__ import annotations

from typing import Optional

import httpx

from aocfetch.client.base import OriginClientBase
from aocfetch.exceptions import OriginTransportError
from aocfetch.models import OriginConfig


class AsyncOriginClient(OriginClientBase):
    """Non-blocking client that retrieves one puzzle input per call.

    Args:
        session: Session cookie value.
        config: Origin settings; defaults to the public puzzle site.
        transport: Optional async httpx transport, mainly for tests.

    Example::

        async with AsyncOriginClient(session) as client:
            text = await client.fetch("3", timeout=10)
    """

    def __init__(
        self,
        session: str,
        config: Optional[OriginConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        super().__init__(session, config)
        self._client = httpx.AsyncClient(transport=transport, **self._client_kwargs())

    async def __aenter__(self) -> AsyncOriginClient:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying :class:`httpx.AsyncClient`."""
        await self._client.aclose()

    async def fetch(self, key: str, timeout: Optional[float] = None) -> str:
        """Retrieve the input for *key*.

        Same contract as :meth:`OriginClient.fetch
        <aocfetch.client.sync_client.OriginClient.fetch>`.
        """
        request = self._prepare(self._client, key, timeout)
        try:
            response = await self._client.send(request, stream=True)
        except httpx.RequestError as exc:
            raise OriginTransportError(f"failed to perform http request: {exc}") from exc

        read_error: Optional[Exception] = None
        try:
            await response.aread()
        except httpx.HTTPError as exc:
            read_error = exc
        finally:
            await response.aclose()

        return self._check_response(response, read_error)
