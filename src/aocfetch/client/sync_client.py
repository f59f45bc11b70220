"""Synchronous client for the puzzle site.

:class:`OriginClient` wraps :class:`httpx.Client` with the session cookie
already in its jar and exposes a single operation, :meth:`OriginClient.fetch`,
which makes exactly one GET per call. There is no retry: a failure is
reported immediately as one of the :class:`~aocfetch.exceptions.OriginError`
subclasses so the caller can tell an expired session (``AuthError``) from a
network problem (``OriginTransportError``).

See Also:
    :class:`~aocfetch.client.async_client.AsyncOriginClient` for the
    equivalent non-blocking implementation.
"""

from __future__ import annotations

from typing import Optional

import httpx

from aocfetch.client.base import OriginClientBase
from aocfetch.exceptions import OriginTransportError
from aocfetch.models import OriginConfig


class OriginClient(OriginClientBase):
    """Blocking client that retrieves one puzzle input per call.

    The underlying connection pool is opened at construction and released
    by :meth:`close` (or on leaving a ``with`` block).

    Args:
        session: Session cookie value.
        config: Origin settings; defaults to the public puzzle site.
        transport: Optional httpx transport, mainly for tests
            (:class:`httpx.MockTransport`).

    Raises:
        ConstructionError: If the session is blank or the base URL is
            unusable.

    Example::

        with OriginClient(session) as client:
            text = client.fetch("3")
    """

    def __init__(
        self,
        session: str,
        config: Optional[OriginConfig] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        super().__init__(session, config)
        self._client = httpx.Client(transport=transport, **self._client_kwargs())

    def __enter__(self) -> OriginClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying :class:`httpx.Client`."""
        self._client.close()

    def fetch(self, key: str, timeout: Optional[float] = None) -> str:
        """Retrieve the input for *key*.

        Args:
            key: The day to fetch, e.g. ``"3"``.
            timeout: Deadline in seconds for this call, overriding
                :attr:`~aocfetch.models.OriginConfig.timeout`.

        Returns:
            The response body decoded as text.

        Raises:
            RequestBuildError: If the URL or request cannot be built.
            OriginTransportError: On DNS, connection, read, timeout, or
                redirect-loop failures.
            AuthError: On 400 / 401 / 403 (missing or expired session).
            NotFoundError: On 404.
            ServerError: On any other non-200 status.
        """
        request = self._prepare(self._client, key, timeout)
        try:
            response = self._client.send(request, stream=True)
        except httpx.RequestError as exc:
            raise OriginTransportError(f"failed to perform http request: {exc}") from exc

        read_error: Optional[Exception] = None
        try:
            response.read()
        except httpx.HTTPError as exc:
            read_error = exc
        finally:
            response.close()

        return self._check_response(response, read_error)
