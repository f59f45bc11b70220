"""HTTP clients for the puzzle site.

Provides synchronous and asynchronous clients that wrap :mod:`httpx` with
the session cookie pre-loaded and map every failure to an
:class:`~aocfetch.exceptions.OriginError` subclass.

Classes:
    :class:`OriginClient` -- blocking client backed by :class:`httpx.Client`.
    :class:`AsyncOriginClient` -- non-blocking client backed by :class:`httpx.AsyncClient`.
"""

from aocfetch.client.async_client import AsyncOriginClient
from aocfetch.client.base import session_cookies
from aocfetch.client.sync_client import OriginClient

__all__ = ["AsyncOriginClient", "OriginClient", "session_cookies"]
