"""Cache-first input fetchers.

:class:`InputFetcher` (and its async twin :class:`AsyncInputFetcher`) is the
entry point most callers want. ``fetch_input(key)``:

1. looks in the local :class:`~aocfetch.cache.InputStore` and returns the
   stored input when there is one -- no network traffic at all;
2. otherwise asks the origin client for it;
3. writes what the origin returned back into the store, then returns it.

The store is purely an optimisation. Any error it raises (lookup, read or
write) is reported as a warning and the fetcher carries on as if the input
were not cached. The only error ``fetch_input`` raises is
:class:`~aocfetch.exceptions.InputUnavailableError`, when the origin fails.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

from aocfetch.cache import InputStore
from aocfetch.client import AsyncOriginClient, OriginClient
from aocfetch.exceptions import CacheError, InputUnavailableError, OriginError
from aocfetch.models import DEFAULT_CACHE_DIR, FetcherConfig, OriginConfig
from aocfetch.output import debug, info, warning


class _CacheFirst:
    """Store-side half of the fetch policy, shared by both fetchers."""

    _store: InputStore

    @property
    def store(self) -> InputStore:
        return self._store

    def _load_cached(self, key: str) -> Optional[str]:
        """Return the cached input for *key*, or ``None`` to go to the network."""
        try:
            exists = self._store.exists(key)
        except CacheError as exc:
            warning(f"failed to check if input {key} is cached, fetching from origin: {exc}")
            return None

        if not exists:
            info(f"input {key} not found in {self._store.root}, fetching from origin")
            return None

        info(f"input {key} found in {self._store.root}, loading from there")
        try:
            return self._store.read(key)
        except CacheError as exc:
            warning(f"failed to load input {key} from cache, fetching from origin: {exc}")
            return None

    def _save(self, key: str, document: str) -> None:
        try:
            self._store.write(key, document)
        except CacheError as exc:
            warning(f"failed to save input {key} to cache: {exc}")
        else:
            info(f"saved input {key} to {self._store.path_for(key)}, future runs will use it")


class InputFetcher(_CacheFirst):
    """Blocking cache-first fetcher.

    Args:
        session: Session cookie value. Ignored when *client* is given.
        cache_dir: Directory for cached inputs (created if missing).
            Ignored when *store* is given.
        origin: Origin settings for the default client.
        store: Pre-built store, replacing the default one.
        client: Pre-built origin client, replacing the default one.

    Raises:
        ConstructionError: If the cache directory is unusable or the
            session/origin cannot be used to build a client.

    Example::

        with InputFetcher(session, cache_dir="inputs") as fetcher:
            text = fetcher.fetch_input("3")
    """

    def __init__(
        self,
        session: str = "",
        cache_dir: Union[str, Path] = DEFAULT_CACHE_DIR,
        origin: Optional[OriginConfig] = None,
        store: Optional[InputStore] = None,
        client: Optional[OriginClient] = None,
    ) -> None:
        self._store = store if store is not None else InputStore(cache_dir)
        self._client = client if client is not None else OriginClient(session, origin)
        debug(f"input fetcher ready, cache directory {self._store.root}")

    @classmethod
    def from_config(cls, config: FetcherConfig) -> InputFetcher:
        """Build a fetcher from a resolved :class:`~aocfetch.models.FetcherConfig`."""
        return cls(config.session, config.cache_dir, config.origin)

    def __enter__(self) -> InputFetcher:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        """Release the origin client's connection pool."""
        self._client.close()

    def fetch_input(self, key: str, timeout: Optional[float] = None) -> str:
        """Return the input for *key*, from the cache when possible.

        Args:
            key: The day to fetch, e.g. ``"3"``.
            timeout: Deadline in seconds for the origin request, if one
                is made.

        Raises:
            InputUnavailableError: If the input was not usable from the
                cache and the origin request failed.
        """
        cached = self._load_cached(key)
        if cached is not None:
            return cached

        try:
            document = self._client.fetch(key, timeout=timeout)
        except OriginError as exc:
            raise InputUnavailableError(key, exc) from exc

        info(f"fetched input {key} from origin")
        self._save(key, document)
        return document


class AsyncInputFetcher(_CacheFirst):
    """Non-blocking cache-first fetcher.

    Same arguments and behaviour as :class:`InputFetcher`, with an
    :class:`~aocfetch.client.AsyncOriginClient`. Store access stays
    synchronous; it is local file I/O on small files.

    Example::

        async with AsyncInputFetcher(session) as fetcher:
            text = await fetcher.fetch_input("3")
    """

    def __init__(
        self,
        session: str = "",
        cache_dir: Union[str, Path] = DEFAULT_CACHE_DIR,
        origin: Optional[OriginConfig] = None,
        store: Optional[InputStore] = None,
        client: Optional[AsyncOriginClient] = None,
    ) -> None:
        self._store = store if store is not None else InputStore(cache_dir)
        self._client = client if client is not None else AsyncOriginClient(session, origin)
        debug(f"async input fetcher ready, cache directory {self._store.root}")

    @classmethod
    def from_config(cls, config: FetcherConfig) -> AsyncInputFetcher:
        """Build a fetcher from a resolved :class:`~aocfetch.models.FetcherConfig`."""
        return cls(config.session, config.cache_dir, config.origin)

    async def __aenter__(self) -> AsyncInputFetcher:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Release the origin client's connection pool."""
        await self._client.aclose()

    async def fetch_input(self, key: str, timeout: Optional[float] = None) -> str:
        """Return the input for *key*, from the cache when possible.

        Raises:
            InputUnavailableError: If the input was not usable from the
                cache and the origin request failed.
        """
        cached = self._load_cached(key)
        if cached is not None:
            return cached

        try:
            document = await self._client.fetch(key, timeout=timeout)
        except OriginError as exc:
            raise InputUnavailableError(key, exc) from exc

        info(f"fetched input {key} from origin")
        self._save(key, document)
        return document
