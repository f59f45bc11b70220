"""Local disk cache for puzzle inputs.

This package provides :class:`InputStore`, a one-file-per-day store used by
:class:`~aocfetch.fetcher.InputFetcher` to avoid re-downloading inputs.
The store location is controlled by ``cache_dir`` in
:class:`~aocfetch.models.FetcherConfig` (``inputs`` by default).
"""

from aocfetch.cache.store import DEFAULT_KEY_WIDTH, InputStore

__all__ = ["DEFAULT_KEY_WIDTH", "InputStore"]
