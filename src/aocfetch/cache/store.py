"""File-per-day storage for fetched puzzle inputs.

Each input lives in its own file directly under the cache directory, named
after its key padded to a fixed width (``"3"`` is stored as ``03``) so that
a directory listing sorts in day order. Files hold the raw input text with
no framing, so they can be opened or edited by hand; deleting one simply
forces a re-fetch.

Writes use a temp-file-then-rename so an interrupted write leaves either the
previous content or nothing. The store has no expiry or eviction: inputs
never change once published.
"""

from __future__ import annotations

import os
import stat
import tempfile
from pathlib import Path
from typing import Any, Optional
from urllib.parse import quote, unquote

from aocfetch.exceptions import (
    CacheLookupError,
    CacheReadError,
    CacheWriteError,
    ConstructionError,
    InvalidKeyError,
)

DEFAULT_KEY_WIDTH = 2

_TMP_PREFIX = "."
_TMP_SUFFIX = ".tmp"


class InputStore:
    """Disk-backed key -> document map with one file per key.

    Args:
        cache_dir: Directory holding the cached inputs. Resolved to an
            absolute path and created (with parents) if missing.
        key_width: Keys shorter than this are left-padded with zeros
            when mapped to a file name.

    Raises:
        ConstructionError: If the directory cannot be created, is not a
            directory, or is not writable.

    Example::

        store = InputStore("inputs")
        store.write("3", "vJrwpWtwJgWr...")
        store.path_for("3")   # .../inputs/03
        store.read("3")
    """

    def __init__(self, cache_dir: str | Path, key_width: int = DEFAULT_KEY_WIDTH) -> None:
        try:
            root = Path(cache_dir).expanduser().resolve()
            root.mkdir(parents=True, exist_ok=True)
        except (OSError, RuntimeError) as exc:
            raise ConstructionError(
                f"failed to ensure cache directory {cache_dir} exists: {exc}"
            ) from exc
        if not root.is_dir():
            raise ConstructionError(f"cache path {root} is not a directory")
        if not os.access(root, os.W_OK | os.X_OK):
            raise ConstructionError(f"cache directory {root} is not writable")

        self._root = root
        self._key_width = key_width

    @property
    def root(self) -> Path:
        """Absolute path of the cache directory."""
        return self._root

    def path_for(self, key: str) -> Path:
        """Return the file a *key* is stored in.

        Raises:
            InvalidKeyError: If the key is empty or maps to ``.``/``..``.
        """
        if not key:
            raise InvalidKeyError("cache key must not be empty")
        name = quote(key.rjust(self._key_width, "0"), safe="")
        if name in (".", ".."):
            raise InvalidKeyError(f"cache key {key!r} cannot be used as a file name")
        return self._root / name

    def exists(self, key: str) -> bool:
        """Report whether an input for *key* is stored.

        A missing file is not an error and returns ``False``.

        Raises:
            CacheLookupError: On any other filesystem error, or when the
                path exists but is not a regular file.
            InvalidKeyError: If the key cannot be mapped to a file name.
        """
        path = self.path_for(key)
        try:
            st = path.stat()
        except FileNotFoundError:
            return False
        except OSError as exc:
            raise CacheLookupError(
                f"unable to check if input for {key!r} exists: {exc}"
            ) from exc
        if not stat.S_ISREG(st.st_mode):
            raise CacheLookupError(f"cached input path {path} is not a regular file")
        return True

    def read(self, key: str) -> str:
        """Return the stored input for *key*.

        Raises:
            CacheReadError: If the file is missing, unreadable, or not
                valid UTF-8.
        """
        path = self.path_for(key)
        try:
            with open(path, encoding="utf-8", newline="") as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as exc:
            raise CacheReadError(f"failed to read input file for {key!r}: {exc}") from exc

    def write(self, key: str, document: str) -> None:
        """Store *document* for *key*, replacing any previous content.

        Raises:
            CacheWriteError: On any I/O failure.
        """
        path = self.path_for(key)
        tmp_path: Optional[str] = None
        try:
            with tempfile.NamedTemporaryFile(
                mode="w",
                dir=self._root,
                prefix=f"{_TMP_PREFIX}{path.name}.",
                suffix=_TMP_SUFFIX,
                delete=False,
                encoding="utf-8",
                newline="",
            ) as fd:
                tmp_path = fd.name
                fd.write(document)
                fd.flush()
                os.fsync(fd.fileno())
            os.replace(tmp_path, path)
        except OSError as exc:
            if tmp_path is not None:
                try:
                    os.unlink(tmp_path)
                except OSError:
                    pass
            raise CacheWriteError(f"failed to write input file for {key!r}: {exc}") from exc

    def entries(self) -> list[tuple[str, Path, int]]:
        """Return ``(key, path, size)`` for every stored file, sorted by key.

        Paths and sizes come from the directory listing itself, so files
        placed by hand under names :meth:`path_for` would not produce
        (``7`` rather than ``07``) are still reported. Temp files from
        interrupted writes are skipped, as are files removed while the
        directory is being listed.
        """
        found = []
        for entry in self._root.iterdir():
            if entry.name.startswith(_TMP_PREFIX):
                continue
            try:
                st = entry.stat()
            except OSError:
                continue
            if not stat.S_ISREG(st.st_mode):
                continue
            found.append((unquote(entry.name), entry, st.st_size))
        return sorted(found)

    def keys(self) -> list[str]:
        """Return the stored keys as file names, in sorted order.

        Keys come back in their on-disk form (``"03"``).
        """
        return [key for key, _, _ in self.entries()]

    def stats(self) -> dict[str, Any]:
        """Return store statistics.

        Returns:
            A ``dict`` with ``directory`` (str path), ``size`` (number of
            cached inputs) and ``bytes`` (total size on disk).
        """
        entries = self.entries()
        return {
            "directory": str(self._root),
            "size": len(entries),
            "bytes": sum(size for _, _, size in entries),
        }
