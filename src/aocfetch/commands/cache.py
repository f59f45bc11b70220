"""Cache commands -- inspect the local input cache.

Provides the ``aocfetch cache`` sub-command group. None of these commands
need a session cookie or touch the network; they only resolve the cache
directory (``--cache-dir``, ``AOCFETCH_CACHE_DIR``/``LOCAL_FOLDER``, the
project file, or ``inputs``).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

import typer

from aocfetch.exceptions import AocFetchError
from aocfetch.output import error, format_response, info, print_data, print_table

if TYPE_CHECKING:
    from aocfetch.cache import InputStore


cache_app = typer.Typer(no_args_is_help=True)

_CACHE_DIR_HELP = "Cache directory (else AOCFETCH_CACHE_DIR/LOCAL_FOLDER, default 'inputs')."


def _open_store(cache_dir: Optional[str]) -> InputStore:
    """Build the :class:`~aocfetch.cache.InputStore` for the resolved directory.

    Raises:
        typer.Exit: With the error's exit code when the directory cannot
            be used.
    """
    from aocfetch.cache import InputStore
    from aocfetch.config import resolve_cache_dir

    try:
        return InputStore(resolve_cache_dir(cache_dir))
    except AocFetchError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None


@cache_app.command("list")
def cache_list(
    cache_dir: Optional[str] = typer.Option(None, "--cache-dir", "-d", help=_CACHE_DIR_HELP),
) -> None:
    """List cached inputs with their file names and sizes.

    Example::

        aocfetch cache list
        aocfetch --json cache list
    """
    store = _open_store(cache_dir)
    info(f"Cache directory: {store.root}")

    rows = [[key, path.name, str(size)] for key, path, size in store.entries()]

    if not rows:
        info("No inputs cached yet.")
        return
    print_table(["Day", "File", "Bytes"], rows, title="Cached inputs")


@cache_app.command("path")
def cache_path(
    day: str = typer.Argument(help="Day whose cache file to locate."),
    cache_dir: Optional[str] = typer.Option(None, "--cache-dir", "-d", help=_CACHE_DIR_HELP),
) -> None:
    """Print the file a day's input is (or would be) cached in."""
    from aocfetch.config import normalize_day

    store = _open_store(cache_dir)
    try:
        key = normalize_day(day)
        path = store.path_for(key)
        cached = store.exists(key)
    except AocFetchError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    print_data(str(path))
    if not cached:
        info(f"day {key} is not cached yet")


@cache_app.command("show")
def cache_show(
    cache_dir: Optional[str] = typer.Option(None, "--cache-dir", "-d", help=_CACHE_DIR_HELP),
) -> None:
    """Show cache statistics (directory, entry count, total bytes)."""
    store = _open_store(cache_dir)
    format_response(store.stats())
