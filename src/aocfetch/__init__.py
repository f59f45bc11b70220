"""aocfetch -- fetch Advent of Code puzzle inputs with a local disk cache.

Puzzle inputs are tied to the logged-in user, so fetching one needs the
``session`` cookie from a browser login. Every input fetched is written to a
local folder (one file per day) and served from there on later runs, so the
site is only contacted once per day.

Typical use::

    export SESSION_COOKIE=53616c7465645f5f...
    aocfetch fetch 3 > day03.txt

Or from Python::

    from aocfetch import InputFetcher

    with InputFetcher(session, cache_dir="inputs") as fetcher:
        text = fetcher.fetch_input("3")

Modules:
    app: Typer application and CLI entry point.
    fetcher: Cache-first orchestrators (sync and async).
    cache: File-per-day input store.
    client: Authenticated HTTP clients for the puzzle site.
    models: Pydantic configuration models.
    config: Configuration resolution (flags, env vars, project file).
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"

from aocfetch.fetcher import AsyncInputFetcher, InputFetcher  # noqa: E402

__all__ = ["AsyncInputFetcher", "InputFetcher", "__version__"]
