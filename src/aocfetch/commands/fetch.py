"""Fetch command -- print one day's puzzle input.

``aocfetch fetch 3`` resolves the configuration, serves day 3 from the
local cache when it is there, and otherwise downloads it with the session
cookie and caches it. The input is written verbatim to stdout (or to
the global ``--output`` file), so it can be piped straight into a solution.
"""

from __future__ import annotations

from typing import Optional

import typer

from aocfetch.exceptions import AocFetchError
from aocfetch.exit_codes import EXIT_AUTH_FAILURE
from aocfetch.output import debug, error, get_output, info, print_document, success, suggest


def fetch_command(
    day: Optional[str] = typer.Argument(
        None, help="Day to fetch (1-25). Read from AOCFETCH_DAY/SOLUTION or prompted when omitted."
    ),
    session: Optional[str] = typer.Option(
        None, "--session", "-s", help="Session cookie value (else AOCFETCH_SESSION/SESSION_COOKIE)."
    ),
    cache_dir: Optional[str] = typer.Option(
        None, "--cache-dir", "-d", help="Cache directory (else AOCFETCH_CACHE_DIR/LOCAL_FOLDER, default 'inputs')."
    ),
    year: Optional[int] = typer.Option(None, "--year", "-y", help="Event year."),
    base_url: Optional[str] = typer.Option(None, "--base-url", help="Puzzle site base URL."),
    cookie_max_age: Optional[int] = typer.Option(
        None, "--cookie-max-age", min=0, help="Seconds to keep the session cookie in the jar."
    ),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", "-t", min=0.001, help="Deadline in seconds for the download."
    ),
) -> None:
    """Fetch the input for DAY, from the local cache when possible.

    Example::

        aocfetch fetch 3 > day03.txt
        SOLUTION=3 aocfetch fetch --year 2023
    """
    from aocfetch.config import day_from_env, normalize_day, resolve_config
    from aocfetch.fetcher import InputFetcher

    try:
        if day is None:
            day = day_from_env()
            if day is not None:
                info(f"day {day.strip()} set via environment variable")
        if day is None:
            day = typer.prompt("Which day's input do you want (1-25)?")
        key = normalize_day(day)

        config = resolve_config(
            cli_session=session,
            cli_cache_dir=cache_dir,
            cli_year=year,
            cli_base_url=base_url,
            cli_cookie_max_age=cookie_max_age,
            cli_timeout=timeout,
        )
        debug(f"fetching day {key} of {config.origin.year} into {config.cache_dir}")

        with InputFetcher.from_config(config) as fetcher:
            document = fetcher.fetch_input(key)
    except AocFetchError as exc:
        error(str(exc))
        if exc.exit_code == EXIT_AUTH_FAILURE:
            suggest("Log in to the site again and copy a fresh 'session' cookie.")
        raise typer.Exit(code=exc.exit_code) from None

    print_document(document)
    output_file = get_output().output_file
    if output_file:
        success(f"Wrote day {key} input to {output_file}")
