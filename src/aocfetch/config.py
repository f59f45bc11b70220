"""Configuration resolution for the aocfetch CLI.

The library classes take their settings as constructor arguments; this
module is where the CLI gathers those settings from the outside world.

* **Project file** -- an optional ``aocfetch.json`` in the working
  directory, deserialised into :class:`~aocfetch.models.FetcherConfig`
  fields. Typically pins ``year`` and ``cache_dir`` for a solutions repo.
* **Environment** -- ``AOCFETCH_*`` variables, plus the ``SESSION_COOKIE``
  and ``LOCAL_FOLDER`` names older scripts already export.
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  environment variables, the project file and defaults.
* **Day parsing** -- :func:`normalize_day` turns ``"03\\n"`` into ``"3"``.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from aocfetch.exceptions import ConfigError, InvalidUsageError
from aocfetch.models import DEFAULT_CACHE_DIR, FetcherConfig

PROJECT_CONFIG_FILENAME = "aocfetch.json"

SESSION_ENV_VARS = ("AOCFETCH_SESSION", "SESSION_COOKIE")
CACHE_DIR_ENV_VARS = ("AOCFETCH_CACHE_DIR", "LOCAL_FOLDER")
DAY_ENV_VARS = ("AOCFETCH_DAY", "SOLUTION")
YEAR_ENV_VAR = "AOCFETCH_YEAR"
BASE_URL_ENV_VAR = "AOCFETCH_BASE_URL"

FIRST_DAY = 1
LAST_DAY = 25


def _first_env(names: tuple[str, ...]) -> Optional[str]:
    """Return the first non-empty environment variable among *names*."""
    for name in names:
        value = os.environ.get(name, "")
        if value:
            return value
    return None


# --- Project-local config ---


def load_project_config() -> Optional[dict[str, Any]]:
    """Load project-local configuration from ``./aocfetch.json``.

    Returns:
        The parsed JSON object, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file exists but is not a JSON object.
    """
    path = Path.cwd() / PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid project config at {path}: expected a JSON object")
    return data


# --- Precedence resolution ---


def resolve_config(
    cli_session: Optional[str] = None,
    cli_cache_dir: Optional[str] = None,
    cli_year: Optional[int] = None,
    cli_base_url: Optional[str] = None,
    cli_cookie_max_age: Optional[int] = None,
    cli_timeout: Optional[float] = None,
) -> FetcherConfig:
    """Resolve the fetcher configuration with the full precedence chain.

    Precedence (high to low):
        1. CLI flags (``cli_*`` arguments)
        2. Environment variables (``AOCFETCH_SESSION``/``SESSION_COOKIE``,
           ``AOCFETCH_CACHE_DIR``/``LOCAL_FOLDER``, ``AOCFETCH_YEAR``,
           ``AOCFETCH_BASE_URL``)
        3. Project config (``./aocfetch.json``)
        4. Defaults

    Raises:
        ConfigError: If no session is available from any source, or the
            merged values fail validation.
    """
    # 4 + 3. Defaults are filled in by the model; layer the project file.
    data: dict[str, Any] = dict(load_project_config() or {})
    origin: dict[str, Any] = dict(data.get("origin") or {})

    # 2. Environment
    env_session = _first_env(SESSION_ENV_VARS)
    if env_session:
        data["session"] = env_session
    env_cache_dir = _first_env(CACHE_DIR_ENV_VARS)
    if env_cache_dir:
        data["cache_dir"] = env_cache_dir
    env_year = os.environ.get(YEAR_ENV_VAR)
    if env_year:
        origin["year"] = env_year
    env_base_url = os.environ.get(BASE_URL_ENV_VAR)
    if env_base_url:
        origin["base_url"] = env_base_url

    # 1. CLI flags
    if cli_session is not None:
        data["session"] = cli_session
    if cli_cache_dir is not None:
        data["cache_dir"] = cli_cache_dir
    if cli_year is not None:
        origin["year"] = cli_year
    if cli_base_url is not None:
        origin["base_url"] = cli_base_url
    if cli_cookie_max_age is not None:
        origin["cookie_max_age"] = cli_cookie_max_age
    if cli_timeout is not None:
        origin["timeout"] = cli_timeout

    if not str(data.get("session") or "").strip():
        raise ConfigError(
            "session cookie must be set to fetch inputs "
            f"(use --session or set {SESSION_ENV_VARS[0]} / {SESSION_ENV_VARS[1]})"
        )

    data["origin"] = origin
    try:
        return FetcherConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc


def resolve_cache_dir(cli_cache_dir: Optional[str] = None) -> str:
    """Resolve only the cache directory, for commands that never touch the network.

    Same precedence as :func:`resolve_config`, but no session is needed.
    """
    if cli_cache_dir is not None:
        return cli_cache_dir
    env_cache_dir = _first_env(CACHE_DIR_ENV_VARS)
    if env_cache_dir:
        return env_cache_dir
    project = load_project_config() or {}
    return str(project.get("cache_dir") or DEFAULT_CACHE_DIR)


# --- Day selection ---


def normalize_day(raw: str) -> str:
    """Normalise a day as typed by a user into the key used for fetching.

    Surrounding whitespace and leading zeros are removed, so ``"03\\n"``,
    ``" 3"`` and ``"3"`` all become ``"3"``.

    Raises:
        InvalidUsageError: If the result is not a whole number in 1-25.
    """
    day = raw.strip().lstrip("0")
    if not (day.isascii() and day.isdigit()) or not FIRST_DAY <= int(day) <= LAST_DAY:
        raise InvalidUsageError(
            f"day must be a number between {FIRST_DAY} and {LAST_DAY}, got {raw.strip()!r}"
        )
    return day


def day_from_env() -> Optional[str]:
    """Return the day named by ``AOCFETCH_DAY`` or ``SOLUTION``, if either is set."""
    return _first_env(DAY_ENV_VARS)
