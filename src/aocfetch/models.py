"""Pydantic configuration models shared across aocfetch modules.

:class:`OriginConfig` describes where inputs come from and how the session
cookie is sent; :class:`FetcherConfig` bundles it with the session value and
the local cache directory. Both can be built in code, loaded from the
project file ``aocfetch.json``, or assembled by
:func:`aocfetch.config.resolve_config`.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from aocfetch import __version__

DEFAULT_BASE_URL = "https://adventofcode.com"
DEFAULT_URL_TEMPLATE = "/{year}/day/{key}/input"
DEFAULT_CACHE_DIR = "inputs"


class OriginConfig(BaseModel):
    """Where puzzle inputs are fetched from and how the session is presented.

    Example::

        OriginConfig(year=2023, cookie_max_age=3600, timeout=10)
    """

    base_url: str = Field(
        default=DEFAULT_BASE_URL, description="Scheme and host of the puzzle site"
    )
    year: int = Field(default=2022, description="Event year substituted into the URL")
    url_template: str = Field(
        default=DEFAULT_URL_TEMPLATE,
        description="Path template; {year} and {key} are substituted",
    )
    cookie_name: str = Field(default="session", description="Name of the session cookie")
    cookie_max_age: Optional[int] = Field(
        default=None,
        ge=0,
        description="Seconds the session cookie stays in the jar; None keeps it for the process",
    )
    timeout: Optional[float] = Field(
        default=None, gt=0, description="Request timeout in seconds; None disables it"
    )
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
    user_agent: str = Field(default=f"aocfetch/{__version__}")


class FetcherConfig(BaseModel):
    """Everything an :class:`~aocfetch.fetcher.InputFetcher` needs.

    The session value is never included in ``repr`` output.
    """

    session: str = Field(repr=False, description="Session cookie value from a browser login")
    cache_dir: str = Field(
        default=DEFAULT_CACHE_DIR, description="Folder holding one file per cached day"
    )
    origin: OriginConfig = Field(default_factory=OriginConfig)

    @field_validator("session")
    @classmethod
    def _session_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("session cookie must not be empty")
        return value
