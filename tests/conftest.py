"""Shared test fixtures for aocfetch.

Provides reusable fixtures for isolating configuration from the real
environment, managing output state, faking the puzzle site with
:class:`httpx.MockTransport`, and running CLI commands. These fixtures are
automatically discovered by pytest and available to all test modules
without explicit imports.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional

import httpx
import pytest

from aocfetch.output import OutputFormat, OutputManager, reset_output, set_output


SESSION = "53616c7465645f5f-test-session"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time. When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale.
    Resetting forces a fresh manager to be created on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration from the developer's shell.

    Clears every environment variable aocfetch reads and changes the
    working directory to tmp_path so no real ``aocfetch.json`` or
    ``inputs/`` folder is picked up.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    for var in [
        "AOCFETCH_SESSION",
        "SESSION_COOKIE",
        "AOCFETCH_CACHE_DIR",
        "LOCAL_FOLDER",
        "AOCFETCH_DAY",
        "SOLUTION",
        "AOCFETCH_YEAR",
        "AOCFETCH_BASE_URL",
        "TRACE",
    ]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a PLAIN-format, quiet OutputManager for tests that don't care about output."""
    output = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def plain_output() -> OutputManager:
    """Install a PLAIN, colourless, verbose OutputManager so diagnostics can be asserted."""
    output = OutputManager(format=OutputFormat.PLAIN, no_color=True, verbose=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# Fake origin
# ---------------------------------------------------------------------------


@pytest.fixture
def session() -> str:
    """The session cookie value the fake origin accepts."""
    return SESSION


class FakeOrigin:
    """Records requests and answers them with a configurable handler."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.inputs: dict[str, str] = {}
        self.handler: Optional[Callable[[httpx.Request], httpx.Response]] = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.handler is not None:
            return self.handler(request)
        if request.headers.get("cookie") != f"session={SESSION}":
            return httpx.Response(
                400, text="Puzzle inputs differ by user.  Please log in to get your puzzle input.\n"
            )
        day = request.url.path.split("/")[3]
        if day not in self.inputs:
            return httpx.Response(
                404, text="Please don't repeatedly request this endpoint before it unlocks!\n"
            )
        return httpx.Response(200, text=self.inputs[day])

    @property
    def calls(self) -> int:
        return len(self.requests)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def fake_origin() -> FakeOrigin:
    """A fake puzzle site serving ``fake_origin.inputs`` to the test session."""
    return FakeOrigin()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
