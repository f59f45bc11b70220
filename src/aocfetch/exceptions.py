"""Exception hierarchy for aocfetch.

All exceptions inherit from :class:`AocFetchError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`aocfetch.exit_codes`.
The top-level error handler in :func:`aocfetch.app.main` catches
``AocFetchError`` and exits with the appropriate code.

Subclass hierarchy::

    AocFetchError (exit 1)
    +-- InvalidUsageError       (exit 2)
    +-- ConfigError             (exit 1)
    +-- ConstructionError       (exit 1)
    +-- CacheError              (exit 1)
    |   +-- InvalidKeyError
    |   +-- CacheLookupError
    |   +-- CacheReadError
    |   +-- CacheWriteError
    +-- OriginError             (exit 1)
    |   +-- RequestBuildError   (exit 2)
    |   +-- OriginTransportError (exit 6)
    |   +-- OriginStatusError   (exit 5)
    |       +-- AuthError       (exit 3)
    |       +-- NotFoundError   (exit 4)
    |       +-- ServerError     (exit 5)
    +-- InputUnavailableError   (exit code of the wrapped origin error)

Cache errors never escape :meth:`~aocfetch.fetcher.InputFetcher.fetch_input`;
they are logged and the fetcher goes to the network instead.
"""

from __future__ import annotations

from aocfetch.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_SERVER_ERROR,
)


class AocFetchError(Exception):
    """Base exception for all aocfetch errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`aocfetch.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(AocFetchError):
    """Raised for invalid CLI arguments, such as a day outside 1-25."""

    exit_code = EXIT_INVALID_USAGE


class ConfigError(AocFetchError):
    """Raised for configuration problems (missing session, invalid project file)."""

    exit_code = EXIT_GENERIC_FAILURE


class ConstructionError(AocFetchError):
    """Raised when a fetcher, store, or client cannot be built.

    Covers an unusable cache directory, a blank session, and an origin URL
    that cannot be parsed.
    """

    exit_code = EXIT_GENERIC_FAILURE


# --- Cache errors ---


class CacheError(AocFetchError):
    """Base class for local input store failures."""


class InvalidKeyError(CacheError):
    """Raised when a key cannot be mapped to a file name (empty, ``.`` or ``..``)."""


class CacheLookupError(CacheError):
    """Raised when checking for a cached input fails for a reason other than absence."""


class CacheReadError(CacheError):
    """Raised when a cached input is missing or unreadable."""


class CacheWriteError(CacheError):
    """Raised when an input cannot be written to the store."""


# --- Origin errors ---


class OriginError(AocFetchError):
    """Base class for failures retrieving an input from the puzzle site."""


class RequestBuildError(OriginError):
    """Raised when the request URL cannot be built from the template and key."""

    exit_code = EXIT_INVALID_USAGE


class OriginTransportError(OriginError):
    """Raised on network-level failures (timeout, DNS resolution, connection refused)."""

    exit_code = EXIT_CONNECTION_ERROR


class OriginStatusError(OriginError):
    """Raised when the origin answers with anything other than HTTP 200.

    Args:
        status_code: The HTTP status code received.
        body: The decoded response body, or a placeholder when the body
            could not be read.
        url: The URL that was requested.
    """

    exit_code = EXIT_SERVER_ERROR

    def __init__(self, status_code: int, body: str, url: str = "") -> None:
        self.status_code = status_code
        self.body = body
        self.url = url
        super().__init__(f"got status {status_code}, wanted 200. body: {body}")


class AuthError(OriginStatusError):
    """Raised on 400 / 401 / 403: the session cookie is missing or expired."""

    exit_code = EXIT_AUTH_FAILURE


class NotFoundError(OriginStatusError):
    """Raised on 404, typically because the day has not unlocked yet."""

    exit_code = EXIT_NOT_FOUND


class ServerError(OriginStatusError):
    """Raised on 5xx and any other unexpected status."""

    exit_code = EXIT_SERVER_ERROR


class InputUnavailableError(AocFetchError):
    """Raised by the fetchers when an input could not be served at all.

    The cache had nothing usable and the origin failed. The origin error is
    kept as ``origin_error`` (and as ``__cause__``) and its exit code is
    reused so the CLI still distinguishes auth failures from outages.

    Args:
        key: The key that was requested.
        origin_error: The error raised by the origin client.
    """

    def __init__(self, key: str, origin_error: OriginError) -> None:
        self.key = key
        self.origin_error = origin_error
        super().__init__(
            f"failed to fetch input {key!r} from origin: {origin_error}",
            exit_code=origin_error.exit_code,
        )


_STATUS_ERRORS: dict[int, type[OriginStatusError]] = {
    400: AuthError,
    401: AuthError,
    403: AuthError,
    404: NotFoundError,
}


def status_error(status_code: int, body: str, url: str = "") -> OriginStatusError:
    """Build the :class:`OriginStatusError` subclass matching *status_code*."""
    cls = _STATUS_ERRORS.get(status_code, ServerError)
    return cls(status_code, body, url)
