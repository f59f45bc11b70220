"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~aocfetch.exceptions.AocFetchError` subclass.
Shell wrappers can inspect the exit code to tell an expired session apart
from a network outage without parsing stderr.

Example::

    $ aocfetch fetch 3
    $ echo $?
    3   # EXIT_AUTH_FAILURE -- the session cookie was rejected
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_AUTH_FAILURE = 3
"""The origin rejected the session cookie (missing or expired)."""

EXIT_NOT_FOUND = 4
"""The requested input does not exist yet (HTTP 404, day not unlocked)."""

EXIT_SERVER_ERROR = 5
"""The origin returned an unexpected HTTP status."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""
