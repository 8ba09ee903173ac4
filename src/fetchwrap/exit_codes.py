"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific failure category and is referenced by the
corresponding :class:`~fetchwrap.exceptions.FetchwrapError` subclass.
Shell scripts wrapping ``fetchwrap request`` can inspect the exit code to
tell a 404 from a timeout without parsing stderr.

Example::

    $ fetchwrap request https://api.example.com/missing
    $ echo $?
    4   # EXIT_NOT_FOUND -- the server answered 404
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or malformed values."""

EXIT_AUTH_FAILURE = 3
"""The server rejected the request with HTTP 401 or 403."""

EXIT_NOT_FOUND = 4
"""The requested resource was not found (HTTP 404)."""

EXIT_SERVER_ERROR = 5
"""The remote server returned an HTTP 5xx error."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (DNS failure, connection refused, abort)."""

EXIT_TIMEOUT = 7
"""The request did not settle before the configured timeout."""

EXIT_HTTP_ERROR = 8
"""The server returned a non-2xx status not covered by a more specific code."""
