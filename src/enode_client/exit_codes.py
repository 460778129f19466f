"""Numeric process exit codes for the ``enode`` command line tool.

Each constant maps to one error category and is referenced by the
corresponding :class:`~enode_client.exceptions.EnodeError` subclass, so
shell scripts wrapping the CLI can branch on the failure class without
parsing stderr.

Example::

    $ enode users get 1ab23cd4
    $ echo $?
    4   # EXIT_NOT_FOUND -- no user with this id
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or an invalid request payload."""

EXIT_AUTH_FAILURE = 3
"""The token exchange failed or the API rejected the access token."""

EXIT_NOT_FOUND = 4
"""The requested resource was not found (HTTP 404)."""

EXIT_SERVER_ERROR = 5
"""The API returned a server error or an unmapped status code."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused, bad gateway)."""

EXIT_RESPONSE_ERROR = 7
"""The API answered successfully but the body was empty or could not be parsed."""

EXIT_LIMIT_REACHED = 8
"""The account has reached its vendor connection limit (HTTP 403)."""
