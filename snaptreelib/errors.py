"""Error taxonomy for SnapTreeLib.

Every failure raised by the library derives from SnapTreeError, so callers
can catch one type around a whole browse. Nothing here is retried by the
library itself: a failing page aborts the fetch, and a failing fetch aborts
the traversal that issued it.
"""

from typing import Optional


class SnapTreeError(Exception):
    """Base class for all SnapTreeLib errors."""


class TransportError(SnapTreeError):
    """The remote API could not be reached or answered with an HTTP error.

    Attributes:
        status_code: HTTP status of the failed response, or None when the
            request never produced one (connection refused, timeout, ...)
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ProtocolError(SnapTreeError):
    """A well-formed HTTP response did not have the expected shape.

    Raised for non-JSON bodies, GraphQL ``errors`` arrays, and responses
    missing the connection, its node list, or its ``pageInfo`` block.
    """


class ConfigurationError(SnapTreeError, ValueError):
    """Client or browse configuration is incomplete or inconsistent."""


class EmptyResultWarning(UserWarning):
    """A listing call returned no children.

    This is the normal answer for an empty container and is never raised,
    only emitted through ``warnings`` when ``BrowseConfig.warn_on_empty``
    is enabled.
    """
