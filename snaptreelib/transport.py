"""Paginated GraphQL fetch client for SnapTreeLib.

Every report issued against the service follows the same shape: POST a
query with its variables, read one page of a connection, and repeat with
the page's ``endCursor`` until the server says there is nothing more. This
module owns that loop and nothing else; it does not retry, cache or
interpret the nodes it returns.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import httpx

from .config import ClientConfig, require_valid
from .errors import ProtocolError, TransportError


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QueryDescriptor:
    """A paginated GraphQL operation.

    Attributes:
        name: Operation name, used in log and error messages
        query: GraphQL document. It must accept ``$first`` and ``$after``.
        connection_path: Keys leading from ``data`` to the connection object
            holding ``nodes`` (or ``edges``) and ``pageInfo``
    """

    name: str
    query: str
    connection_path: Tuple[str, ...]


@dataclass
class Page:
    """One page of a connection."""

    nodes: List[Any] = field(default_factory=list)
    next_cursor: Optional[str] = None
    has_more: bool = False


class PaginatedFetchClient:
    """Issues paginated GraphQL queries over httpx.

    The client owns the httpx.Client it creates and closes it on ``close``
    or when leaving a ``with`` block. A caller-supplied ``http_client`` is
    used as-is and left open.

    Example:
        >>> with PaginatedFetchClient(ClientConfig.from_env()) as client:
        ...     nodes = client.fetch_all(descriptor, {"snapshotId": "abc"})
    """

    def __init__(self, config: ClientConfig,
                 http_client: Optional[httpx.Client] = None):
        """Initialize the fetch client.

        Args:
            config: Endpoint, token, timeout and paging settings
            http_client: Pre-built client (tests pass one wrapping
                httpx.MockTransport)

        Raises:
            ConfigurationError: If ``config`` is invalid
        """
        require_valid(config)
        self.config = config
        self._owns_client = http_client is None
        self._client = http_client

    @property
    def client(self) -> httpx.Client:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.Client(
                timeout=httpx.Timeout(self.config.timeout),
                verify=self.config.verify,
                follow_redirects=True,
            )
        return self._client

    def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._client is not None and self._owns_client:
            self._client.close()
            self._client = None

    def __enter__(self) -> 'PaginatedFetchClient':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def fetch_page(self,
                   descriptor: QueryDescriptor,
                   variables: Mapping[str, Any],
                   cursor: Optional[str] = None,
                   page_size: Optional[int] = None) -> Page:
        """Fetch a single page of ``descriptor``'s connection.

        Args:
            descriptor: The operation to run
            variables: Fixed query variables
            cursor: Continuation token from the previous page, None for the first
            page_size: Overrides ``config.page_size`` for this request

        Returns:
            The page's raw nodes and continuation state

        Raises:
            TransportError: On network failure or HTTP status >= 400
            ProtocolError: If the response is not the expected connection shape
        """
        body = {
            "query": descriptor.query,
            "operationName": descriptor.name,
            "variables": {
                **variables,
                "first": page_size or self.config.page_size,
                "after": cursor,
            },
        }
        payload = self._post(descriptor, body)
        return self._parse_page(descriptor, payload)

    def fetch_all(self,
                  descriptor: QueryDescriptor,
                  variables: Mapping[str, Any],
                  page_size: Optional[int] = None) -> List[Any]:
        """Follow the cursor until the connection is exhausted.

        Returns:
            All page payloads concatenated in server order

        Raises:
            TransportError: If any page request fails; nothing is returned
            ProtocolError: If any page is malformed, the cursor stops
                advancing, or ``config.max_pages`` is exceeded
        """
        nodes: List[Any] = []
        cursor: Optional[str] = None
        pages = 0
        while True:
            pages += 1
            if self.config.max_pages is not None and pages > self.config.max_pages:
                raise ProtocolError(
                    f"{descriptor.name}: pagination exceeded {self.config.max_pages} pages"
                )
            page = self.fetch_page(descriptor, variables, cursor, page_size)
            nodes.extend(page.nodes)
            if not page.has_more or not page.next_cursor:
                break
            if page.next_cursor == cursor:
                raise ProtocolError(
                    f"{descriptor.name}: cursor {cursor!r} did not advance after page {pages}"
                )
            cursor = page.next_cursor

        logger.debug("%s returned %d nodes in %d page(s)", descriptor.name, len(nodes), pages)
        return nodes

    def _post(self, descriptor: QueryDescriptor, body: Dict[str, Any]) -> Any:
        """Send one request and decode its JSON body."""
        try:
            response = self.client.post(
                self.config.endpoint, json=body, headers=self.config.headers()
            )
        except httpx.HTTPError as err:
            raise TransportError(f"{descriptor.name}: request failed: {err}") from err

        if response.status_code >= 400:
            raise TransportError(
                f"{descriptor.name}: HTTP {response.status_code}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except (json.JSONDecodeError, ValueError) as err:
            raise ProtocolError(f"{descriptor.name}: response is not JSON") from err

    @staticmethod
    def _parse_page(descriptor: QueryDescriptor, payload: Any) -> Page:
        """Locate the connection in ``payload`` and read one page from it."""
        if not isinstance(payload, dict):
            raise ProtocolError(f"{descriptor.name}: response is not a JSON object")

        errors = payload.get("errors")
        if errors:
            first = errors[0] if isinstance(errors, list) and errors else {}
            message = first.get("message") if isinstance(first, dict) else None
            raise ProtocolError(
                f"{descriptor.name}: GraphQL returned {len(errors)} error(s). "
                f"First: {message!r}"
            )

        connection = _dig(payload.get("data"), descriptor.connection_path)
        if not isinstance(connection, dict):
            path = ".".join(("data",) + tuple(descriptor.connection_path))
            raise ProtocolError(f"{descriptor.name}: missing connection at {path}")

        if isinstance(connection.get("nodes"), list):
            nodes = list(connection["nodes"])
        elif isinstance(connection.get("edges"), list):
            nodes = [edge.get("node") if isinstance(edge, dict) else edge
                     for edge in connection["edges"]]
        else:
            raise ProtocolError(f"{descriptor.name}: connection has no nodes or edges")

        page_info = connection.get("pageInfo")
        if not isinstance(page_info, dict) or "hasNextPage" not in page_info:
            raise ProtocolError(f"{descriptor.name}: connection has no pageInfo")

        return Page(
            nodes=nodes,
            next_cursor=page_info.get("endCursor"),
            has_more=bool(page_info["hasNextPage"]),
        )


def _dig(value: Any, path: Sequence[str]) -> Any:
    for key in path:
        if not isinstance(value, dict):
            return None
        value = value.get(key)
    return value
