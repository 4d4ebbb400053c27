"""High-level API for SnapTreeLib.

This module provides simple, functional interfaces for browsing a snapshot.
These functions wrap the object-oriented components (ChildLister,
ContainerTraverser, RecordAssembler) for the common cases.
"""

import logging
from typing import Any, Callable, List, Mapping, Optional, Union

from .adapters.graphql import GraphQLChildLister
from .config import BrowseConfig, ClientConfig
from .core.adapter import ChildLister
from .core.collector import DomainContext, ResultRecord, assemble_records
from .core.node import SnapshotHandle
from .core.traverser import ContainerTraverser, LevelStats, TraversalResult
from .errors import SnapTreeError
from .transport import PaginatedFetchClient


logger = logging.getLogger(__name__)

SnapshotLike = Union[SnapshotHandle, str]
ContextLike = Union[DomainContext, Mapping[str, Any], None]


def browse_snapshot_objects(
    snapshot: SnapshotLike,
    domain_context: ContextLike,
    lister: ChildLister,
    config: Optional[BrowseConfig] = None,
    on_level: Optional[Callable[[LevelStats], None]] = None,
) -> List[ResultRecord]:
    """Enumerate every object in a snapshot as flat records.

    Args:
        snapshot: Snapshot handle or bare snapshot id
        domain_context: Fields copied into every record (domain name/id, ...)
        lister: Source of "list children" answers
        config: Depth bound and result options
        on_level: Progress callback, called once per discovery round

    Returns:
        One ResultRecord per leaf object, in discovery order

    Raises:
        TransportError: If any listing call fails; no partial result is returned
        ProtocolError: If any listing response is malformed

    Example:
        >>> records = browse_snapshot_objects("snap-1", {"domain_name": "corp.local"}, lister)
        >>> rows = [record.as_row() for record in records]
    """
    handle = SnapshotHandle.coerce(snapshot)
    result = ContainerTraverser(lister, config, on_level=on_level).traverse(handle)
    return assemble_records(result.objects, domain_context, handle)


def discover_containers(
    snapshot: SnapshotLike,
    lister: ChildLister,
    config: Optional[BrowseConfig] = None,
) -> TraversalResult:
    """Run only the container discovery phase.

    Useful for inspecting the container set of a snapshot without paying
    for the final enumeration pass.

    Returns:
        TraversalResult with ``containers`` and ``levels`` filled and
        an empty ``objects`` list
    """
    handle = SnapshotHandle.coerce(snapshot)
    containers, levels = ContainerTraverser(lister, config).discover(handle)
    return TraversalResult(snapshot=handle, containers=containers, levels=levels)


def list_domain_objects(
    client_config: ClientConfig,
    snapshot: SnapshotLike,
    domain_context: ContextLike,
    config: Optional[BrowseConfig] = None,
    on_level: Optional[Callable[[LevelStats], None]] = None,
) -> List[ResultRecord]:
    """Browse a snapshot through the remote GraphQL API.

    Builds a PaginatedFetchClient and a GraphQLChildLister from
    ``client_config``, runs the browse and closes the client.

    Raises:
        ConfigurationError: If either config is invalid
        TransportError, ProtocolError: If the browse fails. The failure is
            logged with the snapshot id before being re-raised.
    """
    config = config or BrowseConfig()
    handle = SnapshotHandle.coerce(snapshot)
    with PaginatedFetchClient(client_config) as fetch_client:
        lister = GraphQLChildLister(fetch_client, warn_on_empty=config.warn_on_empty)
        try:
            return browse_snapshot_objects(handle, domain_context, lister, config, on_level)
        except SnapTreeError as err:
            logger.error("Browsing snapshot %s failed: %s", handle, err)
            raise
