"""SnapTreeLib - Directory snapshot browser for a data-protection GraphQL API.

SnapTreeLib enumerates the containers and objects of a directory-service
snapshot using nothing but a paginated "list children of node X" query, and
flattens what it finds into uniform records for reporting.

Quick start:
━━━━━━━━━━━━━━━━━━━━━━━━━━
    from snaptreelib import ClientConfig, list_domain_objects

    records = list_domain_objects(
        ClientConfig.from_env(), "snapshot-id", {"domain_name": "corp.local"}
    )
━━━━━━━━━━━━━━━━━━━━━━━━━━
"""

__version__ = "0.1.0"

from .config import (
    ClientConfig,
    BrowseConfig,
    ROOT_NODE_KEY,
    DEFAULT_MAX_DEPTH,
    CONTAINER_KINDS,
    setup_logging,
)
from .errors import (
    SnapTreeError,
    TransportError,
    ProtocolError,
    ConfigurationError,
    EmptyResultWarning,
)
from .core import (
    TreeNode,
    SnapshotNode,
    SnapshotHandle,
    ChildLister,
    ContainerTraverser,
    TraversalResult,
    LevelStats,
    DomainContext,
    ResultRecord,
    RecordAssembler,
    assemble_records,
)
from .transport import PaginatedFetchClient, QueryDescriptor, Page
from .adapters import GraphQLChildLister, SNAPSHOT_CHILDREN_QUERY, snapshot_children_query
from .api import browse_snapshot_objects, discover_containers, list_domain_objects

__all__ = [
    "__version__",
    # Config
    'ClientConfig',
    'BrowseConfig',
    'ROOT_NODE_KEY',
    'DEFAULT_MAX_DEPTH',
    'CONTAINER_KINDS',
    'setup_logging',
    # Errors
    'SnapTreeError',
    'TransportError',
    'ProtocolError',
    'ConfigurationError',
    'EmptyResultWarning',
    # Core
    'TreeNode',
    'SnapshotNode',
    'SnapshotHandle',
    'ChildLister',
    'ContainerTraverser',
    'TraversalResult',
    'LevelStats',
    'DomainContext',
    'ResultRecord',
    'RecordAssembler',
    'assemble_records',
    # Transport
    'PaginatedFetchClient',
    'QueryDescriptor',
    'Page',
    'GraphQLChildLister',
    'SNAPSHOT_CHILDREN_QUERY',
    'snapshot_children_query',
    # API
    'browse_snapshot_objects',
    'discover_containers',
    'list_domain_objects',
]
