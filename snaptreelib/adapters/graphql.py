"""GraphQL child lister for SnapTreeLib.

Lists the children of one node of a directory-service snapshot through the
service's snapshot browse query. The query shape is fixed; only the
snapshot, the node key and the containers-only flag vary between calls.
"""

import logging
from typing import List, Optional

from ..core.adapter import ChildLister
from ..core.node import NodeKey, SnapshotHandle, SnapshotNode
from ..transport import PaginatedFetchClient, QueryDescriptor


logger = logging.getLogger(__name__)


_SNAPSHOT_CHILDREN_TEMPLATE = """
query SnapshotChildren($snapshotId: String!, $nodeKey: {key_type}!, $containersOnly: Boolean!,
                       $first: Int, $after: String) {{
  snapshotDirectoryChildren(snapshotFid: $snapshotId, nodeKey: $nodeKey,
                            containersOnly: $containersOnly, first: $first, after: $after) {{
    nodes {{
      key
      displayName
      description
      objectType
      distinguishedName
    }}
    pageInfo {{
      hasNextPage
      endCursor
    }}
  }}
}}
""".strip()


def snapshot_children_query(key_type: str = "Long") -> QueryDescriptor:
    """Build the browse query with ``$nodeKey`` declared as ``key_type``.

    The default ``Long`` suits services with integer node keys; pass
    ``"String"`` (or ``"ID"``) for services keyed by opaque tokens.
    """
    return QueryDescriptor(
        name="SnapshotChildren",
        query=_SNAPSHOT_CHILDREN_TEMPLATE.format(key_type=key_type),
        connection_path=("snapshotDirectoryChildren",),
    )


SNAPSHOT_CHILDREN_QUERY = snapshot_children_query()


class GraphQLChildLister(ChildLister):
    """ChildLister backed by a PaginatedFetchClient.

    Each ``list_children`` call is exactly one ``fetch_all`` of the browse
    query, so a single failed page aborts the listing.
    """

    def __init__(self,
                 fetch_client: PaginatedFetchClient,
                 descriptor: QueryDescriptor = SNAPSHOT_CHILDREN_QUERY,
                 page_size: Optional[int] = None,
                 warn_on_empty: bool = False):
        """Initialize the lister.

        Args:
            fetch_client: Client used for every listing call
            descriptor: Browse query; override for services exposing the
                same connection under another name, or built with
                ``snapshot_children_query("String")`` for opaque string keys
            page_size: Page size for listing calls (defaults to the client's)
            warn_on_empty: Emit EmptyResultWarning for empty listings
        """
        self.fetch_client = fetch_client
        self.descriptor = descriptor
        self.page_size = page_size
        self.warn_on_empty = warn_on_empty

    def build_variables(self, snapshot: SnapshotHandle, node_key: NodeKey,
                        containers_only: bool) -> dict:
        return {
            "snapshotId": snapshot.snapshot_id,
            "nodeKey": node_key,
            "containersOnly": containers_only,
        }

    def list_children(self,
                      snapshot: SnapshotHandle,
                      node_key: NodeKey,
                      containers_only: bool) -> List[SnapshotNode]:
        raw_nodes = self.fetch_client.fetch_all(
            self.descriptor,
            self.build_variables(snapshot, node_key, containers_only),
            page_size=self.page_size,
        )
        nodes = self.filter_sentinel(SnapshotNode.from_payload(raw) for raw in raw_nodes)
        if not nodes:
            self.report_empty(snapshot, node_key, containers_only)
        return nodes
