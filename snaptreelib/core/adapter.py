"""ChildLister abstraction for SnapTreeLib.

The ChildLister provides the only navigation primitive the remote service
offers: "list the children of node X in snapshot S". It is node-scoped and
non-recursive; the traversal engine builds the whole tree walk on top of it.
"""

import logging
import warnings
from abc import ABC, abstractmethod
from typing import Iterable, List

from ..errors import EmptyResultWarning
from .node import NodeKey, SnapshotHandle, SnapshotNode


logger = logging.getLogger(__name__)


class ChildLister(ABC):
    """Abstract lister of the direct children of one snapshot node.

    Implementations must strip the root sentinel from what they return
    (use ``filter_sentinel``) and must let transport and protocol errors
    propagate unchanged.
    """

    # Emit EmptyResultWarning for listings with no children
    warn_on_empty: bool = False

    @abstractmethod
    def list_children(self,
                      snapshot: SnapshotHandle,
                      node_key: NodeKey,
                      containers_only: bool) -> List[SnapshotNode]:
        """List the direct children of ``node_key``.

        Args:
            snapshot: Snapshot whose namespace ``node_key`` belongs to
            node_key: Key of the node to expand (ROOT_NODE_KEY for the top)
            containers_only: Ask the server for container-typed children only.
                The server is not trusted to enforce this perfectly.

        Returns:
            Child nodes in server order, root sentinel removed

        Raises:
            TransportError: If a page request fails
            ProtocolError: If a response lacks the expected shape
        """
        pass

    @staticmethod
    def filter_sentinel(nodes: Iterable[SnapshotNode]) -> List[SnapshotNode]:
        """Drop the root placeholder, which is structure, not an object."""
        return [node for node in nodes if not node.is_root_sentinel]

    def report_empty(self, snapshot: SnapshotHandle, node_key: NodeKey,
                     containers_only: bool) -> None:
        """Record that a listing legitimately came back empty."""
        logger.debug(
            "No %s under node %s in snapshot %s",
            "containers" if containers_only else "children", node_key, snapshot,
        )
        if self.warn_on_empty:
            warnings.warn(
                f"Node {node_key} in snapshot {snapshot.snapshot_id} has no children",
                EmptyResultWarning,
                stacklevel=3,
            )
