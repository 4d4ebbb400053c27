"""Test fixtures for SnapTreeLib consumers.

These fixtures provide an in-memory ChildLister and builders for synthetic
snapshot trees, so traversal behaviour can be verified without a server.

Example:
    lister = InMemoryChildLister.from_children(three_level_tree())
    result = ContainerTraverser(lister).traverse("snap-1")
    assert lister.expanded_keys(containers_only=True) == [0, 1, 2, ...]
"""

import threading
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from ..config import ROOT_NODE_KEY
from ..core.adapter import ChildLister
from ..core.node import NodeKey, SnapshotHandle, SnapshotNode


CONTAINER_KIND = "organizationalUnit"
LEAF_KIND = "user"


@dataclass(frozen=True)
class ListingCall:
    """One recorded ``list_children`` invocation."""

    snapshot_id: str
    node_key: NodeKey
    containers_only: bool


class InMemoryChildLister(ChildLister):
    """ChildLister answering from a parent -> children mapping.

    Every call is recorded in ``calls`` (thread-safe, so parallel traversal
    can be inspected too). ``failures`` maps a node key to an exception
    raised whenever that key is listed.

    Attributes:
        children: Parent key -> child nodes, in server order
        calls: Recorded listing calls, in call order
        honor_containers_only: When False, containers-only calls return
            every child, like a server that ignores the flag
    """

    def __init__(self,
                 children: Mapping[NodeKey, Sequence[SnapshotNode]],
                 snapshot_id: Optional[str] = None,
                 failures: Optional[Mapping[NodeKey, Exception]] = None,
                 honor_containers_only: bool = True):
        self.children: Dict[NodeKey, List[SnapshotNode]] = {
            key: list(nodes) for key, nodes in children.items()
        }
        self.snapshot_id = snapshot_id
        self.failures = dict(failures or {})
        self.honor_containers_only = honor_containers_only
        self.calls: List[ListingCall] = []
        self._lock = threading.Lock()

    @classmethod
    def from_children(cls, children: Mapping[NodeKey, Sequence[SnapshotNode]],
                      **kwargs) -> 'InMemoryChildLister':
        return cls(children, **kwargs)

    def list_children(self,
                      snapshot: SnapshotHandle,
                      node_key: NodeKey,
                      containers_only: bool) -> List[SnapshotNode]:
        with self._lock:
            self.calls.append(ListingCall(snapshot.snapshot_id, node_key, containers_only))
        if self.snapshot_id is not None and snapshot.snapshot_id != self.snapshot_id:
            raise KeyError(f"Unknown snapshot {snapshot.snapshot_id!r}")
        if node_key in self.failures:
            raise self.failures[node_key]

        nodes = self.children.get(node_key, [])
        if containers_only and self.honor_containers_only:
            nodes = [node for node in nodes if node.is_container]
        nodes = self.filter_sentinel(nodes)
        if not nodes:
            self.report_empty(snapshot, node_key, containers_only)
        return nodes

    def expanded_keys(self, containers_only: Optional[bool] = None) -> List[NodeKey]:
        """Keys listed so far, optionally restricted to one query shape."""
        return [call.node_key for call in self.calls
                if containers_only is None or call.containers_only == containers_only]


def container(key: NodeKey, name: Optional[str] = None) -> SnapshotNode:
    """Build a container node."""
    name = name or f"OU-{key}"
    return SnapshotNode(key=key, display_name=name, kind=CONTAINER_KIND,
                        distinguished_name=f"OU={name}")


def leaf(key: NodeKey, name: Optional[str] = None, kind: str = LEAF_KIND) -> SnapshotNode:
    """Build a leaf object node."""
    name = name or f"obj-{key}"
    return SnapshotNode(key=key, display_name=name, description=f"{kind} {name}",
                        kind=kind, distinguished_name=f"CN={name}")


def three_level_tree() -> Dict[NodeKey, List[SnapshotNode]]:
    """Root -> 2 containers -> 3 containers -> 5 leaf objects.

    Containers: 1, 2 (level 1); 11, 12, 21 (level 2).
    Leaves: 101, 102 (in 11), 103 (in 12), 104, 105 (in 21).
    """
    return {
        ROOT_NODE_KEY: [container(1), container(2)],
        1: [container(11), container(12)],
        2: [container(21)],
        11: [leaf(101), leaf(102)],
        12: [leaf(103)],
        21: [leaf(104), leaf(105)],
    }


def chain_tree(levels: int, leaves_per_level: int = 1) -> Dict[NodeKey, List[SnapshotNode]]:
    """A single chain of ``levels`` nested containers.

    Container at depth ``d`` has key ``d``; every container also holds
    ``leaves_per_level`` leaves keyed ``d * 100 + i``.
    """
    tree: Dict[NodeKey, List[SnapshotNode]] = {ROOT_NODE_KEY: [container(1)]}
    for depth in range(1, levels + 1):
        nodes = [leaf(depth * 100 + i) for i in range(1, leaves_per_level + 1)]
        if depth < levels:
            nodes.insert(0, container(depth + 1))
        tree[depth] = nodes
    return tree


def tree_from_edges(edges: Iterable[Tuple[NodeKey, SnapshotNode]]
                    ) -> Dict[NodeKey, List[SnapshotNode]]:
    """Build a parent -> children mapping from (parent_key, child) pairs."""
    tree: Dict[NodeKey, List[SnapshotNode]] = {}
    for parent_key, child in edges:
        tree.setdefault(parent_key, []).append(child)
    return tree
