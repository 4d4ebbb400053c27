"""Bounded-depth snapshot traversal for SnapTreeLib.

The service offers no recursive listing, so the engine walks the tree
itself, one level at a time:

1. List the containers under the root sentinel; they form the first frontier.
2. List the containers under every frontier key; the ones not seen before
   form the next frontier. Repeat until a frontier is empty or
   ``max_depth`` container levels have been discovered.
3. List every child of every discovered container and keep the union,
   deduplicated by key.

Only two query shapes are ever issued (containers-only and all-children),
and each level is a natural progress checkpoint for large directories.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from ..config import BrowseConfig, ROOT_NODE_KEY, require_valid
from .adapter import ChildLister
from .node import NodeKey, SnapshotHandle, SnapshotNode, is_root_key


logger = logging.getLogger(__name__)


@dataclass
class LevelStats:
    """Progress of one container-discovery round.

    Attributes:
        depth: Depth of the containers discovered this round (1 = the root's
            direct children)
        expanded: Listing calls issued this round
        discovered: New containers found this round
    """

    depth: int
    expanded: int
    discovered: int


@dataclass
class TraversalResult:
    """Everything one traversal learned about a snapshot.

    Attributes:
        snapshot: The snapshot that was browsed
        containers: Discovered containers keyed by NodeKey, in discovery order
        objects: Final object list, deduplicated, in first-seen order
        levels: One LevelStats per discovery round
    """

    snapshot: SnapshotHandle
    containers: Dict[NodeKey, SnapshotNode] = field(default_factory=dict)
    objects: List[SnapshotNode] = field(default_factory=list)
    levels: List[LevelStats] = field(default_factory=list)

    @property
    def container_keys(self) -> List[NodeKey]:
        return list(self.containers)

    @property
    def depth_reached(self) -> int:
        """Deepest level at which new containers were found."""
        found = [level.depth for level in self.levels if level.discovered]
        return max(found) if found else 0


class ContainerTraverser:
    """Level-synchronous container discovery and object enumeration.

    A key that is already in the container set is never expanded again.
    That keeps the walk finite even if the server reports a node as its own
    descendant, although such a cycle is not detected or reported.

    Any exception raised by the lister aborts the whole traversal; no
    partial result is returned.

    Example:
        >>> traverser = ContainerTraverser(lister)
        >>> result = traverser.traverse(SnapshotHandle("snap-1"))
        >>> len(result.objects)
    """

    def __init__(self,
                 lister: ChildLister,
                 config: Optional[BrowseConfig] = None,
                 on_level: Optional[Callable[[LevelStats], None]] = None):
        """Initialize traverser with a lister.

        Args:
            lister: Source of "list children" answers
            config: Depth bound, parallelism and result options. When
                ``warn_on_empty`` is set it is switched on for ``lister`` too.
            on_level: Called after every discovery round

        Raises:
            ConfigurationError: If ``config`` is invalid
        """
        self.lister = lister
        self.config = config or BrowseConfig()
        self.on_level = on_level
        require_valid(self.config)
        if self.config.warn_on_empty:
            self.lister.warn_on_empty = True

    def traverse(self, snapshot: Union[SnapshotHandle, str]) -> TraversalResult:
        """Discover every container, then enumerate the objects inside them."""
        snapshot = SnapshotHandle.coerce(snapshot)
        containers, levels = self.discover(snapshot)
        objects = self.enumerate_objects(snapshot, containers)
        logger.info(
            "Snapshot %s: %d container(s), %d object(s)",
            snapshot, len(containers), len(objects),
        )
        return TraversalResult(
            snapshot=snapshot,
            containers=containers,
            objects=objects,
            levels=levels,
        )

    def discover(self, snapshot: Union[SnapshotHandle, str]
                 ) -> Tuple[Dict[NodeKey, SnapshotNode], List[LevelStats]]:
        """Breadth-first discovery of container nodes.

        Returns:
            Tuple of (container set keyed by NodeKey, per-level stats)
        """
        snapshot = SnapshotHandle.coerce(snapshot)
        containers: Dict[NodeKey, SnapshotNode] = {}
        levels: List[LevelStats] = []

        frontier: List[NodeKey] = [ROOT_NODE_KEY]
        depth = 0
        while frontier and depth < self.config.max_depth:
            depth += 1
            next_frontier: List[NodeKey] = []
            for children in self._list_level(snapshot, frontier, containers_only=True):
                for node in children:
                    if not self._is_expandable(node) or node.key in containers:
                        continue
                    containers[node.key] = node
                    next_frontier.append(node.key)

            stats = LevelStats(depth=depth, expanded=len(frontier),
                               discovered=len(next_frontier))
            levels.append(stats)
            logger.info(
                "Snapshot %s level %d: expanded %d node(s), found %d new container(s)",
                snapshot, depth, stats.expanded, stats.discovered,
            )
            if self.on_level is not None:
                self.on_level(stats)
            frontier = next_frontier

        if frontier:
            logger.info(
                "Snapshot %s: depth bound %d reached, %d container(s) left unexpanded",
                snapshot, self.config.max_depth, len(frontier),
            )
        return containers, levels

    def enumerate_objects(self,
                          snapshot: Union[SnapshotHandle, str],
                          container_keys: Iterable[NodeKey]) -> List[SnapshotNode]:
        """List all children of every container and merge them.

        Nodes are deduplicated by key, keeping the first occurrence.
        Keyless nodes pass through untouched for the assembler to drop.
        Container nodes are left out unless ``include_containers`` is set.
        """
        snapshot = SnapshotHandle.coerce(snapshot)
        keys = list(container_keys)
        seen = set()
        objects: List[SnapshotNode] = []
        for children in self._list_level(snapshot, keys, containers_only=False):
            for node in children:
                if node.is_root_sentinel:
                    continue
                if node.is_container and not self.config.include_containers:
                    continue
                if node.key is not None:
                    if node.key in seen:
                        continue
                    seen.add(node.key)
                objects.append(node)
        return objects

    def _list_level(self,
                    snapshot: SnapshotHandle,
                    keys: Sequence[NodeKey],
                    containers_only: bool) -> List[List[SnapshotNode]]:
        """Issue one listing call per key, returning results in key order."""
        workers = min(self.config.workers, len(keys))
        if workers <= 1:
            return [self.lister.list_children(snapshot, key, containers_only)
                    for key in keys]

        with ThreadPoolExecutor(max_workers=workers,
                                thread_name_prefix="snaptree-level") as executor:
            futures = [executor.submit(self.lister.list_children,
                                       snapshot, key, containers_only)
                       for key in keys]
            try:
                return [future.result() for future in futures]
            except Exception:
                for future in futures:
                    future.cancel()
                raise

    @staticmethod
    def _is_expandable(node: SnapshotNode) -> bool:
        """Containers-only answers are re-checked; untyped nodes are trusted."""
        if node.key is None or is_root_key(node.key):
            return False
        return node.kind is None or node.is_container
