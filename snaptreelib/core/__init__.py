"""Core building blocks: nodes, the listing primitive, traversal and assembly."""

from .node import TreeNode, SnapshotNode, SnapshotHandle, NodeKey, is_root_key
from .adapter import ChildLister
from .traverser import ContainerTraverser, TraversalResult, LevelStats
from .collector import DomainContext, ResultRecord, RecordAssembler, assemble_records

__all__ = [
    'TreeNode',
    'SnapshotNode',
    'SnapshotHandle',
    'NodeKey',
    'is_root_key',
    'ChildLister',
    'ContainerTraverser',
    'TraversalResult',
    'LevelStats',
    'DomainContext',
    'ResultRecord',
    'RecordAssembler',
    'assemble_records',
]
