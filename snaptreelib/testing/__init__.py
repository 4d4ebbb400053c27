"""Testing utilities for SnapTreeLib consumers."""

from .fixtures import (
    InMemoryChildLister,
    ListingCall,
    container,
    leaf,
    three_level_tree,
    chain_tree,
    tree_from_edges,
)

__all__ = [
    'InMemoryChildLister',
    'ListingCall',
    'container',
    'leaf',
    'three_level_tree',
    'chain_tree',
    'tree_from_edges',
]
