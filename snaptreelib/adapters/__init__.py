"""Backends implementing the ChildLister primitive."""

from .graphql import GraphQLChildLister, SNAPSHOT_CHILDREN_QUERY, snapshot_children_query

__all__ = [
    'GraphQLChildLister',
    'SNAPSHOT_CHILDREN_QUERY',
    'snapshot_children_query',
]
