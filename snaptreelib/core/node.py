"""Node abstractions for SnapTreeLib.

A snapshot node is intentionally kept simple - it's a data container parsed
from one entry of a "list children" response. It carries no children
pointers: children are discovered only by asking a ChildLister about the
node's key.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Union

from ..config import CONTAINER_KINDS, ROOT_NODE_KEY
from ..errors import ProtocolError


NodeKey = Union[int, str]


class TreeNode(ABC):
    """Abstract base class for nodes in a browsed tree.

    Navigation logic (how to get children) is handled by the ChildLister,
    so the same node type can be listed through different backends.
    """

    @abstractmethod
    def identifier(self) -> Optional[NodeKey]:
        """Return the key identifying this node inside its snapshot.

        The key is unique within one snapshot namespace only; it is never
        compared across snapshots.
        """
        pass

    @abstractmethod
    def is_leaf(self) -> bool:
        """Check if this node cannot hold children of interest."""
        pass

    @abstractmethod
    def metadata(self) -> Dict[str, Any]:
        """Return the descriptive fields of this node."""
        pass

    def __str__(self) -> str:
        return str(self.identifier())

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(key={self.identifier()!r})"

    def __eq__(self, other: object) -> bool:
        """Nodes are equal if they have the same key."""
        if not isinstance(other, TreeNode):
            return NotImplemented
        return self.identifier() == other.identifier()

    def __hash__(self) -> int:
        return hash(self.identifier())


@dataclass(frozen=True, eq=False)
class SnapshotNode(TreeNode):
    """One directory-service entry inside a snapshot.

    Every field except ``key`` is optional on the wire and maps to None when
    absent. A node whose ``key`` is None is malformed and is dropped before
    it reaches a ResultRecord.
    """

    key: Optional[NodeKey]
    display_name: Optional[str] = None
    description: Optional[str] = None
    kind: Optional[str] = None
    distinguished_name: Optional[str] = None

    # Wire field name -> attribute name
    FIELD_MAP = {
        "key": "key",
        "nodeKey": "key",
        "displayName": "display_name",
        "name": "display_name",
        "description": "description",
        "objectType": "kind",
        "kind": "kind",
        "distinguishedName": "distinguished_name",
        "dn": "distinguished_name",
    }

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> 'SnapshotNode':
        """Parse one raw node object from a listing response.

        The first wire name found for a field wins; unknown wire fields are
        ignored.

        Raises:
            ProtocolError: If the payload is not a JSON object, its key is not
                an integer or string, or a descriptive field is not a string
        """
        if not isinstance(payload, Mapping):
            raise ProtocolError(
                f"Expected a node object, got {type(payload).__name__}"
            )
        values: Dict[str, Any] = {}
        for wire_name, attr in cls.FIELD_MAP.items():
            if attr not in values and payload.get(wire_name) is not None:
                values[attr] = payload[wire_name]

        key = values.setdefault("key", None)
        # bool is an int subclass but never a valid key
        if key is not None and (isinstance(key, bool) or not isinstance(key, (int, str))):
            raise ProtocolError(f"Node key must be an integer or string, got {key!r}")
        for attr, value in values.items():
            if attr != "key" and not isinstance(value, str):
                raise ProtocolError(
                    f"Node {key!r}: {attr} must be a string, got {type(value).__name__}"
                )
        return cls(**values)

    @property
    def is_container(self) -> bool:
        """True when the type tag names a directory container class."""
        return self.kind is not None and self.kind.lower() in CONTAINER_KINDS

    @property
    def is_root_sentinel(self) -> bool:
        return is_root_key(self.key)

    def identifier(self) -> Optional[NodeKey]:
        return self.key

    def is_leaf(self) -> bool:
        return not self.is_container

    def metadata(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "display_name": self.display_name,
            "description": self.description,
            "kind": self.kind,
            "distinguished_name": self.distinguished_name,
        }


@dataclass(frozen=True)
class SnapshotHandle:
    """Identifies the point-in-time tree being browsed.

    Attributes:
        snapshot_id: Identifier the service knows the snapshot by
        label: Optional human-readable name used in log messages
    """

    snapshot_id: str
    label: Optional[str] = None

    @classmethod
    def coerce(cls, value: Union['SnapshotHandle', str]) -> 'SnapshotHandle':
        """Accept either a handle or a bare snapshot id."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str) and value:
            return cls(snapshot_id=value)
        raise TypeError(f"Expected SnapshotHandle or snapshot id, got {value!r}")

    def __str__(self) -> str:
        if self.label:
            return f"{self.label} ({self.snapshot_id})"
        return self.snapshot_id


def is_root_key(key: Optional[NodeKey]) -> bool:
    """Check if ``key`` is the root sentinel.

    Servers serialize the sentinel either as a number or as its string form,
    so both are recognised.
    """
    if key is None:
        return False
    return key == ROOT_NODE_KEY or str(key) == str(ROOT_NODE_KEY)
