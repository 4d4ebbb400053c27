"""Result assembly for SnapTreeLib.

Turns the traversal's object list into the flat records a report consumes.
Assembly is a pure projection: it does no I/O, never mutates its inputs and
keeps the input order.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from .node import NodeKey, SnapshotHandle, SnapshotNode


@dataclass(frozen=True)
class DomainContext:
    """Caller-supplied fields copied verbatim into every record.

    Attributes:
        domain_name: Name of the directory domain the snapshot belongs to
        domain_id: Service identifier of that domain
        extra: Any further report columns the caller wants attached
    """

    domain_name: Optional[str] = None
    domain_id: Optional[str] = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> 'DomainContext':
        """Build a context from a plain dict.

        ``domain_name``/``domainName`` and ``domain_id``/``domainId`` fill the
        named fields; every other entry lands in ``extra``.
        """
        remaining = dict(values)
        name = remaining.pop("domain_name", None)
        name = remaining.pop("domainName", name)
        domain_id = remaining.pop("domain_id", None)
        domain_id = remaining.pop("domainId", domain_id)
        return cls(domain_name=name, domain_id=domain_id, extra=remaining)


@dataclass(frozen=True)
class ResultRecord:
    """Flattened, caller-facing view of one snapshot object."""

    key: NodeKey
    display_name: Optional[str]
    description: Optional[str]
    kind: Optional[str]
    distinguished_name: Optional[str]
    domain_name: Optional[str]
    domain_id: Optional[str]
    snapshot_id: Optional[str] = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    def as_row(self) -> Dict[str, Any]:
        """Return the record as one flat tabular row.

        Context extras come last and never overwrite the record's own columns.
        """
        row = {
            "domain_name": self.domain_name,
            "domain_id": self.domain_id,
            "snapshot_id": self.snapshot_id,
            "key": self.key,
            "display_name": self.display_name,
            "description": self.description,
            "kind": self.kind,
            "distinguished_name": self.distinguished_name,
        }
        for name, value in self.extra.items():
            row.setdefault(name, value)
        return row


class RecordAssembler:
    """Projects SnapshotNodes into ResultRecords for one domain."""

    def __init__(self,
                 context: Union[DomainContext, Mapping[str, Any], None] = None,
                 snapshot: Optional[SnapshotHandle] = None):
        if context is None:
            context = DomainContext()
        elif not isinstance(context, DomainContext):
            context = DomainContext.from_mapping(context)
        self.context = context
        self.snapshot = snapshot
        # Shared read-only view; records must not alias the caller's dict
        self._extra = MappingProxyType(dict(context.extra))

    def project(self, node: SnapshotNode) -> ResultRecord:
        return ResultRecord(
            key=node.key,
            display_name=node.display_name,
            description=node.description,
            kind=node.kind,
            distinguished_name=node.distinguished_name,
            domain_name=self.context.domain_name,
            domain_id=self.context.domain_id,
            snapshot_id=self.snapshot.snapshot_id if self.snapshot else None,
            extra=self._extra,
        )

    def assemble(self, nodes: Iterable[SnapshotNode]) -> List[ResultRecord]:
        """Drop keyless nodes and project the rest, preserving order."""
        return [self.project(node) for node in nodes if node.key is not None]


def assemble_records(nodes: Iterable[SnapshotNode],
                     context: Union[DomainContext, Mapping[str, Any], None] = None,
                     snapshot: Optional[SnapshotHandle] = None) -> List[ResultRecord]:
    """Functional form of ``RecordAssembler(context, snapshot).assemble(nodes)``."""
    return RecordAssembler(context, snapshot).assemble(nodes)
