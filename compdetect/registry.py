"""
Component registry.

One record per candidate node, keyed by the node's source span.
Confidence only ever goes up, except that a ban (0) is absorbing:
once banned, a node stays banned for the rest of the pass.
"""
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, Mapping, Optional

from .syntax import Node, Span


class Confidence(IntEnum):
    BANNED    = 0
    MAYBE     = 1
    CONFIRMED = 2


@dataclass
class ComponentRecord:
    node:       Node
    confidence: int
    extra:      Dict[str, Any] = field(default_factory=dict)


class Components:
    """Candidate components found during one detection pass."""

    def __init__(self):
        self._list: Dict[Span, ComponentRecord] = {}

    @staticmethod
    def key(node: Node) -> Span:
        return node.span

    def add(self, node: Node, confidence: int) -> ComponentRecord:
        """
        Add a node, or merge confidence into its existing record.

        (0=banned, 1=maybe, 2=yes)
        """
        key = self.key(node)
        record = self._list.get(key)
        if record is None:
            record = ComponentRecord(node=node, confidence=confidence)
            self._list[key] = record
            return record

        if confidence == Confidence.BANNED or record.confidence == Confidence.BANNED:
            record.confidence = Confidence.BANNED
        else:
            record.confidence = max(record.confidence, confidence)
        return record

    def get(self, node: Optional[Node]) -> Optional[ComponentRecord]:
        if node is None:
            return None
        return self._list.get(self.key(node))

    def set(self, node: Optional[Node], props: Mapping[str, Any]) -> None:
        """
        Merge extra properties into the record of `node`, or of its
        nearest ancestor that is registered. No-op if there is none.
        """
        current = node
        while current is not None and self.key(current) not in self._list:
            current = current.parent
        if current is None:
            return
        self._list[self.key(current)].extra.update(props)

    def list(self) -> Dict[Span, ComponentRecord]:
        """Every record, whatever its confidence."""
        return dict(self._list)

    def all(self) -> Dict[Span, ComponentRecord]:
        """Records we are confident about (confidence >= 2)."""
        return {
            key: record
            for key, record in self._list.items()
            if record.confidence >= Confidence.CONFIRMED
        }

    def count(self) -> int:
        return sum(
            1 for record in self._list.values()
            if record.confidence >= Confidence.CONFIRMED
        )

    def __len__(self) -> int:
        return self.count()
