from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import AbstractSet, Dict, Iterable, Iterator, List

from varnet.analysis.model import (
    DocumentNode,
    NodeRole,
    NodeUsage,
    UsageBreakdown,
    VariableAlias,
)

logger = logging.getLogger(__name__)

UNKNOWN_NODE_NAME = "Unknown"

_COMPONENT_NODE_TYPES = frozenset({"COMPONENT", "COMPONENT_SET"})
_INSTANCE_NODE_TYPES = frozenset({"INSTANCE"})


@dataclass
class UsageIndex:
    direct_usage: Dict[str, int] = field(default_factory=dict)
    # Insertion-ordered set of node ids per variable.
    node_ids: Dict[str, Dict[str, None]] = field(default_factory=dict)
    breakdown: Dict[str, UsageBreakdown] = field(default_factory=dict)
    node_usage: Dict[str, List[NodeUsage]] = field(default_factory=dict)

    def direct(self, var_id: str) -> int:
        return self.direct_usage.get(var_id, 0)

    def component_ids(self, var_id: str) -> List[str]:
        return list(self.node_ids.get(var_id, {}))

    def breakdown_for(self, var_id: str) -> UsageBreakdown:
        return self.breakdown.get(var_id) or UsageBreakdown()

    def nodes_for(self, var_id: str) -> List[NodeUsage]:
        return list(self.node_usage.get(var_id, []))

    def register(self, var_id: str, node: DocumentNode) -> None:
        self.direct_usage[var_id] = self.direct_usage.get(var_id, 0) + 1
        self.node_ids.setdefault(var_id, {})[node.id] = None
        self.breakdown.setdefault(var_id, UsageBreakdown()).record(classify_node(node))
        self.node_usage.setdefault(var_id, []).append(
            NodeUsage(
                id=node.id,
                type=node.type,
                name=node.name if node.name is not None else UNKNOWN_NODE_NAME,
            )
        )


def classify_node(node: DocumentNode) -> NodeRole:
    if node.type in _COMPONENT_NODE_TYPES:
        return NodeRole.COMPONENT
    if node.type in _INSTANCE_NODE_TYPES:
        return NodeRole.INSTANCE
    return NodeRole.DETACHED


def iter_bindings(node: DocumentNode) -> Iterator[VariableAlias]:
    """Yield every variable reference bound on ``node``, slot by slot.

    A slot holds either a single reference or a sequence of references (for
    example one per gradient stop); empty entries are ignored.
    """
    for slot in node.bound_variables.values():
        if slot is None:
            continue
        if isinstance(slot, VariableAlias):
            yield slot
            continue
        for entry in slot:
            if isinstance(entry, VariableAlias):
                yield entry


def iter_nodes(roots: Iterable[DocumentNode]) -> Iterator[DocumentNode]:
    stack: List[DocumentNode] = list(reversed(list(roots)))
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def scan_document_usage(
    roots: Iterable[DocumentNode],
    selected_ids: AbstractSet[str],
) -> UsageIndex:
    index = UsageIndex()
    visited = 0
    for node in iter_nodes(roots):
        visited += 1
        for binding in iter_bindings(node):
            if binding.id not in selected_ids:
                continue
            index.register(binding.id, node)
    logger.debug(
        "walked %d nodes; %d selected variables bound",
        visited,
        len(index.direct_usage),
    )
    return index
