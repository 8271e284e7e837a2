from __future__ import annotations

from typing import Iterable, List, Mapping, Optional, Set

from varnet.analysis.alias_graph import AliasGraph
from varnet.analysis.model import VariableRecord


def total_usage(
    var_id: str,
    direct_usage: Mapping[str, int],
    graph: AliasGraph,
    visited: Optional[Set[str]] = None,
) -> int:
    """Direct usage of ``var_id`` plus that of every variable aliasing it.

    Dependents are followed transitively. ``visited`` belongs to a single
    top-level query: a variable already counted in it contributes nothing,
    which keeps diamonds from being counted twice and makes cycles finite.
    """
    if visited is None:
        visited = set()
    total = 0
    stack: List[str] = [var_id]
    while stack:
        current = stack.pop()
        if current in visited:
            continue
        visited.add(current)
        total += direct_usage.get(current, 0)
        stack.extend(reversed(graph.dependents(current)))
    return total


def compute_total_usage(
    records: Iterable[VariableRecord],
    direct_usage: Mapping[str, int],
    graph: AliasGraph,
) -> None:
    for record in records:
        record.total_usage = total_usage(record.id, direct_usage, graph)
