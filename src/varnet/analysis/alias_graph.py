from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import AbstractSet, Dict, Iterable, List, Mapping

from varnet.analysis.model import (
    Relationship,
    Variable,
    VariableAlias,
    VariableCollection,
)

logger = logging.getLogger(__name__)


@dataclass
class AliasGraph:
    edges: List[Relationship] = field(default_factory=list)
    # source id -> insertion-ordered set of variables aliasing it
    _dependents: Dict[str, Dict[str, None]] = field(default_factory=dict)

    def add(self, edge: Relationship) -> None:
        self.edges.append(edge)
        self._dependents.setdefault(edge.source, {})[edge.target] = None

    def dependents(self, source: str) -> List[str]:
        return list(self._dependents.get(source, {}))


def build_alias_graph(
    variables: Iterable[Variable],
    collections: Mapping[str, VariableCollection],
    selected_ids: AbstractSet[str],
) -> AliasGraph:
    graph = AliasGraph()
    for variable in variables:
        if variable.id not in selected_ids:
            continue
        collection = collections.get(variable.collection_id)
        if collection is None:
            continue
        for mode in collection.modes:
            value = variable.values_by_mode.get(mode.mode_id)
            if not isinstance(value, VariableAlias):
                continue
            if value.id not in selected_ids:
                continue
            graph.add(Relationship(source=value.id, target=variable.id, mode=mode.name))
    logger.debug("alias graph has %d edges", len(graph.edges))
    return graph
