from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Tuple

from varnet.analysis.aggregate import compute_total_usage
from varnet.analysis.alias_graph import build_alias_graph
from varnet.analysis.census import count_variable_types
from varnet.analysis.materialize import materialize_variables
from varnet.analysis.model import ScanResult, VariableType
from varnet.analysis.usage import scan_document_usage

if TYPE_CHECKING:
    from varnet.provider import DocumentProvider

logger = logging.getLogger(__name__)

DEFAULT_SCAN_TYPES: Tuple[str, ...] = (VariableType.COLOR.value,)


@dataclass(frozen=True)
class ScanOptions:
    types: Tuple[str, ...] = DEFAULT_SCAN_TYPES
    include_hsba: bool = False

    @classmethod
    def for_types(cls, types: Iterable[str], *, include_hsba: bool = False) -> "ScanOptions":
        return cls(types=tuple(str(item) for item in types), include_hsba=include_hsba)


def scan_variables(provider: DocumentProvider, options: ScanOptions | None = None) -> ScanResult:
    """Build the full variable report for the selected types.

    Every map is local to this call; nothing is cached between scans.
    """
    options = options or ScanOptions()
    local_variables = list(provider.get_local_variables())
    collections = {
        collection.id: collection
        for collection in provider.get_local_variable_collections()
    }
    selected_types = set(options.types)
    # Only variables that can be materialized take part in usage and edges.
    filtered = []
    for variable in local_variables:
        if variable.resolved_type not in selected_types:
            continue
        if variable.collection_id not in collections:
            logger.info(
                "skipping %s: collection %s not found",
                variable.name,
                variable.collection_id,
            )
            continue
        filtered.append(variable)
    selected_ids = {variable.id for variable in filtered}
    logger.debug(
        "scanning %d of %d variables (types: %s)",
        len(filtered),
        len(local_variables),
        ", ".join(sorted(selected_types)),
    )

    usage = scan_document_usage(provider.document_roots(), selected_ids)
    graph = build_alias_graph(filtered, collections, selected_ids)
    records = materialize_variables(
        filtered,
        collections,
        provider,
        usage,
        include_hsba=options.include_hsba,
    )
    compute_total_usage(records, usage.direct_usage, graph)
    return ScanResult(
        variables=records,
        relationships=list(graph.edges),
        type_counts=count_variable_types(local_variables),
    )
