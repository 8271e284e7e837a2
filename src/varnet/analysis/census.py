from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Iterable

from varnet.analysis.model import RECOGNIZED_TYPES, Variable

if TYPE_CHECKING:
    from varnet.provider import DocumentProvider


def count_variable_types(variables: Iterable[Variable]) -> Dict[str, int]:
    counts = {type_name: 0 for type_name in RECOGNIZED_TYPES}
    for variable in variables:
        if variable.resolved_type in counts:
            counts[variable.resolved_type] += 1
    return counts


def variable_type_counts(provider: DocumentProvider) -> Dict[str, int]:
    return count_variable_types(provider.get_local_variables())
