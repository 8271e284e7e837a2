from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable, List, Mapping

from varnet.analysis.formatting import (
    ALIAS_PLACEHOLDER,
    FormattedValue,
    format_hsba,
    format_value,
)
from varnet.analysis.model import (
    Variable,
    VariableAlias,
    VariableCollection,
    VariableRecord,
    VariableType,
    VariableValue,
)
from varnet.analysis.usage import UsageIndex

if TYPE_CHECKING:
    from varnet.provider import DocumentProvider

logger = logging.getLogger(__name__)


def first_mode_value(
    variable: Variable,
    collections: Mapping[str, VariableCollection],
) -> VariableValue:
    """Return the value ``variable`` holds in the first mode of its collection.

    When the owning collection is not known locally (for example a variable
    from a library), the first stored value is used instead.
    """
    collection = collections.get(variable.collection_id)
    if collection is not None and collection.modes:
        return variable.values_by_mode.get(collection.modes[0].mode_id)
    for value in variable.values_by_mode.values():
        return value
    return None


def _materialize_one(
    variable: Variable,
    collection: VariableCollection,
    collections: Mapping[str, VariableCollection],
    provider: DocumentProvider,
    usage: UsageIndex,
    *,
    include_hsba: bool,
) -> VariableRecord:
    record = VariableRecord(
        id=variable.id,
        name=variable.name,
        var_type=variable.resolved_type,
        collection=collection.name,
        collection_id=collection.id,
        modes=[mode.name for mode in collection.modes],
        direct_usage=usage.direct(variable.id),
        component_ids=usage.component_ids(variable.id),
        usage_breakdown=usage.breakdown_for(variable.id),
        node_usage=usage.nodes_for(variable.id),
    )
    hsba = {} if include_hsba and variable.resolved_type == VariableType.COLOR else None
    for mode in collection.modes:
        value = variable.values_by_mode.get(mode.mode_id)
        if isinstance(value, VariableAlias):
            target = provider.get_variable_by_id(value.id)
            if target is None:
                logger.info(
                    "alias target %s of %s (%s) not found",
                    value.id,
                    variable.name,
                    mode.name,
                )
                formatted = FormattedValue(ALIAS_PLACEHOLDER, ALIAS_PLACEHOLDER)
                shown = value
            else:
                record.references[mode.name] = target.id
                shown = first_mode_value(target, collections)
                formatted = format_value(shown, variable.resolved_type)
        else:
            record.references[mode.name] = None
            shown = value
            formatted = format_value(value, variable.resolved_type)
        record.values[mode.name] = formatted.display
        record.raw_values[mode.name] = formatted.raw
        if hsba is not None:
            hsba[mode.name] = format_hsba(shown)
    record.values_hsba = hsba
    return record


def materialize_variables(
    variables: Iterable[Variable],
    collections: Mapping[str, VariableCollection],
    provider: DocumentProvider,
    usage: UsageIndex,
    *,
    include_hsba: bool = False,
) -> List[VariableRecord]:
    records: List[VariableRecord] = []
    for variable in variables:
        collection = collections.get(variable.collection_id)
        if collection is None:
            logger.info(
                "skipping %s: collection %s not found",
                variable.name,
                variable.collection_id,
            )
            continue
        records.append(
            _materialize_one(
                variable,
                collection,
                collections,
                provider,
                usage,
                include_hsba=include_hsba,
            )
        )
    return records
