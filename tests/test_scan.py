from __future__ import annotations

import pytest

from varnet.analysis.model import RECOGNIZED_TYPES
from varnet.analysis.scan import ScanOptions, scan_variables
from varnet.exceptions import ProviderError

from tests.document_helpers import (
    alias,
    node,
    provider_from,
    rgba,
    single_mode_collection,
    variable,
)


def _by_id(result):
    return {record.id: record for record in result.variables}


def test_default_scan_selects_colour_variables(provider) -> None:
    result = scan_variables(provider)
    assert [record.id for record in result.variables] == ["v-red", "v-text", "v-accent", "v-ghost"]


def test_scan_all_types_totals_and_edges(provider) -> None:
    result = scan_variables(provider, ScanOptions.for_types(RECOGNIZED_TYPES))
    records = _by_id(result)
    assert set(records) == {"v-red", "v-text", "v-accent", "v-space", "v-title", "v-flag", "v-ghost"}
    assert [(edge.source, edge.target, edge.mode) for edge in result.relationships] == [
        ("v-red", "v-text", "Default"),
        ("v-text", "v-accent", "Default"),
    ]
    assert records["v-red"].direct_usage == 2
    assert records["v-red"].total_usage == 5
    assert records["v-text"].total_usage == 3
    assert records["v-accent"].total_usage == 1
    assert records["v-ghost"].total_usage == 0
    assert result.type_counts == {"COLOR": 4, "FLOAT": 1, "STRING": 1, "BOOLEAN": 1}


def test_relationship_endpoints_are_reported_variables(provider) -> None:
    result = scan_variables(provider, ScanOptions.for_types(RECOGNIZED_TYPES))
    ids = {record.id for record in result.variables}
    for edge in result.relationships:
        assert edge.source in ids
        assert edge.target in ids


def test_breakdown_sums_match_direct_usage(provider) -> None:
    result = scan_variables(provider, ScanOptions.for_types(RECOGNIZED_TYPES))
    for record in result.variables:
        breakdown = record.usage_breakdown
        assert (
            breakdown.component_level + breakdown.instance_level + breakdown.detached
            == breakdown.total
            == record.direct_usage
        )


def test_type_census_ignores_selection(provider) -> None:
    only_strings = scan_variables(provider, ScanOptions.for_types(["STRING"]))
    assert [record.id for record in only_strings.variables] == ["v-title"]
    assert only_strings.type_counts == {"COLOR": 4, "FLOAT": 1, "STRING": 1, "BOOLEAN": 1}
    assert only_strings.relationships == []


def _cross_type_provider():
    collection = single_mode_collection()
    return provider_from(
        collections=[collection],
        variables=[
            variable("colour", "colour", "COLOR", "c", {"m": rgba(0, 1, 0)}),
            variable("number", "number", "FLOAT", "c", {"m": alias("colour")}),
        ],
        nodes=[
            node(
                "page",
                "PAGE",
                "Page",
                children=[
                    node("a", "FRAME", "A", bound={"fills": [alias("colour")]}),
                    node("b", "FRAME", "B", bound={"opacity": alias("number")}),
                    node("c", "INSTANCE", "C", bound={"opacity": alias("number")}),
                ],
            )
        ],
    )


def test_unselected_types_contribute_nothing() -> None:
    provider = _cross_type_provider()
    colours = _by_id(scan_variables(provider, ScanOptions.for_types(["COLOR"])))
    assert colours["colour"].direct_usage == 1
    assert colours["colour"].total_usage == 1

    numbers = scan_variables(provider, ScanOptions.for_types(["FLOAT"]))
    records = _by_id(numbers)
    assert numbers.relationships == []
    assert records["number"].total_usage == 2
    # The colour target is still resolved for display, just not linked.
    assert records["number"].references == {"Mode": "colour"}
    assert records["number"].values == {"Mode": "N/A"}

    both = _by_id(scan_variables(provider, ScanOptions.for_types(["COLOR", "FLOAT"])))
    assert both["colour"].total_usage == 3


def test_cyclic_aliases_terminate() -> None:
    collection = single_mode_collection()
    provider = provider_from(
        collections=[collection],
        variables=[
            variable("a", "a", "COLOR", "c", {"m": alias("b")}),
            variable("b", "b", "COLOR", "c", {"m": alias("c")}),
            variable("c", "c", "COLOR", "c", {"m": alias("a")}),
        ],
        nodes=[
            node(
                "page",
                "PAGE",
                children=[
                    node("1", "FRAME", bound={"fills": [alias("a")]}),
                    node("2", "FRAME", bound={"fills": [alias("b"), alias("b")]}),
                    node("3", "FRAME", bound={"fills": [alias("c")]}),
                ],
            )
        ],
    )
    result = scan_variables(provider, ScanOptions.for_types(["COLOR"]))
    assert len(result.relationships) == 3
    for record in result.variables:
        assert record.direct_usage <= record.total_usage <= 4
        assert record.values == {"Mode": "alias"}


def test_repeated_scans_are_identical(provider) -> None:
    options = ScanOptions.for_types(RECOGNIZED_TYPES)
    first = scan_variables(provider, options)
    second = scan_variables(provider, options)
    assert [record.total_usage for record in first.variables] == [
        record.total_usage for record in second.variables
    ]
    assert first.relationships == second.relationships


def test_selection_matches_declared_type_strings(provider) -> None:
    assert scan_variables(provider, ScanOptions.for_types(["GRADIENT"])).variables == []
    shadows = scan_variables(provider, ScanOptions.for_types(["SHADOW"]))
    assert [record.id for record in shadows.variables] == ["v-shadow"]
    assert shadows.variables[0].values == {"Light": "0 1px", "Dark": "None"}
    assert shadows.relationships == []


def test_variables_without_a_known_collection_are_left_out() -> None:
    provider = provider_from(
        collections=[single_mode_collection()],
        variables=[
            variable("base", "base", "COLOR", "gone", {"m": rgba(1, 0, 0)}),
            variable("derived", "derived", "COLOR", "c", {"m": alias("base")}),
        ],
        nodes=[
            node(
                "page",
                "PAGE",
                children=[
                    node("1", "FRAME", bound={"fills": [alias("base")]}),
                    node("2", "FRAME", bound={"fills": [alias("derived")]}),
                ],
            )
        ],
    )
    result = scan_variables(provider, ScanOptions.for_types(RECOGNIZED_TYPES))
    records = _by_id(result)
    assert set(records) == {"derived"}
    assert result.relationships == []
    assert records["derived"].total_usage == 1
    # The alias still resolves for display through the provider.
    assert records["derived"].references == {"Mode": "base"}
    assert records["derived"].values == {"Mode": "#FF0000"}


def test_provider_failures_propagate(provider) -> None:
    class _FailingProvider:
        def get_local_variables(self):
            return provider.get_local_variables()

        def get_local_variable_collections(self):
            raise ProviderError("collections unavailable")

        def get_variable_by_id(self, variable_id):
            return provider.get_variable_by_id(variable_id)

        def document_roots(self):
            return provider.document_roots()

    with pytest.raises(ProviderError, match="collections unavailable"):
        scan_variables(_FailingProvider())
