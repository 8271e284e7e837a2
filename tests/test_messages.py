from __future__ import annotations

from varnet.exceptions import ProviderError
from varnet.messages import handle_message

from tests.document_helpers import provider_from, rgba, single_mode_collection, variable


def test_type_counts_message(provider) -> None:
    response = handle_message(provider, {"type": "get-type-counts"})
    assert response == {
        "type": "type-counts",
        "typeCounts": {"COLOR": 4, "FLOAT": 1, "STRING": 1, "BOOLEAN": 1},
    }


def test_scan_message_defaults_to_colour(provider) -> None:
    response = handle_message(provider, {"type": "scan"})
    assert response["type"] == "scan-complete"
    data = response["data"]
    assert [entry["id"] for entry in data["variables"]] == ["v-red", "v-text", "v-accent", "v-ghost"]
    assert data["relationships"] == [
        {"from": "v-red", "to": "v-text", "mode": "Default"},
        {"from": "v-text", "to": "v-accent", "mode": "Default"},
    ]
    assert data["typeCounts"]["COLOR"] == 4


def test_scan_message_uses_wire_field_names(provider) -> None:
    response = handle_message(provider, {"type": "scan", "types": ["COLOR", "FLOAT"]})
    red = response["data"]["variables"][0]
    assert red["varType"] == "COLOR"
    assert red["collectionId"] == "c-prim"
    assert red["rawValues"] == {"Light": "#FF0000", "Dark": "#00000080"}
    assert red["references"] == {"Light": None, "Dark": None}
    assert red["directUsage"] == 2
    assert red["totalUsage"] == 5
    assert red["componentIds"] == ["1:1", "1:2"]
    assert red["usageBreakdown"] == {
        "total": 2,
        "componentLevel": 1,
        "instanceLevel": 0,
        "detached": 1,
    }
    assert red["nodeUsageInfo"][0] == {"id": "1:1", "type": "COMPONENT", "name": "Button"}
    assert "valuesHSBA" not in red
    space = next(entry for entry in response["data"]["variables"] if entry["id"] == "v-space")
    assert space["rawValues"] == {"Light": 8, "Dark": 12.5}


def test_scan_message_can_include_hsba(provider) -> None:
    response = handle_message(provider, {"type": "scan", "types": ["COLOR"]}, include_hsba=True)
    red = response["data"]["variables"][0]
    assert red["valuesHSBA"]["Light"] == "hsba(0, 100%, 100%, 1)"


def test_failures_become_scan_errors(provider) -> None:
    class _Broken:
        def get_local_variables(self):
            raise ProviderError("variables unavailable")

    assert handle_message(_Broken(), {"type": "get-type-counts"}) == {
        "type": "scan-error",
        "error": "variables unavailable",
    }
    assert handle_message(_Broken(), {"type": "scan", "types": ["COLOR"]}) == {
        "type": "scan-error",
        "error": "variables unavailable",
    }


def test_host_only_messages_are_ignored(provider) -> None:
    for kind in ("resize", "select-components", "close", None):
        assert handle_message(provider, {"type": kind}) is None


def test_scan_message_accepts_unrecognized_type_holding_colour() -> None:
    provider = provider_from(
        collections=[single_mode_collection()],
        variables=[variable("shadow", "effects/glow", "SHADOW", "c", {"m": rgba(1, 0, 0)})],
    )
    response = handle_message(provider, {"type": "scan", "types": ["SHADOW"]})
    assert response["type"] == "scan-complete"
    (entry,) = response["data"]["variables"]
    assert entry["varType"] == "SHADOW"
    assert entry["values"] == {"Mode": "#FF0000"}
    assert entry["rawValues"] == {"Mode": "#FF0000"}
