from __future__ import annotations

import json
from pathlib import Path
from typing import Mapping

from varnet.analysis.model import ScanResult, VariableRecord
from varnet.json_types import JSONObject, JSONValue


def _variable_payload(record: VariableRecord) -> JSONObject:
    breakdown = record.usage_breakdown
    payload: JSONObject = {
        "id": record.id,
        "name": record.name,
        "varType": record.var_type,
        "collection": record.collection,
        "collectionId": record.collection_id,
        "modes": list(record.modes),
        "values": dict(record.values),
        "rawValues": dict(record.raw_values),
        "references": dict(record.references),
        "directUsage": record.direct_usage,
        "totalUsage": record.total_usage,
        "componentIds": list(record.component_ids),
        "usageBreakdown": {
            "total": breakdown.total,
            "componentLevel": breakdown.component_level,
            "instanceLevel": breakdown.instance_level,
            "detached": breakdown.detached,
        },
        "nodeUsageInfo": [
            {"id": node.id, "type": node.type, "name": node.name}
            for node in record.node_usage
        ],
    }
    if record.values_hsba is not None:
        payload["valuesHSBA"] = dict(record.values_hsba)
    return payload


def scan_result_payload(result: ScanResult) -> JSONObject:
    return {
        "variables": [_variable_payload(record) for record in result.variables],
        "relationships": [
            {"from": edge.source, "to": edge.target, "mode": edge.mode}
            for edge in result.relationships
        ],
        "typeCounts": dict(result.type_counts),
    }


def _cell(value: object) -> str:
    return str(value).replace("|", "\\|")


def render_markdown(payload: Mapping[str, JSONValue]) -> str:
    variables = payload.get("variables", [])
    relationships = payload.get("relationships", [])
    type_counts = payload.get("typeCounts", {})
    lines: list[str] = ["# Variable usage", ""]
    if isinstance(type_counts, Mapping) and type_counts:
        lines.append(
            "Types: "
            + ", ".join(f"{name} {count}" for name, count in type_counts.items())
        )
        lines.append("")
    if not isinstance(variables, list) or not variables:
        lines.append("No variables matched the selected types.")
        return "\n".join(lines) + "\n"
    lines.append("| Variable | Collection | Type | Values | Direct | Total |")
    lines.append("| --- | --- | --- | --- | --- | --- |")
    for entry in variables:
        if not isinstance(entry, Mapping):
            continue
        values = entry.get("values", {})
        shown = ""
        if isinstance(values, Mapping):
            shown = "; ".join(f"{mode}: {value}" for mode, value in values.items())
        lines.append(
            "| "
            + " | ".join(
                _cell(item)
                for item in (
                    entry.get("name", ""),
                    entry.get("collection", ""),
                    entry.get("varType", ""),
                    shown,
                    entry.get("directUsage", 0),
                    entry.get("totalUsage", 0),
                )
            )
            + " |"
        )
    if isinstance(relationships, list) and relationships:
        names = {
            str(entry.get("id")): str(entry.get("name"))
            for entry in variables
            if isinstance(entry, Mapping)
        }
        lines.append("")
        lines.append("## Aliases")
        lines.append("")
        for edge in relationships:
            if not isinstance(edge, Mapping):
                continue
            source = str(edge.get("from", ""))
            target = str(edge.get("to", ""))
            lines.append(
                f"- {names.get(target, target)} -> {names.get(source, source)}"
                f" ({edge.get('mode', '')})"
            )
    return "\n".join(lines) + "\n"


def write_report(payload: Mapping[str, JSONValue], *, output_path: Path) -> None:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(
        json.dumps(payload, indent=2, sort_keys=True) + "\n",
        encoding="utf-8",
    )
