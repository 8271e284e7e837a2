"""Document providers: where variables, collections and nodes come from.

The analysis only talks to the ``DocumentProvider`` protocol. The bundled
implementation keeps a parsed JSON export of a design file in memory.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Protocol, Sequence

from varnet.analysis.model import (
    BindingValue,
    DocumentNode,
    Mode,
    RGBA,
    Variable,
    VariableAlias,
    VariableCollection,
    VariableValue,
)
from varnet.exceptions import DocumentFormatError, ProviderError

logger = logging.getLogger(__name__)

ALIAS_TYPE = "VARIABLE_ALIAS"


class DocumentProvider(Protocol):
    def get_local_variables(self) -> Sequence[Variable]: ...

    def get_local_variable_collections(self) -> Sequence[VariableCollection]: ...

    def get_variable_by_id(self, variable_id: str) -> Optional[Variable]: ...

    def document_roots(self) -> Sequence[DocumentNode]: ...


class InMemoryDocumentProvider:
    def __init__(
        self,
        *,
        variables: Sequence[Variable] = (),
        collections: Sequence[VariableCollection] = (),
        roots: Sequence[DocumentNode] = (),
        external_variables: Sequence[Variable] = (),
    ) -> None:
        self._variables = tuple(variables)
        self._collections = tuple(collections)
        self._roots = tuple(roots)
        # Resolvable by id but not enumerated locally (library variables).
        self._by_id: Dict[str, Variable] = {
            variable.id: variable for variable in (*external_variables, *variables)
        }

    def get_local_variables(self) -> Sequence[Variable]:
        return self._variables

    def get_local_variable_collections(self) -> Sequence[VariableCollection]:
        return self._collections

    def get_variable_by_id(self, variable_id: str) -> Optional[Variable]:
        return self._by_id.get(variable_id)

    def document_roots(self) -> Sequence[DocumentNode]:
        return self._roots


def _require_mapping(value: object, *, where: str) -> Mapping[str, object]:
    if not isinstance(value, Mapping):
        raise DocumentFormatError(f"expected an object, got {type(value).__name__}", path=where)
    return value


def _require_str(entry: Mapping[str, object], key: str, *, where: str) -> str:
    value = entry.get(key)
    if not isinstance(value, str) or not value:
        raise DocumentFormatError(f"missing string field {key!r}", path=where)
    return value


def _parse_alias(value: object) -> Optional[VariableAlias]:
    if isinstance(value, Mapping) and value.get("type") == ALIAS_TYPE:
        alias_id = value.get("id")
        if isinstance(alias_id, str):
            return VariableAlias(alias_id)
    return None


def _parse_value(value: object) -> VariableValue:
    if isinstance(value, Mapping):
        alias = _parse_alias(value)
        if alias is not None:
            return alias
        if all(channel in value for channel in ("r", "g", "b")):
            try:
                return RGBA(
                    r=float(value["r"]),
                    g=float(value["g"]),
                    b=float(value["b"]),
                    a=float(value.get("a", 1.0)),
                )
            except (TypeError, ValueError) as exc:
                raise DocumentFormatError(f"invalid colour channel: {exc}") from exc
        return None
    if isinstance(value, (bool, int, float, str)):
        return value
    return None


def _parse_binding(value: object) -> BindingValue:
    if isinstance(value, list):
        return tuple(_parse_binding_ref(entry) for entry in value)
    return _parse_binding_ref(value)


def _parse_binding_ref(value: object) -> Optional[VariableAlias]:
    if isinstance(value, Mapping) and isinstance(value.get("id"), str):
        return VariableAlias(str(value["id"]))
    return None


def parse_collection(entry: object, *, where: str = "collections") -> VariableCollection:
    data = _require_mapping(entry, where=where)
    modes: List[Mode] = []
    raw_modes = data.get("modes", [])
    if not isinstance(raw_modes, list):
        raise DocumentFormatError("'modes' must be a list", path=where)
    for index, raw_mode in enumerate(raw_modes):
        mode_where = f"{where}.modes[{index}]"
        mode = _require_mapping(raw_mode, where=mode_where)
        modes.append(
            Mode(
                mode_id=_require_str(mode, "modeId", where=mode_where),
                name=_require_str(mode, "name", where=mode_where),
            )
        )
    return VariableCollection(
        id=_require_str(data, "id", where=where),
        name=str(data.get("name", "")),
        modes=tuple(modes),
    )


def parse_variable(entry: object, *, where: str = "variables") -> Variable:
    data = _require_mapping(entry, where=where)
    raw_values = data.get("valuesByMode", {})
    if not isinstance(raw_values, Mapping):
        raise DocumentFormatError("'valuesByMode' must be an object", path=where)
    return Variable(
        id=_require_str(data, "id", where=where),
        name=str(data.get("name", "")),
        resolved_type=str(data.get("resolvedType", "")),
        collection_id=str(data.get("variableCollectionId", "")),
        values_by_mode={
            str(mode_id): _parse_value(value) for mode_id, value in raw_values.items()
        },
    )


def parse_node(entry: object, *, where: str = "document") -> DocumentNode:
    """Convert a JSON node tree into ``DocumentNode`` objects.

    Conversion is iterative so that deeply nested exports do not exhaust the
    interpreter stack.
    """
    built: Dict[int, DocumentNode] = {}
    stack: List[tuple[Mapping[str, object], str, bool]] = [
        (_require_mapping(entry, where=where), where, False)
    ]
    while stack:
        data, path, expanded = stack.pop()
        children = data.get("children", [])
        if not isinstance(children, list):
            raise DocumentFormatError("'children' must be a list", path=path)
        if not expanded:
            stack.append((data, path, True))
            for index, child in enumerate(children):
                child_path = f"{path}.children[{index}]"
                stack.append((_require_mapping(child, where=child_path), child_path, False))
            continue
        bound = data.get("boundVariables") or {}
        if not isinstance(bound, Mapping):
            raise DocumentFormatError("'boundVariables' must be an object", path=path)
        name = data.get("name")
        built[id(data)] = DocumentNode(
            id=_require_str(data, "id", where=path),
            type=str(data.get("type", "")),
            name=name if isinstance(name, str) else None,
            bound_variables={str(slot): _parse_binding(value) for slot, value in bound.items()},
            children=tuple(built.pop(id(child)) for child in children),
        )
    return built.pop(id(entry))


def parse_document(payload: object, *, source: str = "") -> InMemoryDocumentProvider:
    data = _require_mapping(payload, where=source)
    for key in ("variables", "collections"):
        if not isinstance(data.get(key, []), list):
            raise DocumentFormatError(f"'{key}' must be a list", path=source)
    document = _require_mapping(data.get("document", {}), where=f"{source}:document")
    raw_roots = document.get("children", [])
    if not isinstance(raw_roots, list):
        raise DocumentFormatError("'document.children' must be a list", path=source)
    variables = [
        parse_variable(entry, where=f"variables[{index}]")
        for index, entry in enumerate(data.get("variables", []))
    ]
    external = [
        parse_variable(entry, where=f"externalVariables[{index}]")
        for index, entry in enumerate(data.get("externalVariables", []) or [])
    ]
    collections = [
        parse_collection(entry, where=f"collections[{index}]")
        for index, entry in enumerate(data.get("collections", []))
    ]
    roots = [
        parse_node(entry, where=f"document.children[{index}]")
        for index, entry in enumerate(raw_roots)
    ]
    logger.debug(
        "parsed %s: %d variables, %d collections, %d top-level nodes",
        source or "<payload>",
        len(variables),
        len(collections),
        len(roots),
    )
    return InMemoryDocumentProvider(
        variables=variables,
        collections=collections,
        roots=roots,
        external_variables=external,
    )


def load_document(path: Path) -> InMemoryDocumentProvider:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ProviderError(f"cannot read document {path}: {exc}") from exc
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise DocumentFormatError(f"invalid JSON: {exc}", path=str(path)) from exc
    return parse_document(payload, source=str(path))
