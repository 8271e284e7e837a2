from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

from pydantic import ValidationError
from pygls.lsp.server import LanguageServer

from varnet import __version__
from varnet.config import merge_payload, scan_defaults, scan_include_hsba, scan_type_list
from varnet.invariants import never
from varnet.json_types import JSONObject
from varnet.messages import (
    SCAN_MESSAGE,
    TYPE_COUNTS_MESSAGE,
    error_response,
    handle_message,
)
from varnet.provider import DocumentProvider, load_document
from varnet.schema import ScanRequest, TypeCountsRequest

logger = logging.getLogger(__name__)

server = LanguageServer("varnet", __version__)
TYPE_COUNTS_COMMAND = "varnet.typeCounts"
SCAN_COMMAND = "varnet.scan"

ProviderLoader = Callable[[Path], DocumentProvider]


def _require_payload(payload: object, *, command: str) -> dict[str, object]:
    if payload is None:
        never("missing command payload", command=command)
    while isinstance(payload, list) and len(payload) == 1:
        payload = payload[0]
    if not isinstance(payload, dict):
        never(
            "invalid command payload type",
            command=command,
            payload_type=type(payload).__name__,
        )
    return payload


def _workspace_root(ls: object) -> Path | None:
    workspace = getattr(ls, "workspace", None)
    root_path = getattr(workspace, "root_path", None)
    return Path(root_path) if root_path else None


def _resolve_document(document: str, root: Path | None) -> Path:
    path = Path(document)
    if not path.is_absolute() and root is not None:
        path = root / path
    return path


def _scan_payload_with_defaults(payload: dict[str, object], root: Path | None) -> dict[str, object]:
    section = scan_defaults(root)
    defaults: dict[str, object] = {}
    types = scan_type_list(section)
    if types:
        defaults["types"] = types
    if "include_hsba" in section:
        defaults["include_hsba"] = scan_include_hsba(section)
    return merge_payload(payload, defaults)


def execute_type_counts(
    ls: object,
    payload: object = None,
    *,
    loader: ProviderLoader = load_document,
) -> JSONObject:
    data = _require_payload(payload, command=TYPE_COUNTS_COMMAND)
    try:
        request = TypeCountsRequest.model_validate(data)
        provider = loader(_resolve_document(request.document, _workspace_root(ls)))
    except (ValidationError, RuntimeError) as exc:
        return error_response(exc)
    response = handle_message(provider, {"type": TYPE_COUNTS_MESSAGE})
    if response is None:
        never("census produced no response", command=TYPE_COUNTS_COMMAND)
    return response


def execute_scan(
    ls: object,
    payload: object = None,
    *,
    loader: ProviderLoader = load_document,
) -> JSONObject:
    data = _require_payload(payload, command=SCAN_COMMAND)
    root = _workspace_root(ls)
    try:
        request = ScanRequest.model_validate(_scan_payload_with_defaults(data, root))
        provider = loader(_resolve_document(request.document, root))
    except (ValidationError, RuntimeError) as exc:
        return error_response(exc)
    message: dict[str, object] = {"type": SCAN_MESSAGE, "types": request.types}
    response = handle_message(provider, message, include_hsba=bool(request.include_hsba))
    if response is None:
        never("scan produced no response", command=SCAN_COMMAND)
    return response


@server.command(TYPE_COUNTS_COMMAND)
def type_counts_command(ls: LanguageServer, *args: object) -> JSONObject:
    return execute_type_counts(ls, list(args) if args else None)


@server.command(SCAN_COMMAND)
def scan_command(ls: LanguageServer, *args: object) -> JSONObject:
    return execute_scan(ls, list(args) if args else None)


def start(start_fn: Callable[[], None] | None = None) -> None:
    """Start the command server on stdio."""
    logger.info("starting varnet command server %s", __version__)
    (start_fn or server.start_io)()


if __name__ == "__main__":  # pragma: no cover
    start()  # pragma: no cover
