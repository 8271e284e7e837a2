"""Host UI message handling.

``handle_message`` answers the two requests a host UI makes of the analysis:
the type census used for its pre-filter, and a full scan for a set of types.
Every other message type (resizing, selecting nodes, closing) is the host's
own business and yields no reply.
"""

from __future__ import annotations

import logging
from typing import Iterable, Mapping, Optional

from varnet.analysis.census import variable_type_counts
from varnet.analysis.scan import DEFAULT_SCAN_TYPES, ScanOptions, scan_variables
from varnet.json_types import JSONObject
from varnet.provider import DocumentProvider
from varnet.report import scan_result_payload
from varnet.schema import (
    ScanCompleteResponseDTO,
    ScanDataDTO,
    ScanErrorResponseDTO,
    TypeCountsResponseDTO,
)

logger = logging.getLogger(__name__)

TYPE_COUNTS_MESSAGE = "get-type-counts"
SCAN_MESSAGE = "scan"

_HSBA_EXCLUDE = {"data": {"variables": {"__all__": {"values_hsba"}}}}


def census_response(provider: DocumentProvider) -> JSONObject:
    counts = variable_type_counts(provider)
    return TypeCountsResponseDTO(type_counts=counts).model_dump(by_alias=True)


def scan_response(
    provider: DocumentProvider,
    types: Iterable[str],
    *,
    include_hsba: bool = False,
) -> JSONObject:
    result = scan_variables(provider, ScanOptions.for_types(types, include_hsba=include_hsba))
    data = ScanDataDTO.model_validate(scan_result_payload(result))
    exclude = None if include_hsba else _HSBA_EXCLUDE
    return ScanCompleteResponseDTO(data=data).model_dump(by_alias=True, exclude=exclude)


def error_response(exc: BaseException) -> JSONObject:
    return ScanErrorResponseDTO(error=str(exc)).model_dump(by_alias=True)


def handle_message(
    provider: DocumentProvider,
    message: Mapping[str, object],
    *,
    include_hsba: bool = False,
) -> Optional[JSONObject]:
    kind = message.get("type")
    try:
        if kind == TYPE_COUNTS_MESSAGE:
            return census_response(provider)
        if kind == SCAN_MESSAGE:
            raw_types = message.get("types") or list(DEFAULT_SCAN_TYPES)
            if isinstance(raw_types, str):
                raw_types = [raw_types]
            return scan_response(
                provider,
                [str(item) for item in raw_types],
                include_hsba=bool(message.get("include_hsba", include_hsba)),
            )
    except Exception as exc:
        logger.error("%s request failed: %s", kind, exc)
        return error_response(exc)
    logger.debug("ignoring host message %r", kind)
    return None
