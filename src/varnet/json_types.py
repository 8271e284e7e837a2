from __future__ import annotations

"""JSON-compatible value types for report payloads and command messages.

Formatted raw values are scalars; everything that crosses the command server
or lands in a report file is built from these.
"""

from typing import TypeAlias


JSONScalar: TypeAlias = str | int | float | bool | None
JSONValue: TypeAlias = JSONScalar | list["JSONValue"] | dict[str, "JSONValue"]
JSONObject: TypeAlias = dict[str, JSONValue]
RawValue: TypeAlias = JSONScalar
