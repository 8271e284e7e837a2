from __future__ import annotations

import math
import re
from typing import Callable, Dict, NamedTuple

from varnet.analysis.model import RGBA, VariableAlias, VariableType

ALIAS_PLACEHOLDER = "alias"
NOT_AVAILABLE = "N/A"
STRING_DISPLAY_LIMIT = 30
STRING_TRUNCATE_AT = 27
ELLIPSIS = "..."

_TRAILING_ZEROS_RE = re.compile(r"\.?0+$")


class FormattedValue(NamedTuple):
    display: str
    raw: object


_NOT_AVAILABLE = FormattedValue(NOT_AVAILABLE, None)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _channel_byte(value: float) -> int:
    return min(255, max(0, _round_half_up(value * 255)))


def _plain_number(value: float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def color_to_hex(color: RGBA) -> str:
    """Render a normalized colour as ``#RRGGBB`` or ``#RRGGBBAA``.

    The alpha byte is only appended when the colour is translucent, so opaque
    colours always yield seven characters and translucent ones nine.
    """
    digits = "".join(
        f"{_channel_byte(channel):02X}" for channel in (color.r, color.g, color.b)
    )
    if color.a < 1:
        digits += f"{_channel_byte(color.a):02X}"
    return f"#{digits}"


def color_to_hsba(color: RGBA) -> str:
    r, g, b = color.r, color.g, color.b
    high = max(r, g, b)
    low = min(r, g, b)
    delta = high - low
    hue = 0
    saturation = 0.0
    if delta != 0:
        saturation = delta / high
        if r == high:
            sector = math.fmod((g - b) / delta, 6)
        elif g == high:
            sector = (b - r) / delta + 2
        else:
            sector = (r - g) / delta + 4
        hue = _round_half_up(sector * 60) % 360
    return (
        f"hsba({hue}, {_round_half_up(saturation * 100)}%, "
        f"{_round_half_up(high * 100)}%, {_plain_number(color.a)})"
    )


def format_float(value: float) -> str:
    if isinstance(value, int) or (isinstance(value, float) and value.is_integer()):
        return str(int(value))
    return _TRAILING_ZEROS_RE.sub("", f"{value:.2f}")


def _format_color(value: object) -> FormattedValue:
    if not isinstance(value, RGBA):
        return _NOT_AVAILABLE
    text = color_to_hex(value)
    return FormattedValue(text, text)


def _format_number(value: object) -> FormattedValue:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return _NOT_AVAILABLE
    return FormattedValue(format_float(value), value)


def _format_string(value: object) -> FormattedValue:
    if not isinstance(value, str):
        return _NOT_AVAILABLE
    shown = value
    if len(value) > STRING_DISPLAY_LIMIT:
        shown = value[:STRING_TRUNCATE_AT] + ELLIPSIS
    return FormattedValue(f'"{shown}"', value)


def _format_boolean(value: object) -> FormattedValue:
    if not isinstance(value, bool):
        return _NOT_AVAILABLE
    return FormattedValue("true" if value else "false", value)


def _format_unrecognized(value: object) -> FormattedValue:
    # Raw values must stay JSON scalars.
    if isinstance(value, RGBA):
        text = color_to_hex(value)
        return FormattedValue(text, text)
    if value is None or isinstance(value, (str, int, float, bool)):
        return FormattedValue(str(value), value)
    return FormattedValue(str(value), str(value))


_FORMATTERS: Dict[str, Callable[[object], FormattedValue]] = {
    VariableType.COLOR.value: _format_color,
    VariableType.FLOAT.value: _format_number,
    VariableType.STRING.value: _format_string,
    VariableType.BOOLEAN.value: _format_boolean,
}


def format_value(value: object, declared_type: str) -> FormattedValue:
    if isinstance(value, VariableAlias):
        return FormattedValue(ALIAS_PLACEHOLDER, ALIAS_PLACEHOLDER)
    formatter = _FORMATTERS.get(declared_type)
    if formatter is None:
        return _format_unrecognized(value)
    return formatter(value)


def format_hsba(value: object) -> str:
    if isinstance(value, VariableAlias):
        return ALIAS_PLACEHOLDER
    if not isinstance(value, RGBA):
        return NOT_AVAILABLE
    return color_to_hsba(value)
