"""Variable usage analysis for design documents."""

from .aggregate import compute_total_usage, total_usage
from .alias_graph import AliasGraph, build_alias_graph
from .census import count_variable_types, variable_type_counts
from .formatting import color_to_hex, color_to_hsba, format_float, format_value
from .materialize import first_mode_value, materialize_variables
from .scan import DEFAULT_SCAN_TYPES, ScanOptions, scan_variables
from .usage import UsageIndex, classify_node, iter_bindings, scan_document_usage

__all__ = [
    "AliasGraph",
    "DEFAULT_SCAN_TYPES",
    "ScanOptions",
    "UsageIndex",
    "build_alias_graph",
    "classify_node",
    "color_to_hex",
    "color_to_hsba",
    "compute_total_usage",
    "count_variable_types",
    "first_mode_value",
    "format_float",
    "format_value",
    "iter_bindings",
    "materialize_variables",
    "scan_document_usage",
    "scan_variables",
    "total_usage",
    "variable_type_counts",
]
