from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Mapping, Optional, Sequence, Tuple, Union


class VariableType(str, Enum):
    COLOR = "COLOR"
    FLOAT = "FLOAT"
    STRING = "STRING"
    BOOLEAN = "BOOLEAN"


RECOGNIZED_TYPES: Tuple[str, ...] = tuple(member.value for member in VariableType)


class NodeRole(str, Enum):
    COMPONENT = "component"
    INSTANCE = "instance"
    DETACHED = "detached"


@dataclass(frozen=True)
class RGBA:
    r: float
    g: float
    b: float
    a: float = 1.0


@dataclass(frozen=True)
class VariableAlias:
    id: str


VariableValue = Union[RGBA, float, int, str, bool, VariableAlias, None]
BindingValue = Union[VariableAlias, Sequence[Optional[VariableAlias]], None]


@dataclass(frozen=True)
class Mode:
    mode_id: str
    name: str


@dataclass(frozen=True)
class VariableCollection:
    id: str
    name: str
    modes: Tuple[Mode, ...] = ()


@dataclass(frozen=True)
class Variable:
    id: str
    name: str
    resolved_type: str
    collection_id: str
    values_by_mode: Mapping[str, VariableValue] = field(default_factory=dict)


@dataclass(frozen=True)
class DocumentNode:
    id: str
    type: str
    name: Optional[str] = None
    bound_variables: Mapping[str, BindingValue] = field(default_factory=dict)
    children: Tuple["DocumentNode", ...] = ()


@dataclass
class UsageBreakdown:
    total: int = 0
    component_level: int = 0
    instance_level: int = 0
    detached: int = 0

    def record(self, role: NodeRole) -> None:
        self.total += 1
        if role is NodeRole.COMPONENT:
            self.component_level += 1
        elif role is NodeRole.INSTANCE:
            self.instance_level += 1
        else:
            self.detached += 1


@dataclass(frozen=True)
class NodeUsage:
    id: str
    type: str
    name: str


@dataclass(frozen=True)
class Relationship:
    source: str
    target: str
    mode: str


@dataclass
class VariableRecord:
    id: str
    name: str
    var_type: str
    collection: str
    collection_id: str
    modes: List[str]
    values: Dict[str, str] = field(default_factory=dict)
    raw_values: Dict[str, object] = field(default_factory=dict)
    references: Dict[str, Optional[str]] = field(default_factory=dict)
    direct_usage: int = 0
    total_usage: int = 0
    component_ids: List[str] = field(default_factory=list)
    usage_breakdown: UsageBreakdown = field(default_factory=UsageBreakdown)
    node_usage: List[NodeUsage] = field(default_factory=list)
    values_hsba: Optional[Dict[str, str]] = None


@dataclass
class ScanResult:
    variables: List[VariableRecord]
    relationships: List[Relationship]
    type_counts: Dict[str, int]
