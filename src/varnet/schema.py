from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from varnet.json_types import RawValue


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class UsageBreakdownDTO(_WireModel):
    total: int = 0
    component_level: int = Field(0, alias="componentLevel")
    instance_level: int = Field(0, alias="instanceLevel")
    detached: int = 0


class NodeUsageDTO(_WireModel):
    id: str
    type: str
    name: str


class VariableDTO(_WireModel):
    id: str
    name: str
    var_type: str = Field(alias="varType")
    collection: str
    collection_id: str = Field(alias="collectionId")
    modes: List[str]
    values: Dict[str, str]
    raw_values: Dict[str, RawValue] = Field(alias="rawValues")
    references: Dict[str, Optional[str]]
    direct_usage: int = Field(alias="directUsage")
    total_usage: int = Field(alias="totalUsage")
    component_ids: List[str] = Field(alias="componentIds")
    usage_breakdown: UsageBreakdownDTO = Field(alias="usageBreakdown")
    node_usage_info: List[NodeUsageDTO] = Field(alias="nodeUsageInfo")
    values_hsba: Optional[Dict[str, str]] = Field(None, alias="valuesHSBA")


class RelationshipDTO(_WireModel):
    source: str = Field(alias="from")
    target: str = Field(alias="to")
    mode: str


class ScanDataDTO(_WireModel):
    variables: List[VariableDTO] = []
    relationships: List[RelationshipDTO] = []
    type_counts: Dict[str, int] = Field(default_factory=dict, alias="typeCounts")


class ScanRequest(_WireModel):
    document: str
    types: Optional[List[str]] = None
    include_hsba: Optional[bool] = None


class TypeCountsRequest(_WireModel):
    document: str


class TypeCountsResponseDTO(_WireModel):
    type: str = "type-counts"
    type_counts: Dict[str, int] = Field(alias="typeCounts")


class ScanCompleteResponseDTO(_WireModel):
    type: str = "scan-complete"
    data: ScanDataDTO


class ScanErrorResponseDTO(_WireModel):
    type: str = "scan-error"
    error: str
