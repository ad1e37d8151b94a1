from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class FlowNodeData(BaseModel):
    model_config = ConfigDict(extra="allow")

    label: Optional[str] = None
    type: Optional[str] = None
    properties: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("properties", mode="before")
    @classmethod
    def default_properties(cls, value: Any) -> Any:
        return {} if value is None else value


class FlowNode(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: Union[str, int]
    type: Optional[str] = None
    data: FlowNodeData = Field(default_factory=FlowNodeData)

    @field_validator("data", mode="before")
    @classmethod
    def default_data(cls, value: Any) -> Any:
        return {} if value is None else value


class FlowEdge(BaseModel):
    model_config = ConfigDict(extra="allow")

    source: Union[str, int]
    target: Union[str, int]
    label: Optional[str] = None
    data: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("data", mode="before")
    @classmethod
    def default_data(cls, value: Any) -> Any:
        return {} if value is None else value


class FlowPayload(BaseModel):
    nodes: List[FlowNode] = Field(default_factory=list)
    edges: List[FlowEdge] = Field(default_factory=list)


class ValidationResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    is_valid: bool = Field(alias="isValid")
    errors: List[str] = Field(default_factory=list)


class ActivationResponse(BaseModel):
    activated: bool
    errors: List[str] = Field(default_factory=list)
    message: str = ""
