from pydantic import BaseModel, Field
from typing import Literal, Dict, Any, List


class UiSchemaResponse(BaseModel):
    version: Literal[1] = 1
    entities: Dict[str, Dict[str, Any]] = {}


class RecordResponse(BaseModel):
    entity_id: str
    record_id: str
    record: Dict[str, Any]


class RecordListResponse(BaseModel):
    entity_id: str
    items: List[Dict[str, Any]]
    total: int


class RecordWriteRequest(BaseModel):
    values: Dict[str, Any] = Field(default_factory=dict, examples=[{"title": "Buy milk", "done": False}])


class DeleteResponse(BaseModel):
    deleted: bool
