"""Dataclasses for the UI schema produced from an OpenAPI document."""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

UI_SCHEMA_VERSION = 1


@dataclass(frozen=True)
class UiField:
    """A single entity field as seen by generated UI."""
    name: str
    label: str
    type: str
    required: bool = False
    format: Optional[str] = None
    read_only: bool = False
    write_only: bool = False
    enum: Optional[Tuple[str, ...]] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "name": self.name,
            "label": self.label,
            "type": self.type,
        }
        if self.format is not None:
            out["format"] = self.format
        out["required"] = self.required
        if self.read_only:
            out["readOnly"] = True
        if self.write_only:
            out["writeOnly"] = True
        if self.enum is not None:
            out["enum"] = list(self.enum)
        return out


@dataclass(frozen=True)
class UiEndpoint:
    """HTTP operation backing a CRUD action."""
    method: str
    path: str
    operation_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"method": self.method, "path": self.path}
        if self.operation_id is not None:
            out["operationId"] = self.operation_id
        return out


@dataclass(frozen=True)
class UiViews:
    """Default list/detail/form projections of an entity's fields."""
    list_columns: Tuple[str, ...] = ()
    detail_fields: Tuple[str, ...] = ()
    form_fields: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "list": {"columns": list(self.list_columns)},
            "detail": {"fields": list(self.detail_fields)},
            "form": {"fields": list(self.form_fields)},
        }


@dataclass(frozen=True)
class UiEntitySchema:
    id: str
    title: str
    resource_path: str
    primary_key: Optional[str]
    fields: Tuple[UiField, ...]
    endpoints: Dict[str, UiEndpoint]
    views: UiViews

    def field(self, name: str) -> Optional[UiField]:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "resourcePath": self.resource_path,
            "primaryKey": self.primary_key,
            "fields": [f.to_dict() for f in self.fields],
            "endpoints": {
                action: self.endpoints[action].to_dict()
                for action in sorted(self.endpoints)
            },
            "views": self.views.to_dict(),
        }


@dataclass(frozen=True)
class UiSchema:
    """Top-level UI schema; entities are keyed by entity id."""
    entities: Dict[str, UiEntitySchema] = field(default_factory=dict)
    version: int = UI_SCHEMA_VERSION

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "entities": {
                entity_id: self.entities[entity_id].to_dict()
                for entity_id in sorted(self.entities)
            },
        }
