"""Record synthesis and display formatting for the mock backend."""
import json
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, Optional

from app.ui_schema.types import UiEntitySchema, UiField


def generate_value(field: UiField, seed: int, now: Optional[datetime] = None) -> Any:
    """Deterministic sample value for a field; `seed` is the row index."""
    if field.type == "boolean":
        return seed % 2 == 0
    if field.type == "integer":
        return (seed + 1) * 7
    if field.type == "number":
        return round((seed + 1) * 3.14, 2)
    if field.type == "string":
        if field.enum:
            return field.enum[seed % len(field.enum)]
        now = now or datetime.now(timezone.utc)
        if field.format == "date-time":
            return (now - timedelta(days=seed)).isoformat()
        if field.format == "date":
            return (now - timedelta(days=seed)).date().isoformat()
        if field.format == "email":
            return f"user{seed + 1}@demo.local"
        return f"{field.name}-{seed + 1}"
    return None


def create_seed_row(entity: UiEntitySchema, seed: int, now: Optional[datetime] = None) -> Dict[str, Any]:
    row: Dict[str, Any] = {}
    for f in entity.fields:
        if f.write_only:
            continue
        row[f.name] = generate_value(f, seed, now)

    if entity.primary_key:
        row[entity.primary_key] = str(seed + 1)
    return row


def stable_row_id(entity: UiEntitySchema, row: Dict[str, Any], index: int) -> str:
    """Row key: the string primary-key value, else `<entity id>:<index>`."""
    if entity.primary_key and isinstance(row.get(entity.primary_key), str):
        return row[entity.primary_key]
    return f"{entity.id}:{index}"


def format_value(field: Optional[UiField], value: Any) -> str:
    """Render a record value for a table cell or detail pane."""
    if value is None:
        return ""

    if field is not None and field.type == "boolean" and isinstance(value, bool):
        return "Yes" if value else "No"

    if isinstance(value, str):
        if field is not None and field.format == "date-time":
            try:
                return datetime.fromisoformat(value).strftime("%Y-%m-%d %H:%M")
            except ValueError:
                return value
        if field is not None and field.format == "date":
            try:
                return date.fromisoformat(value).strftime("%b %d, %Y")
            except ValueError:
                return value
        return value

    if isinstance(value, bool):
        return json.dumps(value)

    if isinstance(value, (list, dict)):
        try:
            return json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError):
            return str(value)

    return str(value)
