"""Primary-key inference and default view layouts."""
from typing import List, Optional, Sequence

from app.ui_schema.types import UiField, UiViews

MAX_LIST_COLUMNS = 5

# Field types that do not render in a table cell
_NESTED_TYPES = {"object", "array"}


def infer_primary_key(field_names: Sequence[str]) -> Optional[str]:
    """Pick the identifying field: id, then _id, then the first name ending in id."""
    names = set(field_names)
    if "id" in names:
        return "id"
    if "_id" in names:
        return "_id"
    suffixed = sorted(n for n in names if n.lower().endswith("id"))
    return suffixed[0] if suffixed else None


def list_columns(fields: Sequence[UiField], primary_key: Optional[str]) -> List[str]:
    columns = [f.name for f in fields if f.type not in _NESTED_TYPES]
    if primary_key is not None and primary_key in columns:
        columns.remove(primary_key)
        columns.insert(0, primary_key)
    return columns[:MAX_LIST_COLUMNS]


def form_fields(fields: Sequence[UiField], primary_key: Optional[str]) -> List[str]:
    def editable(f: UiField) -> bool:
        if f.read_only:
            return False
        if f.name == primary_key and not f.required:
            return False
        return True

    required = sorted(f.name for f in fields if f.required and editable(f))
    optional = sorted(f.name for f in fields if not f.required and editable(f))
    return required + optional


def build_views(fields: Sequence[UiField], primary_key: Optional[str]) -> UiViews:
    return UiViews(
        list_columns=tuple(list_columns(fields, primary_key)),
        detail_fields=tuple(sorted(f.name for f in fields)),
        form_fields=tuple(form_fields(fields, primary_key)),
    )
