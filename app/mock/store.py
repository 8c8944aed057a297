"""In-memory CRUD backend keyed by each entity's inferred primary key."""
import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from app.mock.records import create_seed_row, stable_row_id
from app.ui_schema.types import UiEntitySchema, UiSchema

log = logging.getLogger(__name__)

DEFAULT_SEED_ROWS = 5


class RecordValidationError(ValueError):
    """Raised when a record is missing required form fields."""

    def __init__(self, entity_id: str, missing: List[str]):
        self.entity_id = entity_id
        self.missing = missing
        super().__init__(f"{entity_id} is missing required fields: {', '.join(missing)}")


class DuplicateRecordError(ValueError):
    """Raised when a supplied primary key is already taken."""

    def __init__(self, entity_id: str, record_id: str):
        self.entity_id = entity_id
        self.record_id = record_id
        super().__init__(f"{entity_id} record {record_id} already exists")


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class InMemoryEntityStore:
    """Records for one entity. Safe to share across threads."""

    def __init__(self, entity: UiEntitySchema, seed_rows: int = DEFAULT_SEED_ROWS):
        self.entity = entity
        self.seed_rows = seed_rows
        self._lock = threading.Lock()
        self._rows: List[Dict[str, Any]] = []
        self._next_id = 1
        self.reset()

    def reset(self) -> List[Dict[str, Any]]:
        """Replace all records with freshly seeded rows."""
        with self._lock:
            self._rows = [create_seed_row(self.entity, i) for i in range(self.seed_rows)]
            self._next_id = len(self._rows) + 1
            return [dict(r) for r in self._rows]

    def _index_of(self, record_id: str) -> int:
        for i, row in enumerate(self._rows):
            if stable_row_id(self.entity, row, i) == record_id:
                return i
        return -1

    def _writable(self, values: Dict[str, Any]) -> Dict[str, Any]:
        out = {}
        for name, value in values.items():
            f = self.entity.field(name)
            if f is not None and f.read_only:
                continue
            out[name] = value
        return out

    def missing_required(self, values: Dict[str, Any]) -> List[str]:
        missing = []
        for name in self.entity.views.form_fields:
            f = self.entity.field(name)
            if f is not None and f.required and _is_blank(values.get(name)):
                missing.append(name)
        return missing

    def list(self) -> List[Dict[str, Any]]:
        with self._lock:
            return [dict(r) for r in self._rows]

    def read(self, record_id: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            idx = self._index_of(record_id)
            return dict(self._rows[idx]) if idx >= 0 else None

    def create(self, values: Dict[str, Any]) -> Dict[str, Any]:
        _, record = self.create_with_id(values)
        return record

    def create_with_id(self, values: Dict[str, Any]) -> Tuple[str, Dict[str, Any]]:
        """Create a record and return it with the row id it was stored under."""
        missing = self.missing_required(values)
        if missing:
            raise RecordValidationError(self.entity.id, missing)

        record = self._writable(values)
        pk = self.entity.primary_key
        with self._lock:
            taken = {stable_row_id(self.entity, row, i) for i, row in enumerate(self._rows)}
            if pk and isinstance(record.get(pk), str):
                if record[pk] in taken:
                    raise DuplicateRecordError(self.entity.id, record[pk])
            elif pk:
                while str(self._next_id) in taken:
                    self._next_id += 1
                record[pk] = str(self._next_id)
                self._next_id += 1
            self._rows.append(record)
            record_id = stable_row_id(self.entity, record, len(self._rows) - 1)
        log.info(f"Created record {record_id}", extra={"entity": self.entity.id})
        return record_id, dict(record)

    def update(self, record_id: str, values: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        changes = self._writable(values)
        pk = self.entity.primary_key
        if pk is not None:
            changes.pop(pk, None)
        with self._lock:
            idx = self._index_of(record_id)
            if idx < 0:
                return None
            self._rows[idx] = {**self._rows[idx], **changes}
            return dict(self._rows[idx])

    def delete(self, record_id: str) -> bool:
        with self._lock:
            idx = self._index_of(record_id)
            if idx < 0:
                return False
            del self._rows[idx]
        log.info(f"Deleted record {record_id}", extra={"entity": self.entity.id})
        return True


@dataclass
class MockBackend:
    """One in-memory store per entity of a UI schema."""
    ui: UiSchema
    stores: Dict[str, InMemoryEntityStore]

    def store(self, entity_id: str) -> InMemoryEntityStore:
        return self.stores[entity_id]

    @staticmethod
    def from_ui_schema(ui: UiSchema, seed_rows: int = DEFAULT_SEED_ROWS) -> "MockBackend":
        return MockBackend(
            ui=ui,
            stores={
                entity_id: InMemoryEntityStore(entity, seed_rows)
                for entity_id, entity in ui.entities.items()
            },
        )
