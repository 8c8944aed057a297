from fastapi import APIRouter, HTTPException, Request
from app.mock.store import DuplicateRecordError, InMemoryEntityStore, RecordValidationError
from app.schemas.ui import DeleteResponse, RecordListResponse, RecordResponse, RecordWriteRequest

router = APIRouter(prefix="/mock/{entity_id}")


def get_store(request: Request, entity_id: str, action: str) -> InMemoryEntityStore:
    """Look up the entity's store, refusing actions its API does not declare."""
    try:
        store = request.app.state.mock_backend.store(entity_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Unknown entity: {entity_id}")
    if action not in store.entity.endpoints:
        raise HTTPException(status_code=405, detail=f"{entity_id} does not support {action}")
    return store


@router.get("/records", response_model=RecordListResponse)
def list_records(entity_id: str, request: Request):
    store = get_store(request, entity_id, "list")
    items = store.list()
    return RecordListResponse(entity_id=entity_id, items=items, total=len(items))


@router.post("/records", response_model=RecordResponse, status_code=201)
def create_record(entity_id: str, req: RecordWriteRequest, request: Request):
    store = get_store(request, entity_id, "create")
    try:
        record_id, record = store.create_with_id(req.values)
    except RecordValidationError as e:
        raise HTTPException(status_code=422, detail={"message": str(e), "missing": e.missing})
    except DuplicateRecordError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return RecordResponse(entity_id=entity_id, record_id=record_id, record=record)


@router.get("/records/{record_id}", response_model=RecordResponse)
def read_record(entity_id: str, record_id: str, request: Request):
    store = get_store(request, entity_id, "read")
    record = store.read(record_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Record not found")
    return RecordResponse(entity_id=entity_id, record_id=record_id, record=record)


@router.patch("/records/{record_id}", response_model=RecordResponse)
def update_record(entity_id: str, record_id: str, req: RecordWriteRequest, request: Request):
    store = get_store(request, entity_id, "update")
    record = store.update(record_id, req.values)
    if record is None:
        raise HTTPException(status_code=404, detail="Record not found")
    return RecordResponse(entity_id=entity_id, record_id=record_id, record=record)


@router.delete("/records/{record_id}", response_model=DeleteResponse)
def delete_record(entity_id: str, record_id: str, request: Request):
    store = get_store(request, entity_id, "delete")
    if not store.delete(record_id):
        raise HTTPException(status_code=404, detail="Record not found")
    return DeleteResponse(deleted=True)


@router.post("/reset", response_model=RecordListResponse)
def reset_records(entity_id: str, request: Request):
    try:
        store = request.app.state.mock_backend.store(entity_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Unknown entity: {entity_id}")
    items = store.reset()
    return RecordListResponse(entity_id=entity_id, items=items, total=len(items))
