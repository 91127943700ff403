from fastapi import APIRouter, Depends, HTTPException, status

from termplan.api.deps import get_store
from termplan.schemas.reference import ItemCreate, PartitionedItem, RenameResult, RoomRename
from termplan.services.records import ROOMS, TIME_BLOCKS, load_items, load_sections
from termplan.services.roster import merged_options, rename_room, room_options
from termplan.services.store import DocumentStore

router = APIRouter()


@router.get("/rooms", response_model=list[str])
def list_rooms(department_id: str, store: DocumentStore = Depends(get_store)) -> list[str]:
    return room_options(load_items(store, ROOMS, department_id), load_sections(store, department_id))


@router.post("/rooms", response_model=PartitionedItem, status_code=status.HTTP_201_CREATED)
def create_room(department_id: str, payload: ItemCreate, store: DocumentStore = Depends(get_store)) -> PartitionedItem:
    existing = {item.value for item in load_items(store, ROOMS, department_id)}
    if payload.value in existing:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Room name already exists")
    room = PartitionedItem(department_id=department_id, value=payload.value)
    store.add(ROOMS, room.to_document())
    return room


@router.put("/rooms/{room_name}", response_model=RenameResult)
def update_room(
    department_id: str,
    room_name: str,
    payload: RoomRename,
    store: DocumentStore = Depends(get_store),
) -> RenameResult:
    updated = rename_room(store, department_id, room_name, payload.value)
    return RenameResult(old_value=room_name, new_value=payload.value, sections_updated=updated)


@router.get("/time-blocks", response_model=list[str])
def list_time_blocks(department_id: str, store: DocumentStore = Depends(get_store)) -> list[str]:
    sections = load_sections(store, department_id)
    observed = [f"{section.begin_time} - {section.end_time}" for section in sections if section.begin_time and section.end_time]
    return merged_options((item.value for item in load_items(store, TIME_BLOCKS, department_id)), observed)


@router.post("/time-blocks", response_model=PartitionedItem, status_code=status.HTTP_201_CREATED)
def create_time_block(department_id: str, payload: ItemCreate, store: DocumentStore = Depends(get_store)) -> PartitionedItem:
    block = PartitionedItem(department_id=department_id, value=payload.value)
    store.add(TIME_BLOCKS, block.to_document())
    return block
