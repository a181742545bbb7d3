from fastapi import APIRouter, Depends, HTTPException

from classdesk.schemas import ClassRoom, ClassRoomCreate
from classdesk.services.entity_store import EntityStore
from classdesk.services.store_provider import get_store
from classdesk.services.view_service import get_room_bookings, get_room_bookings_in_range


router = APIRouter(prefix='/classrooms', tags=['Classrooms'])


@router.get('')
def list_classrooms(active_only: bool = False, store: EntityStore = Depends(get_store)):
    if active_only:
        return [room for room in store.classrooms if room.is_active]
    return store.classrooms


@router.get('/{room_id}')
def get_classroom(room_id: str, store: EntityStore = Depends(get_store)):
    room = store.get_classroom(room_id)
    if not room:
        raise HTTPException(status_code=404, detail='Classroom not found')
    return room


@router.get('/{room_id}/bookings')
def classroom_bookings(
    room_id: str,
    date: str | None = None,
    date_from: str | None = None,
    date_to: str | None = None,
    store: EntityStore = Depends(get_store),
):
    if date_from and date_to:
        return get_room_bookings_in_range(store, room_id, date_from, date_to)
    return get_room_bookings(store, room_id, date)


@router.post('', status_code=201)
def create_classroom(payload: ClassRoomCreate, store: EntityStore = Depends(get_store)):
    return store.add_classroom(payload)


@router.put('/{room_id}')
def update_classroom(room_id: str, payload: ClassRoomCreate, store: EntityStore = Depends(get_store)):
    room = ClassRoom(id=room_id, **payload.model_dump())
    if not store.update_classroom(room):
        raise HTTPException(status_code=404, detail='Classroom not found')
    return room


@router.delete('/{room_id}')
def delete_classroom(room_id: str, store: EntityStore = Depends(get_store)):
    if not store.delete_classroom(room_id):
        raise HTTPException(status_code=404, detail='Classroom not found')
    return {'deleted': room_id}
