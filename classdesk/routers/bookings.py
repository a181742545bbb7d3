from fastapi import APIRouter, Depends, HTTPException

from classdesk.schemas import ClassRoomBooking, ClassRoomBookingCreate, GenerateWeekRequest
from classdesk.services.booking_service import find_room_conflicts, generate_bookings_for_week
from classdesk.services.entity_store import EntityStore
from classdesk.services.store_provider import get_store
from classdesk.services.view_service import (
    get_bookings_in_range,
    get_room_bookings,
    get_room_bookings_in_range,
    get_time_slot_bookings,
)


router = APIRouter(prefix='/bookings', tags=['Bookings'])


@router.get('')
def list_bookings(
    room_id: str | None = None,
    date: str | None = None,
    start_time: str | None = None,
    date_from: str | None = None,
    date_to: str | None = None,
    store: EntityStore = Depends(get_store),
):
    if date_from and date_to:
        if room_id:
            return get_room_bookings_in_range(store, room_id, date_from, date_to)
        return get_bookings_in_range(store, date_from, date_to)
    if room_id:
        return get_room_bookings(store, room_id, date)
    if date and start_time:
        return get_time_slot_bookings(store, date, start_time)
    if date:
        return [row for row in store.bookings if row.date == date]
    return store.bookings


@router.get('/conflicts')
def booking_conflicts(store: EntityStore = Depends(get_store)):
    return [{'first': first, 'second': second} for first, second in find_room_conflicts(store.bookings)]


@router.get('/{booking_id}')
def get_booking(booking_id: str, store: EntityStore = Depends(get_store)):
    booking = store.get_booking(booking_id)
    if not booking:
        raise HTTPException(status_code=404, detail='Booking not found')
    return booking


@router.post('', status_code=201)
def create_booking(payload: ClassRoomBookingCreate, store: EntityStore = Depends(get_store)):
    return store.add_booking(payload)


@router.post('/generate-week')
def generate_week(payload: GenerateWeekRequest, store: EntityStore = Depends(get_store)):
    week_start = payload.week_start or store.time_provider.week_start()
    created = store.add_generated_bookings(generate_bookings_for_week(store.groups, week_start))
    return {'created': len(created), 'bookings': created}


@router.put('/{booking_id}')
def update_booking(booking_id: str, payload: ClassRoomBookingCreate, store: EntityStore = Depends(get_store)):
    booking = ClassRoomBooking(id=booking_id, **payload.model_dump())
    if not store.update_booking(booking):
        raise HTTPException(status_code=404, detail='Booking not found')
    return booking


@router.delete('/{booking_id}')
def delete_booking(booking_id: str, store: EntityStore = Depends(get_store)):
    if not store.delete_booking(booking_id):
        raise HTTPException(status_code=404, detail='Booking not found')
    return {'deleted': booking_id}
