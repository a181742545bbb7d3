from fastapi import APIRouter, Depends, HTTPException

from classdesk.schemas import Attendance, AttendanceSheetRequest
from classdesk.services.attendance_service import attendance_rate, find_attendance, submit_attendance
from classdesk.services.entity_store import EntityStore
from classdesk.services.store_provider import get_store
from classdesk.services.view_service import get_group_attendance


router = APIRouter(prefix='/attendance', tags=['Attendance'])


@router.get('')
def list_attendance(group_id: str | None = None, store: EntityStore = Depends(get_store)):
    if group_id:
        return get_group_attendance(store, group_id)
    return store.attendance


@router.get('/{group_id}/rate')
def group_attendance_rate(group_id: str, store: EntityStore = Depends(get_store)):
    return {'group_id': group_id, 'rate': attendance_rate(store, group_id)}


@router.get('/{group_id}/{date}')
def get_attendance(group_id: str, date: str, store: EntityStore = Depends(get_store)):
    record = find_attendance(store, group_id, date)
    if not record:
        raise HTTPException(status_code=404, detail='Attendance not recorded')
    return record


@router.post('')
def record_attendance(payload: Attendance, store: EntityStore = Depends(get_store)):
    return store.record_attendance(payload)


@router.post('/sheet')
def record_attendance_sheet(payload: AttendanceSheetRequest, store: EntityStore = Depends(get_store)):
    if not store.get_group(payload.group_id):
        raise HTTPException(status_code=404, detail='Group not found')
    return submit_attendance(store, payload.group_id, payload.date, payload.absent_students)
