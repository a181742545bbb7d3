from fastapi import APIRouter, Depends, HTTPException

from classdesk.schemas import Group, GroupCreate
from classdesk.services.entity_store import EntityStore
from classdesk.services.payment_period_service import generate_payment_periods
from classdesk.services.store_provider import get_store
from classdesk.services.view_service import (
    completion_ratio,
    get_group_attendance,
    get_group_payments,
    get_group_students,
    get_teacher_groups,
    lessons_remaining,
)


router = APIRouter(prefix='/groups', tags=['Groups'])


def _require_group(store: EntityStore, group_id: str) -> Group:
    group = store.get_group(group_id)
    if not group:
        raise HTTPException(status_code=404, detail='Group not found')
    return group


@router.get('')
def list_groups(teacher_id: str | None = None, store: EntityStore = Depends(get_store)):
    if teacher_id:
        return get_teacher_groups(store, teacher_id)
    return store.groups


@router.get('/{group_id}')
def get_group(group_id: str, store: EntityStore = Depends(get_store)):
    return _require_group(store, group_id)


@router.get('/{group_id}/students')
def group_students(group_id: str, store: EntityStore = Depends(get_store)):
    return get_group_students(store, group_id)


@router.get('/{group_id}/attendance')
def group_attendance(group_id: str, store: EntityStore = Depends(get_store)):
    return get_group_attendance(store, group_id)


@router.get('/{group_id}/payments')
def group_payments(group_id: str, store: EntityStore = Depends(get_store)):
    return get_group_payments(store, group_id)


@router.get('/{group_id}/progress')
def group_progress(group_id: str, store: EntityStore = Depends(get_store)):
    group = _require_group(store, group_id)
    return {
        'group_id': group.id,
        'completed_lessons': group.completed_lessons,
        'total_lessons': group.total_lessons,
        'lessons_remaining': lessons_remaining(group),
        'completion_ratio': completion_ratio(group),
    }


@router.post('', status_code=201)
def create_group(payload: GroupCreate, store: EntityStore = Depends(get_store)):
    return store.add_group(payload)


@router.put('/{group_id}')
def update_group(group_id: str, payload: GroupCreate, store: EntityStore = Depends(get_store)):
    group = Group(id=group_id, **payload.model_dump())
    if not store.update_group(group):
        raise HTTPException(status_code=404, detail='Group not found')
    return group


@router.delete('/{group_id}')
def delete_group(group_id: str, store: EntityStore = Depends(get_store)):
    if not store.delete_group(group_id):
        raise HTTPException(status_code=404, detail='Group not found')
    return {'deleted': group_id}


@router.post('/{group_id}/payments/generate')
def generate_group_payments(group_id: str, store: EntityStore = Depends(get_store)):
    _require_group(store, group_id)
    created = generate_payment_periods(store, group_id)
    return {'created': len(created), 'payments': created}
