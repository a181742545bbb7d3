from fastapi import APIRouter, Depends, HTTPException

from classdesk.schemas import Teacher, TeacherCreate
from classdesk.services.entity_store import EntityStore
from classdesk.services.store_provider import get_store
from classdesk.services.view_service import get_teacher_groups


router = APIRouter(prefix='/teachers', tags=['Teachers'])


@router.get('')
def list_teachers(store: EntityStore = Depends(get_store)):
    return store.teachers


@router.get('/{teacher_id}')
def get_teacher(teacher_id: str, store: EntityStore = Depends(get_store)):
    teacher = store.get_teacher(teacher_id)
    if not teacher:
        raise HTTPException(status_code=404, detail='Teacher not found')
    return teacher


@router.get('/{teacher_id}/groups')
def teacher_groups(teacher_id: str, store: EntityStore = Depends(get_store)):
    return get_teacher_groups(store, teacher_id)


@router.post('', status_code=201)
def create_teacher(payload: TeacherCreate, store: EntityStore = Depends(get_store)):
    return store.add_teacher(payload)


@router.put('/{teacher_id}')
def update_teacher(teacher_id: str, payload: TeacherCreate, store: EntityStore = Depends(get_store)):
    teacher = Teacher(id=teacher_id, **payload.model_dump())
    if not store.update_teacher(teacher):
        raise HTTPException(status_code=404, detail='Teacher not found')
    return teacher


@router.delete('/{teacher_id}')
def delete_teacher(teacher_id: str, store: EntityStore = Depends(get_store)):
    if not store.delete_teacher(teacher_id):
        raise HTTPException(status_code=404, detail='Teacher not found')
    return {'deleted': teacher_id}
