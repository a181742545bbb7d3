from fastapi import APIRouter, Depends, HTTPException

from classdesk.schemas import Student, StudentCreate
from classdesk.services.entity_store import EntityStore
from classdesk.services.store_provider import get_store
from classdesk.services.view_service import get_group_students, get_student_payments


router = APIRouter(prefix='/students', tags=['Students'])


@router.get('')
def list_students(group_id: str | None = None, store: EntityStore = Depends(get_store)):
    if group_id:
        return get_group_students(store, group_id)
    return store.students


@router.get('/{student_id}')
def get_student(student_id: str, store: EntityStore = Depends(get_store)):
    student = store.get_student(student_id)
    if not student:
        raise HTTPException(status_code=404, detail='Student not found')
    return student


@router.get('/{student_id}/payments')
def student_payments(student_id: str, store: EntityStore = Depends(get_store)):
    return get_student_payments(store, student_id)


@router.post('', status_code=201)
def create_student(payload: StudentCreate, store: EntityStore = Depends(get_store)):
    return store.add_student(payload)


@router.put('/{student_id}')
def update_student(student_id: str, payload: StudentCreate, store: EntityStore = Depends(get_store)):
    student = Student(id=student_id, **payload.model_dump())
    if not store.update_student(student):
        raise HTTPException(status_code=404, detail='Student not found')
    return student


@router.delete('/{student_id}')
def remove_student(student_id: str, store: EntityStore = Depends(get_store)):
    if not store.remove_student(student_id):
        raise HTTPException(status_code=404, detail='Student not found')
    return {'deleted': student_id}
