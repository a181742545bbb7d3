from fastapi import APIRouter, Depends

from classdesk.schemas import PreferencesUpdateRequest
from classdesk.services.entity_store import EntityStore
from classdesk.services.store_provider import get_store, recent_notices


router = APIRouter(tags=['Preferences'])


def _preferences(store: EntityStore) -> dict:
    return {'selectedTeacherId': store.selected_teacher_id, 'viewMode': store.view_mode.value}


@router.get('/preferences')
def get_preferences(store: EntityStore = Depends(get_store)):
    return _preferences(store)


@router.put('/preferences')
def update_preferences(payload: PreferencesUpdateRequest, store: EntityStore = Depends(get_store)):
    if payload.selected_teacher_id is not None:
        store.set_selected_teacher_id(payload.selected_teacher_id)
    if payload.view_mode is not None:
        store.set_view_mode(payload.view_mode)
    return _preferences(store)


@router.get('/notices')
def list_notices():
    return recent_notices.items()


@router.get('/snapshot')
def storage_snapshot(store: EntityStore = Depends(get_store)):
    return store.snapshot()
