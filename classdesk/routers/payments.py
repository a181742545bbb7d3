from fastapi import APIRouter, Depends, HTTPException

from classdesk.models import PaymentStatus
from classdesk.schemas import PaymentCreate, PaymentStatusUpdateRequest
from classdesk.services.entity_store import EntityStore
from classdesk.services.finance_service import filter_payments, get_finance_summary
from classdesk.services.payment_period_service import generate_all_payment_periods
from classdesk.services.store_provider import get_store


router = APIRouter(prefix='/payments', tags=['Payments'])


@router.get('')
def list_payments(
    group_id: str | None = None,
    student_id: str | None = None,
    status: PaymentStatus | None = None,
    store: EntityStore = Depends(get_store),
):
    return filter_payments(store, group_id=group_id, student_id=student_id, status=status)


@router.get('/summary')
def payments_summary(
    group_id: str | None = None,
    student_id: str | None = None,
    store: EntityStore = Depends(get_store),
):
    return get_finance_summary(store, group_id=group_id, student_id=student_id)


@router.post('', status_code=201)
def create_payment(payload: PaymentCreate, store: EntityStore = Depends(get_store)):
    return store.add_payment(payload)


@router.post('/generate')
def generate_all(store: EntityStore = Depends(get_store)):
    return {'created': generate_all_payment_periods(store)}


@router.patch('/{payment_id}/status')
def update_status(payment_id: str, payload: PaymentStatusUpdateRequest, store: EntityStore = Depends(get_store)):
    if not store.update_payment_status(payment_id, payload.status):
        raise HTTPException(status_code=404, detail='Payment not found')
    return store.get_payment(payment_id)


@router.delete('/{payment_id}')
def delete_payment(payment_id: str, store: EntityStore = Depends(get_store)):
    if not store.delete_payment(payment_id):
        raise HTTPException(status_code=404, detail='Payment not found')
    return {'deleted': payment_id}
