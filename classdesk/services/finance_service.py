from __future__ import annotations

from classdesk.models import PaymentStatus
from classdesk.schemas import Payment
from classdesk.services.entity_store import EntityStore
from classdesk.services.view_service import get_group_payments


def _select_payments(store: EntityStore, group_id: str | None, student_id: str | None) -> list[Payment]:
    if group_id:
        rows = get_group_payments(store, group_id)
    else:
        rows = list(store.payments)
    if student_id:
        rows = [row for row in rows if row.student_id == student_id]
    return rows


def filter_payments(
    store: EntityStore,
    *,
    group_id: str | None = None,
    student_id: str | None = None,
    status: PaymentStatus | None = None,
) -> list[Payment]:
    rows = _select_payments(store, group_id, student_id)
    if status:
        rows = [row for row in rows if row.status == status]
    return rows


def get_finance_summary(store: EntityStore, *, group_id: str | None = None, student_id: str | None = None) -> dict:
    rows = _select_payments(store, group_id, student_id)
    summary = {
        status.value: {'count': 0, 'amount': 0.0}
        for status in (PaymentStatus.PENDING, PaymentStatus.CONFIRMED, PaymentStatus.OVERDUE)
    }
    for row in rows:
        bucket = summary[row.status.value]
        bucket['count'] += 1
        bucket['amount'] += float(row.amount)
    return {
        'by_status': summary,
        'total_count': len(rows),
        'total_amount': sum(float(row.amount) for row in rows),
        'outstanding_amount': summary['pending']['amount'] + summary['overdue']['amount'],
    }
