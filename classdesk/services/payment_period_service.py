"""Billing-period synthesis for groups.

Per-lesson groups are billed in consecutive blocks of ``payment_period``
lessons covering ``[1, total_lessons]``; monthly groups once per calendar month
between their start and end dates. Generation only fills gaps: a payment that
already exists for the same student and the same exact lesson range (or month
token) is never created again.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta

from classdesk.config import settings
from classdesk.models import PaymentStatus, PaymentType
from classdesk.schemas import Group, Payment, PaymentCreate, Student
from classdesk.services.entity_store import EntityStore
from classdesk.services.view_service import get_group_students


logger = logging.getLogger(__name__)

_FALLBACK_PERIOD = 8

MONTH_LABELS = {
    'en': [
        'January', 'February', 'March', 'April', 'May', 'June',
        'July', 'August', 'September', 'October', 'November', 'December',
    ],
    'ru': [
        'Январь', 'Февраль', 'Март', 'Апрель', 'Май', 'Июнь',
        'Июль', 'Август', 'Сентябрь', 'Октябрь', 'Ноябрь', 'Декабрь',
    ],
}


def effective_period(group: Group) -> int:
    period = group.payment_period if group.payment_period is not None else settings.default_payment_period
    if period is None or period <= 0:
        logger.warning('payment_period_invalid group_id=%s payment_period=%s', group.id, group.payment_period)
        period = settings.default_payment_period if settings.default_payment_period > 0 else _FALLBACK_PERIOD
    return int(period)


def lesson_blocks(total_lessons: int, period: int) -> list[tuple[int, int]]:
    if period <= 0:
        raise ValueError('period must be positive')
    blocks: list[tuple[int, int]] = []
    start = 1
    while start <= total_lessons:
        end = min(start + period - 1, total_lessons)
        blocks.append((start, end))
        start += period
    return blocks


def block_status(completed_lessons: int, lesson_end: int) -> PaymentStatus:
    if completed_lessons >= lesson_end:
        return PaymentStatus.OVERDUE
    return PaymentStatus.PENDING


def add_months(start: date, months: int) -> date:
    """Add months keeping the day inside the target month (Jan 31 + 1 -> Feb 28/29)."""
    y = start.year + (start.month - 1 + months) // 12
    m = (start.month - 1 + months) % 12 + 1
    if m == 12:
        next_month = date(y + 1, 1, 1)
    else:
        next_month = date(y, m + 1, 1)
    last_day = next_month - timedelta(days=1)
    return date(y, m, min(start.day, last_day.day))


def billing_months(start_date: str, end_date: str) -> list[date]:
    try:
        start = date.fromisoformat(start_date)
        end = date.fromisoformat(end_date)
    except (TypeError, ValueError):
        logger.warning('billing_months_invalid_dates start=%s end=%s', start_date, end_date)
        return []
    months: list[date] = []
    step = 0
    current = start
    while current <= end:
        months.append(current)
        step += 1
        current = add_months(start, step)
    return months


def month_token(day: date) -> str:
    return f"{day.year:04d}-{day.month:02d}"


def month_label(day: date, locale: str | None = None) -> str:
    names = MONTH_LABELS.get(locale or settings.month_label_locale, MONTH_LABELS['en'])
    return f"{names[day.month - 1]} {day.year}"


def plan_payment_periods(
    group: Group,
    students: list[Student],
    existing: list[Payment],
    *,
    today: str,
) -> list[PaymentCreate]:
    """Drafts for every billing period of ``group`` not yet covered per student."""
    drafts: list[PaymentCreate] = []
    if group.payment_type == PaymentType.MONTHLY:
        fee = group.monthly_fee if group.monthly_fee is not None else settings.default_monthly_fee
        covered = {(row.student_id, row.month) for row in existing if row.month}
        for month in billing_months(group.start_date, group.end_date):
            token = month_token(month)
            for student in students:
                if (student.id, token) in covered:
                    continue
                covered.add((student.id, token))
                drafts.append(
                    PaymentCreate(
                        student_id=student.id,
                        amount=fee,
                        date=today,
                        status=PaymentStatus.PENDING,
                        period=month_label(month),
                        month=token,
                    )
                )
        return drafts

    period = effective_period(group)
    covered_ranges = {
        (row.student_id, row.lesson_start, row.lesson_end)
        for row in existing
        if row.lesson_start is not None and row.lesson_end is not None
    }
    blocks = lesson_blocks(group.total_lessons, period)
    for student in students:
        for lesson_start, lesson_end in blocks:
            key = (student.id, lesson_start, lesson_end)
            if key in covered_ranges:
                continue
            covered_ranges.add(key)
            drafts.append(
                PaymentCreate(
                    student_id=student.id,
                    amount=settings.default_lesson_block_amount,
                    date=today,
                    status=block_status(group.completed_lessons, lesson_end),
                    period=f"Lessons {lesson_start}-{lesson_end}",
                    lesson_start=lesson_start,
                    lesson_end=lesson_end,
                )
            )
    return drafts


def generate_payment_periods(store: EntityStore, group_id: str) -> list[Payment]:
    group = store.get_group(group_id)
    if not group:
        logger.warning('payment_generation_skipped reason=group_not_found group_id=%s', group_id)
        return []
    students = get_group_students(store, group_id)
    drafts = plan_payment_periods(group, students, store.payments, today=store.time_provider.today_iso())
    created = store.add_payments(drafts)
    logger.info(
        'payment_periods_generated group_id=%s type=%s created=%s',
        group_id,
        group.payment_type.value,
        len(created),
    )
    return created


def generate_all_payment_periods(store: EntityStore) -> int:
    total = 0
    for group in list(store.groups):
        total += len(generate_payment_periods(store, group.id))
    return total
