from __future__ import annotations

import logging

from classdesk.schemas import Attendance
from classdesk.services.entity_store import EntityStore
from classdesk.services.view_service import get_group_attendance, get_group_students


logger = logging.getLogger(__name__)


def find_attendance(store: EntityStore, group_id: str, date: str) -> Attendance | None:
    for row in get_group_attendance(store, group_id):
        if row.date == date:
            return row
    return None


def build_attendance(store: EntityStore, group_id: str, date: str, absent_ids: list[str] | None = None) -> Attendance:
    """Attendance sheet where each current student of the group is either present or absent.

    Everyone not listed in ``absent_ids`` is present; ids that do not belong to
    the group are dropped.
    """
    student_ids = [student.id for student in get_group_students(store, group_id)]
    absent = set(absent_ids or [])
    unknown = absent.difference(student_ids)
    if unknown:
        logger.warning('attendance_unknown_students group_id=%s ids=%s', group_id, sorted(unknown))
    return Attendance(
        session_id=f"{group_id}-{date}",
        date=date,
        group_id=group_id,
        present_students=[sid for sid in student_ids if sid not in absent],
        absent_students=[sid for sid in student_ids if sid in absent],
    )


def submit_attendance(store: EntityStore, group_id: str, date: str, absent_ids: list[str] | None = None) -> Attendance:
    return store.record_attendance(build_attendance(store, group_id, date, absent_ids))


def attendance_rate(store: EntityStore, group_id: str) -> float:
    present = 0
    total = 0
    for row in get_group_attendance(store, group_id):
        present += len(row.present_students)
        total += len(row.present_students) + len(row.absent_students)
    if total == 0:
        return 0.0
    return round(present / total, 4)
