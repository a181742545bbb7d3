from __future__ import annotations

from classdesk.schemas import Attendance, ClassRoomBooking, Group, Payment, Student
from classdesk.services.entity_store import EntityStore


def get_teacher_groups(store: EntityStore, teacher_id: str) -> list[Group]:
    return [group for group in store.groups if group.teacher_id == teacher_id]


def get_group_students(store: EntityStore, group_id: str) -> list[Student]:
    return [student for student in store.students if student.group_id == group_id]


def get_room_bookings(store: EntityStore, room_id: str, date: str | None = None) -> list[ClassRoomBooking]:
    if date:
        return [row for row in store.bookings if row.room_id == room_id and row.date == date]
    return [row for row in store.bookings if row.room_id == room_id]


def get_time_slot_bookings(store: EntityStore, date: str, start_time: str) -> list[ClassRoomBooking]:
    return [row for row in store.bookings if row.date == date and row.start_time == start_time]


def get_bookings_in_range(store: EntityStore, date_from: str, date_to: str) -> list[ClassRoomBooking]:
    # Plain string comparison; only valid for zero-padded yyyy-mm-dd dates.
    return [row for row in store.bookings if date_from <= row.date <= date_to]


def get_room_bookings_in_range(
    store: EntityStore,
    room_id: str,
    date_from: str,
    date_to: str,
) -> list[ClassRoomBooking]:
    return [row for row in get_bookings_in_range(store, date_from, date_to) if row.room_id == room_id]


def get_group_attendance(store: EntityStore, group_id: str) -> list[Attendance]:
    return [row for row in store.attendance if row.group_id == group_id]


def get_student_payments(store: EntityStore, student_id: str) -> list[Payment]:
    return [row for row in store.payments if row.student_id == student_id]


def get_group_payments(store: EntityStore, group_id: str) -> list[Payment]:
    member_ids = {student.id for student in get_group_students(store, group_id)}
    return [row for row in store.payments if row.student_id in member_ids]


def lessons_remaining(group: Group) -> int:
    return max(0, group.total_lessons - group.completed_lessons)


def completion_ratio(group: Group) -> float:
    if group.total_lessons <= 0:
        return 0.0
    done = min(max(group.completed_lessons, 0), group.total_lessons)
    return round(done / group.total_lessons, 4)
