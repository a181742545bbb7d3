from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Any

from classdesk.config import settings
from classdesk.core.time_provider import TimeProvider, default_time_provider
from classdesk.models import PaymentStatus, ViewMode
from classdesk.schemas import (
    Attendance,
    ClassRoom,
    ClassRoomBooking,
    ClassRoomBookingCreate,
    ClassRoomCreate,
    Group,
    GroupCreate,
    Payment,
    PaymentCreate,
    Student,
    StudentCreate,
    Teacher,
    TeacherCreate,
)
from classdesk.services import seed_data
from classdesk.services.notification_service import Notice, NotificationBus
from classdesk.services.storage_service import (
    SLOT_ATTENDANCE,
    SLOT_BOOKINGS,
    SLOT_CLASSROOMS,
    SLOT_GROUPS,
    SLOT_PAYMENTS,
    SLOT_SELECTED_TEACHER_ID,
    SLOT_STUDENTS,
    SLOT_TEACHERS,
    SLOT_VIEW_MODE,
    StorageAdapter,
    parse_text,
)


logger = logging.getLogger(__name__)

_COLLECTION_SLOTS = {
    SLOT_TEACHERS: 'teachers',
    SLOT_GROUPS: 'groups',
    SLOT_CLASSROOMS: 'classrooms',
    SLOT_STUDENTS: 'students',
    SLOT_BOOKINGS: 'bookings',
    SLOT_ATTENDANCE: 'attendance',
    SLOT_PAYMENTS: 'payments',
}


def _find(items: list, record_id: str):
    for item in items:
        if item.id == record_id:
            return item
    return None


def _replace(items: list, record) -> bool:
    for index, item in enumerate(items):
        if item.id == record.id:
            items[index] = record
            return True
    return False


class EntityStore:
    """Single source of truth for the dashboard's collections.

    Every mutation rewrites the touched slot(s) through the storage adapter and
    publishes a ``Notice``. Lookups that miss are no-ops: update/delete return
    ``False`` instead of raising.
    """

    def __init__(
        self,
        adapter: StorageAdapter,
        *,
        notifier: NotificationBus | None = None,
        time_provider: TimeProvider = default_time_provider,
        seed_on_empty: bool | None = None,
    ) -> None:
        self.adapter = adapter
        self.notifier = notifier or NotificationBus()
        self.time_provider = time_provider
        self.seed_on_empty = settings.seed_on_empty if seed_on_empty is None else seed_on_empty
        self._lock = threading.RLock()
        self._last_id = 0

        self.teachers: list[Teacher] = []
        self.groups: list[Group] = []
        self.classrooms: list[ClassRoom] = []
        self.students: list[Student] = []
        self.bookings: list[ClassRoomBooking] = []
        self.attendance: list[Attendance] = []
        self.payments: list[Payment] = []
        self.selected_teacher_id: str = ''
        self.view_mode: ViewMode = ViewMode.WEEK

    # -- lifecycle -------------------------------------------------------

    def _defaults(self, factory: Callable[[], list]) -> Callable[[], list]:
        if self.seed_on_empty:
            return factory
        return list

    def load(self) -> dict[str, str]:
        """Populate every collection from storage, falling back to seed data.

        Slots that fell back are written back so storage mirrors memory.
        """
        sources: dict[str, str] = {}
        with self._lock:
            loaders: list[tuple[str, type, Callable[[], list]]] = [
                (SLOT_TEACHERS, Teacher, self._defaults(seed_data.seed_teachers)),
                (SLOT_GROUPS, Group, self._defaults(seed_data.seed_groups)),
                (SLOT_CLASSROOMS, ClassRoom, self._defaults(seed_data.seed_classrooms)),
                (SLOT_STUDENTS, Student, self._defaults(seed_data.seed_students)),
                (
                    SLOT_BOOKINGS,
                    ClassRoomBooking,
                    self._defaults(lambda: seed_data.seed_bookings(time_provider=self.time_provider)),
                ),
                (SLOT_ATTENDANCE, Attendance, list),
                (SLOT_PAYMENTS, Payment, list),
            ]
            for slot, model, factory in loaders:
                records, stored = self.adapter.load_collection(slot, model, factory)
                setattr(self, _COLLECTION_SLOTS[slot], records)
                sources[slot] = 'stored' if stored else 'default'

            self.selected_teacher_id, stored = self.adapter.load_scalar(SLOT_SELECTED_TEACHER_ID, '', parse_text)
            sources[SLOT_SELECTED_TEACHER_ID] = 'stored' if stored else 'default'
            self.view_mode, stored = self.adapter.load_scalar(SLOT_VIEW_MODE, ViewMode.WEEK, ViewMode)
            sources[SLOT_VIEW_MODE] = 'stored' if stored else 'default'

            self._last_id = self._max_numeric_id()
            defaulted = [slot for slot, source in sources.items() if source == 'default']
            self._persist(*defaulted)
        logger.info('entity_store_loaded sources=%s', sources)
        return sources

    def snapshot(self) -> dict[str, Any]:
        with self._lock:
            payload: dict[str, Any] = {
                slot: [record.to_json() for record in getattr(self, attr)]
                for slot, attr in _COLLECTION_SLOTS.items()
            }
            payload[SLOT_SELECTED_TEACHER_ID] = self.selected_teacher_id
            payload[SLOT_VIEW_MODE] = self.view_mode.value
            return payload

    def _max_numeric_id(self) -> int:
        highest = 0
        for attr in _COLLECTION_SLOTS.values():
            for record in getattr(self, attr):
                record_id = getattr(record, 'id', '')
                if isinstance(record_id, str) and record_id.isdigit():
                    highest = max(highest, int(record_id))
        return highest

    def _new_id(self) -> str:
        # Millisecond clock, bumped past the last issued value within the same tick.
        candidate = int(self.time_provider.now().timestamp() * 1000)
        if candidate <= self._last_id:
            candidate = self._last_id + 1
        self._last_id = candidate
        return str(candidate)

    def _persist(self, *slots: str) -> None:
        for slot in slots:
            if slot == SLOT_SELECTED_TEACHER_ID:
                self.adapter.save(slot, self.selected_teacher_id)
            elif slot == SLOT_VIEW_MODE:
                self.adapter.save(slot, self.view_mode.value)
            else:
                self.adapter.save_records(slot, getattr(self, _COLLECTION_SLOTS[slot]))

    def _notify(self, title: str, description: str, kind: str = 'info') -> None:
        self.notifier.notify(Notice(title=title, description=description, kind=kind))

    # -- lookups ---------------------------------------------------------

    def get_teacher(self, teacher_id: str) -> Teacher | None:
        return _find(self.teachers, teacher_id)

    def get_group(self, group_id: str) -> Group | None:
        return _find(self.groups, group_id)

    def get_student(self, student_id: str) -> Student | None:
        return _find(self.students, student_id)

    def get_classroom(self, room_id: str) -> ClassRoom | None:
        return _find(self.classrooms, room_id)

    def get_booking(self, booking_id: str) -> ClassRoomBooking | None:
        return _find(self.bookings, booking_id)

    def get_payment(self, payment_id: str) -> Payment | None:
        return _find(self.payments, payment_id)

    # -- teachers --------------------------------------------------------

    def add_teacher(self, draft: TeacherCreate) -> Teacher:
        with self._lock:
            teacher = Teacher(id=self._new_id(), **draft.model_dump(exclude={'id'}))
            self.teachers.append(teacher)
            self._persist(SLOT_TEACHERS)
        self._notify('Teacher added', f"{teacher.name} was added.")
        return teacher

    def update_teacher(self, teacher: Teacher) -> bool:
        with self._lock:
            if not _replace(self.teachers, teacher):
                logger.warning('update_missing entity=teacher id=%s', teacher.id)
                return False
            self._persist(SLOT_TEACHERS)
        self._notify('Teacher updated', f"{teacher.name} was updated.")
        return True

    def delete_teacher(self, teacher_id: str) -> bool:
        with self._lock:
            teacher = self.get_teacher(teacher_id)
            if not teacher:
                logger.warning('delete_missing entity=teacher id=%s', teacher_id)
                return False
            self.teachers = [row for row in self.teachers if row.id != teacher_id]
            if self.selected_teacher_id == teacher_id:
                self.selected_teacher_id = ''
                self._persist(SLOT_SELECTED_TEACHER_ID)
            self._persist(SLOT_TEACHERS)
        self._notify('Teacher removed', f"{teacher.name} was removed.")
        return True

    # -- groups ----------------------------------------------------------

    def _link_group_to_teacher(self, group_id: str, teacher_id: str) -> None:
        teacher = self.get_teacher(teacher_id)
        if teacher and group_id not in teacher.groups:
            teacher.groups.append(group_id)

    def _unlink_group(self, group_id: str) -> None:
        for teacher in self.teachers:
            if group_id in teacher.groups:
                teacher.groups = [gid for gid in teacher.groups if gid != group_id]

    def add_group(self, draft: GroupCreate) -> Group:
        with self._lock:
            group = Group(id=self._new_id(), **draft.model_dump(exclude={'id'}))
            self.groups.append(group)
            self._link_group_to_teacher(group.id, group.teacher_id)
            self._persist(SLOT_GROUPS, SLOT_TEACHERS)
        self._notify('Group created', f"Group {group.name} was created.")
        return group

    def update_group(self, group: Group) -> bool:
        with self._lock:
            previous = self.get_group(group.id)
            if not previous:
                logger.warning('update_missing entity=group id=%s', group.id)
                return False
            previous_teacher_id = previous.teacher_id
            _replace(self.groups, group)
            if previous_teacher_id != group.teacher_id:
                self._unlink_group(group.id)
                self._link_group_to_teacher(group.id, group.teacher_id)
            self._persist(SLOT_GROUPS, SLOT_TEACHERS)
        self._notify('Group updated', f"Group {group.name} was updated.")
        return True

    def delete_group(self, group_id: str) -> bool:
        """Remove a group with its students, bookings, attendance and the students' payments."""
        with self._lock:
            group = self.get_group(group_id)
            if not group:
                logger.warning('delete_missing entity=group id=%s', group_id)
                return False
            member_ids = {student.id for student in self.students if student.group_id == group_id}
            self.groups = [row for row in self.groups if row.id != group_id]
            self.students = [row for row in self.students if row.group_id != group_id]
            self.bookings = [row for row in self.bookings if row.group_id != group_id]
            self.payments = [row for row in self.payments if row.student_id not in member_ids]
            self.attendance = [row for row in self.attendance if row.group_id != group_id]
            self._unlink_group(group_id)
            self._persist(SLOT_GROUPS, SLOT_STUDENTS, SLOT_BOOKINGS, SLOT_PAYMENTS, SLOT_ATTENDANCE, SLOT_TEACHERS)
        logger.info('group_deleted id=%s students_removed=%s', group_id, len(member_ids))
        self._notify('Group deleted', f"Group {group.name} was deleted.")
        return True

    # -- students --------------------------------------------------------

    def add_student(self, draft: StudentCreate) -> Student:
        with self._lock:
            student = Student(id=self._new_id(), **draft.model_dump(exclude={'id'}))
            self.students.append(student)
            self._persist(SLOT_STUDENTS)
        self._notify('Student added', f"{student.name} was added to the group.")
        return student

    def update_student(self, student: Student) -> bool:
        with self._lock:
            if not _replace(self.students, student):
                logger.warning('update_missing entity=student id=%s', student.id)
                return False
            self._persist(SLOT_STUDENTS)
        self._notify('Student updated', f"{student.name} was updated.")
        return True

    def remove_student(self, student_id: str) -> bool:
        with self._lock:
            student = self.get_student(student_id)
            if not student:
                logger.warning('delete_missing entity=student id=%s', student_id)
                return False
            self.students = [row for row in self.students if row.id != student_id]
            self.payments = [row for row in self.payments if row.student_id != student_id]
            self._persist(SLOT_STUDENTS, SLOT_PAYMENTS)
        self._notify('Student removed', f"{student.name} was removed from the group.")
        return True

    # -- classrooms ------------------------------------------------------

    def add_classroom(self, draft: ClassRoomCreate) -> ClassRoom:
        with self._lock:
            room = ClassRoom(id=self._new_id(), **draft.model_dump(exclude={'id'}))
            self.classrooms.append(room)
            self._persist(SLOT_CLASSROOMS)
        self._notify('Classroom added', f"{room.name} was added.")
        return room

    def update_classroom(self, room: ClassRoom) -> bool:
        with self._lock:
            if not _replace(self.classrooms, room):
                logger.warning('update_missing entity=classroom id=%s', room.id)
                return False
            self._persist(SLOT_CLASSROOMS)
        self._notify('Classroom updated', f"{room.name} was updated.")
        return True

    def delete_classroom(self, room_id: str) -> bool:
        with self._lock:
            room = self.get_classroom(room_id)
            if not room:
                logger.warning('delete_missing entity=classroom id=%s', room_id)
                return False
            self.classrooms = [row for row in self.classrooms if row.id != room_id]
            self._persist(SLOT_CLASSROOMS)
        self._notify('Classroom removed', f"{room.name} was removed.")
        return True

    # -- bookings --------------------------------------------------------

    def add_booking(self, draft: ClassRoomBookingCreate) -> ClassRoomBooking:
        with self._lock:
            booking = ClassRoomBooking(id=self._new_id(), **draft.model_dump(exclude={'id'}))
            self.bookings.append(booking)
            self._persist(SLOT_BOOKINGS)
        self._notify(
            'Booking created',
            f"Room booked on {booking.date} from {booking.start_time} to {booking.end_time}.",
        )
        return booking

    def add_generated_bookings(self, bookings: list[ClassRoomBooking]) -> list[ClassRoomBooking]:
        """Append bookings that already carry ids, skipping ids already present."""
        with self._lock:
            existing = {row.id for row in self.bookings}
            created = [row for row in bookings if row.id not in existing]
            if not created:
                return []
            self.bookings.extend(created)
            self._persist(SLOT_BOOKINGS)
        self._notify('Bookings generated', f"{len(created)} bookings were added to the schedule.")
        return created

    def update_booking(self, booking: ClassRoomBooking) -> bool:
        with self._lock:
            if not _replace(self.bookings, booking):
                logger.warning('update_missing entity=booking id=%s', booking.id)
                return False
            self._persist(SLOT_BOOKINGS)
        self._notify('Booking updated', 'The booking was updated.')
        return True

    def delete_booking(self, booking_id: str) -> bool:
        with self._lock:
            if not self.get_booking(booking_id):
                logger.warning('delete_missing entity=booking id=%s', booking_id)
                return False
            self.bookings = [row for row in self.bookings if row.id != booking_id]
            self._persist(SLOT_BOOKINGS)
        self._notify('Booking deleted', 'The room booking was deleted.')
        return True

    # -- attendance ------------------------------------------------------

    def record_attendance(self, record: Attendance) -> Attendance:
        """Upsert keyed by (group_id, date); session_id is rebuilt as a label."""
        record = record.model_copy(update={'session_id': f"{record.group_id}-{record.date}"})
        with self._lock:
            for index, row in enumerate(self.attendance):
                if row.group_id == record.group_id and row.date == record.date:
                    self.attendance[index] = record
                    break
            else:
                self.attendance.append(record)
            self._persist(SLOT_ATTENDANCE)
        self._notify('Attendance recorded', 'Attendance for the group was recorded.')
        return record

    # -- payments --------------------------------------------------------

    def add_payment(self, draft: PaymentCreate) -> Payment:
        with self._lock:
            payment = Payment(id=self._new_id(), **draft.model_dump(exclude={'id'}))
            self.payments.append(payment)
            self._persist(SLOT_PAYMENTS)
        self._notify('Payment added', f"Payment for {payment.period or payment.date} was added.")
        return payment

    def add_payments(self, drafts: list[PaymentCreate]) -> list[Payment]:
        if not drafts:
            return []
        with self._lock:
            created = [Payment(id=self._new_id(), **draft.model_dump(exclude={'id'})) for draft in drafts]
            self.payments.extend(created)
            self._persist(SLOT_PAYMENTS)
        self._notify('Payment periods generated', f"{len(created)} payment periods were created.")
        return created

    def update_payment_status(self, payment_id: str, status: PaymentStatus) -> bool:
        with self._lock:
            payment = self.get_payment(payment_id)
            if not payment:
                logger.warning('update_missing entity=payment id=%s', payment_id)
                return False
            updated = payment.model_copy(update={'status': PaymentStatus(status)})
            _replace(self.payments, updated)
            self._persist(SLOT_PAYMENTS)
        self._notify('Payment status updated', f"Payment {updated.period} is now {updated.status.value}.")
        return True

    def delete_payment(self, payment_id: str) -> bool:
        with self._lock:
            if not self.get_payment(payment_id):
                logger.warning('delete_missing entity=payment id=%s', payment_id)
                return False
            self.payments = [row for row in self.payments if row.id != payment_id]
            self._persist(SLOT_PAYMENTS)
        self._notify('Payment deleted', 'The payment was deleted.')
        return True

    # -- preferences -----------------------------------------------------

    def set_selected_teacher_id(self, teacher_id: str) -> None:
        with self._lock:
            self.selected_teacher_id = teacher_id or ''
            self._persist(SLOT_SELECTED_TEACHER_ID)

    def set_view_mode(self, view_mode: ViewMode | str) -> None:
        with self._lock:
            self.view_mode = ViewMode(view_mode)
            self._persist(SLOT_VIEW_MODE)
