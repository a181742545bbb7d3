from __future__ import annotations

from datetime import date

from classdesk.core.time_provider import TimeProvider, default_time_provider
from classdesk.models import PaymentType
from classdesk.schemas import ClassRoom, ClassRoomBooking, ClassSession, Group, Student, Teacher
from classdesk.services.booking_service import generate_bookings_for_week


def seed_teachers() -> list[Teacher]:
    return [
        Teacher(id='1', name='Ivan Ivanov', subject='Programming', groups=['1', '2']),
        Teacher(id='2', name='Elena Petrova', subject='Web Development', groups=['3']),
        Teacher(id='3', name='Alexey Sidorov', subject='Design', groups=[]),
    ]


def seed_classrooms() -> list[ClassRoom]:
    return [
        ClassRoom(id='1', name='Room 101', capacity=15),
        ClassRoom(id='2', name='Room 102', capacity=20),
        ClassRoom(id='3', name='Room 103', capacity=10),
    ]


def seed_students() -> list[Student]:
    return [
        Student(id='1', name='Artem Kozlov', contacts='+7 (900) 123-45-67', group_id='1'),
        Student(id='2', name='Anna Morozova', contacts='+7 (900) 765-43-21', group_id='1'),
        Student(id='3', name='Dmitry Volkov', contacts='+7 (900) 111-22-33', group_id='2'),
        Student(id='4', name='Maria Zaitseva', contacts='+7 (900) 444-55-66', group_id='2'),
        Student(id='5', name='Igor Sokolov', contacts='+7 (900) 777-88-99', group_id='3'),
    ]


def seed_groups() -> list[Group]:
    return [
        Group(
            id='1',
            name='Programming 1',
            teacher_id='1',
            schedule=[
                ClassSession(id='1-1', day='Monday', start_time='15:00', end_time='16:30', room_id='1'),
                ClassSession(id='1-2', day='Thursday', start_time='15:00', end_time='16:30', room_id='1'),
            ],
            start_date='2025-01-15',
            end_date='2025-05-15',
            total_lessons=32,
            completed_lessons=8,
            last_payment_date='2025-04-15',
            payment_type=PaymentType.PER_LESSON,
            payment_period=8,
        ),
        Group(
            id='2',
            name='Programming 2',
            teacher_id='1',
            schedule=[
                ClassSession(id='2-1', day='Tuesday', start_time='16:30', end_time='18:00', room_id='2'),
                ClassSession(id='2-2', day='Friday', start_time='16:30', end_time='18:00', room_id='2'),
            ],
            start_date='2025-02-01',
            end_date='2025-06-01',
            total_lessons=32,
            completed_lessons=6,
            last_payment_date='2025-04-01',
            payment_type=PaymentType.PER_LESSON,
            payment_period=8,
        ),
        Group(
            id='3',
            name='Web Development 1',
            teacher_id='2',
            schedule=[
                ClassSession(id='3-1', day='Wednesday', start_time='18:00', end_time='19:30', room_id='3'),
                ClassSession(id='3-2', day='Saturday', start_time='12:00', end_time='13:30', room_id='3'),
            ],
            start_date='2025-03-01',
            end_date='2025-07-01',
            total_lessons=32,
            completed_lessons=4,
            last_payment_date='2025-04-10',
            payment_type=PaymentType.MONTHLY,
            monthly_fee=8000.0,
        ),
    ]


def seed_bookings(*, time_provider: TimeProvider = default_time_provider, week_start: date | None = None) -> list[ClassRoomBooking]:
    return generate_bookings_for_week(seed_groups(), week_start or time_provider.week_start())
