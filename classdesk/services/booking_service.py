from __future__ import annotations

import logging
from datetime import date, time, timedelta

from classdesk.schemas import ClassRoomBooking, Group


logger = logging.getLogger(__name__)

WEEKDAYS = ['Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday', 'Sunday']
# Day names as the dashboard stores them in group schedules.
WEEKDAYS_RU = ['Понедельник', 'Вторник', 'Среда', 'Четверг', 'Пятница', 'Суббота', 'Воскресенье']
TIME_SLOTS = ['09:00', '10:30', '12:00', '13:30', '15:00', '16:30', '18:00', '19:30']


def weekday_index(day: str) -> int | None:
    key = (day or '').strip().lower()[:3]
    if not key:
        return None
    for labels in (WEEKDAYS, WEEKDAYS_RU):
        for index, label in enumerate(labels):
            if label.lower()[:3] == key:
                return index
    return None


def monday_of(day: date) -> date:
    return day - timedelta(days=day.weekday())


def booking_id_for(group_id: str, booking_date: str, start_time: str) -> str:
    return f"booking-{group_id}-{booking_date}-{start_time}"


def generate_bookings_for_week(groups: list[Group], week_start: date) -> list[ClassRoomBooking]:
    """One booking per weekly session of every group, dated inside the week of ``week_start``.

    Sessions whose day is not a recognised weekday are skipped.
    """
    start = monday_of(week_start)
    bookings: list[ClassRoomBooking] = []
    for group in groups:
        for session in group.schedule:
            index = weekday_index(session.day)
            if index is None:
                continue
            booking_date = (start + timedelta(days=index)).isoformat()
            bookings.append(
                ClassRoomBooking(
                    id=booking_id_for(group.id, booking_date, session.start_time),
                    room_id=session.room_id,
                    group_id=group.id,
                    date=booking_date,
                    start_time=session.start_time,
                    end_time=session.end_time,
                    title=group.name,
                    teachers=[group.teacher_id],
                )
            )
    return bookings


def _booking_times(booking: ClassRoomBooking) -> tuple[time, time] | None:
    # Accepts HH:MM and HH:MM:SS.
    try:
        return time.fromisoformat(booking.start_time), time.fromisoformat(booking.end_time)
    except (TypeError, ValueError):
        logger.warning(
            'booking_time_unparseable booking_id=%s start_time=%s end_time=%s',
            booking.id,
            booking.start_time,
            booking.end_time,
        )
        return None


def bookings_overlap(first: ClassRoomBooking, second: ClassRoomBooking) -> bool:
    if first.room_id != second.room_id or first.date != second.date:
        return False
    first_times = _booking_times(first)
    second_times = _booking_times(second)
    if first_times is None or second_times is None:
        return False
    first_start, first_end = first_times
    second_start, second_end = second_times
    return not (first_end <= second_start or first_start >= second_end)


def find_room_conflicts(bookings: list[ClassRoomBooking]) -> list[tuple[str, str]]:
    """Pairs of booking ids sharing a room and date with intersecting times.

    Double-booking is allowed by the store; this only reports it. Bookings
    whose times do not parse are logged and left out.
    """
    timed = [booking for booking in bookings if _booking_times(booking) is not None]
    conflicts: list[tuple[str, str]] = []
    for i, first in enumerate(timed):
        for second in timed[i + 1:]:
            if bookings_overlap(first, second):
                conflicts.append((first.id, second.id))
    return conflicts
