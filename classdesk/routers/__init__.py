from classdesk.routers import attendance, bookings, classrooms, groups, payments, preferences, students, teachers

__all__ = [
    'attendance',
    'bookings',
    'classrooms',
    'groups',
    'payments',
    'preferences',
    'students',
    'teachers',
]
