import unittest
from datetime import datetime, timezone

from classdesk.core.time_provider import TimeProvider
from classdesk.models import PaymentStatus
from classdesk.schemas import PaymentCreate
from classdesk.services.attendance_service import attendance_rate, build_attendance, find_attendance, submit_attendance
from classdesk.services.finance_service import filter_payments, get_finance_summary
from classdesk.services.storage_service import MemoryBlobBackend
from classdesk.services.store_provider import build_store


class FixedTimeProvider(TimeProvider):
    def __init__(self, frozen_dt: datetime):
        self._frozen_dt = frozen_dt

    def now(self) -> datetime:
        return self._frozen_dt


class AttendanceServiceTests(unittest.TestCase):
    def setUp(self):
        self.store = build_store(
            MemoryBlobBackend(),
            time_provider=FixedTimeProvider(datetime(2025, 1, 8, 12, 0, tzinfo=timezone.utc)),
            seed_on_empty=True,
        )

    def test_sheet_splits_group_into_present_and_absent(self):
        with self.assertLogs('classdesk.services.attendance_service', level='WARNING'):
            record = build_attendance(self.store, '1', '2025-01-06', ['2', 'ghost'])
        self.assertEqual(record.present_students, ['1'])
        self.assertEqual(record.absent_students, ['2'])
        self.assertEqual(record.session_id, '1-2025-01-06')
        everyone = set(record.present_students) | set(record.absent_students)
        self.assertEqual(everyone, {'1', '2'})
        self.assertFalse(set(record.present_students) & set(record.absent_students))

    def test_default_sheet_marks_everyone_present(self):
        record = build_attendance(self.store, '2', '2025-01-07')
        self.assertEqual(record.present_students, ['3', '4'])
        self.assertEqual(record.absent_students, [])

    def test_resubmitting_same_day_keeps_one_record(self):
        submit_attendance(self.store, '1', '2025-01-06')
        submit_attendance(self.store, '1', '2025-01-06', ['1'])
        rows = [row for row in self.store.attendance if row.group_id == '1' and row.date == '2025-01-06']
        self.assertEqual(len(rows), 1)
        self.assertEqual(find_attendance(self.store, '1', '2025-01-06').absent_students, ['1'])
        self.assertIsNone(find_attendance(self.store, '1', '2025-01-09'))

    def test_attendance_rate(self):
        self.assertEqual(attendance_rate(self.store, '1'), 0.0)
        submit_attendance(self.store, '1', '2025-01-06')
        submit_attendance(self.store, '1', '2025-01-09', ['2'])
        self.assertEqual(attendance_rate(self.store, '1'), 0.75)


class FinanceServiceTests(unittest.TestCase):
    def setUp(self):
        self.store = build_store(
            MemoryBlobBackend(),
            time_provider=FixedTimeProvider(datetime(2025, 1, 8, 12, 0, tzinfo=timezone.utc)),
            seed_on_empty=True,
        )
        self.store.add_payment(PaymentCreate(student_id='1', amount=4000.0, date='2025-01-08', status=PaymentStatus.CONFIRMED))
        self.store.add_payment(PaymentCreate(student_id='2', amount=4000.0, date='2025-01-08', status=PaymentStatus.OVERDUE))
        self.store.add_payment(PaymentCreate(student_id='3', amount=2500.0, date='2025-01-08'))

    def test_summary_buckets_by_status(self):
        summary = get_finance_summary(self.store)
        self.assertEqual(summary['total_count'], 3)
        self.assertEqual(summary['total_amount'], 10500.0)
        self.assertEqual(summary['by_status']['confirmed'], {'count': 1, 'amount': 4000.0})
        self.assertEqual(summary['by_status']['overdue'], {'count': 1, 'amount': 4000.0})
        self.assertEqual(summary['by_status']['pending'], {'count': 1, 'amount': 2500.0})
        self.assertEqual(summary['outstanding_amount'], 6500.0)

    def test_summary_for_group(self):
        summary = get_finance_summary(self.store, group_id='1')
        self.assertEqual(summary['total_count'], 2)
        self.assertEqual(summary['by_status']['pending']['count'], 0)

    def test_filter_payments(self):
        self.assertEqual(len(filter_payments(self.store, group_id='1')), 2)
        self.assertEqual([p.student_id for p in filter_payments(self.store, student_id='3')], ['3'])
        overdue = filter_payments(self.store, status=PaymentStatus.OVERDUE)
        self.assertEqual([p.student_id for p in overdue], ['2'])
        self.assertEqual(filter_payments(self.store, group_id='1', student_id='3'), [])


if __name__ == '__main__':
    unittest.main()
