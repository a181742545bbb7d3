import unittest
from datetime import date, datetime, timezone

from classdesk.core.time_provider import TimeProvider
from classdesk.models import PaymentStatus, PaymentType
from classdesk.schemas import Group, GroupCreate, Payment, PaymentCreate, Student, StudentCreate, TeacherCreate
from classdesk.services.payment_period_service import (
    add_months,
    billing_months,
    generate_all_payment_periods,
    generate_payment_periods,
    lesson_blocks,
    plan_payment_periods,
)
from classdesk.services.storage_service import MemoryBlobBackend
from classdesk.services.store_provider import build_store


class FixedTimeProvider(TimeProvider):
    def __init__(self, frozen_dt: datetime):
        self._frozen_dt = frozen_dt

    def now(self) -> datetime:
        return self._frozen_dt


def _group(**overrides) -> Group:
    values = {
        'id': 'g1',
        'name': 'Programming 1',
        'teacher_id': 't1',
        'start_date': '2025-01-15',
        'end_date': '2025-05-15',
        'total_lessons': 32,
        'completed_lessons': 10,
        'payment_type': PaymentType.PER_LESSON,
        'payment_period': 8,
    }
    values.update(overrides)
    return Group(**values)


class PlanPaymentPeriodsTests(unittest.TestCase):
    def test_per_lesson_example_scenario(self):
        drafts = plan_payment_periods(
            _group(),
            [Student(id='s1', name='Artem', group_id='g1')],
            [],
            today='2025-01-10',
        )
        self.assertEqual(
            [(d.lesson_start, d.lesson_end) for d in drafts],
            [(1, 8), (9, 16), (17, 24), (25, 32)],
        )
        self.assertEqual(
            [d.status for d in drafts],
            [PaymentStatus.OVERDUE, PaymentStatus.PENDING, PaymentStatus.PENDING, PaymentStatus.PENDING],
        )
        self.assertEqual(drafts[1].period, 'Lessons 9-16')
        self.assertTrue(all(d.date == '2025-01-10' for d in drafts))
        self.assertTrue(all(d.month is None for d in drafts))

    def test_new_group_never_starts_overdue(self):
        drafts = plan_payment_periods(
            _group(completed_lessons=0),
            [Student(id='s1', name='Artem', group_id='g1')],
            [],
            today='2025-01-10',
        )
        self.assertTrue(all(d.status == PaymentStatus.PENDING for d in drafts))

    def test_blocks_tile_lesson_range(self):
        for total, period in ((32, 8), (30, 8), (1, 8), (7, 3), (12, 12), (13, 1)):
            blocks = lesson_blocks(total, period)
            self.assertEqual(blocks[0][0], 1)
            self.assertEqual(blocks[-1][1], total)
            for (_, prev_end), (next_start, _) in zip(blocks, blocks[1:]):
                self.assertEqual(next_start, prev_end + 1)
            for start, end in blocks[:-1]:
                self.assertEqual(end - start + 1, period)
            self.assertLessEqual(blocks[-1][1] - blocks[-1][0] + 1, period)

    def test_final_block_may_be_shorter(self):
        self.assertEqual(lesson_blocks(30, 8), [(1, 8), (9, 16), (17, 24), (25, 30)])

    def test_zero_lessons_produce_nothing(self):
        drafts = plan_payment_periods(
            _group(total_lessons=0),
            [Student(id='s1', name='Artem', group_id='g1')],
            [],
            today='2025-01-10',
        )
        self.assertEqual(drafts, [])

    def test_non_positive_period_falls_back_to_default(self):
        with self.assertLogs('classdesk.services.payment_period_service', level='WARNING'):
            drafts = plan_payment_periods(
                _group(total_lessons=16, payment_period=-3),
                [Student(id='s1', name='Artem', group_id='g1')],
                [],
                today='2025-01-10',
            )
        self.assertEqual([(d.lesson_start, d.lesson_end) for d in drafts], [(1, 8), (9, 16)])

    def test_missing_period_uses_default(self):
        drafts = plan_payment_periods(
            _group(total_lessons=16, payment_period=None),
            [Student(id='s1', name='Artem', group_id='g1')],
            [],
            today='2025-01-10',
        )
        self.assertEqual(len(drafts), 2)

    def test_duplicate_detection_is_exact_range_match(self):
        existing = [
            Payment(id='p1', student_id='s1', amount=1.0, date='2025-01-01', lesson_start=1, lesson_end=8),
            Payment(id='p2', student_id='s1', amount=1.0, date='2025-01-01', lesson_start=9, lesson_end=20),
        ]
        drafts = plan_payment_periods(
            _group(),
            [Student(id='s1', name='Artem', group_id='g1')],
            existing,
            today='2025-01-10',
        )
        self.assertEqual(
            [(d.lesson_start, d.lesson_end) for d in drafts],
            [(9, 16), (17, 24), (25, 32)],
        )

    def test_monthly_covers_every_month_per_student(self):
        group = _group(
            payment_type=PaymentType.MONTHLY,
            start_date='2025-03-01',
            end_date='2025-07-01',
            monthly_fee=9000.0,
        )
        students = [Student(id='s1', name='A', group_id='g1'), Student(id='s2', name='B', group_id='g1')]
        drafts = plan_payment_periods(group, students, [], today='2025-03-01')
        self.assertEqual(len(drafts), 10)
        self.assertEqual(
            sorted({d.month for d in drafts}),
            ['2025-03', '2025-04', '2025-05', '2025-06', '2025-07'],
        )
        self.assertTrue(all(d.amount == 9000.0 for d in drafts))
        self.assertTrue(all(d.status == PaymentStatus.PENDING for d in drafts))
        self.assertTrue(all(d.lesson_start is None for d in drafts))
        self.assertEqual(drafts[0].period, 'March 2025')

    def test_monthly_skips_months_already_billed(self):
        group = _group(payment_type=PaymentType.MONTHLY, start_date='2025-03-01', end_date='2025-05-01')
        existing = [Payment(id='p1', student_id='s1', amount=1.0, date='2025-03-01', month='2025-04')]
        drafts = plan_payment_periods(group, [Student(id='s1', name='A', group_id='g1')], existing, today='2025-03-01')
        self.assertEqual([d.month for d in drafts], ['2025-03', '2025-05'])

    def test_monthly_end_before_start_produces_nothing(self):
        group = _group(payment_type=PaymentType.MONTHLY, start_date='2025-05-01', end_date='2025-03-01')
        drafts = plan_payment_periods(group, [Student(id='s1', name='A', group_id='g1')], [], today='2025-03-01')
        self.assertEqual(drafts, [])

    def test_billing_months_step_from_start_day(self):
        months = billing_months('2025-01-31', '2025-03-30')
        self.assertEqual(months, [date(2025, 1, 31), date(2025, 2, 28)])
        self.assertEqual(add_months(date(2024, 1, 31), 1), date(2024, 2, 29))
        self.assertEqual(add_months(date(2025, 11, 15), 2), date(2026, 1, 15))

    def test_billing_months_invalid_dates(self):
        with self.assertLogs('classdesk.services.payment_period_service', level='WARNING'):
            self.assertEqual(billing_months('not-a-date', '2025-03-01'), [])


class GeneratePaymentPeriodsTests(unittest.TestCase):
    def setUp(self):
        self.store = build_store(
            MemoryBlobBackend(),
            time_provider=FixedTimeProvider(datetime(2025, 2, 3, 10, 0, tzinfo=timezone.utc)),
            seed_on_empty=False,
        )
        teacher = self.store.add_teacher(TeacherCreate(name='Ivan Ivanov', subject='Programming'))
        self.group = self.store.add_group(
            GroupCreate(
                name='Programming 1',
                teacher_id=teacher.id,
                start_date='2025-01-15',
                end_date='2025-05-15',
                total_lessons=32,
                completed_lessons=10,
                payment_period=8,
            )
        )
        self.student = self.store.add_student(StudentCreate(name='Artem', group_id=self.group.id))

    def test_generation_is_idempotent(self):
        first = generate_payment_periods(self.store, self.group.id)
        self.assertEqual(len(first), 4)
        snapshot = [row.to_json() for row in self.store.payments]
        second = generate_payment_periods(self.store, self.group.id)
        self.assertEqual(second, [])
        self.assertEqual([row.to_json() for row in self.store.payments], snapshot)

    def test_created_payments_use_store_clock(self):
        created = generate_payment_periods(self.store, self.group.id)
        self.assertTrue(all(row.date == '2025-02-03' for row in created))
        self.assertEqual(len({row.id for row in created}), 4)

    def test_late_student_only_fills_their_gaps(self):
        generate_payment_periods(self.store, self.group.id)
        newcomer = self.store.add_student(StudentCreate(name='Anna', group_id=self.group.id))
        created = generate_payment_periods(self.store, self.group.id)
        self.assertEqual(len(created), 4)
        self.assertTrue(all(row.student_id == newcomer.id for row in created))
        self.assertEqual(len(self.store.payments), 8)

    def test_unknown_group_generates_nothing(self):
        self.assertEqual(generate_payment_periods(self.store, 'missing'), [])
        self.assertEqual(self.store.payments, [])

    def test_generate_all_groups(self):
        monthly = self.store.add_group(
            GroupCreate(
                name='Web 1',
                teacher_id=self.group.teacher_id,
                start_date='2025-03-01',
                end_date='2025-04-01',
                payment_type=PaymentType.MONTHLY,
            )
        )
        self.store.add_student(StudentCreate(name='Igor', group_id=monthly.id))
        self.assertEqual(generate_all_payment_periods(self.store), 6)
        self.assertEqual(generate_all_payment_periods(self.store), 0)

    def test_manual_payment_counts_as_coverage(self):
        self.store.add_payment(
            PaymentCreate(
                student_id=self.student.id,
                amount=4000.0,
                date='2025-01-15',
                status=PaymentStatus.CONFIRMED,
                period='Lessons 1-8',
                lesson_start=1,
                lesson_end=8,
            )
        )
        created = generate_payment_periods(self.store, self.group.id)
        self.assertEqual([(row.lesson_start, row.lesson_end) for row in created], [(9, 16), (17, 24), (25, 32)])


if __name__ == '__main__':
    unittest.main()
