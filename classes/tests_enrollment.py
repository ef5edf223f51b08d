"""
Enrollment ledger tests: enroll/unenroll history, active lookups, class archive.
"""
from datetime import date
from decimal import Decimal
from unittest import mock

from django.test import TestCase

from classes.models import DanceClass, Enrollment
from classes.services import (
    active_class_count,
    active_enrollments_for_class,
    active_enrollments_for_student,
    active_student_count,
    add_schedule,
    archive_class,
    create_class,
    enroll,
    enrollments_in_date_range,
    get_active_enrollment,
    is_enrolled,
    remove_schedule,
    unenroll,
    unenroll_from_all_classes,
)
from core.clock import FixedClock
from core.exceptions import (
    AlreadyEnrolled,
    ClassNotFound,
    InvalidArgument,
    NotEnrolled,
    ScheduleConflict,
    ScheduleNotFound,
    StudentNotFound,
)
from payments.models import Payment
from students.models import Student
from teachers.models import Teacher


class EnrollmentLedgerTests(TestCase):
    def setUp(self):
        self.student = Student.objects.create(first_name="Ana", last_name="Lopez", phone="1111")
        self.salsa = DanceClass.objects.create(name="Salsa", price=Decimal("5000.00"), duration_hours=Decimal("1.50"))
        self.tango = DanceClass.objects.create(name="Tango", price=Decimal("3000.00"), duration_hours=Decimal("1.00"))

    def test_enroll_creates_active_enrollment(self):
        enrollment = enroll(self.student.id, self.salsa.id, enrollment_date=date(2024, 1, 15), notes="trial")
        self.assertTrue(enrollment.is_active)
        self.assertEqual(enrollment.enrollment_date, date(2024, 1, 15))
        self.assertEqual(enrollment.enrollment_month, date(2024, 1, 1))
        self.assertTrue(is_enrolled(self.student.id, self.salsa.id))
        self.assertFalse(is_enrolled(self.student.id, self.tango.id))

    def test_enroll_defaults_to_clock_today(self):
        enrollment = enroll(self.student.id, self.salsa.id, clock=FixedClock(date(2024, 3, 2)))
        self.assertEqual(enrollment.enrollment_date, date(2024, 3, 2))

    def test_enroll_twice_raises_already_enrolled(self):
        enroll(self.student.id, self.salsa.id)
        with self.assertRaises(AlreadyEnrolled) as ctx:
            enroll(self.student.id, self.salsa.id)
        self.assertEqual(ctx.exception.context(), {'student_id': self.student.id, 'class_id': self.salsa.id})
        self.assertEqual(Enrollment.objects.count(), 1)

    def test_concurrent_enroll_hits_active_enrollment_constraint(self):
        enroll(self.student.id, self.salsa.id, enrollment_date=date(2024, 1, 15))
        # the pre-check sees nothing, as a request racing the first one would
        with mock.patch("classes.services.get_active_enrollment", return_value=None):
            with self.assertRaises(AlreadyEnrolled):
                enroll(self.student.id, self.salsa.id, enrollment_date=date(2024, 1, 16))
        self.assertEqual(Enrollment.objects.filter(is_active=True).count(), 1)
        self.assertTrue(is_enrolled(self.student.id, self.salsa.id))

    def test_enroll_unknown_ids(self):
        with self.assertRaises(StudentNotFound):
            enroll(999, self.salsa.id)
        with self.assertRaises(ClassNotFound):
            enroll(self.student.id, 999)

    def test_unenroll_deactivates_same_row(self):
        enrollment = enroll(self.student.id, self.salsa.id)
        result = unenroll(self.student.id, self.salsa.id)
        self.assertEqual(result.id, enrollment.id)
        enrollment.refresh_from_db()
        self.assertFalse(enrollment.is_active)
        self.assertFalse(is_enrolled(self.student.id, self.salsa.id))
        self.assertEqual(Enrollment.objects.count(), 1)

    def test_unenroll_without_active_enrollment_raises(self):
        with self.assertRaises(NotEnrolled):
            unenroll(self.student.id, self.salsa.id)

    def test_reenroll_creates_new_row_and_keeps_history(self):
        first = enroll(self.student.id, self.salsa.id, enrollment_date=date(2024, 1, 10))
        unenroll(self.student.id, self.salsa.id)
        second = enroll(self.student.id, self.salsa.id, enrollment_date=date(2024, 4, 1))
        self.assertNotEqual(first.id, second.id)
        self.assertEqual(Enrollment.objects.filter(student=self.student, dance_class=self.salsa).count(), 2)
        self.assertEqual(get_active_enrollment(self.student.id, self.salsa.id).id, second.id)

    def test_active_lookups(self):
        other = Student.objects.create(first_name="Luis", last_name="Perez", phone="2222")
        enroll(self.student.id, self.salsa.id, enrollment_date=date(2024, 1, 1))
        enroll(self.student.id, self.tango.id, enrollment_date=date(2024, 2, 1))
        enroll(other.id, self.salsa.id, enrollment_date=date(2024, 3, 1))
        unenroll(self.student.id, self.tango.id)

        self.assertEqual([e.dance_class_id for e in active_enrollments_for_student(self.student.id)], [self.salsa.id])
        self.assertEqual(
            [e.student_id for e in active_enrollments_for_class(self.salsa.id)],
            [self.student.id, other.id],
        )
        self.assertEqual(active_student_count(self.salsa.id), 2)
        self.assertEqual(active_class_count(self.student.id), 1)
        self.assertIsNone(get_active_enrollment(self.student.id, self.tango.id))

    def test_enrollments_in_date_range(self):
        enroll(self.student.id, self.salsa.id, enrollment_date=date(2024, 1, 5))
        enroll(self.student.id, self.tango.id, enrollment_date=date(2024, 2, 20))
        found = list(enrollments_in_date_range(date(2024, 1, 1), date(2024, 1, 31)))
        self.assertEqual([e.dance_class_id for e in found], [self.salsa.id])
        with self.assertRaises(InvalidArgument):
            enrollments_in_date_range(date(2024, 2, 1), date(2024, 1, 1))

    def test_unenroll_from_all_classes(self):
        enroll(self.student.id, self.salsa.id)
        enroll(self.student.id, self.tango.id)
        self.assertEqual(unenroll_from_all_classes(self.student.id), 2)
        self.assertEqual(active_class_count(self.student.id), 0)


class ClassCatalogueTests(TestCase):
    def setUp(self):
        self.student = Student.objects.create(first_name="Ana", last_name="Lopez", phone="1111")
        self.teacher = Teacher.objects.create(first_name="Marta", last_name="Diaz", phone="3333")

    def test_create_class_with_schedules(self):
        dance_class = create_class("Salsa", Decimal("5000.00"), Decimal("1.00"), schedules=[(1, 19, 0), (3, 19, 30)])
        self.assertEqual([s.slot for s in dance_class.schedules.all()], [(1, 19, 0), (3, 19, 30)])

    def test_create_class_rejects_duplicate_slots(self):
        with self.assertRaises(ScheduleConflict):
            create_class("Salsa", Decimal("5000.00"), Decimal("1.00"), schedules=[(1, 19, 0), (1, 19, 0)])
        self.assertFalse(DanceClass.objects.exists())

    def test_add_and_remove_schedule(self):
        dance_class = create_class("Salsa", Decimal("5000.00"), Decimal("1.00"))
        add_schedule(dance_class.id, 2, 18, 0)
        with self.assertRaises(ScheduleConflict):
            add_schedule(dance_class.id, 2, 18, 0)
        remove_schedule(dance_class.id, 2, 18, 0)
        self.assertFalse(dance_class.schedules.exists())
        with self.assertRaises(ScheduleNotFound):
            remove_schedule(dance_class.id, 2, 18, 0)

    def test_add_schedule_conflicting_with_teacher_other_class(self):
        salsa = create_class("Salsa", Decimal("5000.00"), Decimal("1.00"), schedules=[(1, 19, 0)])
        tango = create_class("Tango", Decimal("3000.00"), Decimal("1.00"))
        salsa.teachers.add(self.teacher)
        tango.teachers.add(self.teacher)
        with self.assertRaises(ScheduleConflict):
            add_schedule(tango.id, 1, 19, 0)

    def test_archive_class_keeps_payments(self):
        dance_class = create_class("Salsa", Decimal("5000.00"), Decimal("1.00"))
        dance_class.teachers.add(self.teacher)
        enroll(self.student.id, dance_class.id, enrollment_date=date(2024, 1, 1))
        Payment.objects.create(
            student=self.student, dance_class=dance_class, amount=Decimal("5000.00"),
            payment_date=date(2024, 1, 5), payment_month=date(2024, 1, 1),
        )

        archive_class(dance_class.id)

        dance_class.refresh_from_db()
        self.assertFalse(dance_class.is_active)
        self.assertIsNotNone(dance_class.deleted_at)
        self.assertFalse(dance_class.teachers.exists())
        self.assertFalse(is_enrolled(self.student.id, dance_class.id))
        self.assertEqual(Payment.objects.filter(dance_class=dance_class).count(), 1)
        with self.assertRaises(ClassNotFound):
            enroll(self.student.id, dance_class.id)
