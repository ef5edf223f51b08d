"""
Reporting tests: outstanding balances (today-based surcharge), teacher compensation,
monthly financials, class report, management command.
"""
from datetime import date
from decimal import Decimal
from io import StringIO

from django.core.management import call_command
from django.test import TestCase

from classes.models import DanceClass
from classes.services import enroll, unenroll
from core.clock import FixedClock
from core.exceptions import ClassNotFound, StudentNotFound
from payments.services import delete_payment, register_payment
from reports.services import (
    class_report,
    compute_outstanding,
    dashboard_metrics,
    monthly_financial_report,
    outstanding_for_student,
    outstanding_report,
    teacher_compensation_report,
)
from students.models import Student
from teachers.models import Teacher

FEB = date(2024, 2, 1)
EARLY_FEB = FixedClock(date(2024, 2, 5))
LATE_FEB = FixedClock(date(2024, 2, 15))


class OutstandingTests(TestCase):
    def setUp(self):
        self.ana = Student.objects.create(first_name="Ana", last_name="Alvarez", phone="1")
        self.bruno = Student.objects.create(first_name="Bruno", last_name="Benitez", phone="2")
        self.salsa = DanceClass.objects.create(name="Salsa", price=Decimal("5000.00"), duration_hours=Decimal("1.00"))
        self.tango = DanceClass.objects.create(name="Tango", price=Decimal("3000.00"), duration_hours=Decimal("1.00"))
        enroll(self.ana.id, self.salsa.id, enrollment_date=date(2024, 1, 15))
        enroll(self.ana.id, self.tango.id, enrollment_date=date(2024, 1, 20))
        enroll(self.bruno.id, self.salsa.id, enrollment_date=date(2024, 2, 2))

    def test_unpaid_classes_at_base_price_before_the_tenth(self):
        outstanding = compute_outstanding(FEB, clock=EARLY_FEB)
        self.assertEqual(set(outstanding), {self.ana, self.bruno})
        amounts = {i.dance_class.id: i.expected_amount for i in outstanding[self.ana]}
        self.assertEqual(amounts, {self.salsa.id: Decimal("5000.00"), self.tango.id: Decimal("3000.00")})
        self.assertTrue(all(not i.is_late for i in outstanding[self.ana]))

    def test_surcharge_applies_after_the_tenth_of_the_same_month(self):
        outstanding = compute_outstanding(FEB, clock=LATE_FEB)
        amounts = {i.dance_class.id: i.expected_amount for i in outstanding[self.ana]}
        self.assertEqual(amounts, {self.salsa.id: Decimal("5750.00"), self.tango.id: Decimal("3450.00")})
        self.assertTrue(all(i.is_late for i in outstanding[self.ana]))

    def test_no_surcharge_when_today_is_in_a_later_month(self):
        outstanding = compute_outstanding(FEB, clock=FixedClock(date(2024, 3, 20)))
        self.assertEqual(outstanding[self.bruno][0].expected_amount, Decimal("5000.00"))

    def test_enrollment_after_month_is_excluded(self):
        outstanding = compute_outstanding(date(2024, 1, 1), clock=EARLY_FEB)
        self.assertNotIn(self.bruno, outstanding)
        self.assertEqual(len(outstanding[self.ana]), 2)

    def test_paid_classes_are_excluded_and_fully_paid_students_omitted(self):
        register_payment(self.bruno.id, self.salsa.id, Decimal("5000.00"), FEB, payment_date=date(2024, 2, 3))
        register_payment(self.ana.id, self.salsa.id, Decimal("100.00"), FEB, payment_date=date(2024, 2, 3))
        outstanding = compute_outstanding(FEB, clock=EARLY_FEB)
        self.assertNotIn(self.bruno, outstanding)
        self.assertEqual([i.dance_class.id for i in outstanding[self.ana]], [self.tango.id])

    def test_deleting_payment_reincludes_class(self):
        payment = register_payment(self.bruno.id, self.salsa.id, Decimal("5000.00"), FEB, payment_date=date(2024, 2, 3))
        self.assertNotIn(self.bruno, compute_outstanding(FEB, clock=EARLY_FEB))
        delete_payment(payment.id)
        self.assertIn(self.bruno, compute_outstanding(FEB, clock=EARLY_FEB))

    def test_inactive_enrollments_are_ignored(self):
        unenroll(self.bruno.id, self.salsa.id)
        self.assertNotIn(self.bruno, compute_outstanding(FEB, clock=EARLY_FEB))

    def test_outstanding_for_student(self):
        items = outstanding_for_student(self.ana.id, FEB, clock=LATE_FEB)
        self.assertEqual(sorted(i.expected_amount for i in items), [Decimal("3450.00"), Decimal("5750.00")])
        with self.assertRaises(StudentNotFound):
            outstanding_for_student(999, FEB)

    def test_outstanding_report_totals(self):
        report = outstanding_report(FEB, clock=EARLY_FEB)
        self.assertEqual(report.students_with_outstanding, 2)
        self.assertEqual(report.total_outstanding_amount, Decimal("13000.00"))

    def test_management_command(self):
        out = StringIO()
        call_command('outstanding_report', '2024-02', '--today', '2024-02-15', stdout=out)
        output = out.getvalue()
        self.assertIn('Ana Alvarez', output)
        self.assertIn('5750.00 LATE', output)
        self.assertIn('2 students, total 14950.00', output)


class CompensationAndFinancialTests(TestCase):
    def setUp(self):
        self.student = Student.objects.create(first_name="Sofia", last_name="Gomez", phone="1")
        self.other = Student.objects.create(first_name="Tomas", last_name="Ruiz", phone="2")
        self.teacher = Teacher.objects.create(first_name="Marta", last_name="Diaz", phone="3")
        self.owner = Teacher.objects.create(first_name="Elena", last_name="Sosa", phone="4", is_studio_owner=True)
        self.salsa = DanceClass.objects.create(name="Salsa", price=Decimal("5000.00"), duration_hours=Decimal("1.00"))
        self.tango = DanceClass.objects.create(name="Tango", price=Decimal("3000.00"), duration_hours=Decimal("1.00"))
        self.jazz = DanceClass.objects.create(name="Jazz", price=Decimal("2000.00"), duration_hours=Decimal("1.00"))
        self.salsa.teachers.add(self.teacher)
        self.tango.teachers.add(self.owner)
        self.jazz.teachers.add(self.teacher)
        for s in (self.student, self.other):
            for c in (self.salsa, self.tango, self.jazz):
                enroll(s.id, c.id, enrollment_date=date(2024, 1, 1))

    def test_non_owner_gets_half(self):
        register_payment(self.student.id, self.salsa.id, Decimal("5000.00"), FEB, payment_date=date(2024, 2, 5))
        reports = teacher_compensation_report(FEB)
        self.assertEqual(len(reports), 1)
        report = reports[0]
        self.assertEqual(report.teacher, self.teacher)
        self.assertEqual([r.dance_class for r in report.class_reports], [self.salsa])
        self.assertEqual(report.class_reports[0].teacher_compensation, Decimal("2500.00"))
        self.assertEqual(report.total_compensation, Decimal("2500.00"))

    def test_owner_keeps_full_revenue(self):
        register_payment(self.student.id, self.tango.id, Decimal("3000.00"), FEB, payment_date=date(2024, 2, 5))
        register_payment(self.other.id, self.tango.id, Decimal("3000.00"), FEB, payment_date=date(2024, 2, 6))
        report = teacher_compensation_report(FEB)[0]
        self.assertEqual(report.teacher, self.owner)
        self.assertEqual(report.class_reports[0].total_revenue, Decimal("6000.00"))
        self.assertEqual(report.total_compensation, Decimal("6000.00"))
        self.assertEqual(set(report.class_reports[0].paying_students), {self.student, self.other})

    def test_cut_rounds_half_up(self):
        register_payment(self.student.id, self.jazz.id, Decimal("0.05"), FEB, payment_date=date(2024, 2, 5))
        report = teacher_compensation_report(FEB)[0]
        self.assertEqual(report.total_compensation, Decimal("0.03"))

    def test_teacher_without_payments_is_omitted(self):
        register_payment(self.student.id, self.tango.id, Decimal("3000.00"), FEB, payment_date=date(2024, 2, 5))
        teachers = [r.teacher for r in teacher_compensation_report(FEB)]
        self.assertEqual(teachers, [self.owner])

    def test_total_sums_classes_and_skips_unpaid_ones(self):
        register_payment(self.student.id, self.salsa.id, Decimal("5000.00"), FEB, payment_date=date(2024, 2, 5))
        register_payment(self.student.id, self.jazz.id, Decimal("2000.00"), FEB, payment_date=date(2024, 2, 5))
        report = teacher_compensation_report(FEB)[0]
        self.assertEqual(len(report.class_reports), 2)
        self.assertEqual(report.total_compensation, Decimal("3500.00"))
        self.assertEqual(teacher_compensation_report(date(2024, 3, 1)), [])

    def test_monthly_financial_report(self):
        register_payment(self.student.id, self.salsa.id, Decimal("5000.00"), FEB, payment_date=date(2024, 2, 5))
        register_payment(self.student.id, self.tango.id, Decimal("3000.00"), FEB, payment_date=date(2024, 2, 15))
        report = monthly_financial_report(FEB)
        self.assertEqual(report.total_revenue, Decimal("8000.00"))
        self.assertEqual(report.total_teacher_compensation, Decimal("5500.00"))
        self.assertEqual(report.studio_revenue, Decimal("2500.00"))
        self.assertEqual(report.total_payments, 2)
        self.assertEqual(report.late_payments, 1)
        self.assertEqual(report.late_payment_amount, Decimal("3000.00"))

    def test_empty_month(self):
        report = monthly_financial_report(date(2024, 5, 1))
        self.assertEqual(report.total_revenue, Decimal("0.00"))
        self.assertEqual(report.studio_revenue, Decimal("0.00"))
        self.assertEqual(report.total_payments, 0)

    def test_class_report(self):
        register_payment(self.student.id, self.salsa.id, Decimal("5000.00"), FEB, payment_date=date(2024, 2, 5))
        register_payment(self.other.id, self.salsa.id, Decimal("4000.00"), FEB, payment_date=date(2024, 2, 7))
        report = class_report(self.salsa.id, FEB)
        self.assertEqual(report.total_revenue, Decimal("9000.00"))
        self.assertEqual(report.students_count, 2)
        self.assertEqual(len(report.payments), 2)
        with self.assertRaises(ClassNotFound):
            class_report(999, FEB)

    def test_dashboard_metrics(self):
        register_payment(self.student.id, self.salsa.id, Decimal("5000.00"), FEB, payment_date=date(2024, 2, 5))
        metrics = dashboard_metrics(clock=EARLY_FEB)
        self.assertEqual(metrics['total_students'], 2)
        self.assertEqual(metrics['total_teachers'], 2)
        self.assertEqual(metrics['total_classes'], 3)
        self.assertEqual(metrics['monthly_revenue'], Decimal("5000.00"))
        self.assertEqual(metrics['outstanding_payments'], 5)
        self.assertEqual(metrics['outstanding_amount'], Decimal("15000.00"))
        self.assertEqual(len(metrics['recent_payments']), 1)
