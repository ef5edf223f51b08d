"""
Billing engine tests: single and multi-class registration, lateness, update/delete.
"""
from datetime import date
from decimal import Decimal

from django.test import TestCase

from classes.models import DanceClass
from classes.services import enroll, unenroll
from core.clock import FixedClock
from core.exceptions import (
    ClassNotFound,
    DuplicatePayment,
    InvalidArgument,
    InvalidPaymentPeriod,
    NoPayableClasses,
    PaymentNotFound,
    StudentNotEnrolled,
    StudentNotFound,
)
from payments.models import Payment, PaymentMethod
from reports.services import outstanding_for_student
from payments.services import (
    delete_payment,
    late_payments_for_month,
    payments_for_month,
    payments_for_student,
    register_multi_class_payment,
    _insert_payment,
    register_payment,
    total_revenue_for_class_and_month,
    total_revenue_for_month,
    update_payment,
)
from students.models import Student

FEB = date(2024, 2, 1)


class BillingTestCase(TestCase):
    def setUp(self):
        self.student = Student.objects.create(first_name="Sofia", last_name="Gomez", phone="1111")
        self.salsa = DanceClass.objects.create(name="Salsa", price=Decimal("5000.00"), duration_hours=Decimal("1.00"))
        self.tango = DanceClass.objects.create(name="Tango", price=Decimal("3000.00"), duration_hours=Decimal("1.00"))
        enroll(self.student.id, self.salsa.id, enrollment_date=date(2024, 1, 15))


class RegisterPaymentTests(BillingTestCase):

    def test_on_time_payment(self):
        payment = register_payment(self.student.id, self.salsa.id, Decimal("5000.00"), FEB, payment_date=date(2024, 2, 5))
        self.assertFalse(payment.is_late)
        self.assertEqual(payment.amount, Decimal("5000.00"))
        self.assertEqual(payment.payment_month, FEB)
        self.assertEqual(payment.payment_method, PaymentMethod.CASH)

    def test_second_payment_same_month_is_duplicate(self):
        first = register_payment(self.student.id, self.salsa.id, Decimal("5000.00"), FEB, payment_date=date(2024, 2, 5))
        with self.assertRaises(DuplicatePayment) as ctx:
            register_payment(
                self.student.id, self.salsa.id, Decimal("100.00"), FEB,
                payment_date=date(2024, 2, 20), payment_method=PaymentMethod.CARD,
            )
        self.assertEqual(ctx.exception.existing_payment_id, first.id)
        self.assertEqual(ctx.exception.context()['month'], '2024-02')
        self.assertEqual(Payment.objects.count(), 1)

    def test_payment_after_the_tenth_is_late(self):
        payment = register_payment(self.student.id, self.salsa.id, Decimal("5000.00"), FEB, payment_date=date(2024, 2, 15))
        self.assertTrue(payment.is_late)

    def test_day_ten_is_not_late(self):
        payment = register_payment(self.student.id, self.salsa.id, Decimal("5000.00"), FEB, payment_date=date(2024, 2, 10))
        self.assertFalse(payment.is_late)

    def test_paying_a_future_month_after_the_tenth_is_not_late(self):
        payment = register_payment(
            self.student.id, self.salsa.id, Decimal("5000.00"), date(2024, 3, 1), payment_date=date(2024, 2, 25)
        )
        self.assertFalse(payment.is_late)

    def test_paying_a_past_month_is_not_late(self):
        payment = register_payment(self.student.id, self.salsa.id, Decimal("5000.00"), FEB, payment_date=date(2024, 3, 20))
        self.assertFalse(payment.is_late)

    def test_amount_is_recorded_as_given(self):
        payment = register_payment(self.student.id, self.salsa.id, Decimal("1234.50"), FEB, payment_date=date(2024, 2, 1))
        self.assertEqual(payment.amount, Decimal("1234.50"))

    def test_month_before_enrollment_is_invalid(self):
        with self.assertRaises(InvalidPaymentPeriod) as ctx:
            register_payment(self.student.id, self.salsa.id, Decimal("5000.00"), date(2023, 12, 1), payment_date=date(2024, 1, 20))
        self.assertEqual(ctx.exception.context()['enrollment_month'], '2024-01')

    def test_enrollment_month_itself_is_payable(self):
        payment = register_payment(self.student.id, self.salsa.id, Decimal("5000.00"), date(2024, 1, 1), payment_date=date(2024, 1, 20))
        self.assertTrue(payment.is_late)

    def test_not_enrolled(self):
        with self.assertRaises(StudentNotEnrolled):
            register_payment(self.student.id, self.tango.id, Decimal("3000.00"), FEB, payment_date=date(2024, 2, 1))

    def test_unenrolled_student_cannot_pay(self):
        unenroll(self.student.id, self.salsa.id)
        with self.assertRaises(StudentNotEnrolled):
            register_payment(self.student.id, self.salsa.id, Decimal("5000.00"), FEB, payment_date=date(2024, 2, 1))

    def test_unknown_student_or_class(self):
        with self.assertRaises(StudentNotFound):
            register_payment(999, self.salsa.id, Decimal("5000.00"), FEB)
        with self.assertRaises(ClassNotFound):
            register_payment(self.student.id, 999, Decimal("5000.00"), FEB)

    def test_non_positive_amount(self):
        with self.assertRaises(InvalidArgument):
            register_payment(self.student.id, self.salsa.id, Decimal("0"), FEB)
        with self.assertRaises(InvalidArgument):
            register_payment(self.student.id, self.salsa.id, Decimal("-10"), FEB)
        self.assertFalse(Payment.objects.exists())

    def test_amount_above_column_limit(self):
        with self.assertRaises(InvalidArgument) as ctx:
            register_payment(self.student.id, self.salsa.id, Decimal("100000000.00"), FEB)
        self.assertEqual(ctx.exception.field, "amount")
        self.assertFalse(Payment.objects.exists())

    def test_lost_insert_race_reports_the_winning_payment(self):
        winner = Payment.objects.create(
            student=self.student, dance_class=self.salsa, amount=Decimal("5000.00"),
            payment_date=date(2024, 2, 2), payment_month=FEB,
        )
        with self.assertRaises(DuplicatePayment) as ctx:
            _insert_payment(
                self.student, self.salsa, amount=Decimal("4000.00"), payment_date=date(2024, 2, 3),
                payment_month=FEB, payment_method=PaymentMethod.CASH, is_late=False, notes=None,
            )
        self.assertEqual(ctx.exception.existing_payment_id, winner.id)
        self.assertEqual(Payment.objects.get().amount, Decimal("5000.00"))

    def test_payment_date_defaults_to_clock(self):
        payment = register_payment(
            self.student.id, self.salsa.id, Decimal("5000.00"), FEB, clock=FixedClock(date(2024, 2, 12))
        )
        self.assertEqual(payment.payment_date, date(2024, 2, 12))
        self.assertTrue(payment.is_late)


class MultiClassPaymentTests(BillingTestCase):
    def setUp(self):
        super().setUp()
        enroll(self.student.id, self.tango.id, enrollment_date=date(2024, 1, 20))

    def _amounts(self, payments):
        return {p.dance_class_id: p.amount for p in payments}

    def test_exact_total_pays_each_class_its_price(self):
        payments = register_multi_class_payment(self.student.id, Decimal("8000.00"), FEB, payment_date=date(2024, 2, 3))
        self.assertEqual(self._amounts(payments), {self.salsa.id: Decimal("5000.00"), self.tango.id: Decimal("3000.00")})
        self.assertTrue(all(not p.is_late for p in payments))

    def test_underpayment_is_allocated_proportionally(self):
        payments = register_multi_class_payment(self.student.id, Decimal("4000.00"), FEB, payment_date=date(2024, 2, 3))
        self.assertEqual(self._amounts(payments), {self.salsa.id: Decimal("2500.00"), self.tango.id: Decimal("1500.00")})

    def test_overpayment_is_allocated_proportionally(self):
        payments = register_multi_class_payment(self.student.id, Decimal("10000.00"), FEB, payment_date=date(2024, 2, 3))
        self.assertEqual(self._amounts(payments), {self.salsa.id: Decimal("6250.00"), self.tango.id: Decimal("3750.00")})

    def test_factor_is_rounded_to_four_decimals(self):
        # 1001 / 8000 = 0.125125 -> 0.1251
        payments = register_multi_class_payment(self.student.id, Decimal("1001.00"), FEB, payment_date=date(2024, 2, 3))
        self.assertEqual(self._amounts(payments), {self.salsa.id: Decimal("625.50"), self.tango.id: Decimal("375.30")})

    def test_total_too_small_to_split_is_rejected(self):
        # 0.01 / 8000 rounds to a factor of 0.0000
        with self.assertRaises(InvalidArgument) as ctx:
            register_multi_class_payment(self.student.id, Decimal("0.01"), FEB, payment_date=date(2024, 2, 3))
        self.assertEqual(ctx.exception.field, "totalAmount")
        self.assertFalse(Payment.objects.exists())
        outstanding = outstanding_for_student(self.student.id, FEB, clock=FixedClock(date(2024, 2, 3)))
        self.assertEqual({item.dance_class.id for item in outstanding}, {self.salsa.id, self.tango.id})

    def test_smallest_splittable_total_stores_non_zero_amounts(self):
        # 1.00 / 8000 = 0.000125 -> 0.0001
        payments = register_multi_class_payment(self.student.id, Decimal("1.00"), FEB, payment_date=date(2024, 2, 3))
        self.assertEqual(self._amounts(payments), {self.salsa.id: Decimal("0.50"), self.tango.id: Decimal("0.30")})

    def test_total_above_column_limit_is_rejected(self):
        with self.assertRaises(InvalidArgument):
            register_multi_class_payment(self.student.id, Decimal("123456789.00"), FEB, payment_date=date(2024, 2, 3))
        self.assertFalse(Payment.objects.exists())

    def test_shared_fields_and_single_lateness(self):
        payments = register_multi_class_payment(
            self.student.id, Decimal("8000.00"), FEB, payment_date=date(2024, 2, 11),
            payment_method=PaymentMethod.TRANSFER, notes="February",
        )
        self.assertEqual({p.payment_method for p in payments}, {PaymentMethod.TRANSFER})
        self.assertEqual({p.notes for p in payments}, {"February"})
        self.assertTrue(all(p.is_late for p in payments))

    def test_fallback_skips_already_paid_classes(self):
        register_payment(self.student.id, self.salsa.id, Decimal("5000.00"), FEB, payment_date=date(2024, 2, 1))
        payments = register_multi_class_payment(self.student.id, Decimal("3000.00"), FEB, payment_date=date(2024, 2, 3))
        self.assertEqual(self._amounts(payments), {self.tango.id: Decimal("3000.00")})

    def test_fallback_skips_classes_joined_after_month(self):
        jazz = DanceClass.objects.create(name="Jazz", price=Decimal("2000.00"), duration_hours=Decimal("1.00"))
        enroll(self.student.id, jazz.id, enrollment_date=date(2024, 3, 1))
        payments = register_multi_class_payment(self.student.id, Decimal("8000.00"), FEB, payment_date=date(2024, 2, 3))
        self.assertNotIn(jazz.id, self._amounts(payments))

    def test_nothing_left_to_pay(self):
        register_multi_class_payment(self.student.id, Decimal("8000.00"), FEB, payment_date=date(2024, 2, 3))
        with self.assertRaises(NoPayableClasses):
            register_multi_class_payment(self.student.id, Decimal("8000.00"), FEB, payment_date=date(2024, 2, 4))

    def test_explicit_class_ids_are_deduplicated(self):
        payments = register_multi_class_payment(
            self.student.id, Decimal("5000.00"), FEB, payment_date=date(2024, 2, 3),
            class_ids=[self.salsa.id, self.salsa.id],
        )
        self.assertEqual(self._amounts(payments), {self.salsa.id: Decimal("5000.00")})

    def test_explicit_ineligible_class_aborts_without_writes(self):
        jazz = DanceClass.objects.create(name="Jazz", price=Decimal("2000.00"), duration_hours=Decimal("1.00"))
        with self.assertRaises(StudentNotEnrolled):
            register_multi_class_payment(
                self.student.id, Decimal("10000.00"), FEB, payment_date=date(2024, 2, 3),
                class_ids=[self.salsa.id, self.tango.id, jazz.id],
            )
        self.assertFalse(Payment.objects.exists())

    def test_explicit_already_paid_class_aborts_without_writes(self):
        paid = register_payment(self.student.id, self.tango.id, Decimal("3000.00"), FEB, payment_date=date(2024, 2, 1))
        with self.assertRaises(DuplicatePayment) as ctx:
            register_multi_class_payment(
                self.student.id, Decimal("8000.00"), FEB, payment_date=date(2024, 2, 3),
                class_ids=[self.salsa.id, self.tango.id],
            )
        self.assertEqual(ctx.exception.existing_payment_id, paid.id)
        self.assertEqual(Payment.objects.count(), 1)

    def test_unknown_student(self):
        with self.assertRaises(StudentNotFound):
            register_multi_class_payment(999, Decimal("8000.00"), FEB)

    def test_non_positive_total(self):
        with self.assertRaises(InvalidArgument):
            register_multi_class_payment(self.student.id, Decimal("0.00"), FEB)


class UpdateDeletePaymentTests(BillingTestCase):
    def setUp(self):
        super().setUp()
        self.payment = register_payment(
            self.student.id, self.salsa.id, Decimal("5000.00"), FEB, payment_date=date(2024, 2, 5)
        )

    def test_update_date_recomputes_lateness_against_stored_month(self):
        payment = update_payment(self.payment.id, payment_date=date(2024, 2, 20))
        self.assertTrue(payment.is_late)
        self.assertEqual(payment.payment_month, FEB)
        payment = update_payment(self.payment.id, payment_date=date(2024, 3, 20))
        self.assertFalse(payment.is_late)

    def test_update_without_date_keeps_lateness(self):
        late = register_payment(self.student.id, self.salsa.id, Decimal("5000.00"), date(2024, 3, 1), payment_date=date(2024, 3, 15))
        payment = update_payment(late.id, amount=Decimal("4500.00"), notes="discount")
        self.assertTrue(payment.is_late)
        self.assertEqual(payment.amount, Decimal("4500.00"))
        self.assertEqual(payment.notes, "discount")

    def test_update_method(self):
        payment = update_payment(self.payment.id, payment_method=PaymentMethod.CARD)
        self.assertEqual(payment.payment_method, PaymentMethod.CARD)

    def test_update_invalid_amount(self):
        with self.assertRaises(InvalidArgument):
            update_payment(self.payment.id, amount=Decimal("-1"))

    def test_update_missing_payment(self):
        with self.assertRaises(PaymentNotFound):
            update_payment(999, amount=Decimal("10"))

    def test_delete_payment(self):
        delete_payment(self.payment.id)
        self.assertFalse(Payment.objects.filter(id=self.payment.id).exists())
        with self.assertRaises(PaymentNotFound):
            delete_payment(self.payment.id)

    def test_deleted_month_can_be_paid_again(self):
        delete_payment(self.payment.id)
        payment = register_payment(self.student.id, self.salsa.id, Decimal("5000.00"), FEB, payment_date=date(2024, 2, 6))
        self.assertEqual(payment.payment_month, FEB)


class PaymentLookupTests(BillingTestCase):
    def setUp(self):
        super().setUp()
        enroll(self.student.id, self.tango.id, enrollment_date=date(2024, 1, 20))
        register_payment(self.student.id, self.salsa.id, Decimal("5000.00"), FEB, payment_date=date(2024, 2, 5))
        register_payment(self.student.id, self.tango.id, Decimal("3000.00"), FEB, payment_date=date(2024, 2, 15))
        register_payment(self.student.id, self.salsa.id, Decimal("5000.00"), date(2024, 3, 1), payment_date=date(2024, 3, 1))

    def test_revenue_totals(self):
        self.assertEqual(total_revenue_for_month(FEB), Decimal("8000.00"))
        self.assertEqual(total_revenue_for_class_and_month(self.salsa.id, FEB), Decimal("5000.00"))
        self.assertEqual(total_revenue_for_month(date(2024, 4, 1)), Decimal("0.00"))

    def test_month_and_late_lookups(self):
        self.assertEqual(payments_for_month(FEB).count(), 2)
        self.assertEqual([p.dance_class_id for p in late_payments_for_month(FEB)], [self.tango.id])
        self.assertEqual(payments_for_student(self.student.id).count(), 3)
