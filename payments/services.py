"""
Billing engine - registers, updates and deletes monthly tuition payments.

Every rule is checked before any write. The (student, class, month) unique
constraint on Payment backstops concurrent duplicate submissions.
"""
import logging

from django.db import IntegrityError, transaction

from classes.models import DanceClass
from classes.services import active_enrollments_for_student, get_active_enrollment
from core.clock import resolve_clock
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
from core.money import MAX_AMOUNT, money_sum, quantize_factor, quantize_money, to_decimal
from core.months import format_month, is_late, month_of
from core.utils import get_or_raise
from students.models import Student
from .models import Payment, PaymentMethod

logger = logging.getLogger(__name__)


def _require_positive(value, field):
    amount = to_decimal(value)
    if amount <= 0:
        raise InvalidArgument(f"{field} must be greater than 0", field=field)
    if quantize_money(amount) > MAX_AMOUNT:
        raise InvalidArgument(f"{field} must not exceed {MAX_AMOUNT}", field=field)
    return amount


def _allocate(targets, total_amount):
    """
    price * f per class, f = total_amount / sum(prices) rounded to 4 decimals.
    Every share must be a storable, non-zero amount or nothing is allocated.
    """
    total_expected = money_sum(c.price for c in targets)
    factor = quantize_factor(total_amount / total_expected)
    logger.debug(
        f"[billing] Allocating {total_amount} over {len(targets)} classes "
        f"(expected {total_expected}, factor {factor})"
    )
    shares = [(dance_class, quantize_money(dance_class.price * factor)) for dance_class in targets]
    for dance_class, amount in shares:
        if amount <= 0:
            raise InvalidArgument(
                f"totalAmount {total_amount} is too small to split: class {dance_class.id} would get {amount}",
                field="totalAmount",
            )
        if amount > MAX_AMOUNT:
            raise InvalidArgument(
                f"totalAmount {total_amount} is too large to split: class {dance_class.id} would get {amount}",
                field="totalAmount",
            )
    return shares


def _check_eligibility(student, dance_class, month):
    """
    Enrollment, period and duplicate rules for one (student, class, month).
    Returns the active enrollment.
    """
    enrollment = get_active_enrollment(student.id, dance_class.id)
    if enrollment is None:
        raise StudentNotEnrolled(student.id, dance_class.id, student.full_name, dance_class.name)

    if month < enrollment.enrollment_month:
        raise InvalidPaymentPeriod(month, enrollment.enrollment_month, class_id=dance_class.id)

    existing = Payment.objects.find_for(student.id, dance_class.id, month)
    if existing is not None:
        raise DuplicatePayment(existing.id, student.id, dance_class.id, month)
    return enrollment


def _insert_payment(student, dance_class, **fields):
    """Create inside a savepoint; a lost race on the unique constraint becomes DuplicatePayment."""
    month = fields['payment_month']
    try:
        with transaction.atomic():
            return Payment.objects.create(student=student, dance_class=dance_class, **fields)
    except IntegrityError:
        winner = Payment.objects.find_for(student.id, dance_class.id, month)
        if winner is None:
            raise
        raise DuplicatePayment(winner.id, student.id, dance_class.id, month)


# Lookups

def get_payment(payment_id):
    return get_or_raise(Payment.objects.select_related('student', 'dance_class'), payment_id, PaymentNotFound)


def payments_for_student(student_id):
    get_or_raise(Student.objects.all(), student_id, StudentNotFound)
    return Payment.objects.for_student(student_id).select_related('dance_class')


def payments_for_class(class_id):
    get_or_raise(DanceClass.objects.all(), class_id, ClassNotFound)
    return Payment.objects.for_class(class_id).select_related('student')


def payments_for_month(month):
    return Payment.objects.for_month(month_of(month)).select_related('student', 'dance_class')


def late_payments_for_month(month):
    return payments_for_month(month).late()


def total_revenue_for_month(month):
    return Payment.objects.for_month(month_of(month)).total_amount()


def total_revenue_for_class_and_month(class_id, month):
    return Payment.objects.for_class(class_id).for_month(month_of(month)).total_amount()


# Commands

@transaction.atomic
def register_payment(student_id, class_id, amount, month, payment_date=None,
                     payment_method=PaymentMethod.CASH, notes=None, clock=None):
    """
    Register one month of tuition for one class.
    The amount is recorded as given; lateness is derived from payment_date alone.
    """
    amount = _require_positive(amount, 'amount')
    month = month_of(month)

    student = get_or_raise(Student.objects.all(), student_id, StudentNotFound)
    dance_class = get_or_raise(DanceClass.objects.all(), class_id, ClassNotFound)

    try:
        _check_eligibility(student, dance_class, month)
    except (StudentNotEnrolled, InvalidPaymentPeriod, DuplicatePayment) as e:
        logger.warning(f"[billing] Payment rejected ({e.code}): {e}")
        raise

    payment_date = payment_date or resolve_clock(clock).today()
    payment = _insert_payment(
        student,
        dance_class,
        amount=quantize_money(amount),
        payment_date=payment_date,
        payment_month=month,
        payment_method=payment_method or PaymentMethod.CASH,
        is_late=is_late(payment_date, month),
        notes=notes,
    )
    logger.info(
        f"[billing] Registered payment_id={payment.id} student_id={student.id} class_id={dance_class.id} "
        f"month={format_month(month)} amount={payment.amount} is_late={payment.is_late}"
    )
    return payment


def _unique_ids(class_ids):
    return list(dict.fromkeys(class_ids))


def _explicit_targets(student, class_ids, month):
    targets = []
    for class_id in _unique_ids(class_ids):
        dance_class = get_or_raise(DanceClass.objects.all(), class_id, ClassNotFound)
        _check_eligibility(student, dance_class, month)
        targets.append(dance_class)
    return targets


def _pending_targets(student, month):
    """Active enrollments that started by `month` and have no payment for it yet."""
    paid = set(
        Payment.objects.for_student(student.id).for_month(month).values_list('dance_class_id', flat=True)
    )
    return [
        enrollment.dance_class
        for enrollment in active_enrollments_for_student(student.id)
        if enrollment.enrollment_month <= month and enrollment.dance_class_id not in paid
    ]


@transaction.atomic
def register_multi_class_payment(student_id, total_amount, month, payment_date=None,
                                 payment_method=PaymentMethod.CASH, notes=None, class_ids=None, clock=None):
    """
    Split one tendered amount across several classes for the same month.

    Each class gets price * f where f = total_amount / sum(prices), so under- and
    over-payments are spread proportionally. Either every payment is stored or none is.
    """
    total_amount = _require_positive(total_amount, 'totalAmount')
    month = month_of(month)
    student = get_or_raise(Student.objects.all(), student_id, StudentNotFound)

    try:
        if class_ids:
            targets = _explicit_targets(student, class_ids, month)
        else:
            targets = _pending_targets(student, month)
    except (ClassNotFound, StudentNotEnrolled, InvalidPaymentPeriod, DuplicatePayment) as e:
        logger.warning(f"[billing] Multi-class payment rejected ({e.code}): {e}")
        raise

    if not targets:
        logger.warning(f"[billing] No payable classes for student_id={student.id} month={format_month(month)}")
        raise NoPayableClasses(student.id, month)

    try:
        shares = _allocate(targets, total_amount)
    except InvalidArgument as e:
        logger.warning(f"[billing] Multi-class payment rejected ({e.code}): {e}")
        raise

    payment_date = payment_date or resolve_clock(clock).today()
    late = is_late(payment_date, month)

    payments = []
    for dance_class, amount in shares:
        payments.append(_insert_payment(
            student,
            dance_class,
            amount=amount,
            payment_date=payment_date,
            payment_month=month,
            payment_method=payment_method or PaymentMethod.CASH,
            is_late=late,
            notes=notes,
        ))

    logger.info(
        f"[billing] Registered {len(payments)} payments for student_id={student.id} month={format_month(month)} "
        f"total={money_sum(p.amount for p in payments)} ids={[p.id for p in payments]}"
    )
    return payments


@transaction.atomic
def update_payment(payment_id, amount=None, payment_date=None, payment_method=None, notes=None):
    """
    Partial update. The month is immutable; is_late is recomputed against it only
    when a new payment_date is given.
    """
    payment = get_or_raise(Payment.objects.select_for_update(), payment_id, PaymentNotFound)
    update_fields = ['updated_at']

    if amount is not None:
        payment.amount = quantize_money(_require_positive(amount, 'amount'))
        update_fields.append('amount')
    if payment_date is not None:
        payment.payment_date = payment_date
        payment.is_late = is_late(payment_date, payment.payment_month)
        update_fields += ['payment_date', 'is_late']
    if payment_method is not None:
        payment.payment_method = payment_method
        update_fields.append('payment_method')
    if notes is not None:
        payment.notes = notes
        update_fields.append('notes')

    payment.save(update_fields=update_fields)
    logger.info(f"[billing] Updated payment_id={payment.id} fields={update_fields[1:]}")
    return payment


@transaction.atomic
def delete_payment(payment_id):
    """Hard delete. The (student, class, month) becomes outstanding again."""
    payment = get_or_raise(Payment.objects.all(), payment_id, PaymentNotFound)
    summary = f"student_id={payment.student_id} class_id={payment.dance_class_id} month={format_month(payment.payment_month)}"
    payment.delete()
    logger.info(f"[billing] Deleted payment_id={payment_id} {summary}")
