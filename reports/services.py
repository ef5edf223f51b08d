"""
Reporting services - outstanding balances, teacher compensation and studio financials.

Everything here is re-derived from current Enrollment and Payment rows on each call.
Outstanding lateness reflects today's date; payment lateness is the is_late flag
stored when the payment was registered.
"""
import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List

from classes.models import DanceClass, Enrollment
from core.clock import resolve_clock
from core.exceptions import ClassNotFound, StudentNotFound
from core.money import money_sum, quantize_money
from core.months import format_month, is_late, month_of
from core.utils import get_or_raise
from payments.models import Payment
from students.models import Student
from teachers.models import Teacher

logger = logging.getLogger(__name__)

LATE_FEE_MULTIPLIER = Decimal('1.15')
RECENT_PAYMENTS_LIMIT = 5


@dataclass
class OutstandingItem:
    """One unpaid (student, class, month)."""
    student: Student
    dance_class: DanceClass
    month: object
    expected_amount: Decimal
    is_late: bool


@dataclass
class OutstandingReport:
    month: object
    outstanding: Dict[Student, List[OutstandingItem]]
    total_outstanding_amount: Decimal
    students_with_outstanding: int


@dataclass
class TeacherClassReport:
    dance_class: DanceClass
    payments: List[Payment]
    total_revenue: Decimal
    teacher_compensation: Decimal
    paying_students: List[Student] = field(default_factory=list)


@dataclass
class TeacherCompensationReport:
    teacher: Teacher
    month: object
    class_reports: List[TeacherClassReport]
    total_compensation: Decimal


@dataclass
class MonthlyFinancialReport:
    month: object
    total_revenue: Decimal
    studio_revenue: Decimal
    total_teacher_compensation: Decimal
    total_payments: int
    late_payments: int
    late_payment_amount: Decimal


@dataclass
class ClassReport:
    dance_class: DanceClass
    month: object
    payments: List[Payment]
    total_revenue: Decimal
    students_count: int


def _distinct_students(payments):
    seen = {}
    for payment in payments:
        seen.setdefault(payment.student_id, payment.student)
    return list(seen.values())


# Outstanding balances

def _outstanding_items(enrollments, month, late_now):
    """
    enrollments: active Enrollment rows (student and dance_class selected).
    Yields OutstandingItems for the ones that started by `month` and are unpaid.
    """
    paid = set(
        Payment.objects.for_month(month).values_list('student_id', 'dance_class_id')
    )
    for enrollment in enrollments:
        if enrollment.enrollment_month > month:
            continue
        if (enrollment.student_id, enrollment.dance_class_id) in paid:
            continue
        price = enrollment.dance_class.price
        expected = price * LATE_FEE_MULTIPLIER if late_now else price
        yield OutstandingItem(
            student=enrollment.student,
            dance_class=enrollment.dance_class,
            month=month,
            expected_amount=quantize_money(expected),
            is_late=late_now,
        )


def compute_outstanding(month, clock=None):
    """
    {Student: [OutstandingItem, ...]} for every student with unpaid dues in `month`.
    Students with nothing outstanding are left out.
    """
    month = month_of(month)
    late_now = is_late(resolve_clock(clock).today(), month)
    enrollments = (
        Enrollment.objects.active()
        .select_related('student', 'dance_class')
        .order_by('student__last_name', 'student__first_name', 'student_id', 'enrollment_date', 'id')
    )
    result = {}
    for item in _outstanding_items(enrollments, month, late_now):
        result.setdefault(item.student, []).append(item)
    logger.debug(f"[reports] Outstanding for {format_month(month)}: {len(result)} students (late_now={late_now})")
    return result


def outstanding_for_student(student_id, month, clock=None):
    student = get_or_raise(Student.objects.all(), student_id, StudentNotFound)
    month = month_of(month)
    late_now = is_late(resolve_clock(clock).today(), month)
    enrollments = (
        Enrollment.objects.active()
        .for_student(student.id)
        .select_related('student', 'dance_class')
        .order_by('enrollment_date', 'id')
    )
    return list(_outstanding_items(enrollments, month, late_now))


def outstanding_report(month, clock=None):
    month = month_of(month)
    outstanding = compute_outstanding(month, clock=clock)
    total = money_sum(item.expected_amount for items in outstanding.values() for item in items)
    return OutstandingReport(
        month=month,
        outstanding=outstanding,
        total_outstanding_amount=total,
        students_with_outstanding=len(outstanding),
    )


# Compensation and financials

def _class_report_for_teacher(teacher, dance_class, payments):
    revenue = money_sum(p.amount for p in payments)
    return TeacherClassReport(
        dance_class=dance_class,
        payments=payments,
        total_revenue=revenue,
        teacher_compensation=quantize_money(revenue * teacher.share_percentage),
        paying_students=_distinct_students(payments),
    )


def teacher_compensation_report(month):
    """
    One entry per teacher with at least one payment in one of their classes this month.
    Classes without payments are left out of the teacher's class list.
    """
    month = month_of(month)
    payments_by_class = {}
    for payment in Payment.objects.for_month(month).select_related('student').order_by('payment_date', 'id'):
        payments_by_class.setdefault(payment.dance_class_id, []).append(payment)

    teachers = (
        Teacher.objects.filter(classes__id__in=list(payments_by_class))
        .distinct()
        .prefetch_related('classes')
    )
    reports = []
    for teacher in teachers:
        class_reports = [
            _class_report_for_teacher(teacher, dance_class, payments_by_class[dance_class.id])
            for dance_class in teacher.classes.all()
            if dance_class.id in payments_by_class
        ]
        reports.append(TeacherCompensationReport(
            teacher=teacher,
            month=month,
            class_reports=class_reports,
            total_compensation=money_sum(r.teacher_compensation for r in class_reports),
        ))
    logger.debug(f"[reports] Compensation for {format_month(month)}: {len(reports)} teachers")
    return reports


def monthly_financial_report(month):
    month = month_of(month)
    payments = Payment.objects.for_month(month)
    late = payments.late()
    total_revenue = payments.total_amount()
    total_compensation = money_sum(r.total_compensation for r in teacher_compensation_report(month))
    return MonthlyFinancialReport(
        month=month,
        total_revenue=total_revenue,
        studio_revenue=quantize_money(total_revenue - total_compensation),
        total_teacher_compensation=total_compensation,
        total_payments=payments.count(),
        late_payments=late.count(),
        late_payment_amount=late.total_amount(),
    )


def class_report(class_id, month):
    dance_class = get_or_raise(DanceClass.objects.all(), class_id, ClassNotFound)
    month = month_of(month)
    payments = list(
        Payment.objects.for_class(dance_class.id).for_month(month)
        .select_related('student')
        .order_by('payment_date', 'id')
    )
    return ClassReport(
        dance_class=dance_class,
        month=month,
        payments=payments,
        total_revenue=money_sum(p.amount for p in payments),
        students_count=len(_distinct_students(payments)),
    )


def dashboard_metrics(clock=None):
    """Current-month KPIs for the dashboard."""
    clock = resolve_clock(clock)
    month = month_of(clock.today())
    report = outstanding_report(month, clock=clock)
    outstanding_items = sum(len(items) for items in report.outstanding.values())
    recent = (
        Payment.objects.select_related('student', 'dance_class')
        .order_by('-payment_date', '-id')[:RECENT_PAYMENTS_LIMIT]
    )
    return {
        'month': month,
        'total_students': Student.objects.count(),
        'total_teachers': Teacher.objects.count(),
        'total_classes': DanceClass.objects.active().count(),
        'monthly_revenue': Payment.objects.for_month(month).total_amount(),
        'outstanding_payments': outstanding_items,
        'outstanding_amount': report.total_outstanding_amount,
        'recent_payments': list(recent),
    }
