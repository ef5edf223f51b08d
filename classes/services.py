"""
Class services - enrollment ledger and class catalogue operations.
Enrollment is the single source of truth for "is this student in that class".
"""
import logging

from django.db import IntegrityError, transaction
from django.utils import timezone

from core.clock import resolve_clock
from core.exceptions import (
    AlreadyEnrolled,
    ClassNotFound,
    InvalidArgument,
    NotEnrolled,
    ScheduleConflict,
    ScheduleNotFound,
    StudentNotFound,
)
from core.utils import get_or_raise
from students.models import Student
from .models import ClassSchedule, DanceClass, Enrollment

logger = logging.getLogger(__name__)


def get_class(class_id):
    """Any class, archived ones included (payments keep pointing at them)."""
    return get_or_raise(DanceClass.objects.all(), class_id, ClassNotFound)


def get_active_class(class_id):
    return get_or_raise(DanceClass.objects.active(), class_id, ClassNotFound)


# Enrollment ledger

def get_active_enrollment(student_id, class_id):
    return Enrollment.objects.find_active(student_id, class_id)


def is_enrolled(student_id, class_id):
    return Enrollment.objects.active().filter(student_id=student_id, dance_class_id=class_id).exists()


def active_enrollments_for_student(student_id):
    """
    Canonical queryset: the student's active enrollments, oldest first.
    """
    return (
        Enrollment.objects.active()
        .for_student(student_id)
        .select_related('dance_class')
        .order_by('enrollment_date', 'id')
    )


def active_enrollments_for_class(class_id):
    """
    Canonical queryset: students currently enrolled in the class.
    """
    return (
        Enrollment.objects.active()
        .for_class(class_id)
        .select_related('student')
        .order_by('enrollment_date', 'id')
    )


def enrollments_in_date_range(start_date, end_date):
    """Active enrollments with enrollment_date in [start_date, end_date], newest first."""
    if start_date > end_date:
        raise InvalidArgument("start date must not be after end date", field='startDate')
    return (
        Enrollment.objects.active()
        .filter(enrollment_date__range=(start_date, end_date))
        .select_related('student', 'dance_class')
        .order_by('-enrollment_date', '-id')
    )


def active_student_count(class_id):
    return Enrollment.objects.active().for_class(class_id).count()


def active_class_count(student_id):
    return Enrollment.objects.active().for_student(student_id).count()


@transaction.atomic
def enroll(student_id, class_id, enrollment_date=None, notes=None, clock=None):
    """
    Enroll a student in a class. enrollment_date defaults to today.
    Raises AlreadyEnrolled when an active enrollment for the pair exists.
    """
    student = get_or_raise(Student.objects.all(), student_id, StudentNotFound)
    dance_class = get_active_class(class_id)

    if get_active_enrollment(student.id, dance_class.id) is not None:
        logger.warning(f"[enrollment] Rejected: student_id={student.id} already in class_id={dance_class.id}")
        raise AlreadyEnrolled(student.id, dance_class.id)

    effective_date = enrollment_date or resolve_clock(clock).today()
    try:
        with transaction.atomic():
            enrollment = Enrollment.objects.create(
                student=student,
                dance_class=dance_class,
                enrollment_date=effective_date,
                notes=notes,
                is_active=True,
            )
    except IntegrityError:
        # Concurrent enroll won the unique_active_enrollment constraint
        raise AlreadyEnrolled(student.id, dance_class.id)

    logger.info(
        f"[enrollment] Enrolled student_id={student.id} in class_id={dance_class.id} "
        f"date={effective_date} enrollment_id={enrollment.id}"
    )
    return enrollment


@transaction.atomic
def unenroll(student_id, class_id):
    """
    Deactivate the active enrollment (row is kept for history).
    Raises NotEnrolled when there is none.
    """
    student = get_or_raise(Student.objects.all(), student_id, StudentNotFound)
    dance_class = get_class(class_id)

    enrollment = (
        Enrollment.objects.select_for_update()
        .active()
        .filter(student=student, dance_class=dance_class)
        .first()
    )
    if enrollment is None:
        raise NotEnrolled(student.id, dance_class.id)

    enrollment.is_active = False
    enrollment.save(update_fields=['is_active', 'updated_at'])
    logger.info(f"[enrollment] Unenrolled student_id={student.id} from class_id={dance_class.id} enrollment_id={enrollment.id}")
    return enrollment


@transaction.atomic
def unenroll_from_all_classes(student_id):
    """Deactivate every active enrollment of the student. Returns how many were deactivated."""
    updated = (
        Enrollment.objects.active()
        .for_student(student_id)
        .update(is_active=False, updated_at=timezone.now())
    )
    if updated:
        logger.info(f"[enrollment] Deactivated {updated} enrollments for student_id={student_id}")
    return updated


# Class catalogue

def _validate_slots(slots):
    seen = set()
    for slot in slots:
        if slot in seen:
            day, hour, minute = slot
            raise ScheduleConflict(f"Duplicate schedule found: day {day} at {hour:02d}:{minute:02d}")
        seen.add(slot)


def _check_teacher_conflicts(dance_class, slots):
    """A teacher can't have two classes starting in the same weekly slot."""
    slots = set(slots)
    for teacher in dance_class.teachers.all():
        others = teacher.classes.active().exclude(pk=dance_class.pk).prefetch_related('schedules')
        for other in others:
            for schedule in other.schedules.all():
                if schedule.slot in slots:
                    raise ScheduleConflict(
                        f"Schedule conflict: Teacher {teacher.full_name} has conflicting classes "
                        f"{dance_class.name} and {other.name} on {schedule}"
                    )


@transaction.atomic
def create_class(name, price, duration_hours, description=None, schedules=()):
    """schedules: iterable of (day_of_week, start_hour, start_minute)."""
    slots = [tuple(s) for s in schedules]
    _validate_slots(slots)
    dance_class = DanceClass.objects.create(
        name=name,
        description=description,
        price=price,
        duration_hours=duration_hours,
    )
    ClassSchedule.objects.bulk_create([
        ClassSchedule(dance_class=dance_class, day_of_week=d, start_hour=h, start_minute=m)
        for d, h, m in slots
    ])
    logger.info(f"[classes] Created class_id={dance_class.id} name={name!r} price={price}")
    return dance_class


@transaction.atomic
def add_schedule(class_id, day_of_week, start_hour, start_minute=0):
    dance_class = get_active_class(class_id)
    slot = (day_of_week, start_hour, start_minute)
    if dance_class.schedules.filter(
        day_of_week=day_of_week, start_hour=start_hour, start_minute=start_minute
    ).exists():
        raise ScheduleConflict("Schedule already exists for this class")
    _check_teacher_conflicts(dance_class, [slot])
    ClassSchedule.objects.create(
        dance_class=dance_class,
        day_of_week=day_of_week,
        start_hour=start_hour,
        start_minute=start_minute,
    )
    return dance_class


@transaction.atomic
def remove_schedule(class_id, day_of_week, start_hour, start_minute=0):
    dance_class = get_active_class(class_id)
    deleted, _ = dance_class.schedules.filter(
        day_of_week=day_of_week, start_hour=start_hour, start_minute=start_minute
    ).delete()
    if not deleted:
        raise ScheduleNotFound(dance_class.id, f"{day_of_week} {start_hour:02d}:{start_minute:02d}")
    return dance_class


@transaction.atomic
def archive_class(class_id):
    """
    Delete a class from the catalogue: unenroll every student, unassign teachers,
    archive the row. Payments stay intact for reporting.
    """
    dance_class = get_active_class(class_id)
    deactivated = (
        Enrollment.objects.active()
        .for_class(dance_class.id)
        .update(is_active=False, updated_at=timezone.now())
    )
    dance_class.teachers.clear()
    dance_class.is_active = False
    dance_class.deleted_at = timezone.now()
    dance_class.save(update_fields=['is_active', 'deleted_at', 'updated_at'])
    logger.info(f"[classes] Archived class_id={dance_class.id}, deactivated {deactivated} enrollments")
    return dance_class


@transaction.atomic
def update_class(class_id, schedules=None, **fields):
    """
    Partial update of name/description/price/duration_hours.
    When schedules is given it replaces the class's slots (teacher conflicts checked).
    """
    dance_class = get_active_class(class_id)
    for name, value in fields.items():
        setattr(dance_class, name, value)
    dance_class.save()

    if schedules is not None:
        slots = [tuple(s) for s in schedules]
        _validate_slots(slots)
        _check_teacher_conflicts(dance_class, slots)
        dance_class.schedules.all().delete()
        ClassSchedule.objects.bulk_create([
            ClassSchedule(dance_class=dance_class, day_of_week=d, start_hour=h, start_minute=m)
            for d, h, m in slots
        ])
    logger.info(f"[classes] Updated class_id={dance_class.id} fields={sorted(fields)}")
    return dance_class
