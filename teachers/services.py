"""
Teacher services - class assignment with schedule-conflict checks.
"""
import logging

from django.db import transaction

from classes.models import DanceClass
from core.exceptions import AlreadyAssigned, ClassNotFound, NotAssigned, ScheduleConflict, TeacherNotFound
from core.utils import get_or_raise
from .models import Teacher

logger = logging.getLogger(__name__)


def get_teacher(teacher_id):
    return get_or_raise(Teacher.objects.all(), teacher_id, TeacherNotFound)


def classes_for_teacher(teacher_id):
    teacher = get_teacher(teacher_id)
    return teacher.classes.active().prefetch_related('schedules')


def _find_conflict(teacher, dance_class):
    """First (other_class, schedule) of the teacher that starts in one of dance_class's slots."""
    slots = {s.slot for s in dance_class.schedules.all()}
    if not slots:
        return None
    for other in teacher.classes.active().exclude(pk=dance_class.pk).prefetch_related('schedules'):
        for schedule in other.schedules.all():
            if schedule.slot in slots:
                return other, schedule
    return None


@transaction.atomic
def assign_to_class(teacher_id, class_id):
    teacher = get_teacher(teacher_id)
    dance_class = get_or_raise(DanceClass.objects.active(), class_id, ClassNotFound)

    if dance_class.teachers.filter(pk=teacher.pk).exists():
        raise AlreadyAssigned(teacher.id, dance_class.id)

    conflict = _find_conflict(teacher, dance_class)
    if conflict is not None:
        other, schedule = conflict
        logger.warning(f"[teachers] Assignment rejected: teacher_id={teacher.id} busy in class_id={other.id} on {schedule}")
        raise ScheduleConflict(
            f"Schedule conflict: Teacher {teacher.full_name} has conflicting classes "
            f"{dance_class.name} and {other.name} on {schedule}"
        )

    dance_class.teachers.add(teacher)
    logger.info(f"[teachers] Assigned teacher_id={teacher.id} to class_id={dance_class.id}")
    return dance_class


@transaction.atomic
def unassign_from_class(teacher_id, class_id):
    teacher = get_teacher(teacher_id)
    dance_class = get_or_raise(DanceClass.objects.all(), class_id, ClassNotFound)

    if not dance_class.teachers.filter(pk=teacher.pk).exists():
        raise NotAssigned(teacher.id, dance_class.id)

    dance_class.teachers.remove(teacher)
    logger.info(f"[teachers] Unassigned teacher_id={teacher.id} from class_id={dance_class.id}")
    return dance_class


@transaction.atomic
def delete_teacher(teacher_id):
    """Removes the teacher from every class, then deletes the row."""
    teacher = get_teacher(teacher_id)
    teacher.classes.clear()
    teacher.delete()
    logger.info(f"[teachers] Deleted teacher_id={teacher_id}")
