"""
Student services
"""
import logging

from django.db import transaction

from classes.services import unenroll_from_all_classes
from core.exceptions import StudentNotFound
from core.utils import get_or_raise
from .models import Student

logger = logging.getLogger(__name__)


def get_student(student_id):
    return get_or_raise(Student.objects.all(), student_id, StudentNotFound)


def search_students(first_name=None, last_name=None, phone=None):
    qs = Student.objects.all()
    if first_name or last_name:
        qs = qs.search(first_name, last_name)
    if phone:
        qs = qs.by_phone(phone)
    return qs


@transaction.atomic
def delete_student(student_id):
    """
    Deactivate the student's enrollments, then delete the student.
    Their payments go with them (Payment.student cascades).
    """
    student = get_student(student_id)
    deactivated = unenroll_from_all_classes(student.id)
    payments_deleted = student.payments.count()
    student.delete()
    logger.info(
        f"[students] Deleted student_id={student_id} "
        f"(deactivated {deactivated} enrollments, removed {payments_deleted} payments)"
    )
