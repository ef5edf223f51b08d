"""
DanceClass, its weekly schedule slots, and the Enrollment ledger (student <-> class).
Schedule: day_of_week (1=Mon..7=Sun), start_hour, start_minute.
"""
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models
from django.db.models import Q

from students.models import Student
from teachers.models import Teacher

DAY_NAMES = {
    1: 'MONDAY',
    2: 'TUESDAY',
    3: 'WEDNESDAY',
    4: 'THURSDAY',
    5: 'FRIDAY',
    6: 'SATURDAY',
    7: 'SUNDAY',
}


class DanceClassQuerySet(models.QuerySet):

    def active(self):
        return self.filter(is_active=True, deleted_at__isnull=True)

    def search(self, name):
        return self.filter(name__icontains=name or '')

    def taught_by(self, teacher_id):
        return self.filter(teachers__id=teacher_id).distinct()

    def on_day(self, day_of_week):
        return self.filter(schedules__day_of_week=day_of_week).distinct()


class DanceClass(models.Model):
    """
    Dance class. price is the fixed monthly tuition (baseline due per month).
    Deleting a class archives it (is_active=False, deleted_at set) so payments stay reportable.
    """
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, null=True)
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(0.01)],
    )
    duration_hours = models.DecimalField(
        max_digits=4,
        decimal_places=2,
        validators=[MinValueValidator(0.01)],
    )
    teachers = models.ManyToManyField(
        Teacher,
        blank=True,
        related_name='classes',
        db_table='class_teachers',
    )
    is_active = models.BooleanField(default=True)
    deleted_at = models.DateTimeField(null=True, blank=True, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = DanceClassQuerySet.as_manager()

    class Meta:
        db_table = 'dance_classes'
        verbose_name = 'Dance Class'
        verbose_name_plural = 'Dance Classes'
        ordering = ['name', 'id']

    def __str__(self):
        return self.name

    @property
    def active_student_count(self):
        return self.enrollments.filter(is_active=True).count()


class ClassSchedule(models.Model):
    """Weekly slot of a class. (day, hour, minute) is unique per class."""
    dance_class = models.ForeignKey(
        DanceClass,
        on_delete=models.CASCADE,
        related_name='schedules',
    )
    day_of_week = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(7)],
        help_text="1=Mon..7=Sun",
    )
    start_hour = models.PositiveSmallIntegerField(validators=[MaxValueValidator(23)])
    start_minute = models.PositiveSmallIntegerField(default=0, validators=[MaxValueValidator(59)])

    class Meta:
        db_table = 'class_schedules'
        verbose_name = 'Class Schedule'
        verbose_name_plural = 'Class Schedules'
        ordering = ['day_of_week', 'start_hour', 'start_minute']
        constraints = [
            models.UniqueConstraint(
                fields=['dance_class', 'day_of_week', 'start_hour', 'start_minute'],
                name='unique_class_schedule_slot',
            ),
        ]

    def __str__(self):
        return f"{DAY_NAMES.get(self.day_of_week, self.day_of_week)} {self.time_string}"

    @property
    def time_string(self):
        return f"{self.start_hour:02d}:{self.start_minute:02d}"

    @property
    def slot(self):
        return (self.day_of_week, self.start_hour, self.start_minute)


class EnrollmentQuerySet(models.QuerySet):

    def active(self):
        return self.filter(is_active=True)

    def for_student(self, student_id):
        return self.filter(student_id=student_id)

    def for_class(self, class_id):
        return self.filter(dance_class_id=class_id)

    def find_active(self, student_id, class_id):
        """Active enrollment for the pair, or None."""
        return self.active().filter(student_id=student_id, dance_class_id=class_id).first()


class Enrollment(models.Model):
    """
    Dated link between a student and a class. Unenrolling sets is_active=False on
    this row; re-enrolling creates a new row, so history is never lost.
    At most one active row per (student, class).
    """
    student = models.ForeignKey(
        Student,
        on_delete=models.CASCADE,
        related_name='enrollments',
    )
    dance_class = models.ForeignKey(
        DanceClass,
        on_delete=models.CASCADE,
        related_name='enrollments',
    )
    enrollment_date = models.DateField()
    notes = models.TextField(blank=True, null=True)
    is_active = models.BooleanField(default=True, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = EnrollmentQuerySet.as_manager()

    class Meta:
        db_table = 'student_enrollments'
        verbose_name = 'Enrollment'
        verbose_name_plural = 'Enrollments'
        ordering = ['-enrollment_date', '-id']
        constraints = [
            models.UniqueConstraint(
                fields=['student', 'dance_class'],
                condition=Q(is_active=True),
                name='unique_active_enrollment',
            ),
        ]
        indexes = [
            models.Index(fields=['student', 'is_active'], name='enrollment_student_active_idx'),
            models.Index(fields=['dance_class', 'is_active'], name='enrollment_class_active_idx'),
        ]

    def __str__(self):
        state = 'active' if self.is_active else 'inactive'
        return f"{self.student} - {self.dance_class} ({self.enrollment_date}, {state})"

    @property
    def enrollment_month(self):
        return self.enrollment_date.replace(day=1)
