"""
Teacher model. Revenue share is derived from is_studio_owner, never stored.
"""
from decimal import Decimal
from django.db import models

OWNER_SHARE = Decimal('1.0')
TEACHER_SHARE = Decimal('0.5')


class TeacherQuerySet(models.QuerySet):

    def search(self, first_name='', last_name=''):
        return self.filter(
            first_name__icontains=first_name or '',
            last_name__icontains=last_name or '',
        )

    def owners(self):
        return self.filter(is_studio_owner=True)

    def regular(self):
        return self.filter(is_studio_owner=False)


class Teacher(models.Model):
    """
    Teacher - assigned to classes through DanceClass.teachers.
    Studio owner keeps 100% of class revenue; other teachers get 50%.
    """
    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)
    phone = models.CharField(max_length=30)
    email = models.EmailField(blank=True, null=True)
    address = models.CharField(max_length=255, blank=True, null=True)
    is_studio_owner = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = TeacherQuerySet.as_manager()

    class Meta:
        db_table = 'teachers'
        verbose_name = 'Teacher'
        verbose_name_plural = 'Teachers'
        ordering = ['last_name', 'first_name', 'id']

    def __str__(self):
        return self.full_name

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}"

    @property
    def share_percentage(self):
        return OWNER_SHARE if self.is_studio_owner else TEACHER_SHARE
