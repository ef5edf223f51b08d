"""
Student model.
Enrollments live in the classes app (classes.Enrollment) and point here; the
student row holds no back-references to keep in sync.
"""
from django.db import models


class StudentQuerySet(models.QuerySet):

    def search(self, first_name='', last_name=''):
        return self.filter(
            first_name__icontains=first_name or '',
            last_name__icontains=last_name or '',
        )

    def by_phone(self, phone):
        return self.filter(phone__icontains=phone)


class Student(models.Model):
    """
    Student - identity and contact info.
    """
    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)
    phone = models.CharField(max_length=30)
    email = models.EmailField(blank=True, null=True)
    address = models.CharField(max_length=255, blank=True, null=True)
    birth_date = models.DateField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = StudentQuerySet.as_manager()

    class Meta:
        db_table = 'students'
        verbose_name = 'Student'
        verbose_name_plural = 'Students'
        ordering = ['last_name', 'first_name', 'id']

    def __str__(self):
        return self.full_name

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}"
