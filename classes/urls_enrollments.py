"""
Enrollment API URLs
"""
from django.urls import path
from .views import enroll_view, unenroll_view, enrollments_date_range_view

app_name = 'enrollments'

urlpatterns = [
    path('enroll', enroll_view, name='enroll'),
    path('unenroll', unenroll_view, name='unenroll'),
    path('date-range', enrollments_date_range_view, name='date-range'),
]
