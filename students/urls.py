"""
Student API URLs
"""
from django.urls import path
from .views import (
    students_view,
    student_detail_view,
    student_enrollments_view,
    student_outstanding_view,
)

app_name = 'students'

urlpatterns = [
    path('', students_view, name='list'),
    path('<int:pk>', student_detail_view, name='detail'),
    path('<int:pk>/enrollments', student_enrollments_view, name='enrollments'),
    path('<int:pk>/outstanding/<str:month>', student_outstanding_view, name='outstanding'),
]
