"""
Class API URLs
"""
from django.urls import path
from .views import (
    classes_view,
    class_detail_view,
    class_students_view,
    class_schedules_view,
)

app_name = 'classes'

urlpatterns = [
    path('', classes_view, name='list'),
    path('<int:pk>', class_detail_view, name='detail'),
    path('<int:pk>/students', class_students_view, name='students'),
    path('<int:pk>/schedules', class_schedules_view, name='schedules'),
]
