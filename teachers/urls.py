"""
Teacher API URLs
"""
from django.urls import path
from .views import (
    teachers_view,
    teacher_detail_view,
    teacher_classes_view,
    teacher_assign_view,
    teacher_unassign_view,
)

app_name = 'teachers'

urlpatterns = [
    path('', teachers_view, name='list'),
    path('assign', teacher_assign_view, name='assign'),
    path('unassign', teacher_unassign_view, name='unassign'),
    path('<int:pk>', teacher_detail_view, name='detail'),
    path('<int:pk>/classes', teacher_classes_view, name='classes'),
]
