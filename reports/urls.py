"""
Report API URLs
"""
from django.urls import path
from .views import (
    teacher_compensation_view,
    outstanding_view,
    financial_view,
    class_report_view,
    revenue_view,
)

app_name = 'reports'

urlpatterns = [
    path('teacher-compensation/<str:month>', teacher_compensation_view, name='teacher-compensation'),
    path('outstanding/<str:month>', outstanding_view, name='outstanding'),
    path('financial/<str:month>', financial_view, name='financial'),
    path('class/<int:class_id>/<str:month>', class_report_view, name='class'),
    path('revenue/<str:month>', revenue_view, name='revenue'),
]
