"""
Payment API URLs
"""
from django.urls import path
from .views import payments_view, payment_detail_view, multi_class_payment_view

app_name = 'payments'

urlpatterns = [
    path('', payments_view, name='list'),
    path('multi-class', multi_class_payment_view, name='multi-class'),
    path('<int:pk>', payment_detail_view, name='detail'),
]
