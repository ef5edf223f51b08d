"""
Admin configuration for payments app
"""
from django.contrib import admin
from .models import Payment


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    """Payment Admin"""
    list_display = ['id', 'student', 'dance_class', 'amount', 'payment_month', 'payment_date', 'payment_method', 'is_late']
    list_filter = ['is_late', 'payment_method', 'payment_month', 'dance_class']
    search_fields = ['student__first_name', 'student__last_name', 'dance_class__name', 'notes']
    readonly_fields = ['is_late', 'created_at', 'updated_at']
    ordering = ['-payment_date', '-created_at']
