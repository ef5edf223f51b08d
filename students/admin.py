"""
Admin configuration for students app
"""
from django.contrib import admin
from .models import Student


@admin.register(Student)
class StudentAdmin(admin.ModelAdmin):
    """Student Admin"""
    list_display = ['id', 'last_name', 'first_name', 'phone', 'email', 'created_at']
    list_filter = ['created_at']
    search_fields = ['first_name', 'last_name', 'phone', 'email']
    readonly_fields = ['created_at', 'updated_at']
    ordering = ['last_name', 'first_name']
