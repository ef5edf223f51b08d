"""
Admin configuration for teachers app
"""
from django.contrib import admin
from .models import Teacher


@admin.register(Teacher)
class TeacherAdmin(admin.ModelAdmin):
    """Teacher Admin"""
    list_display = ['id', 'last_name', 'first_name', 'phone', 'is_studio_owner', 'share_percentage']
    list_filter = ['is_studio_owner']
    search_fields = ['first_name', 'last_name', 'phone', 'email']
    readonly_fields = ['created_at', 'updated_at']
