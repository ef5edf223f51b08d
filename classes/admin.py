"""
Admin configuration for classes app
"""
from django.contrib import admin
from .models import ClassSchedule, DanceClass, Enrollment


class ClassScheduleInline(admin.TabularInline):
    model = ClassSchedule
    extra = 0


@admin.register(DanceClass)
class DanceClassAdmin(admin.ModelAdmin):
    """Dance Class Admin"""
    list_display = ['id', 'name', 'price', 'duration_hours', 'is_active', 'deleted_at']
    list_filter = ['is_active', 'teachers']
    search_fields = ['name', 'description']
    filter_horizontal = ['teachers']
    readonly_fields = ['created_at', 'updated_at', 'deleted_at']
    inlines = [ClassScheduleInline]


@admin.register(Enrollment)
class EnrollmentAdmin(admin.ModelAdmin):
    """Enrollment Admin (deactivate, never delete)"""
    list_display = ['id', 'student', 'dance_class', 'enrollment_date', 'is_active']
    list_filter = ['is_active', 'dance_class', 'enrollment_date']
    search_fields = ['student__first_name', 'student__last_name', 'dance_class__name']
    readonly_fields = ['created_at', 'updated_at']
    ordering = ['-enrollment_date']
