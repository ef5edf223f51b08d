"""
Serializers for classes app
"""
from decimal import Decimal

from django.core.validators import MinValueValidator
from rest_framework import serializers

from core.months import format_month
from .models import ClassSchedule, DanceClass, Enrollment, DAY_NAMES


class ClassScheduleSerializer(serializers.ModelSerializer):
    dayOfWeek = serializers.IntegerField(source='day_of_week', min_value=1, max_value=7)
    dayName = serializers.SerializerMethodField()
    startHour = serializers.IntegerField(source='start_hour', min_value=0, max_value=23)
    startMinute = serializers.IntegerField(source='start_minute', min_value=0, max_value=59, required=False, default=0)

    class Meta:
        model = ClassSchedule
        fields = ['dayOfWeek', 'dayName', 'startHour', 'startMinute']

    def get_dayName(self, obj):
        return DAY_NAMES.get(obj.day_of_week)


class DanceClassSerializer(serializers.ModelSerializer):
    """Read serializer. Price as string (Decimal)."""
    durationHours = serializers.DecimalField(source='duration_hours', max_digits=4, decimal_places=2)
    schedules = ClassScheduleSerializer(many=True, read_only=True)
    teacherIds = serializers.SerializerMethodField()
    activeStudentCount = serializers.IntegerField(source='active_student_count', read_only=True)
    isActive = serializers.BooleanField(source='is_active', read_only=True)

    class Meta:
        model = DanceClass
        fields = [
            'id', 'name', 'description', 'price', 'durationHours', 'schedules',
            'teacherIds', 'activeStudentCount', 'isActive',
        ]

    def get_teacherIds(self, obj):
        return [t.id for t in obj.teachers.all()]


class DanceClassWriteSerializer(serializers.Serializer):
    """Create (with schedule slots) / partial update"""
    name = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    price = serializers.DecimalField(
        max_digits=10, decimal_places=2, validators=[MinValueValidator(Decimal('0.01'))]
    )
    durationHours = serializers.DecimalField(
        max_digits=4, decimal_places=2, validators=[MinValueValidator(Decimal('0.01'))]
    )
    schedules = ClassScheduleSerializer(many=True, required=False)


class ScheduleSlotSerializer(serializers.Serializer):
    """POST/DELETE /api/classes/{id}/schedules"""
    dayOfWeek = serializers.IntegerField(min_value=1, max_value=7)
    startHour = serializers.IntegerField(min_value=0, max_value=23)
    startMinute = serializers.IntegerField(min_value=0, max_value=59, required=False, default=0)


class EnrollmentSerializer(serializers.ModelSerializer):
    studentId = serializers.IntegerField(source='student_id', read_only=True)
    studentName = serializers.CharField(source='student.full_name', read_only=True)
    classId = serializers.IntegerField(source='dance_class_id', read_only=True)
    className = serializers.CharField(source='dance_class.name', read_only=True)
    enrollmentDate = serializers.DateField(source='enrollment_date', read_only=True)
    enrollmentMonth = serializers.SerializerMethodField()
    isActive = serializers.BooleanField(source='is_active', read_only=True)

    class Meta:
        model = Enrollment
        fields = [
            'id', 'studentId', 'studentName', 'classId', 'className',
            'enrollmentDate', 'enrollmentMonth', 'isActive', 'notes',
        ]

    def get_enrollmentMonth(self, obj):
        return format_month(obj.enrollment_month)


class EnrollRequestSerializer(serializers.Serializer):
    """POST /api/enrollments/enroll"""
    studentId = serializers.IntegerField(min_value=1)
    classId = serializers.IntegerField(min_value=1)
    enrollmentDate = serializers.DateField(required=False, allow_null=True)
    notes = serializers.CharField(required=False, allow_null=True, allow_blank=True)


class UnenrollRequestSerializer(serializers.Serializer):
    """POST /api/enrollments/unenroll"""
    studentId = serializers.IntegerField(min_value=1)
    classId = serializers.IntegerField(min_value=1)
