"""
Serializers for teachers app
"""
from rest_framework import serializers
from .models import Teacher


class TeacherSerializer(serializers.ModelSerializer):
    firstName = serializers.CharField(source='first_name', max_length=100)
    lastName = serializers.CharField(source='last_name', max_length=100)
    fullName = serializers.CharField(source='full_name', read_only=True)
    isStudioOwner = serializers.BooleanField(source='is_studio_owner', required=False, default=False)
    sharePercentage = serializers.DecimalField(
        source='share_percentage', max_digits=3, decimal_places=2, read_only=True
    )
    classIds = serializers.SerializerMethodField()

    class Meta:
        model = Teacher
        fields = [
            'id', 'firstName', 'lastName', 'fullName', 'phone', 'email', 'address',
            'isStudioOwner', 'sharePercentage', 'classIds',
        ]
        read_only_fields = ['id']
        extra_kwargs = {
            'email': {'required': False, 'allow_null': True, 'allow_blank': True},
            'address': {'required': False, 'allow_null': True, 'allow_blank': True},
        }

    def get_classIds(self, obj):
        return [c.id for c in obj.classes.all() if c.is_active]


class TeacherAssignmentSerializer(serializers.Serializer):
    """POST /api/teachers/assign and /api/teachers/unassign"""
    teacherId = serializers.IntegerField(min_value=1)
    classId = serializers.IntegerField(min_value=1)
