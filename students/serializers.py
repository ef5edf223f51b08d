"""
Serializers for students app
"""
from rest_framework import serializers
from .models import Student


class StudentSerializer(serializers.ModelSerializer):
    """Student serializer (camelCase for the frontend)."""
    firstName = serializers.CharField(source='first_name', max_length=100)
    lastName = serializers.CharField(source='last_name', max_length=100)
    fullName = serializers.CharField(source='full_name', read_only=True)
    birthDate = serializers.DateField(source='birth_date', required=False, allow_null=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = Student
        fields = [
            'id', 'firstName', 'lastName', 'fullName', 'phone', 'email',
            'address', 'birthDate', 'createdAt',
        ]
        read_only_fields = ['id']
        extra_kwargs = {
            'email': {'required': False, 'allow_null': True, 'allow_blank': True},
            'address': {'required': False, 'allow_null': True, 'allow_blank': True},
        }

    def validate_phone(self, value):
        value = (value or '').strip()
        if not value:
            raise serializers.ValidationError("Phone is required")
        return value
