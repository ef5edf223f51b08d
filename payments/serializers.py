"""
Serializers for payments app
"""
from rest_framework import serializers

from core.serializers import MonthField, MoneyField
from .models import Payment, PaymentMethod


class PaymentSerializer(serializers.ModelSerializer):
    """Payment serializer. Amount as string (Decimal), month as YYYY-MM."""
    studentId = serializers.IntegerField(source='student_id', read_only=True)
    studentName = serializers.CharField(source='student.full_name', read_only=True)
    classId = serializers.IntegerField(source='dance_class_id', read_only=True)
    className = serializers.CharField(source='dance_class.name', read_only=True)
    paymentDate = serializers.DateField(source='payment_date', read_only=True)
    paymentMonth = MonthField(source='payment_month', read_only=True)
    paymentMethod = serializers.CharField(source='payment_method', read_only=True)
    isLate = serializers.BooleanField(source='is_late', read_only=True)

    class Meta:
        model = Payment
        fields = [
            'id', 'studentId', 'studentName', 'classId', 'className', 'amount',
            'paymentDate', 'paymentMonth', 'paymentMethod', 'isLate', 'notes',
        ]
        read_only_fields = fields


class PaymentCreateSerializer(serializers.Serializer):
    """POST /api/payments/"""
    studentId = serializers.IntegerField(min_value=1)
    classId = serializers.IntegerField(min_value=1)
    amount = MoneyField()
    paymentMonth = MonthField()
    paymentDate = serializers.DateField(required=False, allow_null=True)
    paymentMethod = serializers.ChoiceField(choices=PaymentMethod.choices, default=PaymentMethod.CASH)
    notes = serializers.CharField(required=False, allow_null=True, allow_blank=True)


class MultiClassPaymentSerializer(serializers.Serializer):
    """POST /api/payments/multi-class. Empty classIds pays every pending class."""
    studentId = serializers.IntegerField(min_value=1)
    totalAmount = MoneyField()
    paymentMonth = MonthField()
    paymentDate = serializers.DateField(required=False, allow_null=True)
    paymentMethod = serializers.ChoiceField(choices=PaymentMethod.choices, default=PaymentMethod.CASH)
    notes = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    classIds = serializers.ListField(child=serializers.IntegerField(min_value=1), required=False, default=list)


class PaymentUpdateSerializer(serializers.Serializer):
    """PATCH /api/payments/{id}. paymentMonth is immutable and rejected."""
    amount = MoneyField(required=False)
    paymentDate = serializers.DateField(required=False)
    paymentMethod = serializers.ChoiceField(choices=PaymentMethod.choices, required=False)
    notes = serializers.CharField(required=False, allow_blank=True)

    def validate(self, attrs):
        if 'paymentMonth' in self.initial_data:
            raise serializers.ValidationError({'paymentMonth': 'Payment month cannot be changed'})
        return attrs
