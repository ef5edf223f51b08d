"""
Serializers for report payloads (read-only, built from reports.services dataclasses)
"""
from rest_framework import serializers

from core.money import money_sum
from core.serializers import MonthField
from payments.serializers import PaymentSerializer


class StudentRefSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    fullName = serializers.CharField(source='full_name')


class OutstandingItemSerializer(serializers.Serializer):
    classId = serializers.IntegerField(source='dance_class.id')
    className = serializers.CharField(source='dance_class.name')
    month = MonthField()
    expectedAmount = serializers.DecimalField(source='expected_amount', max_digits=14, decimal_places=2)
    isLate = serializers.BooleanField(source='is_late')


def serialize_outstanding(outstanding):
    """{Student: [items]} -> [{studentId, studentName, items, totalExpected}]"""
    rows = []
    for student, items in outstanding.items():
        rows.append({
            'studentId': student.id,
            'studentName': student.full_name,
            'items': OutstandingItemSerializer(items, many=True).data,
            'totalExpected': str(money_sum(i.expected_amount for i in items)),
        })
    return rows


class OutstandingReportSerializer(serializers.Serializer):
    month = MonthField()
    students = serializers.SerializerMethodField()
    totalOutstandingAmount = serializers.DecimalField(
        source='total_outstanding_amount', max_digits=14, decimal_places=2
    )
    studentsWithOutstanding = serializers.IntegerField(source='students_with_outstanding')

    def get_students(self, obj):
        return serialize_outstanding(obj.outstanding)


class TeacherClassReportSerializer(serializers.Serializer):
    classId = serializers.IntegerField(source='dance_class.id')
    className = serializers.CharField(source='dance_class.name')
    totalRevenue = serializers.DecimalField(source='total_revenue', max_digits=14, decimal_places=2)
    teacherCompensation = serializers.DecimalField(source='teacher_compensation', max_digits=14, decimal_places=2)
    paymentsCount = serializers.SerializerMethodField()
    payingStudents = StudentRefSerializer(source='paying_students', many=True)

    def get_paymentsCount(self, obj):
        return len(obj.payments)


class TeacherCompensationSerializer(serializers.Serializer):
    teacherId = serializers.IntegerField(source='teacher.id')
    teacherName = serializers.CharField(source='teacher.full_name')
    isStudioOwner = serializers.BooleanField(source='teacher.is_studio_owner')
    sharePercentage = serializers.DecimalField(source='teacher.share_percentage', max_digits=3, decimal_places=2)
    month = MonthField()
    classes = TeacherClassReportSerializer(source='class_reports', many=True)
    totalCompensation = serializers.DecimalField(source='total_compensation', max_digits=14, decimal_places=2)


class MonthlyFinancialReportSerializer(serializers.Serializer):
    month = MonthField()
    totalRevenue = serializers.DecimalField(source='total_revenue', max_digits=14, decimal_places=2)
    studioRevenue = serializers.DecimalField(source='studio_revenue', max_digits=14, decimal_places=2)
    totalTeacherCompensation = serializers.DecimalField(
        source='total_teacher_compensation', max_digits=14, decimal_places=2
    )
    totalPayments = serializers.IntegerField(source='total_payments')
    latePayments = serializers.IntegerField(source='late_payments')
    latePaymentAmount = serializers.DecimalField(source='late_payment_amount', max_digits=14, decimal_places=2)


class ClassReportSerializer(serializers.Serializer):
    classId = serializers.IntegerField(source='dance_class.id')
    className = serializers.CharField(source='dance_class.name')
    month = MonthField()
    totalRevenue = serializers.DecimalField(source='total_revenue', max_digits=14, decimal_places=2)
    studentsCount = serializers.IntegerField(source='students_count')
    payments = PaymentSerializer(many=True)


class DashboardSerializer(serializers.Serializer):
    month = MonthField()
    totalStudents = serializers.IntegerField(source='total_students')
    totalTeachers = serializers.IntegerField(source='total_teachers')
    totalClasses = serializers.IntegerField(source='total_classes')
    monthlyRevenue = serializers.DecimalField(source='monthly_revenue', max_digits=14, decimal_places=2)
    outstandingPayments = serializers.IntegerField(source='outstanding_payments')
    outstandingAmount = serializers.DecimalField(source='outstanding_amount', max_digits=14, decimal_places=2)
    recentPayments = PaymentSerializer(source='recent_payments', many=True)
