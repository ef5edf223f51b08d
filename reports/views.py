"""
Report API views. All read-only; any authenticated user.
"""
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.months import format_month
from core.utils import parse_month_param
from payments.services import total_revenue_for_month
from .serializers import (
    ClassReportSerializer,
    DashboardSerializer,
    MonthlyFinancialReportSerializer,
    OutstandingReportSerializer,
    TeacherCompensationSerializer,
)
from .services import (
    class_report,
    dashboard_metrics,
    monthly_financial_report,
    outstanding_report,
    teacher_compensation_report,
)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def teacher_compensation_view(request, month):
    """
    GET /api/reports/teacher-compensation/{YYYY-MM}
    """
    reports = teacher_compensation_report(parse_month_param(month))
    return Response(TeacherCompensationSerializer(reports, many=True).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def outstanding_view(request, month):
    """
    GET /api/reports/outstanding/{YYYY-MM}
    Unpaid dues per student; 15% surcharge once today is past the 10th of that month.
    """
    report = outstanding_report(parse_month_param(month))
    return Response(OutstandingReportSerializer(report).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def financial_view(request, month):
    """
    GET /api/reports/financial/{YYYY-MM}
    """
    report = monthly_financial_report(parse_month_param(month))
    return Response(MonthlyFinancialReportSerializer(report).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def class_report_view(request, class_id, month):
    """
    GET /api/reports/class/{classId}/{YYYY-MM}
    """
    report = class_report(class_id, parse_month_param(month))
    return Response(ClassReportSerializer(report).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def revenue_view(request, month):
    """
    GET /api/reports/revenue/{YYYY-MM}
    """
    month = parse_month_param(month)
    return Response({
        'month': format_month(month),
        'totalRevenue': str(total_revenue_for_month(month)),
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def dashboard_view(request):
    """
    GET /api/dashboard/
    Current-month KPIs and the latest payments.
    """
    return Response(DashboardSerializer(dashboard_metrics()).data)
