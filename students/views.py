"""
Student API views
"""
import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from classes.serializers import EnrollmentSerializer
from classes.services import active_enrollments_for_student
from core.permissions import IsStudioStaff
from core.months import format_month
from core.utils import parse_month_param
from reports.serializers import OutstandingItemSerializer
from reports.services import outstanding_for_student
from .serializers import StudentSerializer
from .services import delete_student, get_student, search_students

logger = logging.getLogger(__name__)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsStudioStaff])
def students_view(request):
    """
    GET /api/students/?firstName=&lastName=&phone=
    POST /api/students/
    """
    if request.method == 'GET':
        students = search_students(
            first_name=request.query_params.get('firstName'),
            last_name=request.query_params.get('lastName'),
            phone=request.query_params.get('phone'),
        )
        return Response(StudentSerializer(students, many=True).data)

    serializer = StudentSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    student = serializer.save()
    logger.info(f"[students] Created student_id={student.id}")
    return Response(StudentSerializer(student).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, IsStudioStaff])
def student_detail_view(request, pk):
    """
    GET/PUT/PATCH /api/students/{id}
    DELETE /api/students/{id} - unenrolls from every class, removes payments
    """
    student = get_student(pk)

    if request.method == 'GET':
        return Response(StudentSerializer(student).data)

    if request.method == 'DELETE':
        delete_student(student.id)
        return Response(status=status.HTTP_204_NO_CONTENT)

    serializer = StudentSerializer(student, data=request.data, partial=request.method == 'PATCH')
    serializer.is_valid(raise_exception=True)
    serializer.save()
    return Response(serializer.data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def student_enrollments_view(request, pk):
    """
    GET /api/students/{id}/enrollments
    Active enrollments only.
    """
    student = get_student(pk)
    enrollments = active_enrollments_for_student(student.id).select_related('student')
    return Response(EnrollmentSerializer(enrollments, many=True).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def student_outstanding_view(request, pk, month):
    """
    GET /api/students/{id}/outstanding/{YYYY-MM}
    """
    month = parse_month_param(month)
    items = outstanding_for_student(pk, month)
    return Response({
        'studentId': int(pk),
        'month': format_month(month),
        'items': OutstandingItemSerializer(items, many=True).data,
    })
