"""
Class and enrollment API views
"""
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.permissions import IsStudioStaff
from core.utils import parse_iso_date
from students.serializers import StudentSerializer
from .models import DanceClass
from .serializers import (
    DanceClassSerializer,
    DanceClassWriteSerializer,
    EnrollmentSerializer,
    EnrollRequestSerializer,
    ScheduleSlotSerializer,
    UnenrollRequestSerializer,
)
from .services import (
    active_enrollments_for_class,
    add_schedule,
    archive_class,
    create_class,
    enroll,
    enrollments_in_date_range,
    get_active_class,
    remove_schedule,
    unenroll,
    update_class,
)

WRITE_FIELDS = {
    'name': 'name',
    'description': 'description',
    'price': 'price',
    'durationHours': 'duration_hours',
}


def _slots(schedules):
    return [(s['day_of_week'], s['start_hour'], s.get('start_minute', 0)) for s in schedules]


def _classes_queryset():
    return DanceClass.objects.active().prefetch_related('schedules', 'teachers')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsStudioStaff])
def classes_view(request):
    """
    GET /api/classes/?name=&teacherId=&dayOfWeek=
    POST /api/classes/ (with schedules)
    """
    if request.method == 'GET':
        qs = _classes_queryset()
        name = request.query_params.get('name')
        teacher_id = request.query_params.get('teacherId')
        day = request.query_params.get('dayOfWeek')
        if name:
            qs = qs.search(name)
        if teacher_id and teacher_id.isdigit():
            qs = qs.taught_by(int(teacher_id))
        if day and day.isdigit():
            qs = qs.on_day(int(day))
        return Response(DanceClassSerializer(qs, many=True).data)

    serializer = DanceClassWriteSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data
    dance_class = create_class(
        name=data['name'],
        description=data.get('description'),
        price=data['price'],
        duration_hours=data['durationHours'],
        schedules=_slots(data.get('schedules', [])),
    )
    return Response(DanceClassSerializer(dance_class).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, IsStudioStaff])
def class_detail_view(request, pk):
    """
    GET/PUT/PATCH /api/classes/{id}
    DELETE /api/classes/{id} - archives; payments are kept
    """
    dance_class = get_active_class(pk)

    if request.method == 'GET':
        return Response(DanceClassSerializer(dance_class).data)

    if request.method == 'DELETE':
        archive_class(dance_class.id)
        return Response(status=status.HTTP_204_NO_CONTENT)

    serializer = DanceClassWriteSerializer(data=request.data, partial=request.method == 'PATCH')
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data
    fields = {model_name: data[api_name] for api_name, model_name in WRITE_FIELDS.items() if api_name in data}
    schedules = _slots(data['schedules']) if 'schedules' in data else None
    dance_class = update_class(dance_class.id, schedules=schedules, **fields)
    return Response(DanceClassSerializer(dance_class).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def class_students_view(request, pk):
    """
    GET /api/classes/{id}/students
    Students with an active enrollment.
    """
    dance_class = get_active_class(pk)
    students = [e.student for e in active_enrollments_for_class(dance_class.id)]
    return Response(StudentSerializer(students, many=True).data)


@api_view(['POST', 'DELETE'])
@permission_classes([IsAuthenticated, IsStudioStaff])
def class_schedules_view(request, pk):
    """
    POST /api/classes/{id}/schedules - add slot
    DELETE /api/classes/{id}/schedules - remove slot
    Body: { dayOfWeek, startHour, startMinute }
    """
    serializer = ScheduleSlotSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    slot = serializer.validated_data

    if request.method == 'POST':
        dance_class = add_schedule(pk, slot['dayOfWeek'], slot['startHour'], slot['startMinute'])
        return Response(DanceClassSerializer(dance_class).data, status=status.HTTP_201_CREATED)

    dance_class = remove_schedule(pk, slot['dayOfWeek'], slot['startHour'], slot['startMinute'])
    return Response(DanceClassSerializer(dance_class).data)


# Enrollment ledger

@api_view(['POST'])
@permission_classes([IsAuthenticated, IsStudioStaff])
def enroll_view(request):
    """
    POST /api/enrollments/enroll
    Body: { studentId, classId, enrollmentDate?, notes? }
    """
    serializer = EnrollRequestSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data
    enrollment = enroll(
        data['studentId'],
        data['classId'],
        enrollment_date=data.get('enrollmentDate'),
        notes=data.get('notes'),
    )
    return Response(EnrollmentSerializer(enrollment).data, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsStudioStaff])
def unenroll_view(request):
    """
    POST /api/enrollments/unenroll
    Body: { studentId, classId }
    """
    serializer = UnenrollRequestSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    enrollment = unenroll(serializer.validated_data['studentId'], serializer.validated_data['classId'])
    return Response(EnrollmentSerializer(enrollment).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def enrollments_date_range_view(request):
    """
    GET /api/enrollments/date-range?startDate=YYYY-MM-DD&endDate=YYYY-MM-DD
    """
    start = parse_iso_date(request.query_params.get('startDate'), 'startDate')
    end = parse_iso_date(request.query_params.get('endDate'), 'endDate')
    enrollments = enrollments_in_date_range(start, end)
    return Response(EnrollmentSerializer(enrollments, many=True).data)
