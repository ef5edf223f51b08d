"""
Teacher API views
"""
import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from classes.serializers import DanceClassSerializer
from core.permissions import IsStudioStaff
from .models import Teacher
from .serializers import TeacherAssignmentSerializer, TeacherSerializer
from .services import assign_to_class, classes_for_teacher, delete_teacher, get_teacher, unassign_from_class

logger = logging.getLogger(__name__)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsStudioStaff])
def teachers_view(request):
    """
    GET /api/teachers/?firstName=&lastName=&owner=true|false
    POST /api/teachers/
    """
    if request.method == 'GET':
        qs = Teacher.objects.prefetch_related('classes')
        first_name = request.query_params.get('firstName')
        last_name = request.query_params.get('lastName')
        owner = request.query_params.get('owner')
        if first_name or last_name:
            qs = qs.search(first_name, last_name)
        if owner == 'true':
            qs = qs.owners()
        elif owner == 'false':
            qs = qs.regular()
        return Response(TeacherSerializer(qs, many=True).data)

    serializer = TeacherSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    teacher = serializer.save()
    logger.info(f"[teachers] Created teacher_id={teacher.id} owner={teacher.is_studio_owner}")
    return Response(TeacherSerializer(teacher).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, IsStudioStaff])
def teacher_detail_view(request, pk):
    """
    GET/PUT/PATCH/DELETE /api/teachers/{id}
    """
    teacher = get_teacher(pk)

    if request.method == 'GET':
        return Response(TeacherSerializer(teacher).data)

    if request.method == 'DELETE':
        delete_teacher(teacher.id)
        return Response(status=status.HTTP_204_NO_CONTENT)

    serializer = TeacherSerializer(teacher, data=request.data, partial=request.method == 'PATCH')
    serializer.is_valid(raise_exception=True)
    serializer.save()
    return Response(serializer.data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def teacher_classes_view(request, pk):
    """
    GET /api/teachers/{id}/classes
    """
    classes = classes_for_teacher(pk).prefetch_related('teachers')
    return Response(DanceClassSerializer(classes, many=True).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsStudioStaff])
def teacher_assign_view(request):
    """
    POST /api/teachers/assign
    Body: { teacherId, classId }
    """
    serializer = TeacherAssignmentSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    dance_class = assign_to_class(serializer.validated_data['teacherId'], serializer.validated_data['classId'])
    return Response(DanceClassSerializer(dance_class).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsStudioStaff])
def teacher_unassign_view(request):
    """
    POST /api/teachers/unassign
    Body: { teacherId, classId }
    """
    serializer = TeacherAssignmentSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    dance_class = unassign_from_class(serializer.validated_data['teacherId'], serializer.validated_data['classId'])
    return Response(DanceClassSerializer(dance_class).data)
