"""
Payment API views
"""
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.permissions import IsStudioStaff
from core.utils import parse_month_param
from .models import Payment
from .serializers import (
    MultiClassPaymentSerializer,
    PaymentCreateSerializer,
    PaymentSerializer,
    PaymentUpdateSerializer,
)
from .services import (
    delete_payment,
    get_payment,
    register_multi_class_payment,
    register_payment,
    update_payment,
)


def _filtered_payments(params):
    qs = Payment.objects.select_related('student', 'dance_class')
    student_id = params.get('studentId')
    class_id = params.get('classId')
    month = params.get('month')
    if student_id and student_id.isdigit():
        qs = qs.for_student(int(student_id))
    if class_id and class_id.isdigit():
        qs = qs.for_class(int(class_id))
    if month:
        qs = qs.for_month(parse_month_param(month))
    if params.get('late') == 'true':
        qs = qs.late()
    return qs


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsStudioStaff])
def payments_view(request):
    """
    GET /api/payments/?studentId=&classId=&month=YYYY-MM&late=true
    POST /api/payments/ - register one month of tuition for one class
    """
    if request.method == 'GET':
        return Response(PaymentSerializer(_filtered_payments(request.query_params), many=True).data)

    serializer = PaymentCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data
    payment = register_payment(
        data['studentId'],
        data['classId'],
        data['amount'],
        data['paymentMonth'],
        payment_date=data.get('paymentDate'),
        payment_method=data['paymentMethod'],
        notes=data.get('notes'),
    )
    return Response(PaymentSerializer(payment).data, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsStudioStaff])
def multi_class_payment_view(request):
    """
    POST /api/payments/multi-class
    Splits totalAmount across classIds (or every pending class) proportionally to price.
    """
    serializer = MultiClassPaymentSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data
    payments = register_multi_class_payment(
        data['studentId'],
        data['totalAmount'],
        data['paymentMonth'],
        payment_date=data.get('paymentDate'),
        payment_method=data['paymentMethod'],
        notes=data.get('notes'),
        class_ids=data.get('classIds'),
    )
    return Response(PaymentSerializer(payments, many=True).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, IsStudioStaff])
def payment_detail_view(request, pk):
    """
    GET /api/payments/{id}
    PATCH /api/payments/{id} - amount, paymentDate, paymentMethod, notes
    DELETE /api/payments/{id} - hard delete
    """
    if request.method == 'GET':
        return Response(PaymentSerializer(get_payment(pk)).data)

    if request.method == 'DELETE':
        delete_payment(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    serializer = PaymentUpdateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data
    payment = update_payment(
        pk,
        amount=data.get('amount'),
        payment_date=data.get('paymentDate'),
        payment_method=data.get('paymentMethod'),
        notes=data.get('notes'),
    )
    return Response(PaymentSerializer(payment).data)
