"""
API tests: auth/permissions, error mapping (404 / 409 / 400), payment endpoints and reports.
"""
from datetime import date
from decimal import Decimal
from unittest import mock

from django.contrib.auth import get_user_model
from django.db import DatabaseError
from django.test import TestCase
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken

from classes.models import DanceClass
from classes.services import enroll
from payments.models import Payment
from students.models import Student
from teachers.models import Teacher

User = get_user_model()


class StudioAPITestCase(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.staff = User.objects.create_user(username="frontdesk", password="pass123", is_staff=True)
        self.viewer = User.objects.create_user(username="viewer", password="pass123")

        self.student = Student.objects.create(first_name="Sofia", last_name="Gomez", phone="1111")
        self.salsa = DanceClass.objects.create(name="Salsa", price=Decimal("5000.00"), duration_hours=Decimal("1.00"))
        self.tango = DanceClass.objects.create(name="Tango", price=Decimal("3000.00"), duration_hours=Decimal("1.00"))
        enroll(self.student.id, self.salsa.id, enrollment_date=date(2024, 1, 15))

    def _auth_header(self, user) -> dict:
        token = str(AccessToken.for_user(user))
        return {"HTTP_AUTHORIZATION": f"Bearer {token}"}

    def _login(self, user):
        self.client.credentials(**self._auth_header(user))

    def _pay(self, **overrides):
        body = {
            'studentId': self.student.id,
            'classId': self.salsa.id,
            'amount': '5000.00',
            'paymentMonth': '2024-02',
            'paymentDate': '2024-02-05',
        }
        body.update(overrides)
        return self.client.post('/api/payments/', body, format='json')


class AuthTests(StudioAPITestCase):

    def test_anonymous_request_returns_401(self):
        res = self.client.get('/api/payments/')
        self.assertEqual(res.status_code, 401)

    def test_health_needs_no_auth(self):
        res = self.client.get('/api/health/')
        self.assertEqual(res.status_code, 200)

    def test_non_staff_can_read_but_not_write(self):
        self._login(self.viewer)
        self.assertEqual(self.client.get('/api/payments/').status_code, 200)
        res = self._pay()
        self.assertEqual(res.status_code, 403)
        self.assertFalse(Payment.objects.exists())

    def test_token_endpoint(self):
        res = self.client.post('/api/auth/token/', {'username': 'frontdesk', 'password': 'pass123'}, format='json')
        self.assertEqual(res.status_code, 200)
        self.assertIn('access', res.data)


class PaymentAPITests(StudioAPITestCase):
    def setUp(self):
        super().setUp()
        self._login(self.staff)

    def test_register_payment(self):
        res = self._pay()
        self.assertEqual(res.status_code, 201)
        self.assertEqual(res.data['amount'], '5000.00')
        self.assertEqual(res.data['paymentMonth'], '2024-02')
        self.assertFalse(res.data['isLate'])
        self.assertEqual(res.data['paymentMethod'], 'CASH')

    def test_late_payment_flag(self):
        res = self._pay(paymentDate='2024-02-15')
        self.assertEqual(res.status_code, 201)
        self.assertTrue(res.data['isLate'])

    def test_duplicate_returns_409_with_existing_id(self):
        first = self._pay()
        res = self._pay(amount='10.00')
        self.assertEqual(res.status_code, 409)
        self.assertEqual(res.data['code'], 'duplicate_payment')
        self.assertEqual(res.data['existingPaymentId'], first.data['id'])
        self.assertEqual(res.data['month'], '2024-02')

    def test_not_enrolled_returns_409(self):
        res = self._pay(classId=self.tango.id)
        self.assertEqual(res.status_code, 409)
        self.assertEqual(res.data['code'], 'student_not_enrolled')

    def test_invalid_period_returns_400(self):
        res = self._pay(paymentMonth='2023-12')
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data['code'], 'invalid_payment_period')

    def test_unknown_student_returns_404(self):
        res = self._pay(studentId=9999)
        self.assertEqual(res.status_code, 404)
        self.assertEqual(res.data['code'], 'student_not_found')
        self.assertEqual(res.data['studentId'], 9999)

    def test_malformed_body_returns_400(self):
        res = self._pay(paymentMonth='2024-13', amount='-5')
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data['code'], 'validation_error')
        self.assertIn('paymentMonth', res.data['errors'])
        self.assertIn('amount', res.data['errors'])

    def test_amount_wider_than_column_returns_400(self):
        res = self._pay(amount="123456789.00")
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["code"], "validation_error")
        self.assertIn("amount", res.data["errors"])
        self.assertFalse(Payment.objects.exists())

    def test_unexpected_database_error_returns_opaque_500(self):
        with mock.patch("payments.views.register_payment", side_effect=DatabaseError("connection reset")):
            res = self._pay()
        self.assertEqual(res.status_code, 500)
        self.assertEqual(res.data["code"], "internal_error")
        self.assertEqual(res.data["detail"], "An internal error occurred.")

    def test_multi_class_total_too_small_to_split_returns_400(self):
        enroll(self.student.id, self.tango.id, enrollment_date=date(2024, 1, 20))
        res = self.client.post("/api/payments/multi-class", {
            "studentId": self.student.id,
            "totalAmount": "0.01",
            "paymentMonth": "2024-02",
        }, format="json")
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["code"], "invalid_argument")
        self.assertEqual(res.data["field"], "totalAmount")
        self.assertFalse(Payment.objects.exists())

    def test_multi_class_payment(self):
        enroll(self.student.id, self.tango.id, enrollment_date=date(2024, 1, 20))
        res = self.client.post('/api/payments/multi-class', {
            'studentId': self.student.id,
            'totalAmount': '8000.00',
            'paymentMonth': '2024-02',
            'paymentDate': '2024-02-03',
        }, format='json')
        self.assertEqual(res.status_code, 201)
        self.assertEqual(
            {row['classId']: row['amount'] for row in res.data},
            {self.salsa.id: '5000.00', self.tango.id: '3000.00'},
        )

    def test_multi_class_nothing_payable_returns_409(self):
        self._pay()
        res = self.client.post('/api/payments/multi-class', {
            'studentId': self.student.id,
            'totalAmount': '100.00',
            'paymentMonth': '2024-02',
        }, format='json')
        self.assertEqual(res.status_code, 409)
        self.assertEqual(res.data['code'], 'no_payable_classes')

    def test_update_payment_date_recomputes_lateness(self):
        payment_id = self._pay().data['id']
        res = self.client.patch(f'/api/payments/{payment_id}', {'paymentDate': '2024-02-25'}, format='json')
        self.assertEqual(res.status_code, 200)
        self.assertTrue(res.data['isLate'])

    def test_payment_month_is_immutable(self):
        payment_id = self._pay().data['id']
        res = self.client.patch(f'/api/payments/{payment_id}', {'paymentMonth': '2024-03'}, format='json')
        self.assertEqual(res.status_code, 400)
        self.assertEqual(Payment.objects.get(id=payment_id).payment_month, date(2024, 2, 1))

    def test_delete_payment(self):
        payment_id = self._pay().data['id']
        self.assertEqual(self.client.delete(f'/api/payments/{payment_id}').status_code, 204)
        res = self.client.get(f'/api/payments/{payment_id}')
        self.assertEqual(res.status_code, 404)
        self.assertEqual(res.data['code'], 'payment_not_found')

    def test_filter_by_month(self):
        self._pay()
        self.assertEqual(len(self.client.get('/api/payments/?month=2024-02').data), 1)
        self.assertEqual(len(self.client.get('/api/payments/?month=2024-03').data), 0)
        res = self.client.get('/api/payments/?month=feb')
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data['code'], 'invalid_argument')


class EnrollmentAPITests(StudioAPITestCase):
    def setUp(self):
        super().setUp()
        self._login(self.staff)

    def test_enroll_and_unenroll(self):
        res = self.client.post('/api/enrollments/enroll', {
            'studentId': self.student.id, 'classId': self.tango.id, 'enrollmentDate': '2024-02-01',
        }, format='json')
        self.assertEqual(res.status_code, 201)
        self.assertEqual(res.data['enrollmentMonth'], '2024-02')

        res = self.client.post('/api/enrollments/enroll', {
            'studentId': self.student.id, 'classId': self.tango.id,
        }, format='json')
        self.assertEqual(res.status_code, 409)
        self.assertEqual(res.data['code'], 'already_enrolled')

        res = self.client.post('/api/enrollments/unenroll', {
            'studentId': self.student.id, 'classId': self.tango.id,
        }, format='json')
        self.assertEqual(res.status_code, 200)
        self.assertFalse(res.data['isActive'])

        res = self.client.post('/api/enrollments/unenroll', {
            'studentId': self.student.id, 'classId': self.tango.id,
        }, format='json')
        self.assertEqual(res.status_code, 409)
        self.assertEqual(res.data['code'], 'not_enrolled')

    def test_date_range_requires_valid_dates(self):
        res = self.client.get('/api/enrollments/date-range?startDate=2024-01-01&endDate=2024-01-31')
        self.assertEqual(res.status_code, 200)
        self.assertEqual(len(res.data), 1)
        res = self.client.get('/api/enrollments/date-range?startDate=2024-02-01&endDate=2024-01-01')
        self.assertEqual(res.status_code, 400)

    def test_student_delete_removes_payments(self):
        self._pay()
        res = self.client.delete(f'/api/students/{self.student.id}')
        self.assertEqual(res.status_code, 204)
        self.assertFalse(Payment.objects.exists())
        self.assertEqual(self.client.get(f'/api/students/{self.student.id}').status_code, 404)

    def test_class_delete_archives_and_keeps_payments(self):
        self._pay()
        res = self.client.delete(f'/api/classes/{self.salsa.id}')
        self.assertEqual(res.status_code, 204)
        self.assertEqual(Payment.objects.count(), 1)
        self.assertEqual(self.client.get(f'/api/classes/{self.salsa.id}').status_code, 404)
        res = self.client.get(f'/api/reports/class/{self.salsa.id}/2024-02')
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data['totalRevenue'], '5000.00')


class ReportAPITests(StudioAPITestCase):
    def setUp(self):
        super().setUp()
        self.teacher = Teacher.objects.create(first_name="Marta", last_name="Diaz", phone="3")
        self.salsa.teachers.add(self.teacher)
        self._login(self.staff)
        self._pay()
        self._login(self.viewer)

    def test_teacher_compensation(self):
        res = self.client.get('/api/reports/teacher-compensation/2024-02')
        self.assertEqual(res.status_code, 200)
        self.assertEqual(len(res.data), 1)
        self.assertEqual(res.data[0]['totalCompensation'], '2500.00')
        self.assertEqual(res.data[0]['classes'][0]['teacherCompensation'], '2500.00')

    def test_financial(self):
        res = self.client.get('/api/reports/financial/2024-02')
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data['totalRevenue'], '5000.00')
        self.assertEqual(res.data['studioRevenue'], '2500.00')
        self.assertEqual(res.data['latePayments'], 0)

    def test_revenue(self):
        res = self.client.get('/api/reports/revenue/2024-02')
        self.assertEqual(res.data, {'month': '2024-02', 'totalRevenue': '5000.00'})

    def test_outstanding_for_month_with_nothing_due(self):
        res = self.client.get('/api/reports/outstanding/2024-02')
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data['studentsWithOutstanding'], 0)
        self.assertEqual(res.data['students'], [])

    def test_student_outstanding(self):
        res = self.client.get(f'/api/students/{self.student.id}/outstanding/2024-03')
        self.assertEqual(res.status_code, 200)
        self.assertEqual([i['classId'] for i in res.data['items']], [self.salsa.id])

    def test_invalid_month_returns_400(self):
        res = self.client.get('/api/reports/financial/2024-2')
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data['code'], 'invalid_argument')

    def test_unknown_class_report_returns_404(self):
        res = self.client.get('/api/reports/class/9999/2024-02')
        self.assertEqual(res.status_code, 404)

    def test_dashboard(self):
        res = self.client.get('/api/dashboard/')
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data['totalStudents'], 1)
        self.assertEqual(len(res.data['recentPayments']), 1)
