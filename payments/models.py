"""
Payment models
"""
from django.db import models
from django.db.models import Sum
from django.core.validators import MinValueValidator

from students.models import Student
from classes.models import DanceClass
from core.money import ZERO, quantize_money


class PaymentMethod(models.TextChoices):
    TRANSFER = 'TRANSFER', 'Bank Transfer'
    CARD = 'CARD', 'Credit/Debit Card'
    CASH = 'CASH', 'Cash'


class PaymentQuerySet(models.QuerySet):

    def for_month(self, month):
        return self.filter(payment_month=month)

    def for_student(self, student_id):
        return self.filter(student_id=student_id)

    def for_class(self, class_id):
        return self.filter(dance_class_id=class_id)

    def late(self):
        return self.filter(is_late=True)

    def find_for(self, student_id, class_id, month):
        """The payment for (student, class, month), or None."""
        return self.filter(
            student_id=student_id,
            dance_class_id=class_id,
            payment_month=month,
        ).first()

    def total_amount(self):
        total = self.aggregate(total=Sum('amount'))['total']
        return quantize_money(total) if total is not None else ZERO


class Payment(models.Model):
    """
    Monthly tuition payment for one (student, class, month).
    payment_month is stored as the first day of the month.
    is_late is fixed at creation (and on an explicit date update), never re-derived.
    """
    student = models.ForeignKey(
        Student,
        on_delete=models.CASCADE,
        related_name='payments',
    )
    dance_class = models.ForeignKey(
        DanceClass,
        on_delete=models.PROTECT,
        related_name='payments',
    )
    amount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(0.01)],
    )
    payment_date = models.DateField()
    payment_month = models.DateField(db_index=True, help_text="First day of the month being paid")
    payment_method = models.CharField(
        max_length=20,
        choices=PaymentMethod.choices,
        default=PaymentMethod.CASH,
    )
    is_late = models.BooleanField(default=False)
    notes = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = PaymentQuerySet.as_manager()

    class Meta:
        db_table = 'payments'
        verbose_name = 'Payment'
        verbose_name_plural = 'Payments'
        ordering = ['-payment_date', '-id']
        constraints = [
            models.UniqueConstraint(
                fields=['student', 'dance_class', 'payment_month'],
                name='unique_payment_student_class_month',
            ),
        ]
        indexes = [
            models.Index(fields=['dance_class', 'payment_month'], name='payment_class_month_idx'),
            models.Index(fields=['student', 'payment_month'], name='payment_student_month_idx'),
        ]

    def __str__(self):
        return f"Payment {self.id} - {self.student} - {self.dance_class} - {self.amount} ({self.payment_month:%Y-%m})"
