"""
Ledger error taxonomy.

Every error is raised before any write and carries:
- code: stable machine-readable identifier (returned to API clients)
- kind: 'not_found' | 'conflict' | 'invalid' (mapped to 404 / 409 / 400 by config.exceptions)
- context(): the structured fields the message was built from
"""

NOT_FOUND = 'not_found'
CONFLICT = 'conflict'
INVALID = 'invalid'


class LedgerError(Exception):
    """Base class for business-rule failures of the billing/enrollment core."""
    code = 'ledger_error'
    kind = INVALID

    def __init__(self, message, **context):
        super().__init__(message)
        self.message = message
        self._context = context

    def context(self):
        return dict(self._context)

    def __str__(self):
        return self.message


# Not found

class StudentNotFound(LedgerError):
    code = 'student_not_found'
    kind = NOT_FOUND

    def __init__(self, student_id):
        super().__init__(f"Student with id {student_id} not found", student_id=student_id)
        self.student_id = student_id


class ClassNotFound(LedgerError):
    code = 'class_not_found'
    kind = NOT_FOUND

    def __init__(self, class_id):
        super().__init__(f"Class with id {class_id} not found", class_id=class_id)
        self.class_id = class_id


class TeacherNotFound(LedgerError):
    code = 'teacher_not_found'
    kind = NOT_FOUND

    def __init__(self, teacher_id):
        super().__init__(f"Teacher with id {teacher_id} not found", teacher_id=teacher_id)
        self.teacher_id = teacher_id


class PaymentNotFound(LedgerError):
    code = 'payment_not_found'
    kind = NOT_FOUND

    def __init__(self, payment_id):
        super().__init__(f"Payment with id {payment_id} not found", payment_id=payment_id)
        self.payment_id = payment_id


class ScheduleNotFound(LedgerError):
    code = 'schedule_not_found'
    kind = NOT_FOUND

    def __init__(self, class_id, slot):
        super().__init__(f"Schedule {slot} not found for class {class_id}", class_id=class_id, slot=slot)
        self.class_id = class_id
        self.slot = slot


# Enrollment state

class AlreadyEnrolled(LedgerError):
    code = 'already_enrolled'
    kind = CONFLICT

    def __init__(self, student_id, class_id):
        super().__init__(
            f"Student {student_id} is already enrolled in class {class_id}",
            student_id=student_id,
            class_id=class_id,
        )
        self.student_id = student_id
        self.class_id = class_id


class NotEnrolled(LedgerError):
    code = 'not_enrolled'
    kind = CONFLICT

    def __init__(self, student_id, class_id):
        super().__init__(
            f"Student {student_id} is not enrolled in class {class_id}",
            student_id=student_id,
            class_id=class_id,
        )
        self.student_id = student_id
        self.class_id = class_id


class StudentNotEnrolled(NotEnrolled):
    """Payment rejected because the student has no active enrollment in the class."""
    code = 'student_not_enrolled'

    def __init__(self, student_id, class_id, student_name=None, class_name=None):
        super().__init__(student_id, class_id)
        if student_name and class_name:
            self.message = f"Student {student_name} is not enrolled in class {class_name}"
            self.args = (self.message,)


# Billing

class DuplicatePayment(LedgerError):
    code = 'duplicate_payment'
    kind = CONFLICT

    def __init__(self, existing_payment_id, student_id, class_id, month):
        label = month.strftime('%Y-%m') if hasattr(month, 'strftime') else str(month)
        super().__init__(
            f"A payment already exists for student {student_id} in class {class_id} "
            f"for {label} (existing payment id: {existing_payment_id})",
            existing_payment_id=existing_payment_id,
            student_id=student_id,
            class_id=class_id,
            month=label,
        )
        self.existing_payment_id = existing_payment_id
        self.student_id = student_id
        self.class_id = class_id
        self.month = month


class InvalidPaymentPeriod(LedgerError):
    code = 'invalid_payment_period'
    kind = INVALID

    def __init__(self, month, enrollment_month, class_id=None):
        month_label = month.strftime('%Y-%m')
        enrolled_label = enrollment_month.strftime('%Y-%m')
        super().__init__(
            f"Payment month {month_label} precedes enrollment month {enrolled_label}",
            month=month_label,
            enrollment_month=enrolled_label,
            class_id=class_id,
        )
        self.month = month
        self.enrollment_month = enrollment_month


class NoPayableClasses(LedgerError):
    code = 'no_payable_classes'
    kind = CONFLICT

    def __init__(self, student_id, month):
        label = month.strftime('%Y-%m')
        super().__init__(
            f"Student {student_id} has no payable classes for {label}",
            student_id=student_id,
            month=label,
        )
        self.student_id = student_id
        self.month = month


class InvalidArgument(LedgerError):
    code = 'invalid_argument'
    kind = INVALID

    def __init__(self, message, field=None):
        super().__init__(message, field=field)
        self.field = field


# Teacher assignment / schedules

class AlreadyAssigned(LedgerError):
    code = 'teacher_already_assigned'
    kind = CONFLICT

    def __init__(self, teacher_id, class_id):
        super().__init__(
            f"Teacher {teacher_id} is already assigned to class {class_id}",
            teacher_id=teacher_id,
            class_id=class_id,
        )


class NotAssigned(LedgerError):
    code = 'teacher_not_assigned'
    kind = CONFLICT

    def __init__(self, teacher_id, class_id):
        super().__init__(
            f"Teacher {teacher_id} is not assigned to class {class_id}",
            teacher_id=teacher_id,
            class_id=class_id,
        )


class ScheduleConflict(LedgerError):
    code = 'schedule_conflict'
    kind = CONFLICT

    def __init__(self, message):
        super().__init__(message)
