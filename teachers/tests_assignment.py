"""
Teacher assignment tests: share derivation, schedule conflicts, unassign, delete.
"""
from decimal import Decimal

from django.test import TestCase

from classes.services import create_class
from core.exceptions import AlreadyAssigned, ClassNotFound, NotAssigned, ScheduleConflict, TeacherNotFound
from teachers.models import Teacher
from teachers.services import assign_to_class, classes_for_teacher, delete_teacher, unassign_from_class


class TeacherAssignmentTests(TestCase):
    def setUp(self):
        self.teacher = Teacher.objects.create(first_name="Marta", last_name="Diaz", phone="3")
        self.salsa = create_class("Salsa", Decimal("5000.00"), Decimal("1.00"), schedules=[(1, 19, 0), (3, 19, 0)])
        self.tango = create_class("Tango", Decimal("3000.00"), Decimal("1.00"), schedules=[(1, 19, 0)])
        self.jazz = create_class("Jazz", Decimal("2000.00"), Decimal("1.00"), schedules=[(1, 20, 0)])

    def test_share_percentage(self):
        owner = Teacher.objects.create(first_name="Elena", last_name="Sosa", phone="4", is_studio_owner=True)
        self.assertEqual(owner.share_percentage, Decimal("1.0"))
        self.assertEqual(self.teacher.share_percentage, Decimal("0.5"))

    def test_assign_and_list_classes(self):
        assign_to_class(self.teacher.id, self.salsa.id)
        assign_to_class(self.teacher.id, self.jazz.id)
        self.assertEqual({c.id for c in classes_for_teacher(self.teacher.id)}, {self.salsa.id, self.jazz.id})

    def test_assign_twice(self):
        assign_to_class(self.teacher.id, self.salsa.id)
        with self.assertRaises(AlreadyAssigned):
            assign_to_class(self.teacher.id, self.salsa.id)

    def test_same_slot_in_another_class_conflicts(self):
        assign_to_class(self.teacher.id, self.salsa.id)
        with self.assertRaises(ScheduleConflict):
            assign_to_class(self.teacher.id, self.tango.id)
        self.assertFalse(self.tango.teachers.exists())

    def test_unassign(self):
        assign_to_class(self.teacher.id, self.salsa.id)
        unassign_from_class(self.teacher.id, self.salsa.id)
        self.assertFalse(self.salsa.teachers.exists())
        with self.assertRaises(NotAssigned):
            unassign_from_class(self.teacher.id, self.salsa.id)

    def test_unknown_ids(self):
        with self.assertRaises(TeacherNotFound):
            assign_to_class(999, self.salsa.id)
        with self.assertRaises(ClassNotFound):
            assign_to_class(self.teacher.id, 999)

    def test_delete_teacher_removes_assignments(self):
        assign_to_class(self.teacher.id, self.salsa.id)
        delete_teacher(self.teacher.id)
        self.assertFalse(Teacher.objects.exists())
        self.assertFalse(self.salsa.teachers.exists())
