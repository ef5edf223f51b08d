"""
Month parsing, lateness rule and money rounding.
"""
from datetime import date, datetime
from decimal import Decimal

from django.test import SimpleTestCase

from core.exceptions import DuplicatePayment, InvalidArgument, LedgerError
from core.money import money_sum, quantize_factor, quantize_money
from core.months import format_month, is_late, month_of, parse_month
from core.utils import parse_month_param


class MonthTests(SimpleTestCase):

    def test_parse_and_format(self):
        self.assertEqual(parse_month('2024-02'), date(2024, 2, 1))
        self.assertEqual(parse_month(date(2024, 2, 17)), date(2024, 2, 1))
        self.assertEqual(format_month(date(2024, 2, 1)), '2024-02')
        self.assertEqual(month_of(datetime(2024, 2, 17, 10, 30)), date(2024, 2, 1))

    def test_parse_rejects_bad_input(self):
        for raw in ('2024-13', '2024-2', '02-2024', '', None, 202402):
            with self.assertRaises(ValueError):
                parse_month(raw)
        with self.assertRaises(InvalidArgument):
            parse_month_param('2024/02')

    def test_lateness_rule(self):
        feb = date(2024, 2, 1)
        self.assertFalse(is_late(date(2024, 2, 10), feb))
        self.assertTrue(is_late(date(2024, 2, 11), feb))
        self.assertFalse(is_late(date(2024, 1, 25), feb))
        self.assertFalse(is_late(date(2024, 3, 11), feb))


class MoneyTests(SimpleTestCase):

    def test_half_up_rounding(self):
        self.assertEqual(quantize_money(Decimal('0.025')), Decimal('0.03'))
        self.assertEqual(quantize_factor(Decimal('0.12345')), Decimal('0.1235'))
        self.assertEqual(money_sum([Decimal('0.10'), 0.2, '0.3']), Decimal('0.60'))


class LedgerErrorTests(SimpleTestCase):

    def test_duplicate_payment_carries_existing_id(self):
        error = DuplicatePayment(42, 1, 2, date(2024, 2, 1))
        self.assertIsInstance(error, LedgerError)
        self.assertEqual(error.kind, 'conflict')
        self.assertEqual(error.code, 'duplicate_payment')
        self.assertEqual(
            error.context(),
            {'existing_payment_id': 42, 'student_id': 1, 'class_id': 2, 'month': '2024-02'},
        )
        self.assertIn('existing payment id: 42', str(error))
