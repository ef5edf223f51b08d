"""
Print unpaid dues for a month.
Usage: python manage.py outstanding_report 2024-02 [--today 2024-02-15]
"""
from datetime import date

from django.core.management.base import BaseCommand, CommandError

from core.clock import FixedClock
from core.months import format_month, parse_month
from reports.services import outstanding_report


class Command(BaseCommand):
    help = 'Outstanding tuition per student for a month (YYYY-MM).'

    def add_arguments(self, parser):
        parser.add_argument('month', help='Billing month, YYYY-MM')
        parser.add_argument(
            '--today',
            help='Evaluate the late surcharge as of this date (YYYY-MM-DD) instead of the real today',
        )

    def handle(self, *args, **options):
        try:
            month = parse_month(options['month'])
        except ValueError as e:
            raise CommandError(str(e))

        clock = None
        if options.get('today'):
            try:
                clock = FixedClock(date.fromisoformat(options['today']))
            except ValueError:
                raise CommandError(f"--today must be YYYY-MM-DD, got {options['today']!r}")

        report = outstanding_report(month, clock=clock)
        if not report.outstanding:
            self.stdout.write(self.style.SUCCESS(f'No outstanding payments for {format_month(month)}'))
            return

        self.stdout.write(f'Outstanding payments for {format_month(month)}')
        for student, items in report.outstanding.items():
            self.stdout.write(f'  {student.full_name} (id={student.id})')
            for item in items:
                late = ' LATE' if item.is_late else ''
                self.stdout.write(f'    {item.dance_class.name}: {item.expected_amount}{late}')
        self.stdout.write(self.style.WARNING(
            f'{report.students_with_outstanding} students, total {report.total_outstanding_amount}'
        ))
