import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('students', '0001_initial'),
        ('classes', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Payment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('amount', models.DecimalField(decimal_places=2, max_digits=10, validators=[django.core.validators.MinValueValidator(0.01)])),
                ('payment_date', models.DateField()),
                ('payment_month', models.DateField(db_index=True, help_text='First day of the month being paid')),
                ('payment_method', models.CharField(choices=[('TRANSFER', 'Bank Transfer'), ('CARD', 'Credit/Debit Card'), ('CASH', 'Cash')], default='CASH', max_length=20)),
                ('is_late', models.BooleanField(default=False)),
                ('notes', models.TextField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('dance_class', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='payments', to='classes.danceclass')),
                ('student', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='payments', to='students.student')),
            ],
            options={
                'verbose_name': 'Payment',
                'verbose_name_plural': 'Payments',
                'db_table': 'payments',
                'ordering': ['-payment_date', '-id'],
                'indexes': [
                    models.Index(fields=['dance_class', 'payment_month'], name='payment_class_month_idx'),
                    models.Index(fields=['student', 'payment_month'], name='payment_student_month_idx'),
                ],
                'constraints': [models.UniqueConstraint(fields=('student', 'dance_class', 'payment_month'), name='unique_payment_student_class_month')],
            },
        ),
    ]
