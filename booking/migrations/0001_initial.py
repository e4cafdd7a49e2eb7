import booking.models
import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='SalonSettings',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('number_of_stylists', models.PositiveSmallIntegerField(default=1, validators=[django.core.validators.MinValueValidator(1, 'Number of stylists must be at least 1'), django.core.validators.MaxValueValidator(50, 'Number of stylists cannot exceed 50')])),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name_plural': 'salon settings',
            },
        ),
        migrations.CreateModel(
            name='Appointment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('customer_name', models.CharField(max_length=100, validators=[django.core.validators.MinLengthValidator(2, 'Name must be at least 2 characters long')])),
                ('customer_email', models.EmailField(max_length=254)),
                ('customer_phone', models.CharField(max_length=15, validators=[django.core.validators.MinLengthValidator(10, 'Phone number must be at least 10 characters')])),
                ('service_id', models.CharField(max_length=60)),
                ('service_name', models.CharField(max_length=120)),
                ('service_duration', models.CharField(max_length=40)),
                ('service_price', models.CharField(max_length=40)),
                ('service_gender', models.CharField(choices=[('men', 'Men'), ('women', 'Women')], max_length=5)),
                ('date', models.DateField()),
                ('timeslot', models.CharField(max_length=10, validators=[booking.models.validate_timeslot])),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('confirmed', 'Confirmed'), ('completed', 'Completed'), ('cancelled', 'Cancelled'), ('rescheduled', 'Rescheduled')], default='pending', max_length=11)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='appointments', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['date', 'timeslot', 'customer_name'],
                'indexes': [
                    models.Index(fields=['customer_email'], name='booking_appt_email_idx'),
                    models.Index(fields=['status'], name='booking_appt_status_idx'),
                    models.Index(fields=['date', 'timeslot'], name='booking_appt_date_time_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='RescheduleEntry',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('old_date', models.DateField()),
                ('old_time', models.CharField(max_length=10)),
                ('new_date', models.DateField()),
                ('new_time', models.CharField(max_length=10)),
                ('rescheduled_by', models.CharField(choices=[('user', 'Customer'), ('admin', 'Admin')], max_length=5)),
                ('rescheduled_at', models.DateTimeField(auto_now_add=True)),
                ('reason', models.TextField(blank=True)),
                ('appointment', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='reschedule_history', to='booking.appointment')),
            ],
            options={
                'verbose_name_plural': 'reschedule entries',
                'ordering': ['rescheduled_at', 'id'],
            },
        ),
        migrations.CreateModel(
            name='SchedulingIndexEntry',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('appointment_date', models.DateField(db_index=True)),
                ('appointment_time', models.CharField(max_length=10, validators=[booking.models.validate_timeslot])),
                ('duration', models.CharField(max_length=40)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('appointment', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='scheduling_entry', to='booking.appointment')),
            ],
            options={
                'verbose_name_plural': 'scheduling index entries',
                'indexes': [
                    models.Index(fields=['appointment_date', 'appointment_time'], name='booking_sched_date_time_idx'),
                ],
            },
        ),
    ]
