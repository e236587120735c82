# Generated manually for the projects app

import uuid
from decimal import Decimal
from django.conf import settings
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Project',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=200)),
                ('client', models.CharField(max_length=200)),
                ('status', models.CharField(choices=[('active', 'Active'), ('completed', 'Completed'), ('pending', 'Pending'), ('cancelled', 'Cancelled')], default='active', max_length=20)),
                ('start_date', models.DateField()),
                ('end_date', models.DateField()),
                ('budget', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14, validators=[MinValueValidator(Decimal('0.00'))])),
                ('hardware_budget', models.DecimalField(blank=True, decimal_places=2, max_digits=14, null=True, validators=[MinValueValidator(Decimal('0.00'))])),
                ('service_budget', models.DecimalField(blank=True, decimal_places=2, max_digits=14, null=True, validators=[MinValueValidator(Decimal('0.00'))])),
                ('invoiced', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
                ('invoice_count', models.PositiveIntegerField(default=0)),
                ('hardware_invoiced', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
                ('service_invoiced', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
                ('po_hardware', models.CharField(blank=True, max_length=100)),
                ('po_software', models.CharField(blank=True, max_length=100)),
                ('po_combined', models.CharField(blank=True, max_length=100)),
                ('active_pos', models.JSONField(blank=True, default=list)),
                ('gst_enabled', models.BooleanField(default=False)),
                ('gst_percentage', models.DecimalField(decimal_places=2, default=Decimal('18.00'), max_digits=5, validators=[MinValueValidator(Decimal('0.00')), MaxValueValidator(Decimal('100'))])),
                ('tds_enabled', models.BooleanField(default=False)),
                ('tds_percentage', models.DecimalField(decimal_places=2, default=Decimal('2.00'), max_digits=5, validators=[MinValueValidator(Decimal('0.00')), MaxValueValidator(Decimal('100'))])),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='projects', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'projects',
                'ordering': ['-updated_at'],
                'indexes': [
                    models.Index(fields=['user', 'status'], name='projects_user_status_idx'),
                    models.Index(fields=['user', 'updated_at'], name='projects_user_updated_idx'),
                ],
            },
        ),
    ]
