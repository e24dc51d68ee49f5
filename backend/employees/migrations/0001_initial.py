import uuid

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
            name='Employee',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=255, verbose_name='name')),
                ('email', models.EmailField(max_length=254, verbose_name='email')),
                ('role', models.CharField(help_text='Job title, e.g. Engineer, Designer, Manager.', max_length=100, verbose_name='role')),
                ('department', models.CharField(blank=True, default='', max_length=100, verbose_name='department')),
                ('skills', models.JSONField(blank=True, default=list, verbose_name='skills')),
                ('wallet_address', models.CharField(blank=True, max_length=255, null=True, verbose_name='wallet address')),
                ('password', models.CharField(blank=True, max_length=128, verbose_name='password')),
                ('is_active', models.BooleanField(default=True, verbose_name='is active')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='updated at')),
                ('organization', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='employees', to=settings.AUTH_USER_MODEL, verbose_name='organization')),
            ],
            options={
                'verbose_name': 'Employee',
                'verbose_name_plural': 'Employees',
                'ordering': ['-created_at'],
                'constraints': [models.UniqueConstraint(fields=('organization', 'email'), name='unique_employee_email_per_organization')],
            },
        ),
    ]
