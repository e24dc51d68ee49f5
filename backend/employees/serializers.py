# employees/serializers.py

import logging

from django.db import transaction
from django.utils.crypto import get_random_string
from rest_framework import serializers

from workforce.exceptions import Conflict
from .models import Employee

logger = logging.getLogger(__name__)

TEMPORARY_PASSWORD_LENGTH = 12


class EmployeeSerializer(serializers.ModelSerializer):
    name = serializers.CharField(min_length=2, max_length=255)
    role = serializers.CharField(min_length=2, max_length=100)
    department = serializers.CharField(min_length=2, max_length=100)
    skills = serializers.ListField(
        child=serializers.CharField(max_length=100, allow_blank=True),
        required=False,
        default=list,
    )

    class Meta:
        model = Employee
        fields = (
            'id', 'name', 'email', 'role', 'department', 'skills',
            'wallet_address', 'is_active', 'created_at', 'updated_at'
        )
        read_only_fields = ('id', 'created_at', 'updated_at')

    def validate_email(self, value):
        organization = self.context['request'].user
        duplicates = Employee.objects.filter(organization=organization, email__iexact=value)
        if self.instance is not None:
            duplicates = duplicates.exclude(pk=self.instance.pk)
        if duplicates.exists():
            raise Conflict("Employee with this email already exists in your organization")
        return value.lower()

    def validate_skills(self, value):
        # Keep first occurrence order, drop blanks and duplicates
        seen = []
        for skill in value:
            skill = skill.strip()
            if skill and skill not in seen:
                seen.append(skill)
        return seen

    def create(self, validated_data):
        """
        Persist the employee under the caller's organization with a generated
        temporary password, then enqueue the welcome email once the
        transaction has committed.
        """
        organization = self.context['request'].user
        temporary_password = get_random_string(TEMPORARY_PASSWORD_LENGTH)

        with transaction.atomic():
            employee = Employee(organization=organization, **validated_data)
            employee.set_password(temporary_password)
            employee.save()

            def trigger_welcome_email():
                from .tasks import send_welcome_email
                send_welcome_email.delay(str(employee.pk), temporary_password)

            transaction.on_commit(trigger_welcome_email)

        logger.info(f"Employee {employee.pk} created for organization {organization.pk}")
        return employee


class EmployeeDetailSerializer(EmployeeSerializer):
    """Employee plus a compact view of their tasks, newest first."""
    tasks = serializers.SerializerMethodField()

    class Meta(EmployeeSerializer.Meta):
        fields = EmployeeSerializer.Meta.fields + ('tasks',)

    def get_tasks(self, obj):
        return [
            {
                'id': str(task['id']),
                'title': task['title'],
                'status': task['status'],
                'priority': task['priority'],
                'deadline': serializers.DateTimeField().to_representation(task['deadline']) if task['deadline'] else None,
                'completed_at': serializers.DateTimeField().to_representation(task['completed_at']) if task['completed_at'] else None,
            }
            for task in obj.tasks.order_by('-created_at').values(
                'id', 'title', 'status', 'priority', 'deadline', 'completed_at'
            )
        ]
