# tasks/serializers.py

from django.db import transaction
from rest_framework import serializers

from employees.models import Employee
from .choices import TaskStatus
from .models import Task
import logging

logger = logging.getLogger(__name__)


class AssigneeSerializer(serializers.ModelSerializer):
    class Meta:
        model = Employee
        fields = ['id', 'name', 'email', 'role']
        read_only_fields = fields


class TaskSerializer(serializers.ModelSerializer):
    title = serializers.CharField(min_length=3, max_length=255)
    employee = AssigneeSerializer(read_only=True)
    employee_id = serializers.PrimaryKeyRelatedField(
        source='employee',
        queryset=Employee.objects.none(),
        write_only=True,
    )

    class Meta:
        model = Task
        # explicit whitelist: client-editable fields + system-read fields required by UI
        fields = [
            'id', 'title', 'description', 'status', 'priority', 'deadline',
            'completed_at', 'tx_hash', 'skill_required', 'employee', 'employee_id',
            'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'completed_at', 'tx_hash', 'created_at', 'updated_at']

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        request = self.context.get('request')
        if request is not None and request.user.is_authenticated:
            # The assignee must belong to the caller's organization
            self.fields['employee_id'].queryset = Employee.objects.filter(
                organization=request.user
            )

    def create(self, validated_data):
        """
        Persist the task under the caller's organization. An initial status of
        COMPLETED stamps completed_at like any later transition would.
        """
        organization = self.context['request'].user
        status = validated_data.pop('status', TaskStatus.TODO)

        with transaction.atomic():
            task = Task(organization=organization, **validated_data)
            task.set_status(status)
            task.save()

        logger.info(f"Task {task.pk} created for employee {task.employee_id}")
        return task

    def update(self, instance, validated_data):
        status = validated_data.pop('status', None)
        if status is not None:
            instance.set_status(status)
        return super().update(instance, validated_data)


class TaskStatusSerializer(serializers.ModelSerializer):
    status = serializers.ChoiceField(choices=TaskStatus.choices)

    class Meta:
        model = Task
        fields = ['id', 'status', 'completed_at', 'updated_at']
        read_only_fields = ['id', 'completed_at', 'updated_at']

    def update(self, instance, validated_data):
        previous = instance.status
        instance.set_status(validated_data['status'])
        instance.save(update_fields=['status', 'completed_at', 'updated_at'])
        logger.info(f"Task {instance.pk} moved from {previous} to {instance.status}")
        return instance


class TaskTxHashSerializer(serializers.ModelSerializer):
    tx_hash = serializers.CharField(min_length=1, max_length=255)

    class Meta:
        model = Task
        fields = ['id', 'tx_hash', 'updated_at']
        read_only_fields = ['id', 'updated_at']

    def update(self, instance, validated_data):
        instance.tx_hash = validated_data['tx_hash'].strip()
        instance.save(update_fields=['tx_hash', 'updated_at'])
        return instance
