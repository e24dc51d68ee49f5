import uuid

from rest_framework import generics, permissions
from rest_framework.exceptions import ValidationError

from organizations.principal import IsEmployee, IsOrganizationAdmin, Principal
from .choices import TaskStatus
from .models import Task
from .serializers import TaskSerializer, TaskStatusSerializer, TaskTxHashSerializer


class TaskOwnerPermission(permissions.BasePermission):
    """
    The organization admin may touch any of its tasks; an employee only the
    tasks assigned to them.
    """
    message = "You can only update your own tasks"

    def has_permission(self, request, view):
        principal = Principal.from_request(request)
        return bool(principal and (principal.is_admin or principal.is_employee))

    def has_object_permission(self, request, view, obj):
        principal = Principal.from_request(request)
        if str(obj.organization_id) != principal.org_id:
            return False
        if principal.is_admin:
            return True
        return str(obj.employee_id) == principal.employee_id


class TaskListCreateView(generics.ListCreateAPIView):
    """
    GET: List the organization's tasks, optionally filtered by
    ?employee_id= and ?status=.
    POST: Create a new task for one of the organization's employees.
    """
    serializer_class = TaskSerializer
    permission_classes = [permissions.IsAuthenticated, IsOrganizationAdmin]

    def get_queryset(self):
        queryset = Task.objects.filter(organization=self.request.user).select_related('employee')

        status = self.request.query_params.get('status')
        if status:
            if status not in TaskStatus.values:
                raise ValidationError({'status': [f"Must be one of {', '.join(TaskStatus.values)}."]})
            queryset = queryset.filter(status=status)

        employee_id = self.request.query_params.get('employee_id')
        if employee_id:
            try:
                employee_id = uuid.UUID(employee_id)
            except ValueError:
                raise ValidationError({'employee_id': ["Must be a valid UUID."]})
            queryset = queryset.filter(employee_id=employee_id)

        return queryset

list_create_view=TaskListCreateView.as_view()


class TaskRetrieveUpdateDestroyView(generics.RetrieveUpdateDestroyAPIView):
    """
    GET, PUT, PATCH, DELETE for a specific task instance.
    """
    serializer_class = TaskSerializer
    permission_classes = [permissions.IsAuthenticated, IsOrganizationAdmin]

    # Ensures the organization can only access tasks it owns.
    def get_queryset(self):
        return Task.objects.filter(organization=self.request.user).select_related('employee')

retreive_update_destroy_view=TaskRetrieveUpdateDestroyView.as_view()


class TaskStatusUpdateView(generics.UpdateAPIView):
    """
    PATCH: Move a task to TODO, IN_PROGRESS or COMPLETED.
    """
    serializer_class = TaskStatusSerializer
    permission_classes = [permissions.IsAuthenticated, TaskOwnerPermission]
    http_method_names = ['patch', 'options']

    def get_queryset(self):
        return Task.objects.filter(organization=self.request.user)

task_status_view=TaskStatusUpdateView.as_view()


class TaskTxHashUpdateView(generics.UpdateAPIView):
    """
    PATCH: Record the transaction hash proving a task's completion.
    """
    serializer_class = TaskTxHashSerializer
    permission_classes = [permissions.IsAuthenticated, TaskOwnerPermission]
    http_method_names = ['patch', 'options']

    def get_queryset(self):
        return Task.objects.filter(organization=self.request.user)

task_txhash_view=TaskTxHashUpdateView.as_view()


class MyTaskListView(generics.ListAPIView):
    """
    Returns the tasks assigned to the calling employee, newest first.
    """
    serializer_class = TaskSerializer
    permission_classes = [permissions.IsAuthenticated, IsEmployee]

    def get_queryset(self):
        principal = Principal.from_request(self.request)
        return Task.objects.filter(
            organization=self.request.user,
            employee_id=principal.employee_id,
        ).select_related('employee')

my_tasks_view=MyTaskListView.as_view()
