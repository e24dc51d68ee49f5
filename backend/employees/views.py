from rest_framework import generics, permissions
from rest_framework.response import Response

from organizations.principal import IsEmployee, IsOrganizationAdmin
from .models import Employee
from .serializers import EmployeeDetailSerializer, EmployeeSerializer
from .services import get_current_employee, score_for_employee


class EmployeeListCreateView(generics.ListCreateAPIView):
    """
    GET: List all employees of the authenticated organization.
    POST: Create a new employee and email them a temporary password.
    """
    serializer_class = EmployeeSerializer
    permission_classes = [permissions.IsAuthenticated, IsOrganizationAdmin]

    # CRITICAL: Ensures organizations only see their own employees
    def get_queryset(self):
        return Employee.objects.filter(organization=self.request.user)

list_create_view=EmployeeListCreateView.as_view()


class EmployeeRetrieveUpdateDestroyView(generics.RetrieveUpdateDestroyAPIView):
    """
    GET, PUT, PATCH, DELETE for a specific employee. Deleting an employee
    deletes their tasks.
    """
    permission_classes = [permissions.IsAuthenticated, IsOrganizationAdmin]

    def get_serializer_class(self):
        if self.request.method == 'GET':
            return EmployeeDetailSerializer
        return EmployeeSerializer

    # The get_object() method will filter against this base queryset,
    # so another tenant's id answers 404.
    def get_queryset(self):
        return Employee.objects.filter(organization=self.request.user)

retreive_update_destroy_view=EmployeeRetrieveUpdateDestroyView.as_view()


class EmployeeScoreView(generics.GenericAPIView):
    """
    GET: Productivity score with breakdown for one employee.
    """
    permission_classes = [permissions.IsAuthenticated, IsOrganizationAdmin]

    def get_queryset(self):
        return Employee.objects.filter(organization=self.request.user)

    def get(self, request, *args, **kwargs):
        employee = self.get_object()
        return Response(score_for_employee(employee).as_dict())

employee_score_view=EmployeeScoreView.as_view()


class MyProfileView(generics.GenericAPIView):
    """
    GET: The calling employee's own profile with their tasks.
    """
    serializer_class = EmployeeDetailSerializer
    permission_classes = [permissions.IsAuthenticated, IsEmployee]

    def get(self, request, *args, **kwargs):
        employee = get_current_employee(request)
        return Response(self.get_serializer(employee).data)

my_profile_view=MyProfileView.as_view()


class MyScoreView(generics.GenericAPIView):
    """
    GET: The calling employee's own productivity score.
    """
    permission_classes = [permissions.IsAuthenticated, IsEmployee]

    def get(self, request, *args, **kwargs):
        employee = get_current_employee(request)
        return Response(score_for_employee(employee).as_dict())

my_score_view=MyScoreView.as_view()
