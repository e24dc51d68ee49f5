from rest_framework import generics, permissions, status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework_simplejwt.views import TokenObtainPairView

from .principal import Principal
from .serializers import (
    EmployeeTokenObtainSerializer,
    OrganizationDetailsSerializer,
    OrganizationRegistrationSerializer,
    OrganizationTokenObtainPairSerializer,
)


class RegisterAPIView(generics.CreateAPIView):
    """
    POST: Register a new organization and return its first token pair.
    """
    serializer_class=OrganizationRegistrationSerializer
    permission_classes=[AllowAny]
    authentication_classes=[]

register_api_view=RegisterAPIView.as_view()


class OrganizationLoginView(TokenObtainPairView):
    serializer_class=OrganizationTokenObtainPairSerializer

login_view=OrganizationLoginView.as_view()


class EmployeeLoginView(generics.GenericAPIView):
    """
    POST: Exchange employee credentials for an employee-tagged token pair.
    """
    serializer_class=EmployeeTokenObtainSerializer
    permission_classes=[AllowAny]

    def post(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        return Response(serializer.validated_data, status=status.HTTP_200_OK)

employee_login_view=EmployeeLoginView.as_view()


class CurrentPrincipalView(generics.GenericAPIView):
    """
    GET: The organization behind the token, plus the caller's role.
    """
    serializer_class=OrganizationDetailsSerializer
    permission_classes=[permissions.IsAuthenticated]

    def get(self, request, *args, **kwargs):
        principal = Principal.from_request(request)
        data = dict(self.get_serializer(request.user).data)
        data['role'] = principal.role
        data['employee_id'] = principal.employee_id
        return Response(data)

current_principal_view=CurrentPrincipalView.as_view()
