from rest_framework import serializers
from rest_framework.exceptions import AuthenticationFailed
from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer
from rest_framework_simplejwt.tokens import RefreshToken

from employees.models import Employee
from workforce.exceptions import Conflict
from .principal import ROLE_ADMIN, ROLE_EMPLOYEE

#Dynamically retrieve the account model configured in settings.py
Organization=get_user_model()


def issue_tokens(organization, **claims):
    """Issue a refresh/access pair for the organization with extra claims."""
    refresh = RefreshToken.for_user(organization)
    refresh['org_id'] = str(organization.pk)
    for claim, value in claims.items():
        refresh[claim] = value
    return {'refresh': str(refresh), 'access': str(refresh.access_token)}


class OrganizationDetailsSerializer(serializers.ModelSerializer):
    """
    Serializer for returning the authenticated organization's details
    """
    class Meta:
        model=Organization
        fields=(
            'id',
            'name',
            'email',
            'created_at',
        )
        read_only_fields=fields


class OrganizationRegistrationSerializer(serializers.ModelSerializer):
    name=serializers.CharField(min_length=2,max_length=255)
    password=serializers.CharField(
        write_only=True,
        required=True,
        validators=[validate_password]
    )

    class Meta:
        model=Organization
        fields=(
            'name',
            'email',
            'password',
        )
        extra_kwargs = {
            # Uniqueness is checked case-insensitively in validate_email
            'email': {'required': True, 'validators': []},
        }

    def validate_email(self, value):
        email = Organization.objects.normalize_email(value)
        if Organization.objects.filter(email__iexact=email).exists():
            raise Conflict('Organization with this email already exists')
        return email

    def create(self, validated_data):
        # Use the custom manager's creation method
        return Organization.objects.create_user(
            email=validated_data['email'],
            password=validated_data['password'],
            name=validated_data['name'],
        )

    def to_representation(self, instance):
        return {
            'organization': OrganizationDetailsSerializer(instance).data,
            **issue_tokens(instance, role=ROLE_ADMIN, email=instance.email, name=instance.name),
        }


class OrganizationTokenObtainPairSerializer(TokenObtainPairSerializer):
    """
    Organization (admin) login. Looks the account up by email and tags the
    token with the admin role.
    """
    username_field = 'email'

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        # Add custom claims to the token payload (accessible in the frontend)
        token['role'] = ROLE_ADMIN
        token['org_id'] = str(user.pk)
        token['email'] = user.email
        token['name'] = user.name
        return token

    def validate(self, attrs):
        data = super().validate(attrs)
        data['organization'] = OrganizationDetailsSerializer(self.user).data
        return data


class EmployeeTokenObtainSerializer(serializers.Serializer):
    """
    Employee login. Employees have no account of their own: the token is
    issued for their organization and carries the employee role and id.
    """
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, trim_whitespace=False)

    default_error_messages = {
        'invalid_credentials': 'Invalid email or password',
    }

    def validate(self, attrs):
        candidates = (
            Employee.objects
            .select_related('organization')
            .filter(
                email__iexact=attrs['email'],
                is_active=True,
                organization__is_active=True,
            )
        )
        employee = next(
            (c for c in candidates if c.check_password(attrs['password'])),
            None,
        )
        if employee is None:
            raise AuthenticationFailed(self.error_messages['invalid_credentials'])

        tokens = issue_tokens(
            employee.organization,
            role=ROLE_EMPLOYEE,
            employee_id=str(employee.pk),
            email=employee.email,
            name=employee.name,
        )
        return {
            **tokens,
            'employee': {
                'id': str(employee.pk),
                'name': employee.name,
                'email': employee.email,
                'role': employee.role,
                'department': employee.department,
            },
        }
