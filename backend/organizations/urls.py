from django.urls import path
from rest_framework_simplejwt.views import TokenRefreshView
from .views import (
    current_principal_view,
    employee_login_view,
    login_view,
    register_api_view,
)


urlpatterns = [
    # Organization registration endpoint
    path('register/',register_api_view, name='auth_register'),

    # Simple JWT login endpoint, customized to use the email field
    path('login/', login_view, name='token_obtain_pair'),

    # Employees log in against their organization's account
    path('employee/login/', employee_login_view, name='employee_login'),

    # TokenRefreshView
    path('token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),
    path('me/',current_principal_view ,name='current_principal')
]
