# employees/urls.py

from django.urls import path
from .views import (
    employee_score_view,
    list_create_view,
    my_profile_view,
    my_score_view,
    retreive_update_destroy_view,
)

urlpatterns = [
    # GET and POST (List and Create)
    path('', list_create_view, name='employee-list-create'),

    # Employee self-service; must come before the <uuid:pk> routes
    path('me/', my_profile_view, name='employee-me'),
    path('me/score/', my_score_view, name='employee-me-score'),

    # GET, PUT, PATCH, DELETE (Detail and Manipulation)
    path('<uuid:pk>/', retreive_update_destroy_view, name='employee-detail'),
    path('<uuid:pk>/score/', employee_score_view, name='employee-score'),
]
