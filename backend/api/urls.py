from django.urls import path,include

urlpatterns=[
    path('v1/auth/',include('organizations.urls')),
    path('v1/employees/',include('employees.urls')),
    path('v1/tasks/',include('tasks.urls')),
    path('v1/dashboard/',include('dashboard.urls')),
    path('v1/ai/',include('insights.urls')),
]
