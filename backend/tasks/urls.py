from django.urls import path
from .views import list_create_view
from .views import my_tasks_view
from .views import retreive_update_destroy_view
from .views import task_status_view
from .views import task_txhash_view

urlpatterns=[
    # GET and POST (List tasks and Create new task)
    path('',list_create_view,name="task-list-create"),

    path('mine/',my_tasks_view,name="task-mine"),

    # GET, PUT, PATCH, DELETE (Detail and Manipulation)
    path('<uuid:pk>/',retreive_update_destroy_view,name="task-detail"),

    path('<uuid:pk>/status/',task_status_view,name="task-status"),
    path('<uuid:pk>/txhash/',task_txhash_view,name="task-txhash"),
]
