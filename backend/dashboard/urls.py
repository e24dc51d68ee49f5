# dashboard/urls.py

from django.urls import path
from .views import activity_view, leaderboard_view, stats_view

urlpatterns = [
    path('stats/', stats_view, name='dashboard-stats'),
    path('leaderboard/', leaderboard_view, name='dashboard-leaderboard'),
    path('activity/', activity_view, name='dashboard-activity'),
]
