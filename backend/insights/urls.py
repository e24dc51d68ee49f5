# insights/urls.py

from django.urls import path
from .views import (
    chat_view,
    daily_insight_view,
    extract_skills_view,
    my_skill_gap_view,
    skill_gap_view,
    smart_assign_view,
)

urlpatterns = [
    path('chat/', chat_view, name='ai-chat'),
    path('skill-gap/', skill_gap_view, name='ai-skill-gap'),
    path('daily-insight/', daily_insight_view, name='ai-daily-insight'),
    path('smart-assign/', smart_assign_view, name='ai-smart-assign'),
    path('my-skill-gap/', my_skill_gap_view, name='ai-my-skill-gap'),
    path('extract-skills/', extract_skills_view, name='ai-extract-skills'),
]
