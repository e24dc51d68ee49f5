from rest_framework import generics, permissions
from rest_framework.response import Response

from employees.services import get_current_employee
from organizations.principal import IsOrganizationAdmin, Principal
from .services import (
    get_dashboard_stats,
    get_employee_dashboard_stats,
    get_leaderboard,
    get_my_recent_activity,
    get_recent_activity,
)


class DashboardStatsView(generics.GenericAPIView):
    """
    GET: Organization-wide counts for admins, personal counts and score for
    employees.
    """
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, *args, **kwargs):
        if Principal.from_request(request).is_admin:
            return Response(get_dashboard_stats(request.user))
        return Response(get_employee_dashboard_stats(get_current_employee(request)))

stats_view=DashboardStatsView.as_view()


class LeaderboardView(generics.GenericAPIView):
    """
    GET: Top 5 employees by productivity score.
    """
    permission_classes = [permissions.IsAuthenticated, IsOrganizationAdmin]

    def get(self, request, *args, **kwargs):
        return Response(get_leaderboard(request.user))

leaderboard_view=LeaderboardView.as_view()


class RecentActivityView(generics.GenericAPIView):
    """
    GET: The 10 most recently updated tasks, of the organization for admins
    and of the caller for employees.
    """
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, *args, **kwargs):
        if Principal.from_request(request).is_admin:
            return Response(get_recent_activity(request.user))
        return Response(get_my_recent_activity(get_current_employee(request)))

activity_view=RecentActivityView.as_view()
