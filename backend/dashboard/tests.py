# dashboard/tests.py
"""
Dashboard Test Suite
====================

1. Organization and employee stats
2. Leaderboard ranking, limit and tie-breaking
3. Recent activity scoping
"""

import datetime

from django.test import TestCase
from django.urls import reverse
from django.utils import timezone
from rest_framework import status

from tasks.choices import TaskPriority, TaskStatus
from tasks.models import Task
from workforce.tests.factories import (
    admin_client,
    create_employee,
    create_organization,
    create_task,
    employee_client,
)
from .services import (
    get_dashboard_stats,
    get_employee_dashboard_stats,
    get_leaderboard,
    get_my_recent_activity,
    get_recent_activity,
)


class DashboardStatsTest(TestCase):

    def setUp(self):
        self.org = create_organization('Acme')
        self.alice = create_employee(self.org, 'Alice')
        self.bob = create_employee(self.org, 'Bob')
        self.carol = create_employee(self.org, 'Carol')
        create_task(self.alice, 'A1', status=TaskStatus.COMPLETED)
        create_task(self.alice, 'A2', status=TaskStatus.IN_PROGRESS)
        create_task(self.bob, 'B1')

        other = create_organization('Globex')
        create_task(create_employee(other, 'Mallory'), 'X1', status=TaskStatus.COMPLETED)

    def test_organization_stats(self):
        self.assertEqual(
            get_dashboard_stats(self.org),
            {
                'totalEmployees': 3,
                'activeEmployees': 2,
                'assignedTasks': 3,
                'completedTasks': 1,
            },
        )

    def test_employee_stats(self):
        stats = get_employee_dashboard_stats(self.alice)

        self.assertEqual(stats['totalTasks'], 2)
        self.assertEqual(stats['completedTasks'], 1)
        self.assertEqual(stats['inProgressTasks'], 1)
        self.assertEqual(stats['todoTasks'], 0)
        # 1/2 * 65, no deadline, no HIGH task
        self.assertEqual(stats['productivityScore'], 33)

    def test_stats_endpoint_switches_on_role(self):
        admin_response = admin_client(self.org).get(reverse('dashboard-stats'))
        employee_response = employee_client(self.bob).get(reverse('dashboard-stats'))

        self.assertEqual(admin_response.status_code, status.HTTP_200_OK)
        self.assertEqual(admin_response.data['totalEmployees'], 3)
        self.assertEqual(employee_response.status_code, status.HTTP_200_OK)
        self.assertEqual(employee_response.data['totalTasks'], 1)
        self.assertEqual(employee_response.data['productivityScore'], 0)


class LeaderboardTest(TestCase):

    def setUp(self):
        self.org = create_organization('Acme')

    def _employee_with_score(self, name, completed, total):
        employee = create_employee(self.org, name)
        for i in range(total):
            create_task(
                employee,
                f'{name} task {i}',
                status=TaskStatus.COMPLETED if i < completed else TaskStatus.TODO,
            )
        return employee

    def test_ranked_by_score_with_name_tiebreak_and_limit(self):
        self._employee_with_score('Dave', 1, 2)
        self._employee_with_score('Alice', 2, 2)
        self._employee_with_score('Bob', 1, 2)
        self._employee_with_score('Eve', 0, 1)
        self._employee_with_score('Frank', 0, 3)
        self._employee_with_score('Carl', 1, 4)
        create_employee(self.org, 'Idle')

        board = get_leaderboard(self.org)

        self.assertEqual([row['name'] for row in board], ['Alice', 'Bob', 'Dave', 'Carl', 'Eve'])
        # 2/2 completed, no deadlines, no HIGH task: 65 + 0
        self.assertEqual(board[0]['productivityScore'], 65)
        self.assertEqual(board[0]['completedTasks'], 2)
        self.assertEqual(board[0]['totalTasks'], 2)

    def test_leaderboard_excludes_employees_without_tasks(self):
        create_employee(self.org, 'Idle')

        self.assertEqual(get_leaderboard(self.org), [])

    def test_leaderboard_uses_constant_number_of_queries(self):
        for name in ('Alice', 'Bob', 'Carl'):
            self._employee_with_score(name, 1, 3)

        with self.assertNumQueries(2):
            get_leaderboard(self.org)

    def test_leaderboard_is_admin_only(self):
        alice = self._employee_with_score('Alice', 1, 1)

        self.assertEqual(
            employee_client(alice).get(reverse('dashboard-leaderboard')).status_code,
            status.HTTP_403_FORBIDDEN,
        )
        self.assertEqual(
            admin_client(self.org).get(reverse('dashboard-leaderboard')).status_code,
            status.HTTP_200_OK,
        )


class RecentActivityTest(TestCase):

    def setUp(self):
        self.org = create_organization('Acme')
        self.alice = create_employee(self.org, 'Alice')
        self.bob = create_employee(self.org, 'Bob')
        base = timezone.now() - datetime.timedelta(days=1)
        for i in range(12):
            task = create_task(self.alice if i % 2 else self.bob, f'Task {i}', priority=TaskPriority.LOW)
            Task.objects.filter(pk=task.pk).update(updated_at=base + datetime.timedelta(minutes=i))

    def test_latest_ten_for_organization(self):
        activity = get_recent_activity(self.org)

        self.assertEqual(len(activity), 10)
        self.assertEqual(activity[0]['title'], 'Task 11')
        self.assertEqual(activity[0]['employeeName'], 'Alice')
        self.assertEqual(activity[-1]['title'], 'Task 2')

    def test_employee_sees_only_own_activity(self):
        activity = get_my_recent_activity(self.bob)

        self.assertEqual(len(activity), 6)
        self.assertTrue(all(row['employeeName'] == 'Bob' for row in activity))

    def test_activity_endpoint(self):
        response = employee_client(self.alice).get(reverse('dashboard-activity'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data[0]['title'], 'Task 11')
        self.assertEqual(len(response.data), 6)
