# dashboard/services.py

import logging
from typing import Any, Dict, List

from django.db.models import Count, Prefetch, Q

from employees.models import Employee
from tasks.choices import TaskStatus
from tasks.models import Task
from tasks.scoring import compute_score

logger = logging.getLogger(__name__)

LEADERBOARD_SIZE = 5
ACTIVITY_SIZE = 10


def get_dashboard_stats(organization) -> Dict[str, int]:
    tasks = Task.objects.filter(organization=organization).aggregate(
        assigned=Count('id'),
        completed=Count('id', filter=Q(status=TaskStatus.COMPLETED)),
        active_employees=Count('employee', distinct=True),
    )
    return {
        'totalEmployees': Employee.objects.filter(organization=organization).count(),
        'activeEmployees': tasks['active_employees'],
        'assignedTasks': tasks['assigned'],
        'completedTasks': tasks['completed'],
    }


def get_employee_dashboard_stats(employee) -> Dict[str, int]:
    # One query for the tasks; counts and score are derived in memory
    tasks = list(employee.tasks.only('status', 'priority', 'deadline', 'completed_at'))
    by_status = {value: 0 for value in TaskStatus.values}
    for task in tasks:
        by_status[task.status] = by_status.get(task.status, 0) + 1

    return {
        'totalTasks': len(tasks),
        'completedTasks': by_status[TaskStatus.COMPLETED],
        'inProgressTasks': by_status[TaskStatus.IN_PROGRESS],
        'todoTasks': by_status[TaskStatus.TODO],
        'productivityScore': compute_score(tasks).final_score,
    }


def get_leaderboard(organization, limit: int = LEADERBOARD_SIZE) -> List[Dict[str, Any]]:
    """
    Employees with at least one task, best productivity score first. Ties
    are broken by name so the order is stable between requests.
    """
    employees = (
        Employee.objects.filter(organization=organization, tasks__isnull=False)
        .distinct()
        .prefetch_related(
            Prefetch('tasks', queryset=Task.objects.only(
                'employee_id', 'status', 'priority', 'deadline', 'completed_at'
            ))
        )
    )

    rows = []
    for employee in employees:
        score = compute_score(employee.tasks.all())
        rows.append({
            'id': str(employee.pk),
            'name': employee.name,
            'email': employee.email,
            'role': employee.role,
            'department': employee.department,
            'productivityScore': score.final_score,
            'completedTasks': score.breakdown.completed_tasks,
            'totalTasks': score.breakdown.total_tasks,
        })

    rows.sort(key=lambda row: (-row['productivityScore'], row['name']))
    return rows[:limit]


def _activity_rows(queryset, limit):
    return [
        {
            'id': str(task.pk),
            'title': task.title,
            'status': task.status,
            'priority': task.priority,
            'updatedAt': task.updated_at.isoformat(),
            'employeeId': str(task.employee_id),
            'employeeName': task.employee.name,
        }
        for task in queryset.select_related('employee').order_by('-updated_at')[:limit]
    ]


def get_recent_activity(organization, limit: int = ACTIVITY_SIZE) -> List[Dict[str, Any]]:
    return _activity_rows(Task.objects.filter(organization=organization), limit)


def get_my_recent_activity(employee, limit: int = ACTIVITY_SIZE) -> List[Dict[str, Any]]:
    return _activity_rows(Task.objects.filter(employee=employee), limit)
