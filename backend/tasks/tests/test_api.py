# tasks/tests/test_api.py
"""
Task API & Model Tests
======================

1. Task.set_status keeps completed_at in step with the status
2. Admin CRUD scoped to the caller's organization
3. Status / tx hash updates by the admin or the assigned employee
4. The employee's own task list
"""

from __future__ import annotations

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


class TestSetStatus(TestCase):

    def setUp(self) -> None:
        self.org = create_organization()
        self.employee = create_employee(self.org)
        self.now = datetime.datetime(2024, 1, 15, 12, 0, tzinfo=datetime.timezone.utc)

    def test_completing_stamps_completed_at(self) -> None:
        task = create_task(self.employee)

        task.set_status(TaskStatus.COMPLETED, now=self.now)

        self.assertEqual(task.status, TaskStatus.COMPLETED)
        self.assertEqual(task.completed_at, self.now)

    def test_recompleting_keeps_original_timestamp(self) -> None:
        task = create_task(self.employee, status=TaskStatus.COMPLETED, completed_at=self.now)

        task.set_status(TaskStatus.COMPLETED, now=self.now + datetime.timedelta(days=3))

        self.assertEqual(task.completed_at, self.now)

    def test_leaving_completed_clears_completed_at(self) -> None:
        task = create_task(self.employee, status=TaskStatus.COMPLETED, completed_at=self.now)

        task.set_status(TaskStatus.IN_PROGRESS)

        self.assertIsNone(task.completed_at)


class TestAdminTaskEndpoints(TestCase):

    def setUp(self) -> None:
        self.org = create_organization("Acme")
        self.employee = create_employee(self.org, "Alice")
        self.client = admin_client(self.org)

        self.other_org = create_organization("Globex")
        self.outsider = create_employee(self.other_org, "Mallory")

    def test_create_task_for_own_employee(self) -> None:
        response = self.client.post(
            reverse("task-list-create"),
            {
                "title": "Ship release",
                "employee_id": str(self.employee.pk),
                "priority": TaskPriority.HIGH,
            },
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        body = response.json()
        self.assertTrue(body["success"])
        self.assertEqual(body["data"]["status"], TaskStatus.TODO)
        self.assertEqual(body["data"]["employee"]["name"], "Alice")
        task = Task.objects.get(pk=body["data"]["id"])
        self.assertEqual(task.organization, self.org)

    def test_create_completed_task_stamps_completed_at(self) -> None:
        response = self.client.post(
            reverse("task-list-create"),
            {"title": "Already done", "employee_id": str(self.employee.pk), "status": TaskStatus.COMPLETED},
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertIsNotNone(response.data["completed_at"])

    def test_cannot_assign_to_other_organizations_employee(self) -> None:
        response = self.client.post(
            reverse("task-list-create"),
            {"title": "Sneaky", "employee_id": str(self.outsider.pk)},
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        body = response.json()
        self.assertFalse(body["success"])
        self.assertIn("employee_id", body["details"])

    def test_title_too_short_is_rejected(self) -> None:
        response = self.client.post(
            reverse("task-list-create"),
            {"title": "ab", "employee_id": str(self.employee.pk)},
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()["statusCode"], 400)

    def test_list_filters_by_status_and_employee(self) -> None:
        bob = create_employee(self.org, "Bob")
        create_task(self.employee, "A1", status=TaskStatus.COMPLETED)
        create_task(self.employee, "A2")
        create_task(bob, "B1", status=TaskStatus.COMPLETED)
        create_task(self.outsider, "X1", status=TaskStatus.COMPLETED)

        response = self.client.get(
            reverse("task-list-create"),
            {"status": TaskStatus.COMPLETED, "employee_id": str(self.employee.pk)},
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([t["title"] for t in response.data], ["A1"])

    def test_list_rejects_unknown_status(self) -> None:
        response = self.client.get(reverse("task-list-create"), {"status": "DONE"})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_list_rejects_malformed_employee_id(self) -> None:
        response = self.client.get(reverse("task-list-create"), {"employee_id": "not-a-uuid"})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_other_organizations_task_is_not_found(self) -> None:
        foreign = create_task(self.outsider, "Foreign")

        response = self.client.get(reverse("task-detail", args=[foreign.pk]))

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.json()["statusCode"], 404)

    def test_update_status_through_detail_endpoint(self) -> None:
        task = create_task(self.employee)

        response = self.client.patch(
            reverse("task-detail", args=[task.pk]), {"status": TaskStatus.COMPLETED}
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        task.refresh_from_db()
        self.assertIsNotNone(task.completed_at)

    def test_delete_task(self) -> None:
        task = create_task(self.employee)

        response = self.client.delete(reverse("task-detail", args=[task.pk]))

        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Task.objects.filter(pk=task.pk).exists())

    def test_employee_token_cannot_create_tasks(self) -> None:
        response = employee_client(self.employee).post(
            reverse("task-list-create"),
            {"title": "Self-assigned", "employee_id": str(self.employee.pk)},
        )

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.json()["error"], "Admin access required")

    def test_unauthenticated_request_is_rejected(self) -> None:
        from rest_framework.test import APIClient

        response = APIClient().get(reverse("task-list-create"))

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertFalse(response.json()["success"])


class TestTaskStatusAndTxHash(TestCase):

    def setUp(self) -> None:
        self.org = create_organization()
        self.alice = create_employee(self.org, "Alice")
        self.bob = create_employee(self.org, "Bob")
        self.task = create_task(self.alice, "Alice's task")

    def test_assigned_employee_completes_task(self) -> None:
        response = employee_client(self.alice).patch(
            reverse("task-status", args=[self.task.pk]), {"status": TaskStatus.COMPLETED}
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.task.refresh_from_db()
        self.assertEqual(self.task.status, TaskStatus.COMPLETED)
        self.assertIsNotNone(self.task.completed_at)

    def test_reopening_clears_completed_at(self) -> None:
        self.task.set_status(TaskStatus.COMPLETED)
        self.task.save()

        response = admin_client(self.org).patch(
            reverse("task-status", args=[self.task.pk]), {"status": TaskStatus.TODO}
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIsNone(response.data["completed_at"])

    def test_other_employee_cannot_update_status(self) -> None:
        response = employee_client(self.bob).patch(
            reverse("task-status", args=[self.task.pk]), {"status": TaskStatus.COMPLETED}
        )

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.task.refresh_from_db()
        self.assertEqual(self.task.status, TaskStatus.TODO)

    def test_invalid_status_is_rejected(self) -> None:
        response = employee_client(self.alice).patch(
            reverse("task-status", args=[self.task.pk]), {"status": "DONE"}
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_put_is_not_allowed_on_status(self) -> None:
        response = employee_client(self.alice).put(
            reverse("task-status", args=[self.task.pk]), {"status": TaskStatus.COMPLETED}
        )

        self.assertEqual(response.status_code, status.HTTP_405_METHOD_NOT_ALLOWED)

    def test_record_tx_hash(self) -> None:
        response = employee_client(self.alice).patch(
            reverse("task-txhash", args=[self.task.pk]), {"tx_hash": " 0xabc123 "}
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.task.refresh_from_db()
        self.assertEqual(self.task.tx_hash, "0xabc123")

    def test_my_tasks_lists_only_own_tasks(self) -> None:
        create_task(self.bob, "Bob's task")

        response = employee_client(self.alice).get(reverse("task-mine"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([t["title"] for t in response.data], ["Alice's task"])

    def test_admin_cannot_use_my_tasks(self) -> None:
        response = admin_client(self.org).get(reverse("task-mine"))

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
