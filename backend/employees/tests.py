# employees/tests.py
"""
Employees App Test Suite
========================

Test Categories:
----------------
1. Employee API Tests - CRUD scoped to the organization
2. Welcome Email Tests - enqueue after commit, worker behaviour
3. Score API Tests - admin and self-service score endpoints
"""

from unittest.mock import patch

from django.core import mail
from django.test import TestCase, override_settings
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from tasks.choices import TaskPriority, TaskStatus
from workforce.tests.factories import (
    admin_client,
    create_employee,
    create_organization,
    create_task,
    employee_client,
)
from .models import Employee
from .tasks import send_welcome_email


# ===========================================================================
# EMPLOYEE API TESTS
# ===========================================================================

class EmployeeAPITest(APITestCase):
    """Admin endpoints for managing employees."""

    def setUp(self):
        self.org = create_organization('Acme')
        self.client = admin_client(self.org)
        self.url = reverse('employee-list-create')
        self.payload = {
            'name': 'Alice Smith',
            'email': 'Alice@Acme.com',
            'role': 'Engineer',
            'department': 'Platform',
            'skills': ['Python', 'SQL', 'Python', ' '],
        }

    @patch('employees.tasks.send_welcome_email.delay')
    def test_create_employee_enqueues_welcome_email_after_commit(self, mock_delay):
        with self.captureOnCommitCallbacks(execute=True) as callbacks:
            response = self.client.post(self.url, self.payload)

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(len(callbacks), 1)

        employee = Employee.objects.get(pk=response.data['id'])
        self.assertEqual(employee.organization, self.org)
        self.assertEqual(employee.email, 'alice@acme.com')
        self.assertEqual(employee.skills, ['Python', 'SQL'])

        mock_delay.assert_called_once()
        employee_id, temporary_password = mock_delay.call_args.args
        self.assertEqual(employee_id, str(employee.pk))
        self.assertEqual(len(temporary_password), 12)
        self.assertTrue(employee.check_password(temporary_password))

    @patch('employees.tasks.send_welcome_email.delay')
    def test_password_is_never_returned(self, mock_delay):
        response = self.client.post(self.url, self.payload)

        self.assertNotIn('password', response.data)

    @patch('employees.tasks.send_welcome_email.delay')
    def test_duplicate_email_in_same_organization_is_rejected(self, mock_delay):
        create_employee(self.org, 'Alice', email='alice@acme.com')

        response = self.client.post(self.url, self.payload)

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(
            response.json()['error'],
            'Employee with this email already exists in your organization',
        )
        mock_delay.assert_not_called()

    @patch('employees.tasks.send_welcome_email.delay')
    def test_same_email_allowed_in_another_organization(self, mock_delay):
        other = create_organization('Globex')
        create_employee(other, 'Alice', email='alice@acme.com')

        response = self.client.post(self.url, self.payload)

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

    def test_short_name_is_rejected(self):
        response = self.client.post(self.url, {**self.payload, 'name': 'A'})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(response.json()['success'])

    def test_list_only_returns_own_employees(self):
        create_employee(self.org, 'Alice')
        create_employee(create_organization('Globex'), 'Mallory')

        response = self.client.get(self.url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([e['name'] for e in response.data], ['Alice'])

    def test_retrieve_includes_tasks(self):
        alice = create_employee(self.org, 'Alice')
        create_task(alice, 'Write docs')

        response = self.client.get(reverse('employee-detail', args=[alice.pk]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([t['title'] for t in response.data['tasks']], ['Write docs'])

    def test_other_organizations_employee_is_not_found(self):
        mallory = create_employee(create_organization('Globex'), 'Mallory')

        response = self.client.get(reverse('employee-detail', args=[mallory.pk]))

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_partial_update(self):
        alice = create_employee(self.org, 'Alice')

        response = self.client.patch(
            reverse('employee-detail', args=[alice.pk]), {'role': 'Designer'}
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        alice.refresh_from_db()
        self.assertEqual(alice.role, 'Designer')

    def test_update_to_taken_email_is_a_conflict(self):
        alice = create_employee(self.org, 'Alice')
        create_employee(self.org, 'Bob', email='bob@acme.com')

        response = self.client.patch(
            reverse('employee-detail', args=[alice.pk]), {'email': 'BOB@acme.com'}
        )

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        alice.refresh_from_db()
        self.assertNotEqual(alice.email, 'bob@acme.com')

    def test_delete_removes_employee_and_tasks(self):
        alice = create_employee(self.org, 'Alice')
        task = create_task(alice)

        response = self.client.delete(reverse('employee-detail', args=[alice.pk]))

        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Employee.objects.filter(pk=alice.pk).exists())
        self.assertFalse(type(task).objects.filter(pk=task.pk).exists())

    def test_employee_token_cannot_list_employees(self):
        alice = create_employee(self.org, 'Alice')

        response = employee_client(alice).get(self.url)

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


# ===========================================================================
# WELCOME EMAIL TESTS
# ===========================================================================

@override_settings(EMAIL_BACKEND='django.core.mail.backends.locmem.EmailBackend')
class SendWelcomeEmailTaskTest(TestCase):

    def test_sends_credentials_to_employee(self):
        org = create_organization('Acme')
        alice = create_employee(org, 'Alice')

        result = send_welcome_email.apply(args=[str(alice.pk), 'TempPass1234']).get()

        self.assertTrue(result)
        self.assertEqual(len(mail.outbox), 1)
        message = mail.outbox[0]
        self.assertEqual(message.to, [alice.email])
        self.assertIn('Acme', message.subject)
        self.assertIn('TempPass1234', message.body)

    def test_missing_employee_is_skipped(self):
        result = send_welcome_email.apply(
            args=['00000000-0000-0000-0000-000000000000', 'x']
        ).get()

        self.assertFalse(result)
        self.assertEqual(len(mail.outbox), 0)


# ===========================================================================
# SCORE API TESTS
# ===========================================================================

class EmployeeScoreAPITest(APITestCase):

    def setUp(self):
        self.org = create_organization('Acme')
        self.alice = create_employee(self.org, 'Alice')
        create_task(self.alice, 'Done', status=TaskStatus.COMPLETED, priority=TaskPriority.HIGH)
        create_task(self.alice, 'Open', priority=TaskPriority.LOW)

    def test_admin_reads_employee_score(self):
        response = admin_client(self.org).get(reverse('employee-score', args=[self.alice.pk]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        body = response.json()
        self.assertTrue(body['success'])
        # 1/2 * 40 + 0 (no deadline) + 1/1 * 25 = 45
        self.assertEqual(body['data']['finalScore'], 45)
        self.assertEqual(body['data']['breakdown']['totalTasks'], 2)
        self.assertEqual(body['data']['breakdown']['highPriorityCompleted'], 1)

    def test_employee_reads_own_score(self):
        response = employee_client(self.alice).get(reverse('employee-me-score'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['finalScore'], 45)

    def test_employee_without_tasks_scores_zero(self):
        bob = create_employee(self.org, 'Bob')

        response = employee_client(bob).get(reverse('employee-me-score'))

        self.assertEqual(response.data['finalScore'], 0)
        self.assertEqual(response.data['breakdown']['totalTasks'], 0)

    def test_employee_reads_own_profile(self):
        response = employee_client(self.alice).get(reverse('employee-me'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['name'], 'Alice')
        self.assertEqual(len(response.data['tasks']), 2)

    def test_deactivated_employee_profile_is_not_found(self):
        client = employee_client(self.alice)
        Employee.objects.filter(pk=self.alice.pk).update(is_active=False)

        response = client.get(reverse('employee-me'))

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
