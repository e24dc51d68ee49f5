# organizations/tests.py
"""
Organizations App Test Suite
============================

Test Categories:
----------------
1. Registration - account creation and first token pair
2. Login - organization and employee credentials
3. Principal - role claims carried through the token
"""

from django.contrib.auth import get_user_model
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient, APITestCase
from rest_framework_simplejwt.tokens import AccessToken

from workforce.tests.factories import TEST_PASSWORD, create_employee, create_organization

Organization = get_user_model()


# ===========================================================================
# REGISTRATION
# ===========================================================================

class RegistrationTest(APITestCase):

    def test_register_returns_organization_and_tokens(self):
        response = self.client.post(reverse('auth_register'), {
            'name': 'Acme',
            'email': 'admin@acme.com',
            'password': TEST_PASSWORD,
        })

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        body = response.json()
        self.assertTrue(body['success'])
        self.assertEqual(body['data']['organization']['name'], 'Acme')

        token = AccessToken(body['data']['access'])
        self.assertEqual(token['role'], 'admin')
        self.assertEqual(token['org_id'], body['data']['organization']['id'])
        self.assertTrue(Organization.objects.get(email='admin@acme.com').check_password(TEST_PASSWORD))

    def test_duplicate_email_is_rejected(self):
        create_organization('Acme', email='admin@acme.com')

        response = self.client.post(reverse('auth_register'), {
            'name': 'Acme 2',
            'email': 'admin@acme.com',
            'password': TEST_PASSWORD,
        })

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.json(), {
            'success': False,
            'error': 'Organization with this email already exists',
            'statusCode': 409,
        })

    def test_weak_password_is_rejected(self):
        response = self.client.post(reverse('auth_register'), {
            'name': 'Acme',
            'email': 'admin@acme.com',
            'password': '123',
        })

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('password', response.json()['details'])


# ===========================================================================
# LOGIN
# ===========================================================================

class LoginTest(APITestCase):

    def setUp(self):
        self.org = create_organization('Acme', email='admin@acme.com')
        self.alice = create_employee(self.org, 'Alice', email='alice@acme.com')

    def test_organization_login(self):
        response = self.client.post(reverse('token_obtain_pair'), {
            'email': 'admin@acme.com',
            'password': TEST_PASSWORD,
        })

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(AccessToken(response.data['access'])['role'], 'admin')
        self.assertEqual(response.data['organization']['email'], 'admin@acme.com')

    def test_organization_login_with_wrong_password(self):
        response = self.client.post(reverse('token_obtain_pair'), {
            'email': 'admin@acme.com',
            'password': 'wrong-password',
        })

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertFalse(response.json()['success'])

    def test_employee_login_issues_employee_token(self):
        response = self.client.post(reverse('employee_login'), {
            'email': 'ALICE@acme.com',
            'password': TEST_PASSWORD,
        })

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        token = AccessToken(response.data['access'])
        self.assertEqual(token['role'], 'employee')
        self.assertEqual(token['employee_id'], str(self.alice.pk))
        self.assertEqual(token['org_id'], str(self.org.pk))
        self.assertEqual(response.data['employee']['name'], 'Alice')

    def test_employee_login_with_wrong_password(self):
        response = self.client.post(reverse('employee_login'), {
            'email': 'alice@acme.com',
            'password': 'wrong-password',
        })

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.json()['error'], 'Invalid email or password')

    def test_inactive_employee_cannot_log_in(self):
        self.alice.is_active = False
        self.alice.save()

        response = self.client.post(reverse('employee_login'), {
            'email': 'alice@acme.com',
            'password': TEST_PASSWORD,
        })

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_employee_login_failure_uses_401_envelope(self):
        response = self.client.post(reverse('employee_login'), {
            'email': 'nobody@acme.com',
            'password': TEST_PASSWORD,
        })

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.json(), {
            'success': False,
            'error': 'Invalid email or password',
            'statusCode': 401,
        })
        self.assertIn('WWW-Authenticate', response)

    def test_refreshed_token_keeps_employee_claims(self):
        login = self.client.post(reverse('employee_login'), {
            'email': 'alice@acme.com',
            'password': TEST_PASSWORD,
        })

        response = self.client.post(reverse('token_refresh'), {'refresh': login.data['refresh']})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        token = AccessToken(response.data['access'])
        self.assertEqual(token['role'], 'employee')
        self.assertEqual(token['employee_id'], str(self.alice.pk))


# ===========================================================================
# PRINCIPAL
# ===========================================================================

class CurrentPrincipalTest(APITestCase):

    def setUp(self):
        self.org = create_organization('Acme', email='admin@acme.com')
        self.alice = create_employee(self.org, 'Alice', email='alice@acme.com')

    def _login(self, url, email):
        response = self.client.post(url, {'email': email, 'password': TEST_PASSWORD})
        client = APIClient()
        client.credentials(HTTP_AUTHORIZATION=f"Bearer {response.data['access']}")
        return client

    def test_me_as_admin(self):
        client = self._login(reverse('token_obtain_pair'), 'admin@acme.com')

        response = client.get(reverse('current_principal'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['role'], 'admin')
        self.assertIsNone(response.data['employee_id'])

    def test_me_as_employee(self):
        client = self._login(reverse('employee_login'), 'alice@acme.com')

        response = client.get(reverse('current_principal'))

        self.assertEqual(response.data['role'], 'employee')
        self.assertEqual(response.data['employee_id'], str(self.alice.pk))
        self.assertEqual(response.data['name'], 'Acme')
