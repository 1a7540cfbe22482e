"""
Tests for the authentication endpoints.
"""

from django.contrib.auth import get_user_model
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

User = get_user_model()


class TokenObtainTestCase(APITestCase):
    """Test login with email and password."""

    def setUp(self):
        self.user = User.objects.create_user(
            username='ana',
            email='ana@example.com',
            password='Casamento-2026',
            first_name='Ana',
        )
        self.url = reverse('token_obtain_pair')

    def test_login(self):
        response = self.client.post(self.url, {'email': 'Ana@Example.com ', 'password': 'Casamento-2026'})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)
        self.assertIn('refresh', response.data)
        self.assertEqual(response.data['user']['email'], 'ana@example.com')
        self.user.refresh_from_db()
        self.assertIsNotNone(self.user.last_login)

    def test_wrong_password(self):
        response = self.client.post(self.url, {'email': 'ana@example.com', 'password': 'errada'})

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data, {'success': False, 'message': 'Invalid credentials'})

    def test_invalid_payload(self):
        response = self.client.post(self.url, {'email': 'not-an-email'})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('email', response.data['errors'])
        self.assertIn('password', response.data['errors'])

    def test_refresh_and_logout(self):
        tokens = self.client.post(self.url, {'email': 'ana@example.com', 'password': 'Casamento-2026'}).data

        refreshed = self.client.post(reverse('token_refresh'), {'refresh': tokens['refresh']})
        self.assertEqual(refreshed.status_code, status.HTTP_200_OK)

        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {tokens['access']}")
        response = self.client.post(reverse('logout'), {'refresh': refreshed.data['refresh']})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['success'])

        reused = self.client.post(reverse('token_refresh'), {'refresh': refreshed.data['refresh']})
        self.assertEqual(reused.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_logout_with_bad_token_still_succeeds(self):
        self.client.force_authenticate(self.user)

        response = self.client.post(reverse('logout'), {'refresh': 'garbage'})

        self.assertEqual(response.status_code, status.HTTP_200_OK)


class RegistrationTestCase(APITestCase):
    """Test account registration."""

    url = '/api/v1/auth/register/'

    def test_register(self):
        response = self.client.post(self.url, {
            'email': 'Bruno@Example.com',
            'first_name': 'Bruno',
            'last_name': 'Lima',
            'password': 'Casamento-2026',
            'password_confirm': 'Casamento-2026',
        })

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertIn('access', response.data)
        user = User.objects.get(email='bruno@example.com')
        self.assertEqual(user.username, 'bruno')
        self.assertTrue(user.check_password('Casamento-2026'))
        self.assertFalse(user.onboarding_completed)

    def test_passwords_must_match(self):
        response = self.client.post(self.url, {
            'email': 'bruno@example.com',
            'first_name': 'Bruno',
            'password': 'Casamento-2026',
            'password_confirm': 'Casamento-2027',
        })

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('password_confirm', response.data['errors'])

    def test_duplicate_email(self):
        User.objects.create_user(username='bruno', email='bruno@example.com', password='Casamento-2026')

        response = self.client.post(self.url, {
            'email': 'BRUNO@example.com',
            'first_name': 'Bruno',
            'password': 'Casamento-2026',
            'password_confirm': 'Casamento-2026',
        })

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('email', response.data['errors'])


class UserProfileTestCase(APITestCase):
    """Test the profile endpoint."""

    url = '/api/v1/auth/me/'

    def setUp(self):
        self.user = User.objects.create_user(
            username='ana', email='ana@example.com', password='Casamento-2026', first_name='Ana'
        )

    def test_requires_authentication(self):
        response = self.client.get(self.url)

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_get_profile(self):
        self.client.force_authenticate(self.user)

        response = self.client.get(self.url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['full_name'], 'Ana')
        self.assertIsNone(response.data['current_wedding_id'])
        self.assertFalse(response.data['is_admin'])
        self.assertNotIn('password', response.data)

    def test_update_profile(self):
        self.client.force_authenticate(self.user)

        response = self.client.put(self.url, {
            'last_name': 'Souza',
            'email': 'other@example.com',
            'password': 'Nova-senha-2026',
        })

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.user.refresh_from_db()
        self.assertEqual(self.user.last_name, 'Souza')
        self.assertEqual(self.user.email, 'ana@example.com')
        self.assertTrue(self.user.check_password('Nova-senha-2026'))
