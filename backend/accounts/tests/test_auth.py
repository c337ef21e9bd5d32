from django.contrib.auth import get_user_model
from django.contrib.auth.hashers import make_password
from django.test import TestCase
from django.urls import reverse
from rest_framework.test import APIClient

from academic_calendar.models import AcademicYear
from college.models import College, Department

User = get_user_model()


class AuthApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.college = College.objects.create(code='IDCS', name='IDCS College')
        self.dept = Department.objects.create(college=self.college, code='ECE', name='Electronics')
        self.year = AcademicYear.objects.create(college=self.college, year_name='2024 - 2027')
        self.user = User.objects.create_user(
            username='meena@student.test', email='meena@student.test', password='correct-horse',
            first_name='Meena', role='student', college=self.college, department=self.dept,
            academic_year=self.year, roll_number='24EC010',
        )

    def test_token_then_me(self):
        resp = self.client.post(
            reverse('token_obtain_pair'),
            {'username': 'meena@student.test', 'password': 'correct-horse'},
            format='json',
        )
        self.assertEqual(resp.status_code, 200)
        self.assertIn('refresh', resp.data)

        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {resp.data['access']}")
        me = self.client.get(reverse('me'))
        self.assertEqual(me.status_code, 200)
        self.assertEqual(me.data['display_name'], 'Meena')
        self.assertEqual(me.data['role'], 'student')
        self.assertEqual(me.data['college']['code'], 'IDCS')
        self.assertEqual(me.data['department']['name'], 'Electronics')
        self.assertEqual(me.data['academic_year']['year_name'], '2024 - 2027')

    def test_stored_hash_logs_in(self):
        User.objects.create(
            username='copied@student.test', email='copied@student.test',
            password=make_password('from-registration'), role='staff',
        )
        resp = self.client.post(
            reverse('token_obtain_pair'),
            {'username': 'copied@student.test', 'password': 'from-registration'},
            format='json',
        )
        self.assertEqual(resp.status_code, 200)

    def test_wrong_password(self):
        resp = self.client.post(
            reverse('token_obtain_pair'),
            {'username': 'meena@student.test', 'password': 'nope'},
            format='json',
        )
        self.assertEqual(resp.status_code, 401)

    def test_me_requires_authentication(self):
        resp = self.client.get(reverse('me'))
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.data['status_code'], 401)

    def test_display_name(self):
        self.assertEqual(self.user.display_name, 'Meena')
        self.assertEqual(User(username='x').display_name, 'x')
