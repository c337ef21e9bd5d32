from django.contrib.auth import get_user_model

from academic_calendar.models import AcademicYear
from college.models import College, Department
from registrations.services import registration_service

User = get_user_model()

PASSWORD = 'secret-pass-1'


class RegistrationFixturesMixin:
    """One college with a full set of approvers plus a second college without a principal."""

    def setUp(self):
        super().setUp()
        self.college = College.objects.create(code='IDCS', name='IDCS College')
        self.other_college = College.objects.create(code='NEWC', name='New College')
        self.dept = Department.objects.create(college=self.college, code='CSE', name='Computer Science')
        self.year = AcademicYear.objects.create(college=self.college, year_name='2025 - 2029')

        self.staff_any = User.objects.create_user(
            username='staff-any', email='any@idcs.test', password='x', role='staff',
            college=self.college, department=self.dept,
        )
        self.class_staff = User.objects.create_user(
            username='staff-a', email='a@idcs.test', password='x', role='staff',
            college=self.college, department=self.dept, class_in_charge='CSE-A',
        )
        self.hod = User.objects.create_user(
            username='hod', email='hod@idcs.test', password='x', role='hod',
            college=self.college, department=self.dept,
        )
        self.principal = User.objects.create_user(
            username='principal', email='principal@idcs.test', password='x', role='principal',
            college=self.college,
        )
        self.admin = User.objects.create_user(username='admin', email='admin@lms.test', password='x', role='admin')

    def student_data(self, **overrides):
        data = {
            'name': 'Asha Kumar',
            'email': 'asha@student.test',
            'phone': '9000000000',
            'role': 'student',
            'password': PASSWORD,
            'college': self.college,
            'department': self.dept,
            'class_name': 'CSE-A',
            'roll_number': '25CS001',
            'academic_year': self.year,
        }
        data.update(overrides)
        return data

    def principal_data(self, **overrides):
        data = {
            'name': 'Dr. Rao',
            'email': 'rao@newcollege.test',
            'role': 'principal',
            'password': PASSWORD,
            'college': self.other_college,
        }
        data.update(overrides)
        return data

    def submit(self, data, **kwargs):
        return registration_service.submit_registration(data, **kwargs)
