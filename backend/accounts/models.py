from django.contrib.auth.models import AbstractUser
from django.core.validators import RegexValidator
from django.db import models


class UsernameValidator(RegexValidator):
    """Custom validator that allows spaces in usernames."""
    regex = r'^[\w\s.@+-]+$'
    message = 'Enter a valid username. This value may contain letters, numbers, spaces, and @/./+/-/_ characters.'
    flags = 0


class UserRole(models.TextChoices):
    ADMIN = 'admin', 'Admin'
    PRINCIPAL = 'principal', 'Principal'
    HOD = 'hod', 'HOD'
    STAFF = 'staff', 'Staff'
    STUDENT = 'student', 'Student'


class User(AbstractUser):
    """
    Base user model.
    Every account (admin, principal, HOD, staff, student) is a user with a
    single role scoped to a college and, below principal, a department.
    `is_active` doubles as the account status used by approver lookups.
    """
    username = models.CharField(
        max_length=150,
        unique=True,
        help_text='Required. 150 characters or fewer. Letters, numbers, spaces, and @/./+/-/_ characters.',
        validators=[UsernameValidator()],
        error_messages={
            'unique': 'A user with that username already exists.',
        },
    )

    role = models.CharField(max_length=16, choices=UserRole.choices, default=UserRole.STUDENT, db_index=True)

    college = models.ForeignKey(
        'college.College',
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name='users',
    )
    department = models.ForeignKey(
        'college.Department',
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name='users',
    )
    academic_year = models.ForeignKey(
        'academic_calendar.AcademicYear',
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name='students',
    )

    phone = models.CharField(max_length=32, blank=True, default='')
    # Students: the class they belong to. Staff: the class they are in charge of.
    class_name = models.CharField(max_length=32, blank=True, default='')
    class_in_charge = models.CharField(max_length=32, blank=True, default='')
    roll_number = models.CharField(max_length=64, blank=True, default='')

    def __str__(self):
        return self.username

    @property
    def display_name(self) -> str:
        return self.get_full_name() or self.username
