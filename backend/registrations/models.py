from django.conf import settings
from django.db import models


class RegistrationRequest(models.Model):
    class Role(models.TextChoices):
        STUDENT = 'student', 'Student'
        STAFF = 'staff', 'Staff'
        HOD = 'hod', 'HOD'
        PRINCIPAL = 'principal', 'Principal'

    class Status(models.TextChoices):
        PENDING = 'pending', 'Pending'
        APPROVED = 'approved', 'Approved'
        REJECTED = 'rejected', 'Rejected'

    name = models.CharField(max_length=255)
    email = models.EmailField()
    phone = models.CharField(max_length=32, blank=True)
    role = models.CharField(max_length=16, choices=Role.choices)

    college = models.ForeignKey(
        'college.College',
        on_delete=models.PROTECT,
        related_name='registration_requests'
    )
    department = models.ForeignKey(
        'college.Department',
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name='registration_requests'
    )
    class_name = models.CharField(max_length=32, blank=True)
    roll_number = models.CharField(max_length=64, blank=True)
    academic_year = models.ForeignKey(
        'academic_calendar.AcademicYear',
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name='registration_requests'
    )

    status = models.CharField(max_length=16, choices=Status.choices, default=Status.PENDING, db_index=True)
    # Django password hash; copied verbatim onto the account on final approval.
    password_hash = models.CharField(max_length=255)
    rejection_reason = models.TextField(blank=True)
    reviewed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name='reviewed_registrations'
    )
    reviewed_at = models.DateTimeField(null=True, blank=True)
    requested_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ('-requested_at',)
        indexes = [
            models.Index(fields=['college', 'role', 'status'], name='registration_scope_idx'),
        ]

    def __str__(self):
        return f"{self.name} <{self.email}> as {self.role} ({self.status})"

    @property
    def request_type(self) -> str:
        return f'{self.role}_registration'


class ApprovalWorkflow(models.Model):
    class Status(models.TextChoices):
        ACTIVE = 'active', 'Active'
        COMPLETED = 'completed', 'Completed'
        REJECTED = 'rejected', 'Rejected'

    request = models.OneToOneField(
        RegistrationRequest,
        on_delete=models.CASCADE,
        related_name='workflow'
    )
    request_type = models.CharField(max_length=32)
    current_approver_role = models.CharField(max_length=16, db_index=True)
    current_approver = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name='assigned_approvals'
    )
    status = models.CharField(max_length=16, choices=Status.choices, default=Status.ACTIVE, db_index=True)
    rejection_reason = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    completed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ('created_at',)

    def __str__(self):
        return f"Workflow {self.pk} for {self.request_type} at {self.current_approver_role} ({self.status})"

    @property
    def is_active(self) -> bool:
        return self.status == self.Status.ACTIVE


class ApprovalAction(models.Model):
    class Action(models.TextChoices):
        APPROVED = 'approved', 'Approved'
        REJECTED = 'rejected', 'Rejected'

    workflow = models.ForeignKey(
        ApprovalWorkflow,
        on_delete=models.CASCADE,
        related_name='actions'
    )
    role = models.CharField(max_length=16)
    acted_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name='registration_actions'
    )
    action = models.CharField(max_length=16, choices=Action.choices)
    remarks = models.TextField(blank=True)
    acted_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ('acted_at', 'id')

    def __str__(self):
        return f"{self.workflow_id}: {self.role} {self.action} by {self.acted_by_id}"
