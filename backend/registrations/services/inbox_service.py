"""Read-side queries for approvers: pending work, visible requests, statistics."""
from django.db.models import Count, Q

from accounts.models import UserRole
from registrations.models import ApprovalWorkflow, RegistrationRequest
from registrations.services.approver_resolver import resolve_approver

APPROVER_ROLES = (UserRole.STAFF, UserRole.HOD, UserRole.PRINCIPAL, UserRole.ADMIN)

# Requested roles each reviewer role may browse.
VISIBLE_REQUEST_ROLES = {
    UserRole.PRINCIPAL: ('hod', 'staff'),
    UserRole.HOD: ('staff', 'student'),
    UserRole.STAFF: ('student',),
}


def get_pending_approvals_for_user(user):
    """Active workflows waiting for ``user``'s role and assigned to them.

    Unassigned workflows are included only when the resolver would now pick
    ``user`` for the step.
    """
    if user is None or getattr(user, 'role', None) not in APPROVER_ROLES:
        return ApprovalWorkflow.objects.none()

    waiting = ApprovalWorkflow.objects.filter(status=ApprovalWorkflow.Status.ACTIVE, current_approver_role=user.role)
    if user.role != UserRole.ADMIN:
        waiting = waiting.filter(request__college_id=user.college_id)

    resolvable_ids = [
        workflow.pk
        for workflow in waiting.filter(current_approver__isnull=True).select_related('request')
        if getattr(resolve_approver(workflow.current_approver_role, workflow.request), 'pk', None) == user.pk
    ]

    return (
        waiting
        .filter(Q(current_approver=user) | Q(pk__in=resolvable_ids))
        .select_related('request__college', 'request__department', 'current_approver')
        .order_by('created_at')
    )


def get_visible_requests(user):
    """Registration requests ``user`` may browse. None means the user may not browse at all."""
    role = getattr(user, 'role', None)
    qs = RegistrationRequest.objects.select_related('college', 'department', 'reviewed_by')

    if role == UserRole.ADMIN:
        return qs.order_by('-requested_at')
    if role not in VISIBLE_REQUEST_ROLES:
        return None

    qs = qs.filter(role__in=VISIBLE_REQUEST_ROLES[role], status=RegistrationRequest.Status.PENDING)
    if role == UserRole.PRINCIPAL:
        qs = qs.filter(college_id=user.college_id)
    else:
        qs = qs.filter(department_id=user.department_id)
    return qs.order_by('-requested_at')


def get_approval_statistics(user):
    """Workflow counts grouped by request type and status. None when not permitted."""
    role = getattr(user, 'role', None)
    if role not in (UserRole.PRINCIPAL, UserRole.ADMIN):
        return None

    qs = ApprovalWorkflow.objects.all()
    if role == UserRole.PRINCIPAL:
        qs = qs.filter(request__college_id=user.college_id)
    rows = (
        qs.values('request_type', 'status')
        .annotate(count=Count('id'))
        .order_by('-count', 'request_type', 'status')
    )
    return list(rows)


def can_user_view_request(request: RegistrationRequest, user) -> bool:
    """Admins, anyone who acted on the request and approvers of the same college."""
    role = getattr(user, 'role', None)
    if role == UserRole.ADMIN or getattr(user, 'is_superuser', False):
        return True
    workflow = getattr(request, 'workflow', None)
    if workflow is not None and workflow.actions.filter(acted_by=user).exists():
        return True
    return role in APPROVER_ROLES and user.college_id == request.college_id
