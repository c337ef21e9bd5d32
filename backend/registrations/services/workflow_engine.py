"""State machine driving a registration request through its approver chain.

``create`` opens an active workflow at the first approver role. ``advance``
applies one approve/reject decision under a row lock:

- reject ends the workflow and the request as rejected
- approve at a non-final role moves to the next role and re-resolves the approver
- approve at the final role creates the account and completes the workflow

Notification failures are logged and never undo a transition.
"""
import logging
from typing import Callable, Optional

from django.contrib.auth import get_user_model
from django.core.exceptions import PermissionDenied
from django.db import transaction
from django.utils import timezone

from accounts.models import UserRole
from registrations.exceptions import ApprovalConflict, InvalidStateTransition
from registrations.models import ApprovalAction, ApprovalWorkflow, RegistrationRequest
from registrations.services import account_materializer, approval_chain, approver_resolver, notification_service

logger = logging.getLogger(__name__)

User = get_user_model()

APPROVE = 'approve'
REJECT = 'reject'


def ensure_principal_slot_free(request: RegistrationRequest):
    """A college has at most one active principal and one pending principal request."""
    existing = (
        User.objects
        .filter(role=UserRole.PRINCIPAL, college_id=request.college_id, is_active=True)
        .first()
    )
    if existing is not None:
        raise ApprovalConflict(
            f'This college already has an active principal: {existing.display_name} ({existing.email}). '
            'Only one principal is allowed per college.'
        )

    pending = (
        RegistrationRequest.objects
        .filter(
            role=RegistrationRequest.Role.PRINCIPAL,
            college_id=request.college_id,
            status=RegistrationRequest.Status.PENDING,
        )
        .exclude(pk=request.pk)
    )
    if pending.exists():
        raise ApprovalConflict('A principal registration for this college is already pending approval.')


class ApprovalWorkflowEngine:
    def __init__(self,
                 resolve_approver: Callable = approver_resolver.resolve_approver,
                 materialize_account: Callable = account_materializer.materialize_account,
                 notifier=notification_service):
        self.resolve_approver = resolve_approver
        self.materialize_account = materialize_account
        self.notifier = notifier

    def create(self, request: RegistrationRequest) -> ApprovalWorkflow:
        if request.status != RegistrationRequest.Status.PENDING:
            raise InvalidStateTransition(f'Registration request {request.pk} is already {request.status}')
        if ApprovalWorkflow.objects.filter(request=request).exists():
            raise InvalidStateTransition(f'Registration request {request.pk} already has a workflow')

        if request.role == RegistrationRequest.Role.PRINCIPAL:
            ensure_principal_slot_free(request)

        role = approval_chain.first_approver_role(request.role)
        workflow = ApprovalWorkflow.objects.create(
            request=request,
            request_type=request.request_type,
            current_approver_role=role,
            current_approver=self.resolve_approver(role, request),
        )
        logger.info(
            'Opened workflow %s for request %s (%s) at %s, approver=%s',
            workflow.pk, request.pk, workflow.request_type, role, workflow.current_approver_id,
        )

        self._notify_approver(workflow)
        return workflow

    def advance(self, workflow: ApprovalWorkflow, decision: str, acting_approver,
                reason: Optional[str] = None) -> ApprovalWorkflow:
        decision = (decision or '').strip().lower()
        if decision not in (APPROVE, REJECT):
            raise ValueError('decision must be "approve" or "reject"')
        if decision == REJECT and not (reason or '').strip():
            raise ValueError('A rejection reason is required when rejecting a request')

        with transaction.atomic():
            workflow = ApprovalWorkflow.objects.select_for_update().get(pk=workflow.pk)
            request = RegistrationRequest.objects.select_for_update().get(pk=workflow.request_id)
            self._check_can_act(workflow, request, acting_approver)

            now = timezone.now()
            acting_role = workflow.current_approver_role
            ApprovalAction.objects.create(
                workflow=workflow,
                role=acting_role,
                acted_by=acting_approver,
                action=ApprovalAction.Action.APPROVED if decision == APPROVE else ApprovalAction.Action.REJECTED,
                remarks=reason or '',
            )

            if decision == REJECT:
                self._reject(workflow, request, acting_approver, reason.strip(), now)
                outcome = 'rejected'
            else:
                next_role = approval_chain.next_approver_role(acting_role)
                if next_role is None:
                    self._complete(workflow, request, acting_approver, now)
                    outcome = 'completed'
                else:
                    workflow.current_approver_role = next_role
                    workflow.current_approver = self.resolve_approver(next_role, request)
                    workflow.save(update_fields=['current_approver_role', 'current_approver', 'updated_at'])
                    outcome = 'forwarded'

        logger.info(
            'Workflow %s %s by user %s acting as %s',
            workflow.pk, outcome, getattr(acting_approver, 'pk', None), acting_role,
        )

        if outcome == 'forwarded':
            self._notify_approver(workflow)
        else:
            self._notify_outcome(request, approved=outcome == 'completed', reason=workflow.rejection_reason)
        return workflow

    def _check_can_act(self, workflow: ApprovalWorkflow, request: RegistrationRequest, actor):
        if not workflow.is_active:
            raise InvalidStateTransition(f'Workflow {workflow.pk} is already {workflow.status}')
        if request.status != RegistrationRequest.Status.PENDING:
            raise InvalidStateTransition(f'Registration request {request.pk} is already {request.status}')

        actor_role = getattr(actor, 'role', None)
        if actor_role != workflow.current_approver_role:
            raise InvalidStateTransition(
                f'Workflow {workflow.pk} is waiting for {workflow.current_approver_role} approval, '
                f'not {actor_role}'
            )

        if workflow.current_approver_id is None:
            approver = self.resolve_approver(workflow.current_approver_role, request)
            if approver is None:
                raise InvalidStateTransition(
                    f'Workflow {workflow.pk} has no {workflow.current_approver_role} approver available'
                )
            workflow.current_approver = approver
            workflow.save(update_fields=['current_approver', 'updated_at'])

        if workflow.current_approver_id != actor.pk:
            raise PermissionDenied('You do not have permission to process this approval')

    def _reject(self, workflow, request, actor, reason, now):
        workflow.status = ApprovalWorkflow.Status.REJECTED
        workflow.rejection_reason = reason
        workflow.completed_at = now
        workflow.save(update_fields=['status', 'rejection_reason', 'completed_at', 'updated_at'])

        request.status = RegistrationRequest.Status.REJECTED
        request.rejection_reason = reason
        request.reviewed_by = actor
        request.reviewed_at = now
        request.save(update_fields=['status', 'rejection_reason', 'reviewed_by', 'reviewed_at', 'updated_at'])

    def _complete(self, workflow, request, actor, now):
        if request.role == RegistrationRequest.Role.PRINCIPAL:
            ensure_principal_slot_free(request)

        self.materialize_account(request)

        request.status = RegistrationRequest.Status.APPROVED
        request.reviewed_by = actor
        request.reviewed_at = now
        request.save(update_fields=['status', 'reviewed_by', 'reviewed_at', 'updated_at'])

        workflow.status = ApprovalWorkflow.Status.COMPLETED
        workflow.completed_at = now
        workflow.save(update_fields=['status', 'completed_at', 'updated_at'])

    def _notify_approver(self, workflow):
        try:
            self.notifier.notify_approver(workflow)
        except Exception:
            logger.exception('Failed to notify approver for workflow %s', workflow.pk)

    def _notify_outcome(self, request, approved: bool, reason: str = ''):
        try:
            self.notifier.notify_outcome(request, approved=approved, reason=reason)
        except Exception:
            logger.exception('Failed to notify applicant for request %s', request.pk)


engine = ApprovalWorkflowEngine()
