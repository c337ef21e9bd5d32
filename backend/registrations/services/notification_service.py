"""Email notifications for the registration approval workflow.

Every event is logged as a structured payload. Email delivery is best effort:
SMTP errors are logged and reported through ``NotificationOutcome``, never
raised to the workflow.
"""
import logging
from dataclasses import dataclass
from typing import List, Optional

from django.conf import settings
from django.core.mail import get_connection, send_mail

logger = logging.getLogger(__name__)

STATUS_SENT = 'SENT'
STATUS_SKIPPED = 'SKIPPED'
STATUS_FAILED = 'FAILED'


@dataclass
class NotificationOutcome:
    status: str
    recipient: str = ''
    error: str = ''

    @property
    def sent(self) -> bool:
        return self.status == STATUS_SENT


def _log(event: str, registration, target_user_ids: List[int], reason: str):
    payload = {
        'event': event,
        'registration_id': registration.id,
        'request_type': registration.request_type,
        'status': registration.status,
        'target_user_ids': target_user_ids,
        'reason': reason,
    }
    logger.info('%s', payload)


def _send_email(to_email: str, subject: str, message: str) -> NotificationOutcome:
    if not bool(getattr(settings, 'REGISTRATION_EMAIL_ENABLED', True)):
        return NotificationOutcome(status=STATUS_SKIPPED, recipient=to_email, error='Registration email disabled')
    if not to_email:
        return NotificationOutcome(status=STATUS_SKIPPED, error='No recipient email configured')

    timeout = int(getattr(settings, 'EMAIL_TIMEOUT', 10) or 10)
    try:
        connection = get_connection(timeout=timeout)
        sent_count = send_mail(
            subject=subject,
            message=message,
            from_email=getattr(settings, 'DEFAULT_FROM_EMAIL', None),
            recipient_list=[to_email],
            fail_silently=False,
            connection=connection,
        )
    except Exception as exc:
        logger.exception('Registration email to %s failed', to_email)
        return NotificationOutcome(status=STATUS_FAILED, recipient=to_email, error=str(exc))

    if int(sent_count or 0) <= 0:
        return NotificationOutcome(
            status=STATUS_FAILED,
            recipient=to_email,
            error='SMTP accepted request but no recipients were delivered',
        )
    return NotificationOutcome(status=STATUS_SENT, recipient=to_email)


def _frontend_url(path: str) -> str:
    base = str(getattr(settings, 'FRONTEND_URL', '') or '').rstrip('/')
    return f'{base}{path}'


def notify_approver(workflow, approver=None) -> Optional[NotificationOutcome]:
    """Tell the resolved approver that a request is waiting for them."""
    registration = workflow.request
    approver = approver or workflow.current_approver
    if approver is None:
        _log('registration_awaiting_role', registration, [], f'No {workflow.current_approver_role} resolved')
        return None

    _log('registration_awaiting_approver', registration, [approver.id], f'Awaiting {workflow.current_approver_role}')
    message = (
        f'Hello {approver.display_name},\n\n'
        f'{registration.name} ({registration.email}) has requested a {registration.role} account '
        'and is waiting for your approval.\n\n'
        f'Review it at {_frontend_url(f"/approvals/{workflow.id}")}\n'
    )
    return _send_email(approver.email, f'[LMS] {registration.role.title()} registration awaiting approval', message)


def notify_outcome(registration, approved: bool, reason: str = '') -> NotificationOutcome:
    """Tell the applicant whether the registration was approved."""
    if approved:
        _log('registration_approved', registration, [], 'Account created')
        subject = '[LMS] Your registration has been approved'
        message = (
            f'Hello {registration.name},\n\n'
            f'Your {registration.role} account has been approved. '
            f'Sign in with {registration.email} and the password you chose at {_frontend_url("/login")}\n'
        )
    else:
        _log('registration_rejected', registration, [], reason or 'Rejected')
        subject = '[LMS] Your registration was not approved'
        message = (
            f'Hello {registration.name},\n\n'
            f'Your {registration.role} registration was rejected.\n'
            f'Reason: {reason or "not given"}\n'
        )
    return _send_email(registration.email, subject, message)
