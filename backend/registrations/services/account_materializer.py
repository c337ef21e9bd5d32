import logging

from django.contrib.auth import get_user_model
from django.db.models import Q

from accounts.models import UserRole
from registrations.exceptions import ApprovalConflict

logger = logging.getLogger(__name__)

User = get_user_model()


def _split_name(name: str):
    parts = (name or '').strip().split(None, 1)
    if not parts:
        return '', ''
    return parts[0], parts[1] if len(parts) > 1 else ''


def materialize_account(request) -> User:
    """Create the active account for an approved registration request.

    The stored password hash is assigned as-is so the applicant logs in with
    the password chosen at registration time. Raises ``ApprovalConflict`` if
    an account with the same email (or username) already exists.
    """
    email = request.email.strip().lower()
    if User.objects.filter(Q(email__iexact=email) | Q(username__iexact=email)).exists():
        raise ApprovalConflict(f'An account with email {email} already exists')

    first_name, last_name = _split_name(request.name)
    user = User(
        username=email,
        email=email,
        first_name=first_name[:150],
        last_name=last_name[:150],
        role=request.role,
        college_id=request.college_id,
        department_id=request.department_id,
        phone=request.phone or '',
        roll_number=request.roll_number or '',
        is_active=True,
    )
    if request.role == UserRole.STUDENT:
        user.academic_year_id = request.academic_year_id
        user.class_name = request.class_name or ''
    elif request.role == UserRole.STAFF:
        user.class_in_charge = request.class_name or ''
    user.password = request.password_hash
    user.save()

    logger.info('Created %s account %s from registration request %s', user.role, user.pk, request.pk)
    return user
