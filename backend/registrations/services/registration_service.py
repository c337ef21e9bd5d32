import logging

from django.contrib.auth.hashers import make_password
from django.db import transaction

from registrations.models import RegistrationRequest
from registrations.services.workflow_engine import engine

logger = logging.getLogger(__name__)


def submit_registration(data: dict, workflow_engine=None):
    """Store a registration request and open its approval workflow.

    ``data`` holds validated request fields plus the plain ``password``; only
    its hash is persisted. Returns ``(request, workflow)``.
    """
    workflow_engine = workflow_engine or engine
    fields = dict(data)
    password = fields.pop('password')
    fields['email'] = fields['email'].strip().lower()
    if fields.get('role') == RegistrationRequest.Role.PRINCIPAL:
        fields['department'] = None

    with transaction.atomic():
        request = RegistrationRequest.objects.create(password_hash=make_password(password), **fields)
        workflow = workflow_engine.create(request)

    logger.info('Registration request %s submitted for %s as %s', request.pk, request.email, request.role)
    return request, workflow
