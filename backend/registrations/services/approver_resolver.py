"""Resolve the concrete User who should act for an approver role.

Each role has a resolver object registered in ``_RESOLVERS``. Resolvers are
read-only and deterministic (lowest id wins when several users qualify) and
return None when nobody suitable exists; the step then waits until an approver
becomes resolvable.
"""
import logging
from typing import Dict, Optional

from django.contrib.auth import get_user_model

from accounts.models import UserRole

logger = logging.getLogger(__name__)

User = get_user_model()


class ApproverResolver:
    role: str = ''

    def candidates(self):
        return User.objects.filter(role=self.role, is_active=True).order_by('id')

    def resolve(self, request) -> Optional[User]:
        raise NotImplementedError


class StaffApproverResolver(ApproverResolver):
    """Class in charge of the student's class, else any staff of the department."""

    role = UserRole.STAFF

    def resolve(self, request):
        if not request.department_id:
            return None
        in_department = self.candidates().filter(department_id=request.department_id)

        if request.role == UserRole.STUDENT and request.class_name:
            class_in_charge = in_department.filter(class_in_charge__iexact=request.class_name).first()
            if class_in_charge is not None:
                return class_in_charge
            logger.warning(
                'No class in charge for class %s in department %s; assigning request %s to any staff',
                request.class_name, request.department_id, request.pk,
            )

        return in_department.first()


class HodApproverResolver(ApproverResolver):
    role = UserRole.HOD

    def resolve(self, request):
        if not request.department_id:
            return None
        return self.candidates().filter(department_id=request.department_id).first()


class PrincipalApproverResolver(ApproverResolver):
    role = UserRole.PRINCIPAL

    def resolve(self, request):
        return self.candidates().filter(college_id=request.college_id).first()


class AdminApproverResolver(ApproverResolver):
    role = UserRole.ADMIN

    def resolve(self, request):
        return self.candidates().first()


_RESOLVERS: Dict[str, ApproverResolver] = {}


def register_resolver(resolver: ApproverResolver) -> ApproverResolver:
    _RESOLVERS[str(resolver.role)] = resolver
    return resolver


for _resolver in (StaffApproverResolver(), HodApproverResolver(), PrincipalApproverResolver(), AdminApproverResolver()):
    register_resolver(_resolver)


def resolve_approver(role: str, request) -> Optional[User]:
    resolver = _RESOLVERS.get(str(role))
    if resolver is None:
        logger.error('No approver resolver registered for role %r', role)
        return None
    return resolver.resolve(request)
