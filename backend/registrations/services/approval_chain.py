"""Approver chain for registration requests.

Every chain is a walk along ``NEXT_APPROVER_ROLE`` starting at the first
approver for the requested role and ending at ``FINAL_APPROVER_ROLE``:

    student   -> staff -> hod -> principal -> admin
    staff     -> hod -> principal -> admin
    hod       -> principal -> admin
    principal -> admin
"""
from typing import List, Optional

FINAL_APPROVER_ROLE = 'admin'

FIRST_APPROVER_ROLE = {
    'student': 'staff',
    'staff': 'hod',
    'hod': 'principal',
    'principal': 'admin',
}

NEXT_APPROVER_ROLE = {
    'staff': 'hod',
    'hod': 'principal',
    'principal': 'admin',
}


def first_approver_role(requested_role: str) -> str:
    """Unknown roles go straight to an admin."""
    return FIRST_APPROVER_ROLE.get((requested_role or '').strip().lower(), FINAL_APPROVER_ROLE)


def next_approver_role(current_role: str) -> Optional[str]:
    """Role after ``current_role``, or None when ``current_role`` is final."""
    return NEXT_APPROVER_ROLE.get(current_role)


def is_final_role(role: str) -> bool:
    return next_approver_role(role) is None


def approval_chain(requested_role: str) -> List[str]:
    chain = [first_approver_role(requested_role)]
    while True:
        following = next_approver_role(chain[-1])
        if following is None:
            return chain
        chain.append(following)
