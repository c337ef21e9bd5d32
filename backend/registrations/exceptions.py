class InvalidStateTransition(Exception):
    """Raised when a workflow or registration request cannot move to the requested state."""

    code = 'invalid_state_transition'


class ApprovalConflict(InvalidStateTransition):
    """The transition would break a uniqueness rule (one principal per college, one account per email)."""

    code = 'approval_conflict'
