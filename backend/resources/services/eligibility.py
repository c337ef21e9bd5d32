"""Photo upload eligibility.

Decides whether a student may upload a progress photo for a resource right
now. The rules, checked in order with the first failure winning:

1. every semester already has a photo -> ``Completed``
2. the current semester is past the end of the course -> ``Denied``
3. today is outside the enrolled window -> ``Denied``
4. an earlier semester has no photo -> ``Denied`` naming the first gap
5. a photo already exists in the current six-month cycle -> ``Denied`` with
   the date the next cycle opens
6. otherwise ``Allowed``

The evaluator owns no state. Record lookups go through the
``exists_record_in_window`` callable supplied by the caller, which must also
wrap evaluation and persistence in a single transaction.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date
from typing import Callable, Optional, Union

from academic_calendar.services import calendar_engine
from academic_calendar.services.calendar_engine import AcademicEnrollment, SemesterWindow

ExistsRecordInWindow = Callable[[object, object, SemesterWindow], bool]

NOT_ENROLLED_REASON = 'Student is not enrolled in any academic year'
INVALID_YEAR_FORMAT_REASON = 'Invalid academic year format'
COMPLETED_REASON = 'Congratulations! You have successfully uploaded all photos for all semesters.'


@dataclass(frozen=True)
class Allowed:
    semester_index: Optional[int]
    total_semesters: int

    status = 'allowed'
    can_upload = True

    def as_dict(self) -> dict:
        return {
            'status': self.status,
            'can_upload': True,
            'is_completed': False,
            'current_semester': self.semester_index,
            'total_semesters': self.total_semesters,
        }


@dataclass(frozen=True)
class Denied:
    reason: str
    total_semesters: Optional[int] = None
    next_allowed_date: Optional[date] = None
    semester_index: Optional[int] = None
    next_semester: Optional[int] = None

    status = 'denied'
    can_upload = False

    def as_dict(self) -> dict:
        payload = asdict(self)
        payload['current_semester'] = payload.pop('semester_index')
        if self.next_allowed_date is not None:
            payload['next_allowed_date'] = self.next_allowed_date.isoformat()
        payload.update({'status': self.status, 'can_upload': False, 'is_completed': False})
        return payload


@dataclass(frozen=True)
class Completed:
    total_semesters: int
    reason: str = COMPLETED_REASON

    status = 'completed'
    can_upload = False

    def as_dict(self) -> dict:
        return {
            'status': self.status,
            'can_upload': False,
            'is_completed': True,
            'reason': self.reason,
            'total_semesters': self.total_semesters,
        }


EligibilityDecision = Union[Allowed, Denied, Completed]


def is_fully_completed(entity_id, submitter_id, enrollment: AcademicEnrollment,
                       exists_record_in_window: ExistsRecordInWindow) -> bool:
    """Return True when every semester of the course has a record.

    The number of semesters comes from ``total_semesters`` so three year
    courses complete after six windows.
    """
    for semester in range(1, calendar_engine.total_semesters(enrollment) + 1):
        window = calendar_engine.semester_window(enrollment, semester)
        if not exists_record_in_window(entity_id, submitter_id, window):
            return False
    return True


def first_missing_semester(entity_id, submitter_id, enrollment: AcademicEnrollment, before: int,
                           exists_record_in_window: ExistsRecordInWindow) -> Optional[int]:
    """Return the first semester in ``1 .. before-1`` without a record, or None."""
    for semester in range(1, before):
        window = calendar_engine.semester_window(enrollment, semester)
        if not exists_record_in_window(entity_id, submitter_id, window):
            return semester
    return None


def evaluate(entity_id, submitter_id, now, enrollment: Optional[AcademicEnrollment],
             exists_record_in_window: ExistsRecordInWindow) -> EligibilityDecision:
    if enrollment is None:
        return Denied(reason=NOT_ENROLLED_REASON)

    total = calendar_engine.total_semesters(enrollment)

    if is_fully_completed(entity_id, submitter_id, enrollment, exists_record_in_window):
        return Completed(total_semesters=total)

    current = calendar_engine.current_semester_index(enrollment, now)

    if current is not None and current > total:
        return Denied(
            reason=(
                f'You have successfully completed all {total} semesters for your batch '
                f'({enrollment.year_name}).'
            ),
            total_semesters=total,
            semester_index=total,
        )

    if not calendar_engine.is_within_enrolled_window(enrollment, now):
        return Denied(
            reason=f'You can only take photos during your enrolled academic year period ({enrollment.year_name})',
            total_semesters=total,
        )

    if current is not None:
        missing = first_missing_semester(entity_id, submitter_id, enrollment, current, exists_record_in_window)
        if missing is not None:
            return Denied(
                reason=(
                    'You must complete photo uploads for all previous semesters before uploading in the '
                    f'current semester. Missing photo for {calendar_engine.ordinal(missing)} semester.'
                ),
                total_semesters=total,
                semester_index=current,
            )

    if exists_record_in_window(entity_id, submitter_id, calendar_engine.current_semester_cycle(now)):
        next_allowed = calendar_engine.next_cycle_start(now)
        if current is None:
            reason = (
                'You have already uploaded a photo for this semester. '
                f'The next photo can be uploaded from {next_allowed.isoformat()}.'
            )
            next_semester = None
        else:
            next_semester = current + 1
            reason = (
                f'You have already uploaded a photo for the {calendar_engine.ordinal(current)} semester. '
                f'The next photo can be uploaded in {calendar_engine.ordinal(next_semester)} semester.'
            )
        return Denied(
            reason=reason,
            total_semesters=total,
            next_allowed_date=next_allowed,
            semester_index=current,
            next_semester=next_semester,
        )

    return Allowed(semester_index=current, total_semesters=total)
