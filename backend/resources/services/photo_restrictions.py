"""Database-backed photo restriction checks for tracked resources.

Loads the student's enrollment, supplies the record lookup used by
``eligibility.evaluate`` and applies the proximity check. ``submit_photo``
is the only path that creates ``ResourceMedia`` rows.
"""
import logging
from typing import Optional, Tuple

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import transaction
from django.utils import timezone

from academic_calendar.services import calendar_engine
from academic_calendar.services.calendar_engine import SemesterWindow
from resources.models import Resource, ResourceMedia
from resources.services import eligibility, proximity
from resources.services.proximity import Geotag

logger = logging.getLogger(__name__)

User = get_user_model()


def _today(now=None):
    now = now or timezone.now()
    if timezone.is_aware(now):
        return timezone.localtime(now).date()
    return now.date() if hasattr(now, 'date') else now


def record_exists_in_window(resource_id, student_id, window: SemesterWindow) -> bool:
    return ResourceMedia.objects.filter(
        resource_id=resource_id,
        student_id=student_id,
        upload_date__date__gte=window.start_date,
        upload_date__date__lte=window.end_date,
    ).exists()


def load_enrollment(student) -> Tuple[Optional[calendar_engine.AcademicEnrollment], Optional[str]]:
    """Return ``(enrollment, None)`` or ``(None, reason)`` when it cannot be derived."""
    academic_year = getattr(student, 'academic_year', None)
    if academic_year is None or not academic_year.year_name:
        return None, eligibility.NOT_ENROLLED_REASON

    enrollment = calendar_engine.parse_academic_year_name(academic_year.year_name)
    if enrollment is None:
        logger.warning(
            'Unparseable academic year %r for student %s', academic_year.year_name, getattr(student, 'pk', None)
        )
        return None, eligibility.INVALID_YEAR_FORMAT_REASON
    return enrollment, None


def latest_geotag(resource_id) -> Optional[Geotag]:
    media = (
        ResourceMedia.objects
        .filter(resource_id=resource_id, latitude__isnull=False, longitude__isnull=False)
        .order_by('-upload_date', '-id')
        .first()
    )
    if media is None:
        return None
    return Geotag.from_values(media.latitude, media.longitude)


def can_student_take_photo(student, resource: Resource, now=None,
                           geotag: Optional[Geotag] = None) -> eligibility.EligibilityDecision:
    enrollment, problem = load_enrollment(student)
    if enrollment is None:
        return eligibility.Denied(reason=problem)

    today = _today(now)
    decision = eligibility.evaluate(resource.pk, student.pk, today, enrollment, record_exists_in_window)
    if not isinstance(decision, eligibility.Allowed):
        return decision

    max_meters = float(getattr(settings, 'PHOTO_PROXIMITY_MAX_METERS', proximity.DEFAULT_MAX_METERS))
    result = proximity.check_proximity(geotag, latest_geotag(resource.pk), max_meters=max_meters)
    if result.skipped:
        logger.debug('Proximity check skipped for resource %s: missing coordinates', resource.pk)
    elif not result.ok:
        logger.info(
            'Photo for resource %s by student %s rejected: %.2fm from last location',
            resource.pk, student.pk, result.distance_meters,
        )
        return eligibility.Denied(
            reason=(
                f'You are more than {max_meters:g} meters away from your last photo location. '
                'Please move closer to take a new photo.'
            ),
            total_semesters=decision.total_semesters,
            semester_index=decision.semester_index,
        )
    return decision


def can_download_certificate(student, resource: Resource) -> bool:
    enrollment, _ = load_enrollment(student)
    if enrollment is None:
        return False
    return eligibility.is_fully_completed(resource.pk, student.pk, enrollment, record_exists_in_window)


def photo_history(student, resource: Resource, now=None):
    """The student's photos of ``resource`` within the current June..March business year."""
    start, end = calendar_engine.current_academic_year_cycle(_today(now))
    return (
        ResourceMedia.objects
        .filter(
            resource=resource,
            student=student,
            upload_date__date__gte=start,
            upload_date__date__lte=end,
        )
        .select_related('resource')
        .order_by('-upload_date')
    )


def submit_photo(student, resource: Resource, image_url: str, caption: str = '',
                 geotag: Optional[Geotag] = None, now=None):
    """Evaluate and, when allowed, persist a photo in one transaction.

    The student row is locked first so concurrent uploads by the same student
    are serialized and cannot both pass the one-per-semester check.

    Returns ``(decision, media)``; ``media`` is None when the upload was refused.
    """
    now = now or timezone.now()
    with transaction.atomic():
        locked_student = User.objects.select_for_update().select_related('academic_year').get(pk=student.pk)
        decision = can_student_take_photo(locked_student, resource, now=now, geotag=geotag)
        if not isinstance(decision, eligibility.Allowed):
            return decision, None

        media = ResourceMedia.objects.create(
            resource=resource,
            student=locked_student,
            image_url=image_url,
            caption=caption or '',
            latitude=geotag.latitude if geotag else None,
            longitude=geotag.longitude if geotag else None,
            upload_date=now,
        )

    logger.info(
        'Stored photo %s for resource %s by student %s (semester %s)',
        media.pk, resource.pk, student.pk, decision.semester_index,
    )
    return decision, media
