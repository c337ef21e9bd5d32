"""Academic calendar arithmetic.

Pure functions mapping dates onto the fixed semester calendar used for photo
tracking. The business year starts on June 1; each year is split into two
six-month semesters:

- odd semester: June 1 .. November 30
- even semester: December 1 .. May 31 of the following year

An enrollment span such as ``2025 - 2029`` is open for uploads from June 1 of
the start year until March 31 of the year after the end year.

Nothing here touches the database; callers pass plain ``date``/``datetime``
values and an :class:`AcademicEnrollment`.
"""
from __future__ import annotations

import calendar
import math
import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

JUNE = 6
NOVEMBER = 11
DECEMBER = 12
MARCH = 3
MAY = 5

_YEAR_NAME_RE = re.compile(r'^\s*(\d{4})\s*-\s*(\d{4})\s*$')


@dataclass(frozen=True)
class AcademicEnrollment:
    start_year: int
    end_year: int

    def __post_init__(self):
        if self.end_year <= self.start_year:
            raise ValueError(f'end_year ({self.end_year}) must be after start_year ({self.start_year})')

    @property
    def duration_years(self) -> int:
        return self.end_year - self.start_year

    @property
    def year_name(self) -> str:
        return f'{self.start_year} - {self.end_year}'


@dataclass(frozen=True)
class SemesterWindow:
    """Closed date range ``[start_date, end_date]`` for one semester.

    ``semester_index`` is the overall 1-based semester of the course for
    windows derived from an enrollment, or the half of the business year
    (1 or 2) for windows derived from a bare date. ``course_year_index`` is
    None for the latter.
    """

    start_date: date
    end_date: date
    semester_index: int
    course_year_index: Optional[int] = None

    def contains(self, value) -> bool:
        d = _as_date(value)
        return self.start_date <= d <= self.end_date


def _as_date(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def _last_day(year: int, month: int) -> date:
    return date(year, month, calendar.monthrange(year, month)[1])


def _half_window(academic_start_year: int, sem_in_year: int) -> tuple[date, date]:
    if sem_in_year == 1:
        return date(academic_start_year, JUNE, 1), _last_day(academic_start_year, NOVEMBER)
    return date(academic_start_year, DECEMBER, 1), _last_day(academic_start_year + 1, MAY)


def academic_start_year(now) -> int:
    """Return the calendar year in which the business year containing ``now`` began."""
    d = _as_date(now)
    return d.year if d.month >= JUNE else d.year - 1


def semester_in_year(now) -> int:
    """1 for June..November, 2 for December..May."""
    d = _as_date(now)
    return 1 if JUNE <= d.month <= NOVEMBER else 2


def parse_academic_year_name(year_name) -> Optional[AcademicEnrollment]:
    """Parse ``"2025 - 2029"`` into an enrollment. Returns None when malformed."""
    if not year_name:
        return None
    match = _YEAR_NAME_RE.match(str(year_name))
    if not match:
        return None
    start_year, end_year = int(match.group(1)), int(match.group(2))
    if end_year <= start_year:
        return None
    return AcademicEnrollment(start_year=start_year, end_year=end_year)


def total_semesters(enrollment: AcademicEnrollment) -> int:
    duration = enrollment.duration_years
    if duration == 4:
        return 8
    if duration == 3:
        return 6
    return duration * 2


def current_semester_cycle(now) -> SemesterWindow:
    """Return the six-month half of the business year that brackets ``now``."""
    sem = semester_in_year(now)
    start, end = _half_window(academic_start_year(now), sem)
    return SemesterWindow(start_date=start, end_date=end, semester_index=sem)


def next_cycle_start(now) -> date:
    """First day of the semester cycle following the one containing ``now``."""
    d = _as_date(now)
    if JUNE <= d.month <= NOVEMBER:
        return date(d.year, DECEMBER, 1)
    if d.month == DECEMBER:
        return date(d.year + 1, JUNE, 1)
    return date(d.year, JUNE, 1)


def current_academic_year_cycle(now) -> tuple[date, date]:
    """June 1 .. March 31 span of the business year containing ``now``."""
    start_year = academic_start_year(now)
    return date(start_year, JUNE, 1), date(start_year + 1, MARCH, 31)


def semester_window(enrollment: AcademicEnrollment, semester_index: int) -> SemesterWindow:
    if semester_index < 1:
        raise ValueError('semester_index is 1-based')
    course_year_index = math.ceil(semester_index / 2)
    sem = ((semester_index - 1) % 2) + 1
    start, end = _half_window(enrollment.start_year + course_year_index - 1, sem)
    return SemesterWindow(
        start_date=start,
        end_date=end,
        semester_index=semester_index,
        course_year_index=course_year_index,
    )


def enrolled_window(enrollment: AcademicEnrollment) -> tuple[date, date]:
    return date(enrollment.start_year, JUNE, 1), date(enrollment.end_year + 1, MARCH, 31)


def is_within_enrolled_window(enrollment: AcademicEnrollment, now) -> bool:
    start, end = enrolled_window(enrollment)
    return start <= _as_date(now) <= end


def current_semester_index(enrollment: AcademicEnrollment, now) -> Optional[int]:
    """Overall semester number for ``now``, or None outside the course.

    The March grace period after the nominal end year is inside the enrolled
    window but past the last course year, so it also yields None.
    """
    if not is_within_enrolled_window(enrollment, now):
        return None

    year_in_course = academic_start_year(now) - enrollment.start_year + 1
    if year_in_course < 1 or year_in_course > enrollment.duration_years:
        return None

    return (year_in_course - 1) * 2 + semester_in_year(now)


def ordinal(num: int) -> str:
    """1 -> '1st', 2 -> '2nd', 11 -> '11th', 21 -> '21st'."""
    if num % 100 in (11, 12, 13):
        return f'{num}th'
    suffix = {1: 'st', 2: 'nd', 3: 'rd'}.get(num % 10, 'th')
    return f'{num}{suffix}'
