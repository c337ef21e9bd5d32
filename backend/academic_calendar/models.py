from django.db import models

from academic_calendar.services.calendar_engine import parse_academic_year_name


class AcademicYear(models.Model):
    """Batch enrollment span, e.g. ``2025 - 2029`` for a four year course.

    Students reference an AcademicYear; its ``year_name`` is re-parsed into an
    enrollment on every eligibility check.
    """

    college = models.ForeignKey('college.College', on_delete=models.CASCADE, null=True, blank=True, related_name='academic_years')
    course_name = models.CharField(max_length=128, blank=True)
    year_name = models.CharField(max_length=32, help_text='Enrollment span formatted "YYYY - YYYY"')
    year_number = models.PositiveSmallIntegerField(null=True, blank=True)
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ('-year_name',)
        indexes = [
            models.Index(fields=['year_name'], name='academic_year_name_idx'),
        ]

    def __str__(self) -> str:
        if self.course_name:
            return f"{self.course_name} ({self.year_name})"
        return self.year_name

    @property
    def enrollment(self):
        return parse_academic_year_name(self.year_name)
