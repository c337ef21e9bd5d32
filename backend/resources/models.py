from django.conf import settings
from django.db import models
from django.utils import timezone


class Resource(models.Model):
    """A physical resource students photograph once per semester (e.g. a sapling)."""

    resource_code = models.CharField(max_length=64, unique=True)
    name = models.CharField(max_length=255, blank=True)
    category = models.CharField(max_length=64, blank=True)
    college = models.ForeignKey(
        'college.College',
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name='resources',
    )
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ('resource_code',)

    def __str__(self):
        return f"{self.resource_code} ({self.category or 'uncategorised'})"


class ResourceMedia(models.Model):
    """One accepted progress photo.

    Rows are only created through the photo restriction service after an
    eligibility check passes; they are never edited afterwards.
    """

    resource = models.ForeignKey(Resource, on_delete=models.CASCADE, related_name='media')
    student = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='resource_media',
    )
    image_url = models.CharField(max_length=500)
    caption = models.TextField(blank=True)
    latitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)
    longitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)
    upload_date = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ('-upload_date',)
        verbose_name = 'Resource photo'
        verbose_name_plural = 'Resource photos'
        indexes = [
            models.Index(fields=['resource', 'student', 'upload_date'], name='resource_media_lookup_idx'),
        ]

    def __str__(self):
        return f"{self.resource.resource_code} by {self.student} on {self.upload_date:%Y-%m-%d}"

    @property
    def has_geotag(self) -> bool:
        return self.latitude is not None and self.longitude is not None
