from django.db import models


class College(models.Model):
    """A tenant institution.

    Principals, departments, registration requests and tracked resources all
    hang off a college.
    """

    code = models.CharField(max_length=32, unique=True, help_text='Short college code (e.g. IDCS)')
    name = models.CharField(max_length=255)
    short_name = models.CharField(max_length=64, blank=True, help_text='Optional short display name')

    city = models.CharField(max_length=128, blank=True)
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ('code',)

    def __str__(self):
        return f"{self.code} - {self.short_name or self.name}"


class Department(models.Model):
    college = models.ForeignKey(College, on_delete=models.CASCADE, related_name='departments')
    code = models.CharField(max_length=16)
    name = models.CharField(max_length=128)
    short_name = models.CharField(max_length=32, blank=True)
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = (('college', 'code'),)
        ordering = ('college', 'name')

    def __str__(self):
        return f"{self.code} - {self.name}"
