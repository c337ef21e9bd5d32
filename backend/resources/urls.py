from django.urls import path

from resources.views import (
    CertificateEligibilityView,
    PhotoEligibilityView,
    ResourcePhotoHistoryView,
    ResourcePhotoUploadView,
)

urlpatterns = [
    path('<int:resource_id>/photo-eligibility/', PhotoEligibilityView.as_view(), name='resource-photo-eligibility'),
    path('<int:resource_id>/photos/', ResourcePhotoUploadView.as_view(), name='resource-photo-upload'),
    path('<int:resource_id>/photos/history/', ResourcePhotoHistoryView.as_view(), name='resource-photo-history'),
    path('<int:resource_id>/certificate-eligibility/', CertificateEligibilityView.as_view(), name='resource-certificate-eligibility'),
]
