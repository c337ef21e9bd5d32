from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.models import UserRole
from resources.models import Resource
from resources.permissions import IsStudent
from resources.serializers import (
    PhotoEligibilityQuerySerializer,
    PhotoUploadSerializer,
    ResourceMediaSerializer,
)
from resources.services import photo_restrictions


def _active_resource(resource_id):
    return get_object_or_404(Resource, pk=resource_id, is_active=True)


class PhotoEligibilityView(APIView):
    permission_classes = (IsAuthenticated, IsStudent)

    def get(self, request, resource_id: int, *args, **kwargs):
        resource = _active_resource(resource_id)
        query = PhotoEligibilityQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        decision = photo_restrictions.can_student_take_photo(request.user, resource, geotag=query.get_geotag())
        return Response(decision.as_dict())


class ResourcePhotoUploadView(APIView):
    permission_classes = (IsAuthenticated, IsStudent)

    def post(self, request, resource_id: int, *args, **kwargs):
        resource = _active_resource(resource_id)
        serializer = PhotoUploadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        decision, media = photo_restrictions.submit_photo(
            request.user,
            resource,
            image_url=serializer.validated_data['image_url'],
            caption=serializer.validated_data.get('caption', ''),
            geotag=serializer.get_geotag(),
        )
        if media is None:
            return Response(decision.as_dict(), status=status.HTTP_403_FORBIDDEN)

        completed = photo_restrictions.can_download_certificate(request.user, resource)
        return Response(
            {
                'eligibility': decision.as_dict(),
                'photo': ResourceMediaSerializer(media).data,
                'is_completed': completed,
            },
            status=status.HTTP_201_CREATED,
        )


class ResourcePhotoHistoryView(APIView):
    permission_classes = (IsAuthenticated,)

    def get(self, request, resource_id: int, *args, **kwargs):
        resource = _active_resource(resource_id)
        qs = photo_restrictions.photo_history(request.user, resource)
        return Response(ResourceMediaSerializer(qs, many=True).data)


class CertificateEligibilityView(APIView):
    permission_classes = (IsAuthenticated, IsStudent)

    def get(self, request, resource_id: int, *args, **kwargs):
        resource = _active_resource(resource_id)
        can_download = photo_restrictions.can_download_certificate(request.user, resource)
        return Response({
            'resource_id': resource.pk,
            'can_download': can_download,
            'role': UserRole.STUDENT,
        })
