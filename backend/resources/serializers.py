from rest_framework import serializers

from resources.models import ResourceMedia
from resources.services.proximity import Geotag


class ResourceMediaSerializer(serializers.ModelSerializer):
    resource_code = serializers.CharField(source='resource.resource_code', read_only=True)
    category = serializers.CharField(source='resource.category', read_only=True)

    class Meta:
        model = ResourceMedia
        fields = ('id', 'resource', 'resource_code', 'category', 'image_url', 'caption', 'latitude', 'longitude', 'upload_date')
        read_only_fields = fields


class GeotagInputMixin:
    """Reads an optional geotag from ``latitude``/``longitude`` or a ``"lat, lon"`` ``location`` field."""

    def get_geotag(self):
        data = self.validated_data
        geotag = Geotag.from_values(data.get('latitude'), data.get('longitude'))
        if geotag is None and data.get('location'):
            geotag = Geotag.parse(data['location'])
        return geotag


class PhotoEligibilityQuerySerializer(GeotagInputMixin, serializers.Serializer):
    latitude = serializers.FloatField(required=False, allow_null=True, min_value=-90, max_value=90)
    longitude = serializers.FloatField(required=False, allow_null=True, min_value=-180, max_value=180)
    location = serializers.CharField(required=False, allow_blank=True)


class PhotoUploadSerializer(GeotagInputMixin, serializers.Serializer):
    image_url = serializers.CharField(max_length=500)
    caption = serializers.CharField(required=False, allow_blank=True, default='')
    latitude = serializers.FloatField(required=False, allow_null=True, min_value=-90, max_value=90)
    longitude = serializers.FloatField(required=False, allow_null=True, min_value=-180, max_value=180)
    location = serializers.CharField(required=False, allow_blank=True)

    def validate(self, attrs):
        has_lat = attrs.get('latitude') is not None
        has_lon = attrs.get('longitude') is not None
        if has_lat != has_lon:
            raise serializers.ValidationError('latitude and longitude must be provided together')
        return attrs
