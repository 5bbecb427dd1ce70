from rest_framework import serializers

from dental.models import PublicAppointmentRequest
from dental.serializers.fields import CleanCharField


class PublicRequestSerializer(serializers.Serializer):
    name = CleanCharField(min_length=3, max_length=255)
    phone = CleanCharField(min_length=8, max_length=32)
    email = serializers.EmailField(required=False, allow_blank=True, allow_null=True)
    preferredDate = serializers.DateTimeField()
    reason = CleanCharField(required=False, allow_blank=True, allow_null=True)


class PublicRequestStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=PublicAppointmentRequest.Status.choices)


class PublicRequestListQuerySerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=PublicAppointmentRequest.Status.choices, required=False)
