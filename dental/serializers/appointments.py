from rest_framework import serializers

from dental.models import Appointment
from dental.serializers.fields import CleanCharField


class AppointmentCreateSerializer(serializers.Serializer):
    patientId = serializers.IntegerField(min_value=1)
    dentistId = serializers.IntegerField(min_value=1)
    date = serializers.DateTimeField()
    notes = CleanCharField(required=False, allow_blank=True, allow_null=True)


class AppointmentStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Appointment.Status.choices)


class AppointmentListQuerySerializer(serializers.Serializer):
    dentistId = serializers.IntegerField(required=False, min_value=1)
    status = serializers.ChoiceField(choices=Appointment.Status.choices, required=False)
