from rest_framework import serializers

from dental.serializers.fields import CleanCharField


class MedicalRecordCreateSerializer(serializers.Serializer):
    patientId = serializers.IntegerField(min_value=1)
    description = CleanCharField(min_length=10)
