from rest_framework import serializers

from dental.serializers.fields import CleanCharField


class ProcedureSerializer(serializers.Serializer):
    category = CleanCharField(max_length=100)
    name = CleanCharField(max_length=255)
    price = serializers.DecimalField(max_digits=10, decimal_places=2)


class ProcedureListQuerySerializer(serializers.Serializer):
    category = serializers.CharField(required=False, allow_blank=True)
