from rest_framework import serializers

from dental.models import TOOTH_NUMBERS, Tooth
from dental.serializers.fields import CleanCharField


class ToothUpdateSerializer(serializers.Serializer):
    number = serializers.IntegerField()
    status = serializers.ChoiceField(choices=Tooth.Status.choices)
    notes = CleanCharField(required=False, allow_blank=True, allow_null=True)
    procedureId = serializers.IntegerField(required=False, allow_null=True, min_value=1)
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, allow_null=True,
                                      min_value=0)

    def validate_number(self, v):
        if v not in TOOTH_NUMBERS:
            raise serializers.ValidationError('Tooth number must follow FDI notation (11-18, 21-28, 31-38, 41-48)')
        return v
