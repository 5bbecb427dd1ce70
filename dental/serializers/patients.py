from rest_framework import serializers

from dental.serializers.fields import CleanCharField


class PatientSerializer(serializers.Serializer):
    """Input for ``POST /patients``; ``partial=True`` for updates."""
    name = CleanCharField(min_length=3, max_length=255)
    nationalId = serializers.RegexField(
        r'^\d{11}$', error_messages={'invalid': 'National ID must be exactly 11 digits'}
    )
    phone = CleanCharField(max_length=32)
    email = serializers.EmailField(required=False, allow_blank=True, allow_null=True)
    address = CleanCharField(required=False, allow_blank=True, allow_null=True, max_length=255)
    birthDate = serializers.DateField()

    def to_model_fields(self) -> dict:
        mapping = {'name': 'name', 'nationalId': 'national_id', 'phone': 'phone',
                   'email': 'email', 'address': 'address', 'birthDate': 'birth_date'}
        out = {}
        for key, field in mapping.items():
            if key in self.validated_data:
                value = self.validated_data[key]
                out[field] = '' if value is None and field in ('email', 'address') else value
        return out


class PatientListQuerySerializer(serializers.Serializer):
    q = serializers.CharField(required=False, allow_blank=True, max_length=100)
