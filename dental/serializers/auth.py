from rest_framework import serializers

from dental.models import Role
from dental.serializers.fields import CleanCharField


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(trim_whitespace=False)

    def validate_password(self, v):
        if not v:
            raise serializers.ValidationError('Password is required')
        return v


class RegisterSerializer(serializers.Serializer):
    name = CleanCharField(min_length=3, max_length=255)
    email = serializers.EmailField()
    password = serializers.CharField(min_length=6, trim_whitespace=False, write_only=True)
    role = serializers.ChoiceField(choices=Role.choices, required=False, default=Role.SECRETARY)


class RefreshSerializer(serializers.Serializer):
    refresh = serializers.CharField()
