from rest_framework import serializers

from dental.models import Role
from dental.serializers.auth import RegisterSerializer
from dental.serializers.fields import CleanCharField


class UserCreateSerializer(RegisterSerializer):
    role = serializers.ChoiceField(choices=Role.choices)


class UserUpdateSerializer(serializers.Serializer):
    name = CleanCharField(min_length=3, max_length=255, required=False)
    email = serializers.EmailField(required=False)
    password = serializers.CharField(min_length=6, trim_whitespace=False, write_only=True, required=False)
    role = serializers.ChoiceField(choices=Role.choices, required=False)


class UserListQuerySerializer(serializers.Serializer):
    role = serializers.ChoiceField(choices=Role.choices, required=False)
