"""
Authentication serializers.
"""

from rest_framework import serializers

from authentication.models import User


class UserSerializer(serializers.ModelSerializer):
    """Public view of a user."""

    class Meta:
        model = User
        fields = ["id", "code", "username", "email", "role", "is_premium", "date_joined"]
        read_only_fields = fields


class RegisterSerializer(serializers.Serializer):
    code = serializers.CharField(max_length=64)
    password = serializers.CharField(write_only=True, trim_whitespace=False)
    username = serializers.CharField(max_length=150, required=False, allow_blank=True)
    email = serializers.EmailField(required=False, allow_blank=True)


class LoginSerializer(serializers.Serializer):
    code = serializers.CharField(max_length=64)
    password = serializers.CharField(write_only=True, trim_whitespace=False)


class LogoutSerializer(serializers.Serializer):
    refresh = serializers.CharField(required=False, allow_blank=True)


class AuthResponseSerializer(serializers.Serializer):
    user = UserSerializer()
    access = serializers.CharField()
    refresh = serializers.CharField()
