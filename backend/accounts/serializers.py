from rest_framework import serializers

from .models import User


class AccountSerializer(serializers.ModelSerializer):
    firstName = serializers.CharField(source="first_name", read_only=True)
    lastName = serializers.CharField(source="last_name", read_only=True)
    displayName = serializers.CharField(source="display_name", read_only=True)
    isHost = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ["id", "email", "firstName", "lastName", "displayName", "phone", "isHost"]
        read_only_fields = ["id", "email", "phone"]

    def get_isHost(self, obj) -> bool:
        return obj.cars.exists()


class RegistrationSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, min_length=8)
    firstName = serializers.CharField(source="first_name", max_length=150, required=False, allow_blank=True)
    lastName = serializers.CharField(source="last_name", max_length=150, required=False, allow_blank=True)
    phone = serializers.CharField(max_length=30, required=False, allow_blank=True)


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, trim_whitespace=False)


class ProfileSerializer(serializers.Serializer):
    """Partial profile update; only the keys sent are changed."""

    email = serializers.EmailField(required=False)
    firstName = serializers.CharField(source="first_name", max_length=150, required=False, allow_blank=True)
    lastName = serializers.CharField(source="last_name", max_length=150, required=False, allow_blank=True)
    displayName = serializers.CharField(source="display_name", max_length=120, required=False, allow_blank=True)
    phone = serializers.CharField(max_length=30, required=False, allow_blank=True)
