import bleach
from rest_framework import serializers

from care.models import User


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField()

    def validate_email(self, v):
        return (v or '').strip().lower()

    def validate_password(self, v):
        if not v:
            raise serializers.ValidationError('Password is required')
        return v


class _AccountSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, min_length=8)
    dateOfBirth = serializers.DateField(required=False, allow_null=True)
    gender = serializers.ChoiceField(choices=[c[0] for c in User.GENDER_CHOICES], required=False, allow_blank=True)
    phoneNumber = serializers.CharField(required=False, allow_blank=True, max_length=32)
    address = serializers.CharField(required=False, allow_blank=True, max_length=255)

    def validate_name(self, v):
        v = bleach.clean((v or '').strip(), strip=True)
        if len(v) < 2:
            raise serializers.ValidationError('Name must be at least 2 characters')
        return v

    def validate_email(self, v):
        return (v or '').strip().lower()


class PatientRegisterSerializer(_AccountSerializer):
    bloodGroup = serializers.CharField(required=False, allow_blank=True, max_length=8)
    emergencyContactName = serializers.CharField(required=False, allow_blank=True, max_length=255)
    emergencyContactNumber = serializers.CharField(required=False, allow_blank=True, max_length=32)


class StaffRegisterSerializer(_AccountSerializer):
    role = serializers.ChoiceField(choices=list(User.STAFF_ROLES))
    about = serializers.CharField(required=False, allow_blank=True)
    specialization = serializers.CharField(required=False, allow_blank=True, max_length=64)
    department = serializers.CharField(required=False, allow_blank=True, max_length=128)
    hospital = serializers.CharField(required=False, allow_blank=True, max_length=255)
    qualifications = serializers.CharField(required=False, allow_blank=True, max_length=255)
    licenseNumber = serializers.CharField(required=False, allow_blank=True, max_length=64)
    experienceYears = serializers.IntegerField(required=False, allow_null=True, min_value=0, max_value=80)
    position = serializers.CharField(required=False, allow_blank=True, max_length=128)


class AdminBootstrapSerializer(_AccountSerializer):
    pass
