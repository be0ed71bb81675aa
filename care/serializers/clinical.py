import bleach
from rest_framework import serializers

from care.lifecycle import DOCTOR_TARGET_STATUSES
from care.models import Appointment, Booking


def _clean(v):
    return bleach.clean((v or '').strip(), strip=True)


class TriageProcessSerializer(serializers.Serializer):
    doctorId = serializers.IntegerField(min_value=1)
    vitals = serializers.DictField(required=False, default=dict)
    priority = serializers.ChoiceField(choices=[c[0] for c in Booking.PRIORITY_CHOICES], required=False)
    notes = serializers.CharField(required=False, allow_blank=True, max_length=2000)

    def validate_notes(self, v):
        return _clean(v)


class SurgerySerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    date = serializers.DateField(required=False, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True)


class ImmunizationSerializer(serializers.Serializer):
    vaccine = serializers.CharField(max_length=255)
    date = serializers.DateField(required=False, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True)


class MedicalHistoryUpdateSerializer(serializers.Serializer):
    allergies = serializers.ListField(child=serializers.CharField(max_length=255), required=False)
    chronicConditions = serializers.ListField(child=serializers.CharField(max_length=255), required=False)
    surgeries = SurgerySerializer(many=True, required=False)
    familyHistory = serializers.CharField(required=False, allow_blank=True)
    immunizations = ImmunizationSerializer(many=True, required=False)


class AppointmentStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(
        choices=list(DOCTOR_TARGET_STATUSES),
        error_messages={'invalid_choice': 'Invalid status value'},
    )
    reason = serializers.CharField(required=False, allow_blank=True, max_length=255)


class AppointmentListQuerySerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[c[0] for c in Appointment.STATUS_CHOICES], required=False)
    date = serializers.DateField(required=False)
    upcoming = serializers.BooleanField(required=False, default=False)


class MedicationSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    dosage = serializers.CharField(max_length=128)
    frequency = serializers.CharField(max_length=128)
    duration = serializers.CharField(max_length=128, required=False, allow_blank=True)
    instructions = serializers.CharField(required=False, allow_blank=True)


class PrescriptionCreateSerializer(serializers.Serializer):
    patientId = serializers.IntegerField(min_value=1)
    appointmentId = serializers.IntegerField(min_value=1)
    medications = MedicationSerializer(many=True, allow_empty=False)
    diagnosis = serializers.CharField(required=False, allow_blank=True)
    notes = serializers.CharField(required=False, allow_blank=True)

    def validate_diagnosis(self, v):
        return _clean(v)

    def validate_notes(self, v):
        return _clean(v)


class MedicalRecordSerializer(serializers.Serializer):
    patientId = serializers.IntegerField(min_value=1)
    appointmentId = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    diagnosis = serializers.CharField(required=False, allow_blank=True)
    treatment = serializers.CharField(required=False, allow_blank=True)
    notes = serializers.CharField(required=False, allow_blank=True)

    def validate_diagnosis(self, v):
        return _clean(v)

    def validate_treatment(self, v):
        return _clean(v)

    def validate_notes(self, v):
        return _clean(v)


class MedicalRecordUpdateSerializer(serializers.Serializer):
    diagnosis = serializers.CharField(required=False, allow_blank=True)
    treatment = serializers.CharField(required=False, allow_blank=True)
    notes = serializers.CharField(required=False, allow_blank=True)

    def validate_diagnosis(self, v):
        return _clean(v)

    def validate_treatment(self, v):
        return _clean(v)

    def validate_notes(self, v):
        return _clean(v)
