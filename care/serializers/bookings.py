import re

import bleach
from rest_framework import serializers

from care.models import Booking

_TIME_RE = re.compile(r'^([01]\d|2[0-3]):[0-5]\d$')


class BookingCreateSerializer(serializers.Serializer):
    lookingFor = serializers.ChoiceField(choices=[c[0] for c in Booking.SPECIALTY_CHOICES])
    symptoms = serializers.CharField(required=False, allow_blank=True, max_length=2000)
    priority = serializers.ChoiceField(choices=[c[0] for c in Booking.PRIORITY_CHOICES], required=False)
    preferredDate = serializers.DateField()
    preferredTime = serializers.CharField(max_length=5)
    notes = serializers.CharField(required=False, allow_blank=True, max_length=2000)

    def validate_preferredTime(self, v):
        v = (v or '').strip()
        if not _TIME_RE.match(v):
            raise serializers.ValidationError('Expected HH:MM')
        return v

    def validate_symptoms(self, v):
        return bleach.clean((v or '').strip(), strip=True)

    def validate_notes(self, v):
        return bleach.clean((v or '').strip(), strip=True)


class BookingListQuerySerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[c[0] for c in Booking.STATUS_CHOICES], required=False)
