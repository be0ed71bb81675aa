"""
Triage endpoints.

Triage staff work through the pending booking list, pick a doctor,
record vitals and turn the booking into an appointment.  They can also
amend a patient's medical history once it exists.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from care.serializers.clinical import MedicalHistoryUpdateSerializer, TriageProcessSerializer
from care.serializers.shapes import (
    appointment_data,
    booking_data,
    doctor_brief,
    medical_history_data,
    patient_brief,
)
from care.services import records as record_svc
from care.services import triage as triage_svc
from care.services.bookings import pending_bookings
from care.services.pagination import page_params, paginate

from ..permissions import IsTriageRole


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsTriageRole])
def unassigned_bookings(request):
    page, limit = page_params(request.query_params)
    items, pagination = paginate(pending_bookings(), page, limit)
    data = [booking_data(b, with_patient=True) for b in items]
    return Response({'success': True, 'count': len(data), 'pagination': pagination, 'data': data})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsTriageRole])
def available_doctors(request):
    department = (request.query_params.get('department') or '').strip() or None
    data = [doctor_brief(d) for d in triage_svc.available_doctors(department=department)]
    return Response({'success': True, 'count': len(data), 'data': data})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsTriageRole])
def process_triage(request, booking_id: int):
    s = TriageProcessSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    outcome = triage_svc.process_triage(
        request.user,
        booking_id,
        doctor_id=vd['doctorId'],
        vitals=vd.get('vitals'),
        priority=vd.get('priority'),
        notes=vd.get('notes', ''),
    )
    return Response({'success': True, 'data': {
        'appointment': appointment_data(outcome.appointment),
        'medicalHistory': medical_history_data(outcome.medical_history),
    }}, status=status.HTTP_201_CREATED)


@api_view(['PUT'])
@permission_classes([IsAuthenticated, IsTriageRole])
def update_medical_history(request, patient_id: int):
    s = MedicalHistoryUpdateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    history = record_svc.update_medical_history(patient_id, s.validated_data)
    return Response({'success': True, 'data': medical_history_data(history)})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsTriageRole])
def patients(request):
    department = (request.query_params.get('department') or '').strip() or None
    data = [patient_brief(p) for p in triage_svc.patients(department=department)]
    return Response({'success': True, 'count': len(data), 'data': data})
