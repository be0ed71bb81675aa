"""
Doctor endpoints.

Doctors see their own appointments, move them to a final status, issue
prescriptions and keep encounter records.  Any endpoint exposing a
patient's data checks :func:`care.services.access.doctor_can_access_patient`
first.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import NotFound
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from care.serializers.clinical import (
    AppointmentListQuerySerializer,
    AppointmentStatusSerializer,
    MedicalRecordSerializer,
    MedicalRecordUpdateSerializer,
    PrescriptionCreateSerializer,
)
from care.serializers.shapes import (
    appointment_data,
    medical_history_data,
    medical_record_data,
    patient_brief,
    prescription_data,
    user_data,
)
from care.services import appointments as appointment_svc
from care.services import records as record_svc
from care.services.access import ensure_doctor_can_access_patient
from care.services.prescriptions import issue_prescription, patient_prescriptions

from ..models import User
from ..permissions import IsDoctorRole


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsDoctorRole])
def appointments(request):
    """Own appointments, optionally filtered by ``status`` and ``date`` (YYYY-MM-DD)."""
    q = AppointmentListQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    items = appointment_svc.doctor_appointments(
        request.user, status=q.validated_data.get('status'), date=q.validated_data.get('date'),
    )
    data = [appointment_data(a, with_patient=True) for a in items]
    return Response({'success': True, 'count': len(data), 'data': data})


@api_view(['PUT'])
@permission_classes([IsAuthenticated, IsDoctorRole])
def update_appointment_status(request, pk: int):
    s = AppointmentStatusSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    appt = appointment_svc.update_status(
        request.user, pk, s.validated_data['status'], reason=s.validated_data.get('reason', ''),
    )
    return Response({'success': True, 'data': appointment_data(appt)})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsDoctorRole])
def patients(request):
    data = [patient_brief(p) for p in appointment_svc.doctor_patients(request.user)]
    return Response({'success': True, 'count': len(data), 'data': data})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsDoctorRole])
def patient_details(request, pk: int):
    ensure_doctor_can_access_patient(request.user, pk)
    patient = User.objects.filter(id=pk, role=User.ROLE_PATIENT).first()
    if patient is None:
        raise NotFound('Patient not found')
    return Response({'success': True, 'data': {
        'patient': user_data(patient),
        'medicalHistory': medical_history_data(record_svc.history_for(pk)),
        'prescriptions': [prescription_data(p) for p in patient_prescriptions(patient)],
    }})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsDoctorRole])
def patient_medical_records(request, pk: int):
    records = list(record_svc.records_for(request.user, pk))
    if not records:
        return Response({'success': False, 'message': 'No medical records found for this patient'},
                        status=status.HTTP_404_NOT_FOUND)
    data = [medical_record_data(r) for r in records]
    return Response({'success': True, 'count': len(data), 'data': data})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsDoctorRole])
def prescriptions(request):
    s = PrescriptionCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    prescription = issue_prescription(
        request.user,
        patient_id=vd['patientId'],
        appointment_id=vd['appointmentId'],
        medications=vd['medications'],
        diagnosis=vd.get('diagnosis', ''),
        notes=vd.get('notes', ''),
    )
    return Response({'success': True, 'data': prescription_data(prescription)}, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsDoctorRole])
def create_medical_record(request):
    s = MedicalRecordSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    record = record_svc.create_record(
        request.user,
        patient_id=vd['patientId'],
        appointment_id=vd.get('appointmentId'),
        diagnosis=vd.get('diagnosis', ''),
        treatment=vd.get('treatment', ''),
        notes=vd.get('notes', ''),
    )
    return Response({'success': True, 'data': medical_record_data(record)}, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated, IsDoctorRole])
def medical_record_detail(request, pk: int):
    if request.method == 'GET':
        record = record_svc.own_record(request.user, pk)
        data = medical_record_data(record)
        data['patient'] = patient_brief(record.patient)
        return Response({'success': True, 'data': data})
    if request.method == 'PUT':
        s = MedicalRecordUpdateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        record = record_svc.update_record(request.user, pk, s.validated_data)
        return Response({'success': True, 'data': medical_record_data(record)})
    # DELETE
    patient_id = record_svc.delete_record(request.user, pk)
    return Response({'success': True, 'message': 'Medical record deleted successfully',
                     'data': {'patientId': patient_id}})
