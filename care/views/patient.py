"""
Patient facing endpoints.

Patients create and cancel bookings and read everything the clinic
holds about them: appointments, doctors, medical history and
prescriptions, plus a small dashboard aggregating the latest of each.
Every handler scopes its query to ``request.user``.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from care.serializers.bookings import BookingCreateSerializer, BookingListQuerySerializer
from care.serializers.clinical import AppointmentListQuerySerializer
from care.serializers.shapes import (
    appointment_data,
    booking_data,
    doctor_brief,
    medical_history_data,
    prescription_data,
)
from care.services import appointments as appointment_svc
from care.services import bookings as booking_svc
from care.services import records as record_svc
from care.services import stats as stats_svc
from care.services.pagination import page_params, paginate
from care.services.prescriptions import patient_prescriptions

from ..permissions import IsPatientRole


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsPatientRole])
def bookings(request):
    """GET lists the patient's bookings (``status`` filter); POST creates one."""
    if request.method == 'GET':
        q = BookingListQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)
        items = booking_svc.patient_bookings(request.user, status=q.validated_data.get('status'))
        data = [booking_data(b) for b in items]
        return Response({'success': True, 'count': len(data), 'data': data})

    s = BookingCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    booking = booking_svc.create_booking(
        request.user,
        looking_for=vd['lookingFor'],
        preferred_date=vd['preferredDate'],
        preferred_time=vd['preferredTime'],
        priority=vd.get('priority'),
        symptoms=vd.get('symptoms', ''),
        notes=vd.get('notes', ''),
    )
    return Response({'success': True, 'data': booking_data(booking, with_patient=True)}, status=status.HTTP_201_CREATED)


@api_view(['PUT', 'DELETE'])
@permission_classes([IsAuthenticated, IsPatientRole])
def cancel_booking(request, pk: int):
    booking = booking_svc.cancel_booking(request.user, pk)
    return Response({'success': True, 'data': booking_data(booking)})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsPatientRole])
def appointments(request):
    """Own appointments; ``upcoming=true`` keeps scheduled ones from today on."""
    q = AppointmentListQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    items = appointment_svc.patient_appointments(
        request.user, status=q.validated_data.get('status'), upcoming=q.validated_data.get('upcoming', False),
    )
    data = [appointment_data(a, with_doctor=True) for a in items]
    return Response({'success': True, 'count': len(data), 'data': data})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsPatientRole])
def doctors(request):
    data = [doctor_brief(d) for d in appointment_svc.patient_doctors(request.user)]
    return Response({'success': True, 'count': len(data), 'data': data})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsPatientRole])
def medical_history(request):
    history = record_svc.history_for(request.user.id)
    if history is None:
        return Response({'success': False, 'message': 'No medical history found'}, status=status.HTTP_404_NOT_FOUND)
    data = medical_history_data(history)
    data['doctor'] = doctor_brief(history.doctor)
    return Response({'success': True, 'data': data})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsPatientRole])
def prescriptions(request):
    page, limit = page_params(request.query_params)
    items, pagination = paginate(patient_prescriptions(request.user), page, limit)
    data = [prescription_data(p, with_doctor=True) for p in items]
    return Response({'success': True, 'count': len(data), 'pagination': pagination, 'data': data})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsPatientRole])
def dashboard(request):
    d = stats_svc.patient_dashboard(request.user)
    return Response({'success': True, 'data': {
        'upcomingAppointments': [appointment_data(a, with_doctor=True) for a in d['upcomingAppointments']],
        'recentPrescriptions': [prescription_data(p, with_doctor=True) for p in d['recentPrescriptions']],
        'pendingBookings': [booking_data(b) for b in d['pendingBookings']],
        'allergies': d['allergies'],
        'conditions': d['conditions'],
    }})
