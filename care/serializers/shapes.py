"""
Response shapes.

One function per entity turning a model instance into the JSON object
the client consumes.  ``*_brief`` helpers give the reduced user views
the listing endpoints embed for related people.
"""
from __future__ import annotations

from typing import Optional

from care.models import (
    Appointment,
    Booking,
    MedicalHistory,
    MedicalRecord,
    Notification,
    Prescription,
    User,
)


def _iso(value) -> Optional[str]:
    return value.isoformat() if value else None


def user_data(u: User) -> dict:
    """Full profile without credentials."""
    data = {
        'id': u.id,
        'name': u.name,
        'email': u.email,
        'role': u.role,
        'about': u.about,
        'dateOfBirth': _iso(u.date_of_birth),
        'gender': u.gender,
        'phoneNumber': u.phone_number,
        'address': u.address,
        'profilePicture': u.profile_picture,
        'createdAt': _iso(u.created_at),
    }
    if u.role == User.ROLE_PATIENT:
        data.update({
            'bloodGroup': u.blood_group,
            'emergencyContactName': u.emergency_contact_name,
            'emergencyContactNumber': u.emergency_contact_number,
        })
    elif u.role == User.ROLE_DOCTOR:
        data.update({
            'specialization': u.specialization,
            'department': u.department,
            'hospital': u.hospital,
            'qualifications': u.qualifications,
            'licenseNumber': u.license_number,
            'experienceYears': u.experience_years,
            'rating': u.rating,
        })
    else:
        data['position'] = u.position
        data['department'] = u.department
    return data


def patient_brief(u: Optional[User]) -> Optional[dict]:
    if u is None:
        return None
    return {
        'id': u.id,
        'name': u.name,
        'email': u.email,
        'dateOfBirth': _iso(u.date_of_birth),
        'gender': u.gender,
        'bloodGroup': u.blood_group,
    }


def doctor_brief(u: Optional[User]) -> Optional[dict]:
    if u is None:
        return None
    return {
        'id': u.id,
        'name': u.name,
        'specialization': u.specialization,
        'department': u.department,
        'profilePicture': u.profile_picture,
    }


def booking_data(b: Booking, *, with_patient: bool = False) -> dict:
    data = {
        'id': b.id,
        'patientId': b.patient_id,
        'lookingFor': b.looking_for,
        'symptoms': b.symptoms,
        'priority': b.priority,
        'preferredDate': _iso(b.preferred_date),
        'preferredTime': b.preferred_time,
        'status': b.status,
        'notes': b.notes,
        'createdAt': _iso(b.created_at),
        'updatedAt': _iso(b.updated_at),
    }
    if with_patient:
        data['patient'] = patient_brief(b.patient)
    return data


def appointment_data(a: Appointment, *, with_patient: bool = False, with_doctor: bool = False) -> dict:
    data = {
        'id': a.id,
        'bookingId': a.booking_id,
        'patientId': a.patient_id,
        'doctorId': a.doctor_id,
        'date': _iso(a.date),
        'time': a.time,
        'status': a.status,
        'reason': a.reason,
        'priority': a.priority,
        'notes': a.notes,
        'createdAt': _iso(a.created_at),
        'updatedAt': _iso(a.updated_at),
    }
    if with_patient:
        data['patient'] = patient_brief(a.patient)
    if with_doctor:
        data['doctor'] = doctor_brief(a.doctor)
    return data


def medical_history_data(h: Optional[MedicalHistory]) -> dict:
    if h is None:
        return {}
    return {
        'id': h.id,
        'patientId': h.patient_id,
        'doctorId': h.doctor_id,
        'triageData': h.triage_data,
        'allergies': h.allergies,
        'chronicConditions': h.chronic_conditions,
        'surgeries': h.surgeries,
        'familyHistory': h.family_history,
        'immunizations': h.immunizations,
        'lastUpdated': _iso(h.last_updated),
    }


def medical_record_data(r: MedicalRecord) -> dict:
    return {
        'id': r.id,
        'patientId': r.patient_id,
        'doctorId': r.doctor_id,
        'appointmentId': r.appointment_id,
        'diagnosis': r.diagnosis,
        'treatment': r.treatment,
        'notes': r.notes,
        'createdAt': _iso(r.created_at),
        'updatedAt': _iso(r.updated_at),
    }


def prescription_data(p: Prescription, *, with_doctor: bool = False) -> dict:
    data = {
        'id': p.id,
        'appointmentId': p.appointment_id,
        'patientId': p.patient_id,
        'doctorId': p.doctor_id,
        'medications': p.medications,
        'diagnosis': p.diagnosis,
        'notes': p.notes,
        'date': _iso(p.date),
        'isActive': p.is_active,
    }
    if with_doctor:
        data['doctor'] = doctor_brief(p.doctor)
    return data


def notification_data(n: Notification) -> dict:
    return {
        'id': n.id,
        'title': n.title,
        'message': n.message,
        'type': n.type,
        'relatedEntity': n.related_entity,
        'isRead': n.is_read,
        'createdAt': _iso(n.created_at),
    }
