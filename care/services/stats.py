from django.db.models import Count, Q

from care.models import Appointment, Booking, MedicalHistory, User
from care.services.appointments import patient_appointments
from care.services.bookings import patient_bookings
from care.services.prescriptions import patient_prescriptions


def dashboard_stats() -> dict:
    users = User.objects.aggregate(
        patients=Count('id', filter=Q(role=User.ROLE_PATIENT)),
        doctors=Count('id', filter=Q(role=User.ROLE_DOCTOR)),
        triage=Count('id', filter=Q(role=User.ROLE_TRIAGE)),
    )
    appts = Appointment.objects.aggregate(
        total=Count('id'),
        scheduled=Count('id', filter=Q(status=Appointment.STATUS_SCHEDULED)),
        completed=Count('id', filter=Q(status=Appointment.STATUS_COMPLETED)),
        cancelled=Count('id', filter=Q(status=Appointment.STATUS_CANCELLED)),
        no_show=Count('id', filter=Q(status=Appointment.STATUS_NO_SHOW)),
    )
    return {
        'patients': users['patients'],
        'doctors': users['doctors'],
        'triageStaff': users['triage'],
        'appointments': appts['total'],
        'upcomingAppointments': appts['scheduled'],
        'completedAppointments': appts['completed'],
        'cancelledAppointments': appts['cancelled'],
        'noShowAppointments': appts['no_show'],
        'pendingBookings': Booking.objects.filter(status=Booking.STATUS_PENDING).count(),
    }


def patient_dashboard(patient: User) -> dict:
    """Bundle of the patient's next appointments, latest prescriptions and pending bookings."""
    history = MedicalHistory.objects.filter(patient=patient).only('allergies', 'chronic_conditions').first()
    return {
        'upcomingAppointments': list(patient_appointments(patient, upcoming=True)[:3]),
        'recentPrescriptions': list(patient_prescriptions(patient)[:3]),
        'pendingBookings': list(patient_bookings(patient, status=Booking.STATUS_PENDING)[:3]),
        'allergies': history.allergies if history else [],
        'conditions': history.chronic_conditions if history else [],
    }
