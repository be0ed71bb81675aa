"""Care application for the clinic backend.

Models, services, serializers, views and route registrations for the
booking, triage and appointment lifecycle and the clinical records that
follow it.
"""
