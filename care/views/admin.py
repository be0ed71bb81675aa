"""
Administrator endpoints.

Administrators register staff accounts, browse staff, patients and
appointments, and read aggregate clinic statistics.  The very first
administrator is created through the open bootstrap endpoint, which
closes itself as soon as any administrator exists.
"""
from __future__ import annotations

from django.db.models import Q
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes, throttle_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from care.auth_views import RegisterRateThrottle
from care.serializers.auth import AdminBootstrapSerializer, StaffRegisterSerializer
from care.serializers.clinical import AppointmentListQuerySerializer
from care.serializers.shapes import appointment_data, user_data
from care.services.accounts import admin_exists, create_account
from care.services.appointments import appointments_by_status
from care.services.audit import log_action
from care.services.pagination import page_params, paginate
from care.services.stats import dashboard_stats

from ..models import User
from ..permissions import IsAdminRole


@api_view(['POST'])
@permission_classes([AllowAny])
@throttle_classes([RegisterRateThrottle])
def register_admin(request):
    if admin_exists():
        return Response({'success': False, 'message': 'An administrator already exists'},
                        status=status.HTTP_403_FORBIDDEN)
    s = AdminBootstrapSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = dict(s.validated_data)
    user = create_account(
        name=vd.pop('name'), email=vd.pop('email'), password=vd.pop('password'), role=User.ROLE_ADMIN, **vd,
    )
    log_action(user=user, action='register', object_type='user', object_id=user.id, detail={'role': user.role})
    return Response({'success': True, 'data': user_data(user)}, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def register_staff(request):
    s = StaffRegisterSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = dict(s.validated_data)
    user = create_account(
        name=vd.pop('name'), email=vd.pop('email'), password=vd.pop('password'), role=vd.pop('role'), **vd,
    )
    log_action(user=request.user, action='staff_register', object_type='user', object_id=user.id,
               detail={'role': user.role})
    return Response({'success': True, 'data': user_data(user)}, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def staff_by_role(request, role: str):
    if role not in User.STAFF_ROLES:
        return Response({'success': False, 'message': 'Invalid staff category'}, status=status.HTTP_400_BAD_REQUEST)
    page, limit = page_params(request.query_params)
    items, pagination = paginate(User.objects.filter(role=role).order_by('id'), page, limit)
    data = [user_data(u) for u in items]
    return Response({'success': True, 'count': len(data), 'pagination': pagination, 'data': data})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def stats(request):
    return Response({'success': True, 'data': dashboard_stats()})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def appointments(request):
    q = AppointmentListQuerySerializer(data=request.query_params)
    if not q.is_valid():
        return Response({'success': False, 'message': 'Invalid appointment status'}, status=status.HTTP_400_BAD_REQUEST)
    page, limit = page_params(request.query_params)
    items, pagination = paginate(appointments_by_status(q.validated_data.get('status')), page, limit)
    data = [appointment_data(a, with_patient=True, with_doctor=True) for a in items]
    return Response({'success': True, 'count': len(data), 'pagination': pagination, 'data': data})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def patients(request):
    """Patients, optionally filtered by ``search`` on name or email."""
    qs = User.objects.filter(role=User.ROLE_PATIENT)
    search = (request.query_params.get('search') or '').strip()
    if search:
        qs = qs.filter(Q(name__icontains=search) | Q(email__icontains=search))
    page, limit = page_params(request.query_params)
    items, pagination = paginate(qs.order_by('id'), page, limit)
    data = [user_data(u) for u in items]
    return Response({'success': True, 'count': len(data), 'pagination': pagination, 'data': data})
