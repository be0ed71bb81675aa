"""
Authentication views.

Patients self-register; staff accounts are created by administrators
(see ``care.views.admin``).  Every successful login or registration
returns a JWT pair whose access token carries the user's role.  Refresh
and logout wrap simplejwt's refresh and blacklist machinery.
"""
from __future__ import annotations

from django.contrib.auth import authenticate
from rest_framework.decorators import api_view, permission_classes, throttle_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.token_blacklist.models import BlacklistedToken, OutstandingToken
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.views import TokenRefreshView

from care.authentication import issue_tokens
from care.serializers.auth import LoginSerializer, PatientRegisterSerializer
from care.services.accounts import create_account
from care.services.audit import log_action

from .models import User


class LoginRateThrottle(AnonRateThrottle):
    scope = 'login'


class RegisterRateThrottle(AnonRateThrottle):
    scope = 'register'


def _auth_payload(user: User, message: str) -> dict:
    tokens = issue_tokens(user)
    return {
        'success': True,
        'token': tokens['access'],
        'refresh': tokens['refresh'],
        'userId': user.id,
        'role': user.role,
        'name': user.name,
        'message': message,
    }


# ---------------------------------------------------------------------
# Patient self registration
# ---------------------------------------------------------------------
@api_view(['POST'])
@permission_classes([AllowAny])
@throttle_classes([RegisterRateThrottle])
def register_patient_view(request):
    s = PatientRegisterSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = dict(s.validated_data)
    user = create_account(
        name=vd.pop('name'), email=vd.pop('email'), password=vd.pop('password'), role=User.ROLE_PATIENT, **vd,
    )
    log_action(user=user, action='register', object_type='user', object_id=user.id, detail={'role': user.role})
    return Response(_auth_payload(user, 'Patient registered successfully'), status=201)


# ---------------------------------------------------------------------
# Email/password login for every role
# ---------------------------------------------------------------------
@api_view(['POST'])
@permission_classes([AllowAny])
@throttle_classes([LoginRateThrottle])
def login_view(request):
    s = LoginSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    email = s.validated_data['email']
    password = s.validated_data['password']

    user = authenticate(request, username=email, password=password)
    if not user:
        log_action(user=None, action='login', object_type='user', object_id=None,
                   detail={'result': 'fail', 'email': email}, request=request)
        return Response({'success': False, 'message': 'Invalid credentials'}, status=400)

    log_action(user=user, action='login', object_type='user', object_id=user.id,
               detail={'result': 'ok'}, request=request)
    return Response(_auth_payload(user, 'Login successful'), status=200)


# ---------------------------------------------------------------------
# JWT: refresh & logout
# ---------------------------------------------------------------------
@api_view(['POST'])
@permission_classes([AllowAny])
def jwt_refresh_view(request):
    """Return a new access token from a refresh token."""
    resp = TokenRefreshView.as_view()(request._request)
    if resp.status_code != 200:
        return Response(resp.data, status=resp.status_code)
    data = dict(resp.data)
    return Response({'success': True, 'token': data.get('access'), 'refresh': data.get('refresh')})


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def jwt_logout_view(request):
    """Blacklist one refresh token, or every outstanding token of the user."""
    refresh = request.data.get('refresh')
    count = 0
    if refresh:
        try:
            RefreshToken(refresh).blacklist()
            count = 1
        except TokenError as e:
            return Response({'success': False, 'message': str(e)}, status=400)
    else:
        for token in OutstandingToken.objects.filter(user=request.user):
            _, created = BlacklistedToken.objects.get_or_create(token=token)
            count += int(created)
    return Response({'success': True, 'blacklisted': count})
