"""
JWT authentication for the clinic API.

Tokens are issued by :func:`issue_tokens` and carry the user's ``role``
as a claim next to simplejwt's ``user_id``.  The authentication class
rejects a token whose role claim no longer matches the stored user, so
a role change invalidates tokens minted before it.
"""
from __future__ import annotations

from rest_framework_simplejwt.authentication import JWTAuthentication as BaseJWTAuthentication
from rest_framework_simplejwt.exceptions import InvalidToken
from rest_framework_simplejwt.tokens import RefreshToken


class ClinicRefreshToken(RefreshToken):
    """Refresh token whose access tokens also carry the role claim."""

    @classmethod
    def for_user(cls, user):
        token = super().for_user(user)
        token['role'] = user.role
        return token


def issue_tokens(user) -> dict[str, str]:
    refresh = ClinicRefreshToken.for_user(user)
    return {'access': str(refresh.access_token), 'refresh': str(refresh)}


class JWTAuthentication(BaseJWTAuthentication):
    """``Bearer`` JWT authentication that also checks the role claim."""

    def get_user(self, validated_token):
        user = super().get_user(validated_token)
        claimed = validated_token.get('role')
        if claimed is not None and claimed != user.role:
            raise InvalidToken('Token role no longer matches user')
        return user
