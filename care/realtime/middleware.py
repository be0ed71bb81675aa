"""
Websocket authentication from a JWT passed as ``?token=<access>``.

Browsers cannot set an ``Authorization`` header on a websocket
handshake, so the access token travels in the query string.  A missing
or invalid token leaves ``scope["user"]`` anonymous.
"""
from urllib.parse import parse_qs

from channels.db import database_sync_to_async
from channels.middleware import BaseMiddleware
from django.contrib.auth.models import AnonymousUser
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.exceptions import TokenError

from care.authentication import JWTAuthentication


@database_sync_to_async
def _user_for_token(raw: str):
    auth = JWTAuthentication()
    try:
        return auth.get_user(auth.get_validated_token(raw))
    except (AuthenticationFailed, TokenError):
        return AnonymousUser()


class JWTQueryAuthMiddleware(BaseMiddleware):
    async def __call__(self, scope, receive, send):
        params = parse_qs((scope.get("query_string") or b"").decode())
        token = (params.get("token") or [None])[0]
        if token:
            scope = dict(scope, user=await _user_for_token(token))
        return await super().__call__(scope, receive, send)
