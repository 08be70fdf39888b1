"""
Bearer token issuing and validation.

TokenService signs short-lived JWTs whose subject is the player's username.
BearerTokenAuthentication is the DRF authentication class guarding the
/auth routes: it validates the token and loads the player it names.
"""

import logging
from datetime import datetime, timedelta, timezone

from django.apps import apps
from rest_framework import exceptions
from rest_framework.authentication import BaseAuthentication, get_authorization_header
from rest_framework_simplejwt.backends import TokenBackend
from rest_framework_simplejwt.exceptions import TokenBackendError

from .exceptions import AuthError, NotFoundError

logger = logging.getLogger(__name__)

DEFAULT_ALGORITHM = 'HS256'
DEFAULT_LIFETIME = timedelta(hours=24)


class TokenService:
    """
    Issues and validates signed, time-limited tokens.

    The signing key is handed in by whoever builds the application context;
    nothing here reads global settings.
    """

    def __init__(self, signing_key, lifetime=DEFAULT_LIFETIME, algorithm=DEFAULT_ALGORITHM):
        if not signing_key:
            raise ValueError('A signing key is required to issue tokens.')
        self.lifetime = lifetime
        self.backend = TokenBackend(algorithm, signing_key=signing_key)

    def issue(self, username: str) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            'sub': username,
            'iat': now,
            'exp': now + self.lifetime,
        }
        return self.backend.encode(payload)

    def validate(self, token: str) -> str:
        """
        Returns the username carried by the token.

        :raises AuthError: If the token is malformed, badly signed, expired,
                           or is missing its expiry or subject.
        """
        try:
            payload = self.backend.decode(token, verify=True)
        except TokenBackendError as exc:
            raise AuthError(detail=f"Token rejected: {exc}") from exc

        if 'exp' not in payload:
            raise AuthError(detail="Token has no expiry claim")

        username = payload.get('sub')
        if not isinstance(username, str) or not username.strip():
            raise AuthError(detail="Token has no subject claim")
        return username


class BearerTokenAuthentication(BaseAuthentication):
    """
    Authenticates requests carrying `Authorization: Bearer <token>`.

    Requests without the header are left anonymous so that IsAuthenticated
    rejects them with a 401 (authenticate_header is what makes DRF pick 401
    over 403).
    """
    keyword = 'Bearer'

    def authenticate(self, request):
        auth = get_authorization_header(request).split()

        if not auth or auth[0].lower() != self.keyword.lower().encode():
            return None

        if len(auth) != 2:
            raise exceptions.AuthenticationFailed('Invalid token header.')

        try:
            token = auth[1].decode()
        except UnicodeError as exc:
            raise exceptions.AuthenticationFailed('Invalid token header.') from exc

        context = apps.get_app_config('api').context
        try:
            username = context.tokens.validate(token)
            player = context.players.get(username)
        except (AuthError, NotFoundError) as exc:
            logger.info("Bearer token refused: %s", exc)
            raise exceptions.AuthenticationFailed('Invalid token.') from exc

        return player, token

    def authenticate_header(self, request):
        return self.keyword
