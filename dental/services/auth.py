"""
Login, token issuance and bootstrap registration.

Access tokens are signed JWTs (``djangorestframework-simplejwt``) that
carry the user id and role; their lifetime comes from
``SIMPLE_JWT['ACCESS_TOKEN_LIFETIME']`` (one day by default).
"""
from __future__ import annotations

import logging
from typing import Optional

from django.conf import settings
from django.contrib.auth import authenticate, get_user_model
from django.contrib.auth.models import update_last_login
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import AccessToken, RefreshToken

from dental.exceptions import AuthenticationError, AuthorizationError
from dental.models import Role
from dental.policies import AccessContext
from dental.services.audit import log_action
from dental.services.users import create_user

logger = logging.getLogger(__name__)

User = get_user_model()


def issue_tokens(user) -> dict[str, str]:
    refresh = RefreshToken.for_user(user)
    refresh['role'] = user.role
    return {'token': str(refresh.access_token), 'refresh': str(refresh)}


def login(request, *, email: str, password: str):
    """Return ``(user, tokens)`` or raise :class:`AuthenticationError`."""
    email = email.strip().lower()
    ip = request.META.get('REMOTE_ADDR') if request is not None else None
    user = authenticate(request, email=email, password=password)
    if user is None:
        log_action(action='login', object_type='user',
                   detail={'result': 'fail', 'email': email, 'ip': ip})
        logger.info('failed login for %s', email)
        raise AuthenticationError('Invalid credentials')
    update_last_login(None, user)
    log_action(user=user, action='login', object_type='user', object_id=user.id,
               detail={'result': 'ok', 'ip': ip})
    return user, issue_tokens(user)


def refresh_access(refresh_token: str) -> str:
    try:
        refresh = RefreshToken(refresh_token)
    except TokenError as exc:
        raise AuthenticationError('Invalid or expired refresh token') from exc
    user = User.objects.filter(id=refresh.get('user_id'), is_active=True).first()
    if user is None:
        raise AuthenticationError('Invalid or expired refresh token')
    access = AccessToken.for_user(user)
    access['role'] = user.role
    return str(access)


def register(ctx: Optional[AccessContext], *, name: str, email: str, password: str, role: str):
    """Create an account through ``POST /auth/register``.

    Anonymous callers may only register while the user table is empty
    (the very first account always becomes ADMIN) or when
    ``ALLOW_OPEN_REGISTRATION`` is on.  Otherwise an ADMIN token is
    required.
    """
    if ctx is None:
        if not User.objects.exists():
            role = Role.ADMIN
        elif not settings.ALLOW_OPEN_REGISTRATION:
            raise AuthenticationError('Registration is closed; ask an administrator')
    elif not ctx.is_admin:
        raise AuthorizationError('Only administrators can register users')
    return create_user(name=name, email=email, password=password, role=role,
                       actor_id=ctx.user_id if ctx else None)
