"""
Bearer-token authentication for the clinic API.

Tokens are signed JWTs issued by :func:`dental.services.auth.issue_tokens`.
This subclass exists to give the REST framework configuration a stable
import path and to refuse tokens belonging to deactivated accounts.
"""
from __future__ import annotations

from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import AuthenticationFailed


class BearerTokenAuthentication(JWTAuthentication):
    """``Authorization: Bearer <jwt>`` authentication."""

    www_authenticate_realm = 'clinic'

    def get_user(self, validated_token):
        user = super().get_user(validated_token)
        # role in the token must still match the account
        claimed = validated_token.get('role')
        if claimed is not None and claimed != user.role:
            raise AuthenticationFailed('Token role is stale, please log in again', code='stale_role')
        return user
