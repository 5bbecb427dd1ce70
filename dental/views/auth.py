"""
Authentication endpoints: login, token refresh, bootstrap registration
and the current-user profile.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes, throttle_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from dental.policies import AccessContext
from dental.serializers.auth import LoginSerializer, RefreshSerializer, RegisterSerializer
from dental.services import auth as auth_service
from dental.services.users import format_user
from dental.throttling import LoginRateThrottle


@api_view(['POST'])
@permission_classes([AllowAny])
@throttle_classes([LoginRateThrottle])
def login_view(request):
    """Exchange email + password for a bearer token.

    Response: ``{"user": {...}, "token": "<access>", "refresh": "<refresh>"}``.
    """
    s = LoginSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    user, tokens = auth_service.login(request, **s.validated_data)
    return Response({'user': format_user(user), **tokens})


@api_view(['POST'])
@permission_classes([AllowAny])
def refresh_view(request):
    s = RefreshSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    return Response({'token': auth_service.refresh_access(s.validated_data['refresh'])})


@api_view(['POST'])
@permission_classes([AllowAny])
@throttle_classes([LoginRateThrottle])
def register_view(request):
    """Create an account.

    Anonymous while the clinic has no users yet (or open registration is
    configured); an ADMIN bearer token otherwise.
    """
    s = RegisterSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    ctx = AccessContext.from_user(request.user) if request.user else None
    user = auth_service.register(ctx, **s.validated_data)
    return Response({'user': format_user(user), **auth_service.issue_tokens(user)},
                    status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def me_view(request):
    return Response(format_user(request.user))
