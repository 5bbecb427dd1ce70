"""Scoped throttles for the anonymous endpoints."""
from rest_framework.throttling import AnonRateThrottle


class LoginRateThrottle(AnonRateThrottle):
    scope = 'login'


class PublicRequestRateThrottle(AnonRateThrottle):
    scope = 'public_request'
