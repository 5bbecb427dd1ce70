"""Dental clinic application.

This package contains models, serializers, services, views and route
registrations implementing the clinic REST API consumed by the
administrative front-end.
"""
