"""
Staff account management.

Passwords are stored with Django's salted hashers via ``set_password``;
the raw password never reaches the database or a response body.
"""
from __future__ import annotations

import logging
from typing import Optional

from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.db.models import ProtectedError

from dental.exceptions import ConflictError, NotFoundError, ValidationError
from dental.services.audit import log_action

logger = logging.getLogger(__name__)

User = get_user_model()


def format_user(user) -> dict:
    return {
        'id': user.id,
        'name': user.name,
        'email': user.email,
        'role': user.role,
        'isActive': user.is_active,
        'createdAt': user.created_at.isoformat() if user.created_at else None,
        'updatedAt': user.updated_at.isoformat() if user.updated_at else None,
    }


def _check_password(password: str, user=None) -> None:
    try:
        validate_password(password, user=user)
    except DjangoValidationError as e:
        raise ValidationError(' '.join(e.messages))


def _ensure_email_free(email: str, exclude_id: Optional[int] = None) -> None:
    qs = User.objects.filter(email__iexact=email)
    if exclude_id is not None:
        qs = qs.exclude(id=exclude_id)
    if qs.exists():
        raise ConflictError('Email is already in use')


def list_users(*, role: Optional[str] = None):
    qs = User.objects.all()
    if role:
        qs = qs.filter(role=role)
    return qs.order_by('name', 'id')


def get_user(user_id: int):
    user = User.objects.filter(id=user_id).first()
    if not user:
        raise NotFoundError('User not found')
    return user


def create_user(*, name: str, email: str, password: str, role: str, actor_id: Optional[int] = None):
    email = email.strip().lower()
    _ensure_email_free(email)
    _check_password(password)
    user = User.objects.create_user(email=email, password=password, name=name, role=role)
    log_action(user_id=actor_id, action='user_create', object_type='user', object_id=user.id,
               detail={'role': role})
    logger.info('user %s created with role %s', user.id, role)
    return user


def update_user(user_id: int, *, name: Optional[str] = None, email: Optional[str] = None,
                password: Optional[str] = None, role: Optional[str] = None):
    user = get_user(user_id)
    fields: list[str] = []
    if email is not None:
        email = email.strip().lower()
        _ensure_email_free(email, exclude_id=user.id)
        user.email = email
        fields.append('email')
    if name is not None:
        user.name = name
        fields.append('name')
    if role is not None:
        user.role = role
        fields.append('role')
    if password:
        _check_password(password, user=user)
        user.set_password(password)
        fields.append('password')
    if fields:
        user.save(update_fields=fields + ['updated_at'])
    return user


def delete_user(user_id: int, *, actor_id: Optional[int] = None) -> None:
    """Delete a user unless clinical or financial rows still point at them."""
    user = get_user(user_id)
    if user.appointments.exists() or user.medical_records.exists():
        raise ConflictError('Cannot delete a user with appointments or medical records')
    try:
        with transaction.atomic():
            user.delete()
    except ProtectedError:
        raise ConflictError('Cannot delete a user referenced by ledger entries or tooth history')
    log_action(user_id=actor_id, action='user_delete', object_type='user', object_id=user_id)
    logger.info('user %s deleted', user_id)
