"""
Appointment booking.

A dentist cannot hold two non-canceled appointments at the same
timestamp.  Any status may follow any status; the UI decides which
transitions to offer.
"""
from __future__ import annotations

import logging
from typing import Optional

from django.contrib.auth import get_user_model
from django.db import transaction

from dental.exceptions import ConflictError, NotFoundError, ValidationError
from dental.models import Appointment, Patient, Role
from dental.policies import AccessContext, ensure_can_update_appointment, scope_appointments

logger = logging.getLogger(__name__)

User = get_user_model()


def format_appointment(a: Appointment) -> dict:
    return {
        'id': a.id,
        'patientId': a.patient_id,
        'dentistId': a.dentist_id,
        'date': a.date.isoformat(),
        'status': a.status,
        'notes': a.notes or None,
        'patient': {'id': a.patient.id, 'name': a.patient.name},
        'dentist': {'id': a.dentist.id, 'name': a.dentist.name},
        'createdAt': a.created_at.isoformat() if a.created_at else None,
    }


@transaction.atomic
def create_appointment(ctx: AccessContext, *, patient_id: int, dentist_id: int, date, notes: str = '') -> Appointment:
    patient = Patient.objects.filter(id=patient_id).first()
    if not patient:
        raise NotFoundError('Patient not found')
    # lock the dentist row so concurrent bookings for the same dentist serialize
    dentist = User.objects.select_for_update().filter(id=dentist_id).first()
    if not dentist:
        raise NotFoundError('Dentist not found')
    if dentist.role != Role.DENTIST:
        raise ValidationError('Appointments can only be booked with a dentist')

    clash = (
        Appointment.objects
        .filter(dentist=dentist, date=date)
        .exclude(status=Appointment.Status.CANCELED)
        .exists()
    )
    if clash:
        raise ConflictError('Dentist is not available at this time')

    appointment = Appointment.objects.create(patient=patient, dentist=dentist, date=date, notes=notes or '')
    logger.info('appointment %s booked for dentist %s by user %s', appointment.id, dentist.id, ctx.user_id)
    return appointment


def list_appointments(ctx: AccessContext, *, dentist_id: Optional[int] = None, status: Optional[str] = None):
    qs = scope_appointments(Appointment.objects.select_related('patient', 'dentist'), ctx)
    if dentist_id and not ctx.is_dentist:
        qs = qs.filter(dentist_id=dentist_id)
    if status:
        qs = qs.filter(status=status)
    return qs.order_by('date', 'id')


def update_status(ctx: AccessContext, appointment_id: int, status: str) -> Appointment:
    appointment = Appointment.objects.select_related('patient', 'dentist').filter(id=appointment_id).first()
    if not appointment:
        raise NotFoundError('Appointment not found')
    ensure_can_update_appointment(ctx, appointment)
    previous = appointment.status
    appointment.status = status
    appointment.save(update_fields=['status', 'updated_at'])
    logger.info('appointment %s status %s -> %s by user %s', appointment.id, previous, status, ctx.user_id)
    return appointment
