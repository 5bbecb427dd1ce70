from typing import Optional
from django.db import IntegrityError, transaction
from django.db.models import Q

from dental.exceptions import ConflictError, NotFoundError
from dental.models import Patient


def format_patient(p: Patient) -> dict:
    return {
        'id': p.id,
        'name': p.name,
        'nationalId': p.national_id,
        'phone': p.phone,
        'email': p.email or None,
        'address': p.address or None,
        'birthDate': p.birth_date.isoformat() if p.birth_date else None,
        'createdAt': p.created_at.isoformat() if p.created_at else None,
        'updatedAt': p.updated_at.isoformat() if p.updated_at else None,
    }


def _ensure_national_id_free(national_id: str, exclude_id: Optional[int] = None) -> None:
    qs = Patient.objects.filter(national_id=national_id)
    if exclude_id is not None:
        qs = qs.exclude(id=exclude_id)
    if qs.exists():
        raise ConflictError('A patient with this national ID already exists')


def create_patient(**fields) -> Patient:
    _ensure_national_id_free(fields['national_id'])
    try:
        with transaction.atomic():
            return Patient.objects.create(**fields)
    except IntegrityError:
        # lost a race against a concurrent insert of the same national ID
        raise ConflictError('A patient with this national ID already exists')


def list_patients(q: Optional[str] = None):
    qs = Patient.objects.all()
    if q:
        qs = qs.filter(Q(name__icontains=q) | Q(national_id__startswith=q))
    return qs.order_by('name', 'id')


def get_patient(patient_id: int) -> Patient:
    patient = Patient.objects.filter(id=patient_id).first()
    if not patient:
        raise NotFoundError('Patient not found')
    return patient


def get_patient_detail(patient_id: int) -> Patient:
    """Patient with appointments and medical records prefetched."""
    patient = (
        Patient.objects
        .prefetch_related('appointments__dentist', 'medical_records__dentist')
        .filter(id=patient_id)
        .first()
    )
    if not patient:
        raise NotFoundError('Patient not found')
    return patient


def update_patient(patient_id: int, **fields) -> Patient:
    patient = get_patient(patient_id)
    if 'national_id' in fields and fields['national_id'] != patient.national_id:
        _ensure_national_id_free(fields['national_id'], exclude_id=patient.id)
    for name, value in fields.items():
        setattr(patient, name, value)
    if fields:
        patient.save()
    return patient
