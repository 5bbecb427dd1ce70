"""
Database models for the dental clinic backend.

These models capture staff users, patients, appointments, clinical
records, the per-tooth chart (odontogram) with its audit history, the
procedure price list and a small financial ledger.  Field names are
snake_case here; the API exposes them as camelCase.
"""
from __future__ import annotations

from django.contrib.auth.models import AbstractUser, BaseUserManager
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone


# Standard two-digit FDI numbering: quadrant (1-4) then position (1-8).
TOOTH_NUMBERS: tuple[int, ...] = tuple(q * 10 + p for q in (1, 2, 3, 4) for p in range(1, 9))


class Role(models.TextChoices):
    ADMIN = 'ADMIN', 'Administrator'
    DENTIST = 'DENTIST', 'Dentist'
    SECRETARY = 'SECRETARY', 'Secretary'


class UserManager(BaseUserManager):
    """Manager for the email-keyed :class:`User`."""
    use_in_migrations = True

    def _create_user(self, email, password, **extra_fields):
        if not email:
            raise ValueError('email is required')
        email = self.normalize_email(email)
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_user(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', False)
        extra_fields.setdefault('is_superuser', False)
        return self._create_user(email, password, **extra_fields)

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('role', Role.ADMIN)
        return self._create_user(email, password, **extra_fields)


class User(AbstractUser):
    """Clinic staff account.

    Users log in with their email.  The role drives both route access
    and data visibility: dentists only see their own appointments and
    ledger entries.
    """
    username = None
    first_name = None
    last_name = None

    email = models.EmailField(unique=True)
    name = models.CharField(max_length=255)
    role = models.CharField(max_length=16, choices=Role.choices, default=Role.SECRETARY, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['name']

    objects = UserManager()

    def get_full_name(self) -> str:
        return self.name

    def get_short_name(self) -> str:
        return self.name

    def __str__(self) -> str:
        return f"{self.email} ({self.role})"


class Patient(models.Model):
    """A clinic patient.  ``national_id`` is the 11-digit CPF."""
    name = models.CharField(max_length=255)
    national_id = models.CharField(max_length=11, unique=True)
    phone = models.CharField(max_length=32)
    email = models.EmailField(blank=True)
    address = models.CharField(max_length=255, blank=True)
    birth_date = models.DateField()
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"{self.name} ({self.national_id})"


class Appointment(models.Model):
    class Status(models.TextChoices):
        AWAITING_RECEPTION = 'AWAITING_RECEPTION', 'Awaiting reception'
        SCHEDULED = 'SCHEDULED', 'Scheduled'
        IN_PROGRESS = 'IN_PROGRESS', 'In progress'
        CONFIRMED = 'CONFIRMED', 'Confirmed'
        COMPLETED = 'COMPLETED', 'Completed'
        CANCELED = 'CANCELED', 'Canceled'
        NO_SHOW = 'NO_SHOW', 'No show'

    patient = models.ForeignKey(Patient, on_delete=models.PROTECT, related_name='appointments')
    dentist = models.ForeignKey(User, on_delete=models.PROTECT, related_name='appointments')
    date = models.DateTimeField(db_index=True)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.SCHEDULED, db_index=True)
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=['dentist', 'date'], name='appt_dentist_date_idx'),
        ]

    def __str__(self) -> str:
        return f"Appointment {self.id} {self.date:%F %H:%M} d={self.dentist_id}"


class MedicalRecord(models.Model):
    """Clinical note.  Append-only: the API exposes no update or delete."""
    patient = models.ForeignKey(Patient, on_delete=models.PROTECT, related_name='medical_records')
    dentist = models.ForeignKey(User, on_delete=models.PROTECT, related_name='medical_records')
    description = models.TextField()
    date = models.DateTimeField(default=timezone.now, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:
        return f"Record {self.id} p={self.patient_id}"


class Procedure(models.Model):
    """Price list entry."""
    category = models.CharField(max_length=100)
    name = models.CharField(max_length=255)
    price = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"{self.name} ({self.price})"


class FinancialTransaction(models.Model):
    """A ledger entry (income or expense) owned by the staff member who created it."""
    class Type(models.TextChoices):
        INCOME = 'INCOME', 'Income'
        EXPENSE = 'EXPENSE', 'Expense'

    class Status(models.TextChoices):
        PENDING = 'PENDING', 'Pending'
        PAID = 'PAID', 'Paid'
        CANCELED = 'CANCELED', 'Canceled'

    INCOME_CATEGORIES = ('CONSULTATION', 'PROCEDURE', 'CLEANING', 'ORTHODONTICS', 'OTHER')
    EXPENSE_CATEGORIES = ('SALARY', 'RENT', 'SUPPLIES', 'EQUIPMENT', 'UTILITIES', 'OTHER')

    type = models.CharField(max_length=10, choices=Type.choices, db_index=True)
    category = models.CharField(max_length=32, db_index=True)
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    description = models.CharField(max_length=255)
    date = models.DateTimeField(default=timezone.now, db_index=True)
    status = models.CharField(max_length=10, choices=Status.choices, default=Status.PENDING, db_index=True)
    patient = models.ForeignKey(
        Patient, null=True, blank=True, on_delete=models.SET_NULL, related_name='transactions'
    )
    appointment = models.ForeignKey(
        Appointment, null=True, blank=True, on_delete=models.SET_NULL, related_name='transactions'
    )
    created_by = models.ForeignKey(User, on_delete=models.PROTECT, related_name='transactions')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'dental_transaction'
        indexes = [
            models.Index(fields=['status', 'date'], name='txn_status_date_idx'),
            models.Index(fields=['created_by', 'date'], name='txn_owner_date_idx'),
        ]

    @classmethod
    def categories_for(cls, txn_type: str) -> tuple[str, ...]:
        if txn_type == cls.Type.INCOME:
            return cls.INCOME_CATEGORIES
        if txn_type == cls.Type.EXPENSE:
            return cls.EXPENSE_CATEGORIES
        return ()

    def __str__(self) -> str:
        return f"{self.type} {self.amount} ({self.status})"


class Tooth(models.Model):
    """Current state of one tooth in a patient's odontogram."""
    class Status(models.TextChoices):
        HEALTHY = 'HEALTHY', 'Healthy'
        CAVITY = 'CAVITY', 'Cavity'
        RESTORED = 'RESTORED', 'Restored'
        MISSING = 'MISSING', 'Missing'
        CANAL = 'CANAL', 'Root canal'
        PROTHESIS = 'PROTHESIS', 'Prosthesis'

    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='teeth')
    number = models.PositiveSmallIntegerField(choices=[(n, str(n)) for n in TOOTH_NUMBERS])
    status = models.CharField(max_length=16, choices=Status.choices, default=Status.HEALTHY)
    notes = models.TextField(blank=True)
    last_procedure = models.ForeignKey(
        Procedure, null=True, blank=True, on_delete=models.SET_NULL, related_name='+'
    )
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        unique_together = [('patient', 'number')]

    def __str__(self) -> str:
        return f"Tooth {self.number} p={self.patient_id}: {self.status}"


class ToothHistory(models.Model):
    """Immutable record of one tooth status change."""
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='tooth_history')
    tooth_number = models.PositiveSmallIntegerField()
    previous_status = models.CharField(max_length=16, null=True, blank=True)
    new_status = models.CharField(max_length=16)
    notes = models.TextField(blank=True)
    procedure = models.ForeignKey(
        Procedure, null=True, blank=True, on_delete=models.SET_NULL, related_name='tooth_history'
    )
    amount = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    dentist = models.ForeignKey(User, on_delete=models.PROTECT, related_name='tooth_updates')
    transaction = models.ForeignKey(
        FinancialTransaction, null=True, blank=True, on_delete=models.SET_NULL, related_name='tooth_history'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name_plural = 'tooth history'
        indexes = [
            models.Index(fields=['patient', 'tooth_number', 'created_at'], name='tooth_hist_lookup_idx'),
        ]

    def __str__(self) -> str:
        return f"{self.tooth_number}: {self.previous_status} → {self.new_status}"


class PublicAppointmentRequest(models.Model):
    """Anonymous booking request submitted from the public site."""
    class Status(models.TextChoices):
        PENDING = 'PENDING', 'Pending'
        APPROVED = 'APPROVED', 'Approved'
        REJECTED = 'REJECTED', 'Rejected'

    name = models.CharField(max_length=255)
    phone = models.CharField(max_length=32)
    email = models.EmailField(blank=True)
    preferred_date = models.DateTimeField()
    reason = models.TextField(blank=True)
    status = models.CharField(max_length=10, choices=Status.choices, default=Status.PENDING, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"{self.name} @ {self.preferred_date:%F %H:%M} ({self.status})"


class AuditEvent(models.Model):
    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True)
    action = models.CharField(max_length=64)
    object_type = models.CharField(max_length=64, blank=True, null=True)
    object_id = models.BigIntegerField(blank=True, null=True)
    detail = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=['action', 'created_at'], name='audit_action_idx'),
            models.Index(fields=['object_type', 'object_id', 'created_at'], name='audit_object_idx'),
        ]

    def __str__(self):
        return f"{self.action}:{self.user_id}@{self.created_at:%F %T}"
