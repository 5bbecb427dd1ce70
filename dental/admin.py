"""
Django admin registrations for the dental models.

Handy during development for inspecting what the API wrote; the ledger
and the tooth history are shown read-only in list views.
"""
from django.contrib import admin

from .models import (
    Appointment,
    AuditEvent,
    FinancialTransaction,
    MedicalRecord,
    Patient,
    Procedure,
    PublicAppointmentRequest,
    Tooth,
    ToothHistory,
    User,
)


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ('email', 'name', 'role', 'is_active', 'is_staff')
    list_filter = ('role', 'is_active')
    search_fields = ('email', 'name')
    ordering = ('name',)
    exclude = ('password',)


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'national_id', 'phone', 'birth_date')
    search_fields = ('name', 'national_id', 'phone')


@admin.register(Appointment)
class AppointmentAdmin(admin.ModelAdmin):
    list_display = ('id', 'date', 'patient', 'dentist', 'status')
    list_filter = ('status', 'dentist')
    date_hierarchy = 'date'


@admin.register(MedicalRecord)
class MedicalRecordAdmin(admin.ModelAdmin):
    list_display = ('id', 'patient', 'dentist', 'date')
    search_fields = ('patient__name', 'description')


@admin.register(Procedure)
class ProcedureAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'category', 'price')
    list_filter = ('category',)
    search_fields = ('name',)


@admin.register(FinancialTransaction)
class FinancialTransactionAdmin(admin.ModelAdmin):
    list_display = ('id', 'date', 'type', 'category', 'amount', 'status', 'created_by')
    list_filter = ('type', 'status', 'category')
    date_hierarchy = 'date'


@admin.register(Tooth)
class ToothAdmin(admin.ModelAdmin):
    list_display = ('patient', 'number', 'status', 'last_procedure', 'updated_at')
    list_filter = ('status',)


@admin.register(ToothHistory)
class ToothHistoryAdmin(admin.ModelAdmin):
    list_display = ('patient', 'tooth_number', 'previous_status', 'new_status', 'dentist', 'created_at')
    readonly_fields = [f.name for f in ToothHistory._meta.fields]


@admin.register(PublicAppointmentRequest)
class PublicAppointmentRequestAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'phone', 'preferred_date', 'status', 'created_at')
    list_filter = ('status',)


@admin.register(AuditEvent)
class AuditEventAdmin(admin.ModelAdmin):
    list_display = ('created_at', 'action', 'user', 'object_type', 'object_id')
    list_filter = ('action',)
    readonly_fields = [f.name for f in AuditEvent._meta.fields]
