"""
URL mappings for the dental clinic API.

Paths carry no trailing slash (``APPEND_SLASH`` is off) and match the
ones the front-end calls.
"""
from django.urls import path

from .views import appointments, auth, health, medical_records, odontogram, patients, procedures, public, transactions, users

urlpatterns = [
    path('health', health.health, name='health'),

    path('auth/login', auth.login_view, name='login_view'),
    path('auth/register', auth.register_view, name='register_view'),
    path('auth/refresh', auth.refresh_view, name='refresh_view'),
    path('auth/me', auth.me_view, name='me_view'),

    path('users', users.users, name='users'),
    path('users/<int:user_id>', users.user_detail, name='user_detail'),

    path('patients', patients.patients, name='patients'),
    path('patients/<int:patient_id>', patients.patient_detail, name='patient_detail'),

    path('appointments', appointments.appointments, name='appointments'),
    path('appointments/<int:appointment_id>/status', appointments.appointment_status, name='appointment_status'),

    path('medical-records', medical_records.medical_records, name='medical_records'),
    path('medical-records/patient/<int:patient_id>', medical_records.patient_medical_records,
         name='patient_medical_records'),

    path('procedures', procedures.procedures, name='procedures'),
    path('procedures/<int:procedure_id>', procedures.procedure_detail, name='procedure_detail'),

    path('odontogram/<int:patient_id>', odontogram.patient_odontogram, name='patient_odontogram'),
    path('odontogram/<int:patient_id>/tooth', odontogram.update_tooth, name='update_tooth'),
    path('odontogram/<int:patient_id>/tooth/<int:tooth_number>/history', odontogram.tooth_history,
         name='tooth_history'),

    path('transactions', transactions.transactions, name='transactions'),
    path('transactions/summary', transactions.transaction_summary, name='transaction_summary'),
    path('transactions/<int:txn_id>', transactions.transaction_detail, name='transaction_detail'),

    path('public/appointment-request', public.create_appointment_request, name='public_appointment_request'),
    path('public/appointment-requests', public.appointment_requests, name='appointment_requests'),
    path('public/appointment-requests/<int:request_id>', public.appointment_request_detail,
         name='appointment_request_detail'),
    path('public/appointment-requests/<int:request_id>/status', public.appointment_request_status,
         name='appointment_request_status'),
]
