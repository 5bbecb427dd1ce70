"""
Patient registry views.

Every authenticated role may read patients; only the front desk
(ADMIN, SECRETARY) registers or edits them.
"""
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from dental.permissions import IsFrontDesk, ReadOnly
from dental.serializers.patients import PatientListQuerySerializer, PatientSerializer
from dental.services import patients as patient_service
from dental.services.medical_records import format_record


def _appointment_summary(a) -> dict:
    return {
        'id': a.id,
        'date': a.date.isoformat(),
        'status': a.status,
        'notes': a.notes or None,
        'dentist': {'id': a.dentist.id, 'name': a.dentist.name},
    }


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, ReadOnly | IsFrontDesk])
def patients(request):
    if request.method == 'GET':
        q = PatientListQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)
        qs = patient_service.list_patients(q.validated_data.get('q'))
        return Response([patient_service.format_patient(p) for p in qs])

    s = PatientSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    patient = patient_service.create_patient(**s.to_model_fields())
    return Response(patient_service.format_patient(patient), status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT'])
@permission_classes([IsAuthenticated, ReadOnly | IsFrontDesk])
def patient_detail(request, patient_id: int):
    if request.method == 'GET':
        patient = patient_service.get_patient_detail(patient_id)
        data = patient_service.format_patient(patient)
        appointments = sorted(patient.appointments.all(), key=lambda a: (a.date, a.id))
        records = sorted(patient.medical_records.all(), key=lambda r: (r.date, r.id), reverse=True)
        data['appointments'] = [_appointment_summary(a) for a in appointments]
        data['medicalRecords'] = [format_record(r) for r in records]
        return Response(data)

    s = PatientSerializer(data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    patient = patient_service.update_patient(patient_id, **s.to_model_fields())
    return Response(patient_service.format_patient(patient))
