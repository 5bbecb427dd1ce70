from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from dental.permissions import IsDentist, ReadOnly
from dental.policies import AccessContext
from dental.serializers.medical_records import MedicalRecordCreateSerializer
from dental.services import medical_records as record_service


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, ReadOnly | IsDentist])
def medical_records(request):
    if request.method == 'GET':
        return Response([record_service.format_record(r) for r in record_service.list_records()])

    s = MedicalRecordCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    record = record_service.create_record(
        AccessContext.from_user(request.user),
        patient_id=s.validated_data['patientId'],
        description=s.validated_data['description'],
    )
    return Response(record_service.format_record(record), status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def patient_medical_records(request, patient_id: int):
    qs = record_service.list_records_for_patient(patient_id)
    return Response([record_service.format_record(r) for r in qs])
