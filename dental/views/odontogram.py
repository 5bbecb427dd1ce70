"""
Odontogram views: the patient's tooth chart, tooth updates (dentists
only) and the per-tooth change history.
"""
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from dental.permissions import IsDentist
from dental.policies import AccessContext
from dental.serializers.odontogram import ToothUpdateSerializer
from dental.services import odontogram as odontogram_service


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def patient_odontogram(request, patient_id: int):
    teeth = odontogram_service.get_patient_odontogram(patient_id)
    return Response([odontogram_service.format_tooth(t) for t in teeth])


@api_view(['PUT'])
@permission_classes([IsAuthenticated, IsDentist])
def update_tooth(request, patient_id: int):
    """Set one tooth's status.

    Body: ``{"number": 16, "status": "RESTORED", "notes": "...",
    "procedureId": 3, "amount": 250}``.  A procedure with a positive
    amount books a PENDING income entry for the patient.
    """
    s = ToothUpdateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    tooth = odontogram_service.update_tooth(
        AccessContext.from_user(request.user), patient_id,
        number=vd['number'], status=vd['status'], notes=vd.get('notes') or '',
        procedure_id=vd.get('procedureId'), amount=vd.get('amount'),
    )
    return Response(odontogram_service.format_tooth(tooth))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def tooth_history(request, patient_id: int, tooth_number: int):
    history = odontogram_service.get_tooth_history(patient_id, tooth_number)
    return Response([odontogram_service.format_history(h) for h in history])
