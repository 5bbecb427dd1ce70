from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from dental.policies import AccessContext
from dental.serializers.appointments import (
    AppointmentCreateSerializer,
    AppointmentListQuerySerializer,
    AppointmentStatusSerializer,
)
from dental.services import appointments as appointment_service


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def appointments(request):
    """GET lists appointments (dentists only see their own); POST books one."""
    ctx = AccessContext.from_user(request.user)
    if request.method == 'GET':
        q = AppointmentListQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)
        qs = appointment_service.list_appointments(
            ctx, dentist_id=q.validated_data.get('dentistId'), status=q.validated_data.get('status'),
        )
        return Response([appointment_service.format_appointment(a) for a in qs])

    s = AppointmentCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    appointment = appointment_service.create_appointment(
        ctx, patient_id=vd['patientId'], dentist_id=vd['dentistId'], date=vd['date'], notes=vd.get('notes') or '',
    )
    return Response(appointment_service.format_appointment(appointment), status=status.HTTP_201_CREATED)


@api_view(['PATCH'])
@permission_classes([IsAuthenticated])
def appointment_status(request, appointment_id: int):
    s = AppointmentStatusSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    appointment = appointment_service.update_status(
        AccessContext.from_user(request.user), appointment_id, s.validated_data['status'],
    )
    return Response(appointment_service.format_appointment(appointment))
