from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from dental.permissions import IsAdmin, ReadOnly
from dental.serializers.procedures import ProcedureListQuerySerializer, ProcedureSerializer
from dental.services import procedures as procedure_service


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, ReadOnly | IsAdmin])
def procedures(request):
    if request.method == 'GET':
        q = ProcedureListQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)
        qs = procedure_service.list_procedures(q.validated_data.get('category') or None)
        return Response([procedure_service.format_procedure(p) for p in qs])

    s = ProcedureSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    procedure = procedure_service.create_procedure(**s.validated_data)
    return Response(procedure_service.format_procedure(procedure), status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated, ReadOnly | IsAdmin])
def procedure_detail(request, procedure_id: int):
    if request.method == 'GET':
        return Response(procedure_service.format_procedure(procedure_service.get_procedure(procedure_id)))
    if request.method == 'PUT':
        s = ProcedureSerializer(data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        procedure = procedure_service.update_procedure(procedure_id, **s.validated_data)
        return Response(procedure_service.format_procedure(procedure))
    procedure_service.delete_procedure(procedure_id)
    return Response(status=status.HTTP_204_NO_CONTENT)
