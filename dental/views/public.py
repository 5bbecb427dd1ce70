"""
Public booking page endpoints.

Anyone may submit a request (rate limited per client address); staff
review, update and delete them.
"""
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes, throttle_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from dental.serializers.public import (
    PublicRequestListQuerySerializer,
    PublicRequestSerializer,
    PublicRequestStatusSerializer,
)
from dental.services import public_requests as request_service
from dental.throttling import PublicRequestRateThrottle


@api_view(['POST'])
@permission_classes([AllowAny])
@throttle_classes([PublicRequestRateThrottle])
def create_appointment_request(request):
    s = PublicRequestSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    req = request_service.create_request(
        name=vd['name'], phone=vd['phone'], email=vd.get('email') or '',
        preferred_date=vd['preferredDate'], reason=vd.get('reason') or '',
    )
    return Response(request_service.format_request(req), status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def appointment_requests(request):
    q = PublicRequestListQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    qs = request_service.list_requests(q.validated_data.get('status'))
    return Response([request_service.format_request(r) for r in qs])


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated])
def appointment_request_detail(request, request_id: int):
    if request.method == 'GET':
        return Response(request_service.format_request(request_service.get_request(request_id)))
    if request.method == 'PUT':
        s = PublicRequestStatusSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        req = request_service.update_status(request_id, s.validated_data['status'])
        return Response(request_service.format_request(req))
    request_service.delete_request(request_id)
    return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['PUT'])
@permission_classes([IsAuthenticated])
def appointment_request_status(request, request_id: int):
    s = PublicRequestStatusSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    req = request_service.update_status(request_id, s.validated_data['status'])
    return Response(request_service.format_request(req))
