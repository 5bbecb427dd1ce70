from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from dental.policies import AccessContext
from dental.serializers.transactions import (
    SummaryQuerySerializer,
    TransactionListQuerySerializer,
    TransactionSerializer,
)
from dental.services import transactions as txn_service

_FILTERS = {'patientId': 'patient_id', 'startDate': 'start_date', 'endDate': 'end_date'}


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def transactions(request):
    ctx = AccessContext.from_user(request.user)
    if request.method == 'GET':
        q = TransactionListQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)
        filters = {_FILTERS.get(k, k): v for k, v in q.validated_data.items()}
        return Response([txn_service.format_transaction(t) for t in txn_service.list_transactions(ctx, **filters)])

    s = TransactionSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    txn = txn_service.create_transaction(ctx, **s.to_service_kwargs())
    return Response(txn_service.format_transaction(txn), status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def transaction_summary(request):
    """Paid income/expenses, balance and pending income over an optional date range."""
    q = SummaryQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    summary = txn_service.financial_summary(
        AccessContext.from_user(request.user),
        start_date=q.validated_data.get('startDate'), end_date=q.validated_data.get('endDate'),
    )
    return Response(summary)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated])
def transaction_detail(request, txn_id: int):
    ctx = AccessContext.from_user(request.user)
    if request.method == 'GET':
        return Response(txn_service.format_transaction(txn_service.get_transaction(ctx, txn_id)))
    if request.method == 'PUT':
        s = TransactionSerializer(data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        txn = txn_service.update_transaction(ctx, txn_id, **s.to_service_kwargs())
        return Response(txn_service.format_transaction(txn))
    txn_service.delete_transaction(ctx, txn_id)
    return Response(status=status.HTTP_204_NO_CONTENT)
