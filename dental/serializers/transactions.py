from rest_framework import serializers

from dental.models import FinancialTransaction
from dental.serializers.fields import CleanCharField, DateOrDateTimeField

Txn = FinancialTransaction
CATEGORIES = sorted(set(Txn.INCOME_CATEGORIES) | set(Txn.EXPENSE_CATEGORIES))


class TransactionSerializer(serializers.Serializer):
    """Input for creating a ledger entry; ``partial=True`` for updates."""
    type = serializers.ChoiceField(choices=Txn.Type.choices)
    category = serializers.ChoiceField(choices=CATEGORIES)
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    description = CleanCharField(min_length=1, max_length=255)
    date = serializers.DateTimeField(required=False)
    status = serializers.ChoiceField(choices=Txn.Status.choices, required=False)
    patientId = serializers.IntegerField(required=False, allow_null=True, min_value=1)
    appointmentId = serializers.IntegerField(required=False, allow_null=True, min_value=1)

    def validate_amount(self, v):
        if v <= 0:
            raise serializers.ValidationError('Amount must be greater than zero')
        return v

    def validate(self, attrs):
        txn_type, category = attrs.get('type'), attrs.get('category')
        if txn_type and category and category not in Txn.categories_for(txn_type):
            raise serializers.ValidationError({'category': [f'{category} is not a valid {txn_type} category']})
        return attrs

    def to_service_kwargs(self) -> dict:
        mapping = {'patientId': 'patient_id', 'appointmentId': 'appointment_id'}
        return {mapping.get(k, k): v for k, v in self.validated_data.items()}


class TransactionListQuerySerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=Txn.Type.choices, required=False)
    category = serializers.ChoiceField(choices=CATEGORIES, required=False)
    status = serializers.ChoiceField(choices=Txn.Status.choices, required=False)
    patientId = serializers.IntegerField(required=False, min_value=1)
    startDate = DateOrDateTimeField(required=False)
    endDate = DateOrDateTimeField(required=False)


class SummaryQuerySerializer(serializers.Serializer):
    startDate = DateOrDateTimeField(required=False)
    endDate = DateOrDateTimeField(required=False)
