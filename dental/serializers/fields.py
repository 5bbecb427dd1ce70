"""Shared serializer fields."""
import bleach
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime
from rest_framework import serializers


class CleanCharField(serializers.CharField):
    """CharField that strips any HTML markup from the submitted text."""

    def to_internal_value(self, data):
        value = super().to_internal_value(data)
        return bleach.clean(value, tags=[], strip=True).strip()


class DateOrDateTimeField(serializers.Field):
    """Accepts ``YYYY-MM-DD`` (returned as a date) or an ISO 8601 timestamp."""
    default_error_messages = {'invalid': 'Enter a date (YYYY-MM-DD) or an ISO 8601 date-time.'}

    def to_internal_value(self, data):
        text = str(data).strip()
        try:
            day = parse_date(text)
            if day is not None:
                return day
            moment = parse_datetime(text)
        except ValueError:
            self.fail('invalid')
        if moment is None:
            self.fail('invalid')
        if timezone.is_naive(moment):
            moment = timezone.make_aware(moment)
        return moment

    def to_representation(self, value):
        return value.isoformat()
