"""Anonymous appointment requests submitted from the public booking page."""
import logging

from dental.exceptions import NotFoundError
from dental.models import PublicAppointmentRequest

logger = logging.getLogger(__name__)


def format_request(r: PublicAppointmentRequest) -> dict:
    return {
        'id': r.id,
        'name': r.name,
        'phone': r.phone,
        'email': r.email or None,
        'preferredDate': r.preferred_date.isoformat(),
        'reason': r.reason or None,
        'status': r.status,
        'createdAt': r.created_at.isoformat() if r.created_at else None,
    }


def create_request(*, name, phone, preferred_date, email='', reason='') -> PublicAppointmentRequest:
    req = PublicAppointmentRequest.objects.create(
        name=name, phone=phone, email=email or '', preferred_date=preferred_date, reason=reason or '',
    )
    logger.info('public appointment request %s received', req.id)
    return req


def list_requests(status=None):
    qs = PublicAppointmentRequest.objects.all()
    if status:
        qs = qs.filter(status=status)
    return qs.order_by('-created_at', '-id')


def get_request(request_id: int) -> PublicAppointmentRequest:
    req = PublicAppointmentRequest.objects.filter(id=request_id).first()
    if not req:
        raise NotFoundError('Appointment request not found')
    return req


def update_status(request_id: int, status: str) -> PublicAppointmentRequest:
    req = get_request(request_id)
    req.status = status
    req.save(update_fields=['status', 'updated_at'])
    return req


def delete_request(request_id: int) -> None:
    get_request(request_id).delete()
