from decimal import Decimal
from typing import Optional

from dental.exceptions import NotFoundError, ValidationError
from dental.models import Procedure


def format_procedure(p: Procedure) -> dict:
    return {
        'id': p.id,
        'category': p.category,
        'name': p.name,
        'price': p.price,
    }


def _check_price(price: Optional[Decimal]) -> None:
    if price is not None and price < 0:
        raise ValidationError('Price must be greater than or equal to zero')


def list_procedures(category: Optional[str] = None):
    qs = Procedure.objects.all()
    if category:
        qs = qs.filter(category=category)
    return qs.order_by('name', 'id')


def get_procedure(procedure_id: int) -> Procedure:
    procedure = Procedure.objects.filter(id=procedure_id).first()
    if not procedure:
        raise NotFoundError('Procedure not found')
    return procedure


def create_procedure(*, category: str, name: str, price: Decimal) -> Procedure:
    _check_price(price)
    return Procedure.objects.create(category=category, name=name, price=price)


def update_procedure(procedure_id: int, **fields) -> Procedure:
    _check_price(fields.get('price'))
    procedure = get_procedure(procedure_id)
    for name, value in fields.items():
        setattr(procedure, name, value)
    if fields:
        procedure.save()
    return procedure


def delete_procedure(procedure_id: int) -> None:
    # teeth and history keep their rows; their procedure reference becomes null
    get_procedure(procedure_id).delete()
