import pytest
from django.urls import reverse
from rest_framework.test import APIClient

pytestmark = pytest.mark.django_db


def test_health_is_public():
    r = APIClient().get(reverse('health'))
    assert r.status_code == 200
    assert r.data == {'status': 'ok', 'db': True}


def test_unknown_route_is_404(admin, client_for):
    assert client_for(admin).get('/nope').status_code == 404
