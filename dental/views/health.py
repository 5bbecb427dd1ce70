from django.db import DatabaseError, connections
from rest_framework.decorators import api_view, authentication_classes, permission_classes, throttle_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response


@api_view(['GET'])
@authentication_classes([])
@permission_classes([AllowAny])
@throttle_classes([])
def health(request):
    """Liveness plus a ``SELECT 1`` database probe; 503 when the database is unreachable."""
    try:
        with connections['default'].cursor() as c:
            c.execute('SELECT 1')
            row = c.fetchone()
    except DatabaseError as e:
        return Response({'status': 'error', 'db': False, 'error': str(e)}, status=503)
    return Response({'status': 'ok', 'db': bool(row and row[0] == 1)})
