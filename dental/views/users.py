from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from dental.permissions import IsAdmin, ReadOnly
from dental.serializers.users import UserCreateSerializer, UserListQuerySerializer, UserUpdateSerializer
from dental.services import users as user_service


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, ReadOnly | IsAdmin])
def users(request):
    """GET lists staff (any role, e.g. to pick a dentist); POST creates one (ADMIN)."""
    if request.method == 'GET':
        q = UserListQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)
        return Response([user_service.format_user(u) for u in user_service.list_users(**q.validated_data)])

    s = UserCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    user = user_service.create_user(actor_id=request.user.id, **s.validated_data)
    return Response(user_service.format_user(user), status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated, IsAdmin])
def user_detail(request, user_id: int):
    if request.method == 'GET':
        return Response(user_service.format_user(user_service.get_user(user_id)))
    if request.method == 'PUT':
        s = UserUpdateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        user = user_service.update_user(user_id, **s.validated_data)
        return Response(user_service.format_user(user))
    user_service.delete_user(user_id, actor_id=request.user.id)
    return Response(status=status.HTTP_204_NO_CONTENT)
