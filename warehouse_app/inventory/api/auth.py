import logging

from django.contrib.auth import authenticate, get_user_model
from rest_framework import status
from rest_framework.authtoken.models import Token
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import AuthenticationFailed
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from .serializers import LoginSerializer, RegisterSerializer, UserSerializer

logger = logging.getLogger(__name__)

User = get_user_model()


@api_view(['POST'])
@permission_classes([AllowAny])
def login(request):
    """Exchange email and password for an API token"""
    serializer = LoginSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    email = serializer.validated_data['email']
    account = User.objects.filter(email__iexact=email).first()
    user = None
    if account is not None:
        user = authenticate(
            request,
            username=account.get_username(),
            password=serializer.validated_data['password'],
        )

    if user is None:
        logger.warning(f"[AUTH] Failed login for {email}")
        raise AuthenticationFailed('Invalid email or password')

    token, _ = Token.objects.get_or_create(user=user)
    logger.info(f"[AUTH] {user.get_username()} logged in")
    return Response({'token': token.key, 'user': UserSerializer(user).data})


@api_view(['POST'])
@permission_classes([AllowAny])
def register(request):
    serializer = RegisterSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    user = serializer.save()

    token = Token.objects.create(user=user)
    logger.info(f"[AUTH] Registered {user.get_username()}")
    return Response(
        {'token': token.key, 'user': UserSerializer(user).data},
        status=status.HTTP_201_CREATED
    )


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def me(request):
    return Response({'user': UserSerializer(request.user).data})
