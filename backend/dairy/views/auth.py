"""Authentication and user management views."""

import logging

from django.contrib.auth.models import User
from rest_framework import generics, status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework_simplejwt.tokens import AccessToken

from ..exceptions import NotFoundError, Unauthorized, ValidationError
from ..serializers import (
    ChangePasswordSerializer,
    LoginSerializer,
    RegisterSerializer,
    UserSerializer,
)
from .utils import api_response

logger = logging.getLogger(__name__)


def issue_token(user):
    """Return a signed access token carrying the user's id and username."""

    token = AccessToken.for_user(user)
    token['username'] = user.username
    return str(token)


class RegisterView(generics.GenericAPIView):
    """Allow anyone to register a new user."""

    serializer_class = RegisterSerializer
    permission_classes = [AllowAny]

    def post(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        logger.info('Registered user %s', user.username)
        return api_response(
            'User registered successfully',
            {'user': UserSerializer(user).data},
            status=status.HTTP_201_CREATED,
        )


class LoginView(generics.GenericAPIView):
    """Exchange a username and password for a bearer token."""

    serializer_class = LoginSerializer
    permission_classes = [AllowAny]

    def post(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        username = serializer.validated_data['username']
        password = serializer.validated_data['password']

        user = User.objects.filter(username=username).first()
        if user is None or not user.is_active or not user.check_password(password):
            logger.warning('Rejected login for %s', username)
            raise Unauthorized()

        return api_response(
            'Login successful',
            {'user': UserSerializer(user).data, 'token': issue_token(user)},
        )


class ProfileView(generics.GenericAPIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, *args, **kwargs):
        return api_response(
            'Profile retrieved successfully',
            {'user': UserSerializer(request.user).data},
        )


class ChangePasswordView(generics.GenericAPIView):
    """Allow authenticated users to change their password."""

    serializer_class = ChangePasswordSerializer
    permission_classes = [IsAuthenticated]

    def put(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = request.user
        user.set_password(serializer.validated_data['newPassword'])
        user.save(update_fields=['password'])
        logger.info('Password changed for %s', user.username)
        return api_response('Password changed successfully')


class UserListView(generics.GenericAPIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, *args, **kwargs):
        users = User.objects.order_by('-date_joined')
        records = UserSerializer(users, many=True).data
        return api_response(
            'Users retrieved successfully',
            {'users': records, 'total': len(records)},
        )


class UserDetailView(generics.GenericAPIView):
    """Hard delete another user's account."""

    permission_classes = [IsAuthenticated]

    def delete(self, request, pk, *args, **kwargs):
        if int(pk) == request.user.pk:
            raise ValidationError('You cannot delete your own account')
        user = User.objects.filter(pk=pk).first()
        if user is None:
            raise NotFoundError('User not found')
        username = user.username
        user.delete()
        logger.info('User %s deleted by %s', username, request.user.username)
        return api_response('User deleted successfully')
