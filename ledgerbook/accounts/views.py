import logging

from django.utils.translation import gettext_lazy as _
from drf_spectacular.utils import extend_schema, extend_schema_view, inline_serializer
from rest_framework import serializers, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny
from rest_framework.views import APIView

from ledgerbook_core.enums import AuditAction
from ledgerbook_core.mixins import AuditTrailMixin
from ledgerbook_core.responses import success_response

from accounts import services as account_service
from accounts.authentication import BearerTokenAuthentication
from accounts.permissions import IsAccountHolder, IsMasterAdmin, IsNotMasterAdminTarget
from accounts.serializers import (
    AccountStatsSerializer, AdminPasswordResetSerializer, AdminUserUpdateSerializer,
    UserChangePasswordSerializer, UserLoginSerializer, UserRegistrationSerializer, UserSerializer,
)
from accounts.tokens import issue_token

logger = logging.getLogger(__name__)

LoginResponseSerializer = inline_serializer(
    name='LoginResponse',
    fields={'token': serializers.CharField(), 'user': UserSerializer()},
)


# =============================================================================
# Session endpoints (/api/auth/...)
# =============================================================================

class UserLoginView(AuditTrailMixin, APIView):
    """
    API endpoint for user login. Returns a 24h bearer token and the account.
    """
    authentication_classes = []
    permission_classes = [AllowAny]

    def get_authenticate_header(self, request):
        # No authenticators here, but failed logins must still answer 401.
        return BearerTokenAuthentication().authenticate_header(request)

    @extend_schema(request=UserLoginSerializer, responses={200: LoginResponseSerializer})
    def post(self, request, format=None):
        serializer = UserLoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = account_service.authenticate_credentials(
            serializer.validated_data['email'], serializer.validated_data['password'],
        )
        account_service.record_login(user)
        token = issue_token(user)
        self.audit(AuditAction.LOGIN, actor=user, details={'email': user.email})
        return success_response(
            data={'token': token, 'user': UserSerializer(user).data},
            message=_('Login successful'),
        )


class UserRegistrationView(AuditTrailMixin, APIView):
    """
    API endpoint for creating accounts. Master admin only.
    """
    permission_classes = [IsMasterAdmin]

    @extend_schema(request=UserRegistrationSerializer, responses={201: UserSerializer})
    def post(self, request, format=None):
        serializer = UserRegistrationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = account_service.create_account(created_by=request.user, **serializer.validated_data)
        self.audit(
            AuditAction.CREATE_USER, target=user,
            details={'new_user': {'name': user.name, 'email': user.email, 'role': user.role}},
        )
        return success_response(
            data={'user': UserSerializer(user).data},
            message=_('User created successfully'),
            status_code=status.HTTP_201_CREATED,
        )


class UserProfileView(APIView):
    """
    API endpoint to retrieve the authenticated user's profile.
    """
    permission_classes = [IsAccountHolder]

    @extend_schema(responses=UserSerializer)
    def get(self, request, format=None):
        return success_response(data={'user': UserSerializer(request.user).data})


class UserLogoutView(AuditTrailMixin, APIView):
    """
    Records the logout. The token itself stays valid until expiry; clients discard it.
    """
    permission_classes = [IsAccountHolder]

    @extend_schema(request=None, responses={200: None})
    def post(self, request, format=None):
        self.audit(AuditAction.LOGOUT)
        return success_response(message=_('Logged out successfully'))


class UserChangePasswordView(AuditTrailMixin, APIView):
    """
    API endpoint for allowing an authenticated user to change their password.
    """
    permission_classes = [IsAccountHolder]

    @extend_schema(request=UserChangePasswordSerializer, responses={200: None, 400: None})
    def put(self, request, format=None):
        serializer = UserChangePasswordSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        account_service.change_password(
            request.user,
            serializer.validated_data['current_password'],
            serializer.validated_data['new_password'],
        )
        self.audit(AuditAction.CHANGE_PASSWORD, target=request.user)
        return success_response(message=_('Password changed successfully'))


# =============================================================================
# Account administration (/api/admin/users/...)
# =============================================================================

@extend_schema_view(
    list=extend_schema(
        summary="List accounts with user-cap statistics",
        responses={200: inline_serializer(
            name='AccountListResponse',
            fields={'users': UserSerializer(many=True), 'stats': AccountStatsSerializer()},
        )},
    ),
    retrieve=extend_schema(summary="Retrieve an account", responses={200: UserSerializer}),
    update=extend_schema(summary="Edit name, email or active flag", request=AdminUserUpdateSerializer,
                         responses={200: UserSerializer}),
    destroy=extend_schema(summary="Delete a regular account", responses={200: None}),
    activate=extend_schema(summary="Activate an account", request=None, responses={200: UserSerializer}),
    deactivate=extend_schema(summary="Deactivate a regular account", request=None, responses={200: UserSerializer}),
    reset_password=extend_schema(summary="Set a new password for an account",
                                 request=AdminPasswordResetSerializer, responses={200: None}),
)
class UserAdminViewSet(AuditTrailMixin, viewsets.GenericViewSet):
    serializer_class = UserSerializer
    permission_classes = [IsMasterAdmin]

    def get_queryset(self):
        return account_service.list_accounts()

    def get_permissions(self):
        if self.action in ('destroy', 'deactivate'):
            return [IsMasterAdmin(), IsNotMasterAdminTarget()]
        return super().get_permissions()

    def get_object(self):
        user = account_service.get_account(self.kwargs['pk'])
        self.check_object_permissions(self.request, user)
        return user

    def list(self, request):
        users = self.get_serializer(self.get_queryset(), many=True).data
        return success_response(
            data={'users': users, 'stats': account_service.account_stats()},
            count=len(users),
        )

    def retrieve(self, request, pk=None):
        return success_response(data={'user': self.get_serializer(self.get_object()).data})

    def update(self, request, pk=None):
        user = self.get_object()
        serializer = AdminUserUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        changes = account_service.update_account(user, **serializer.validated_data)
        self.audit(AuditAction.UPDATE_USER, target=user, details={'changes': changes})
        return success_response(
            data={'user': self.get_serializer(user).data},
            message=_('User updated successfully'),
        )

    def destroy(self, request, pk=None):
        user = self.get_object()
        log_prefix = self.log_prefix('Destroy')
        snapshot = account_service.delete_account(user)
        logger.info(f"{log_prefix} Deleted account {snapshot['email']}.")
        self.audit(
            AuditAction.DELETE_USER, target=user, target_id=snapshot['id'],
            details={'deleted_user': {'name': snapshot['name'], 'email': snapshot['email']}},
        )
        return success_response(message=_('User deleted successfully'))

    @action(detail=True, methods=['put'])
    def activate(self, request, pk=None):
        user = account_service.activate_account(self.get_object())
        self.audit(AuditAction.ACTIVATE_USER, target=user, details={'email': user.email})
        return success_response(
            data={'user': self.get_serializer(user).data},
            message=_('User activated successfully'),
        )

    @action(detail=True, methods=['put'])
    def deactivate(self, request, pk=None):
        user = account_service.deactivate_account(self.get_object())
        self.audit(AuditAction.DEACTIVATE_USER, target=user, details={'email': user.email})
        return success_response(
            data={'user': self.get_serializer(user).data},
            message=_('User deactivated successfully'),
        )

    @action(detail=True, methods=['put'], url_path='reset-password')
    def reset_password(self, request, pk=None):
        user = self.get_object()
        serializer = AdminPasswordResetSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        account_service.reset_password(user, serializer.validated_data['new_password'])
        self.audit(AuditAction.RESET_PASSWORD, target=user, details={'email': user.email})
        return success_response(message=_('Password reset successfully'))
