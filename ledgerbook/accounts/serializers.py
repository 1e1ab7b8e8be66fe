from django.utils.translation import gettext_lazy as _
from rest_framework import serializers

from ledgerbook_core.enums import Role
from ledgerbook_core.validators import min_password_length

from accounts.models import User

NAME_MAX_LENGTH = 100


def check_password_length(value, message):
    minimum = min_password_length()
    if len(value) < minimum:
        raise serializers.ValidationError(message % {'min': minimum})
    return value


class UserBriefSerializer(serializers.ModelSerializer):
    """
    Minimal account reference embedded in ledgers, transactions and audit entries.
    """
    class Meta:
        model = User
        fields = ['id', 'name', 'email', 'role']
        read_only_fields = fields


class UserSerializer(serializers.ModelSerializer):
    """
    Account representation returned by the API. Never includes the password hash.
    """
    created_by = UserBriefSerializer(read_only=True)

    class Meta:
        model = User
        fields = ['id', 'name', 'email', 'role', 'is_active', 'last_login', 'created_by', 'created_at', 'updated_at']
        read_only_fields = fields


class UserRegistrationSerializer(serializers.Serializer):
    """
    Payload for creating an account (master admin only).
    """
    name = serializers.CharField(
        max_length=NAME_MAX_LENGTH,
        error_messages={'max_length': _('Name cannot exceed 100 characters'), 'blank': _('Name is required')},
    )
    email = serializers.EmailField(
        max_length=255,
        error_messages={'invalid': _('Please provide a valid email')},
    )
    password = serializers.CharField(
        write_only=True, trim_whitespace=False, style={'input_type': 'password'},
    )
    role = serializers.ChoiceField(choices=Role.choices, default=Role.USER)

    def validate_password(self, value):
        return check_password_length(value, _('Password must be at least %(min)s characters'))


class UserLoginSerializer(serializers.Serializer):
    email = serializers.EmailField(max_length=255, error_messages={'invalid': _('Please provide a valid email')})
    password = serializers.CharField(
        trim_whitespace=False, style={'input_type': 'password'},
        error_messages={'blank': _('Password is required')},
    )


class UserChangePasswordSerializer(serializers.Serializer):
    current_password = serializers.CharField(
        write_only=True, trim_whitespace=False, style={'input_type': 'password'},
        error_messages={'blank': _('Current password is required')},
    )
    new_password = serializers.CharField(
        write_only=True, trim_whitespace=False, style={'input_type': 'password'},
    )

    def validate_new_password(self, value):
        return check_password_length(value, _('New password must be at least %(min)s characters'))


class AdminUserUpdateSerializer(serializers.Serializer):
    """
    Partial edit of an account by the master admin. Every field is optional.
    """
    name = serializers.CharField(
        max_length=NAME_MAX_LENGTH, required=False,
        error_messages={'max_length': _('Name cannot exceed 100 characters')},
    )
    email = serializers.EmailField(
        max_length=255, required=False,
        error_messages={'invalid': _('Please provide a valid email')},
    )
    is_active = serializers.BooleanField(required=False)
    role = serializers.ChoiceField(choices=Role.choices, required=False)


class AdminPasswordResetSerializer(serializers.Serializer):
    new_password = serializers.CharField(
        write_only=True, trim_whitespace=False, allow_blank=True, default='',
        style={'input_type': 'password'},
    )

    def validate_new_password(self, value):
        return check_password_length(value, _('New password must be at least %(min)s characters'))


class AccountStatsSerializer(serializers.Serializer):
    total_users = serializers.IntegerField()
    active_users = serializers.IntegerField()
    max_users = serializers.IntegerField()
    remaining_slots = serializers.IntegerField()
