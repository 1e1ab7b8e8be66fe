# accounts/services.py

import logging
from typing import Optional

from django.conf import settings
from django.contrib.auth.models import update_last_login
from django.db import IntegrityError, transaction
from django.utils.translation import gettext_lazy as _
from rest_framework.exceptions import ValidationError

from ledgerbook_core.enums import Role
from ledgerbook_core.exceptions import (
    AccountDeactivatedError, DuplicateEmailError, InvalidCredentialsError,
    MasterAdminProtectedError, UserCapReachedError,
)
from ledgerbook_core.utils import fetch_or_404
from ledgerbook_core.validators import min_password_length

from .models import User

logger = logging.getLogger(__name__)


def max_users() -> int:
    return getattr(settings, 'LEDGERBOOK_MAX_USERS', 3)


DEMO_USERS = (
    {'name': 'John Doe', 'email': 'user1@example.com'},
    {'name': 'Jane Smith', 'email': 'user2@example.com'},
    {'name': 'Bob Johnson', 'email': 'user3@example.com'},
)
DEMO_USER_PASSWORD = 'user123'


# =============================================================================
# Session
# =============================================================================

def authenticate_credentials(email: str, password: str) -> User:
    """
    Resolves an email/password pair to an active account.

    Raises:
        InvalidCredentialsError: Unknown email or wrong password.
        AccountDeactivatedError: Correct credentials for a deactivated account.
    """
    user = User.objects.filter(email=User.objects.normalize_email(email)).first()
    if user is None:
        # Run the hasher anyway so unknown emails cost the same as wrong passwords.
        User().set_password(password)
        raise InvalidCredentialsError()
    if not user.check_password(password):
        logger.info(f"Failed login for {user.email}: wrong password.")
        raise InvalidCredentialsError()
    if not user.is_active:
        logger.info(f"Failed login for {user.email}: account deactivated.")
        raise AccountDeactivatedError()
    return user


def record_login(user: User) -> None:
    update_last_login(None, user)
    logger.info(f"User {user.email} logged in.")


def change_password(user: User, current_password: str, new_password: str) -> None:
    if not user.check_password(current_password):
        raise ValidationError({'current_password': [_("Current password is incorrect")]})
    user.set_password(new_password)
    user.save(update_fields=['password', 'updated_at'])
    logger.info(f"User {user.email} changed their password.")


# =============================================================================
# Account administration
# =============================================================================

def list_accounts():
    return User.objects.select_related('created_by').order_by('-created_at')


def account_stats() -> dict:
    cap = max_users()
    users = User.objects.filter(role=Role.USER)
    total = users.count()
    return {
        'total_users': total,
        'active_users': users.filter(is_active=True).count(),
        'max_users': cap,
        'remaining_slots': max(cap - total, 0),
    }


def get_account(user_id) -> User:
    return fetch_or_404(User.objects.select_related('created_by'), _("User not found."), pk=user_id)


@transaction.atomic
def create_account(*, name: str, email: str, password: str, role: str = Role.USER,
                   created_by: Optional[User] = None) -> User:
    """
    Creates an account, enforcing email uniqueness and the user-role cap.

    Account creation serializes on the master admin rows, so two concurrent
    requests cannot both observe a free slot. The unique index on email is
    the final word on duplicates.

    Raises:
        DuplicateEmailError: Email already registered.
        UserCapReachedError: role is `user` and max_users() user accounts exist.
    """
    email = User.objects.normalize_email(email)
    list(User.objects.select_for_update().filter(role=Role.MASTER_ADMIN).values_list('pk', flat=True))

    if User.objects.filter(email=email).exists():
        raise DuplicateEmailError()

    if role == Role.USER:
        cap = max_users()
        user_count = User.objects.filter(role=Role.USER).count()
        if user_count >= cap:
            logger.warning(f"Account creation for {email} refused: user cap {cap} reached.")
            raise UserCapReachedError(
                _("Maximum number of users (%(max)s) reached. Cannot create more users.") % {'max': cap}
            )

    try:
        with transaction.atomic():
            user = User.objects.create_user(
                email=email, name=name, password=password, role=role, created_by=created_by,
            )
    except IntegrityError as exc:
        logger.warning(f"Account creation for {email} lost a race on the email index: {exc}")
        raise DuplicateEmailError() from exc

    logger.info(
        f"Account {user.pk} ({user.email}, role {user.role}) created by "
        f"{created_by.email if created_by else 'system'}."
    )
    return user


def update_account(user: User, *, name: Optional[str] = None, email: Optional[str] = None,
                   is_active: Optional[bool] = None, role: Optional[str] = None) -> dict:
    """
    Applies an admin edit to `user` and returns the fields that changed.

    Master admins cannot have their role changed or be deactivated. Roles of
    regular accounts are fixed at creation.
    """
    if user.is_master_admin:
        if role is not None and role != user.role:
            raise MasterAdminProtectedError(_("Cannot change Master Admin role"))
        if is_active is False:
            raise MasterAdminProtectedError(_("Cannot deactivate Master Admin account"))
    elif role is not None and role != user.role:
        raise ValidationError({'role': [_("Account roles cannot be changed after creation.")]})

    changes = {}
    if name is not None and name != user.name:
        user.name = name
        changes['name'] = name
    if email is not None:
        email = User.objects.normalize_email(email)
        if email != user.email:
            if User.objects.filter(email=email).exclude(pk=user.pk).exists():
                raise DuplicateEmailError()
            user.email = email
            changes['email'] = email
    if is_active is not None and is_active != user.is_active:
        user.is_active = is_active
        changes['is_active'] = is_active

    if changes:
        try:
            with transaction.atomic():
                user.save()
        except IntegrityError as exc:
            raise DuplicateEmailError() from exc
        logger.info(f"Account {user.pk} updated: {sorted(changes)}.")
    return changes


def activate_account(user: User) -> User:
    if not user.is_active:
        user.is_active = True
        user.save(update_fields=['is_active', 'updated_at'])
        logger.info(f"Account {user.pk} ({user.email}) activated.")
    return user


def deactivate_account(user: User) -> User:
    if user.is_master_admin:
        raise MasterAdminProtectedError(_("Cannot deactivate Master Admin account"))
    if user.is_active:
        user.is_active = False
        user.save(update_fields=['is_active', 'updated_at'])
        logger.info(f"Account {user.pk} ({user.email}) deactivated.")
    return user


def delete_account(user: User) -> dict:
    """
    Hard-deletes a regular account and returns an identity snapshot for the audit trail.
    """
    if user.is_master_admin:
        raise MasterAdminProtectedError(_("Cannot delete Master Admin account"))
    snapshot = {'id': str(user.pk), 'name': user.name, 'email': user.email}
    user.delete()
    logger.info(f"Account {snapshot['id']} ({snapshot['email']}) deleted.")
    return snapshot


def reset_password(user: User, new_password: str) -> None:
    minimum = min_password_length()
    if not new_password or len(new_password) < minimum:
        raise ValidationError({'new_password': [
            _("New password must be at least %(min)s characters") % {'min': minimum}
        ]})
    user.set_password(new_password)
    user.save(update_fields=['password', 'updated_at'])
    logger.info(f"Password reset for account {user.pk} ({user.email}).")


# =============================================================================
# Seeding
# =============================================================================

def ensure_master_admin(*, email: str, password: str, name: str):
    """
    Creates the initial master admin unless one already exists.

    Returns:
        (User, bool): The master admin and whether it was created now.
    """
    existing = User.objects.filter(role=Role.MASTER_ADMIN).order_by('created_at').first()
    if existing is not None:
        return existing, False
    user = User.objects.create_superuser(email=email, name=name, password=password)
    logger.info(f"Seeded master admin {user.email}.")
    return user, True


def seed_demo_users(created_by: Optional[User] = None) -> list:
    """
    Creates the demo accounts that do not exist yet, stopping at the user cap.
    """
    created = []
    for demo in DEMO_USERS:
        if User.objects.filter(email=demo['email']).exists():
            continue
        try:
            created.append(create_account(
                name=demo['name'], email=demo['email'], password=DEMO_USER_PASSWORD,
                role=Role.USER, created_by=created_by,
            ))
        except UserCapReachedError:
            logger.warning(f"Demo user {demo['email']} skipped: user cap reached.")
            break
    return created
