from django import forms
from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.contrib.auth.forms import UserCreationForm
from django.utils.translation import gettext_lazy as _

from accounts import services as account_service
from accounts.models import User


class UserAddForm(UserCreationForm):
    """
    Admin add form for regular accounts. Checks the email and the user cap up
    front so the admin shows form errors instead of failing on save.
    """
    class Meta(UserCreationForm.Meta):
        model = User
        fields = ('email', 'name')

    def clean_email(self):
        email = User.objects.normalize_email(self.cleaned_data.get('email'))
        if User.objects.filter(email=email).exists():
            raise forms.ValidationError(_('User with this email already exists'))
        return email

    def clean(self):
        cleaned_data = super().clean()
        if account_service.account_stats()['remaining_slots'] == 0:
            raise forms.ValidationError(
                _('Maximum number of users (%(max)s) reached. Cannot create more users.')
                % {'max': account_service.max_users()}
            )
        return cleaned_data


class UserModelAdmin(BaseUserAdmin):
    add_form = UserAddForm
    list_display = ('email', 'name', 'role', 'is_active', 'is_staff', 'last_login', 'created_at')
    list_filter = ('role', 'is_active', 'is_staff')

    fieldsets = (
        ('User Credentials', {'fields': ('email', 'password')}),
        ('Personal Info', {'fields': ('name',)}),
        ('Access', {'fields': ('role', 'is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions')}),
        ('Important Dates', {'fields': ('last_login', 'created_at', 'created_by')}),
    )
    readonly_fields = ('role', 'last_login', 'created_at', 'created_by')

    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'name', 'password1', 'password2'),
        }),
    )

    search_fields = ('email', 'name')
    ordering = ('-created_at',)
    filter_horizontal = ('groups', 'user_permissions',)

    def get_readonly_fields(self, request, obj=None):
        readonly = super().get_readonly_fields(request, obj)
        if obj is not None and obj.is_master_admin:
            return tuple(readonly) + ('is_active',)
        return readonly

    def get_actions(self, request):
        # Bulk delete would bypass the per-object master admin check.
        actions = super().get_actions(request)
        actions.pop('delete_selected', None)
        return actions

    def has_delete_permission(self, request, obj=None):
        # Master admins are never deletable.
        if obj is not None and obj.is_master_admin:
            return False
        return super().has_delete_permission(request, obj)

    def save_model(self, request, obj, form, change):
        if change:
            super().save_model(request, obj, form, change)
            return
        user = account_service.create_account(
            name=form.cleaned_data['name'],
            email=form.cleaned_data['email'],
            password=form.cleaned_data['password1'],
            created_by=request.user,
        )
        obj.pk = user.pk
        obj.refresh_from_db()


admin.site.register(User, UserModelAdmin)
