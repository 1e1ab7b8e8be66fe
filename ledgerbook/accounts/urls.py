from django.urls import path

from accounts.views import (
    UserChangePasswordView, UserLoginView, UserLogoutView, UserProfileView, UserRegistrationView,
)

urlpatterns = [
    path('login', UserLoginView.as_view(), name='login'),
    path('register', UserRegistrationView.as_view(), name='register'),
    path('me', UserProfileView.as_view(), name='me'),
    path('logout', UserLogoutView.as_view(), name='logout'),
    path('change-password', UserChangePasswordView.as_view(), name='change-password'),
]
