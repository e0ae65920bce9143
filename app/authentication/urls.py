"""
URL configuration for authentication app.

URL structure:
    /api/v1/auth/register/          - Create account (returns token pair)
    /api/v1/auth/token/             - Obtain access/refresh token pair
    /api/v1/auth/token/refresh/     - Refresh access token
    /api/v1/auth/me/                - Current user
"""

from django.urls import path
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from authentication.views import MeView, RegisterView

app_name = "authentication"

urlpatterns = [
    path("register/", RegisterView.as_view(), name="register"),
    path("token/", TokenObtainPairView.as_view(), name="token-obtain"),
    path("token/refresh/", TokenRefreshView.as_view(), name="token-refresh"),
    path("me/", MeView.as_view(), name="me"),
]
