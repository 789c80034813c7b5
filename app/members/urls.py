"""
URL configuration for members app.

URL structure:
    /api/v1/members/register/         - Registration (POST)
    /api/v1/members/login/            - Obtain JWT pair (POST)
    /api/v1/members/token/refresh/    - Refresh access token (POST)
    /api/v1/members/me/               - Current member (GET)
"""

from django.urls import path
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from members.views import MeView, RegisterView

app_name = "members"

urlpatterns = [
    path("register/", RegisterView.as_view(), name="register"),
    path("login/", TokenObtainPairView.as_view(), name="login"),
    path("token/refresh/", TokenRefreshView.as_view(), name="token-refresh"),
    path("me/", MeView.as_view(), name="me"),
]
