"""
URL configuration for authentication app.
"""

from django.urls import path
from rest_framework_simplejwt.views import TokenRefreshView

from authentication.views import LoginView, LogoutView, RegisterView, SessionCheckView

app_name = "authentication"

urlpatterns = [
    path("register/", RegisterView.as_view(), name="register"),
    path("login/", LoginView.as_view(), name="login"),
    path("logout/", LogoutView.as_view(), name="logout"),
    path("check/", SessionCheckView.as_view(), name="check"),
    path("token/refresh/", TokenRefreshView.as_view(), name="token_refresh"),
]
