"""URL Configuration for authentication API."""

from django.urls import path
from rest_framework_simplejwt.views import (
    TokenRefreshView,
    TokenVerifyView,
)

from .views import (
    EmailTokenObtainPairView,
    LogoutView,
    RegistrationView,
    UserProfileView,
)

urlpatterns = [
    # JWT endpoints
    path('token/', EmailTokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),
    path('token/verify/', TokenVerifyView.as_view(), name='token_verify'),
    path('logout/', LogoutView.as_view(), name='logout'),

    path('register/', RegistrationView.as_view(), name='register'),

    # User Profile
    path('me/', UserProfileView.as_view(), name='user_profile'),
]
