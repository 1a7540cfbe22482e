"""URL Configuration for onboarding and partner invites."""

from django.urls import path

from .views import (
    InviteAcceptView,
    InviteDeclineView,
    InviteDetailView,
    OnboardingCompleteView,
)

urlpatterns = [
    path('onboarding/complete/', OnboardingCompleteView.as_view(), name='onboarding-complete'),
    path('invites/<str:token>/', InviteDetailView.as_view(), name='invite-detail'),
    path('invites/<str:token>/accept/', InviteAcceptView.as_view(), name='invite-accept'),
    path('invites/<str:token>/decline/', InviteDeclineView.as_view(), name='invite-decline'),
]
