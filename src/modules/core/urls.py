from django.urls import path

from modules.core.views import CurrentUserView, health_check

urlpatterns = [
    path("health", health_check, name="health_check"),
    path("api/auth/user", CurrentUserView.as_view(), name="current_user"),
]
