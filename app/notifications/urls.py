"""
URL configuration for notifications API.

Routes:
    /                     - List notifications (GET)
    /{id}/                - Notification detail (GET, DELETE)
    /unread-count/        - Get unread count (GET)
    /{id}/read/           - Mark single as read (POST)
    /{id}/unread/         - Mark single as unread (POST)
    /read-all/            - Mark all as read (POST)
"""

from rest_framework.routers import SimpleRouter

from notifications.views import NotificationViewSet

router = SimpleRouter()
router.register(r"", NotificationViewSet, basename="notification")

app_name = "notifications"
urlpatterns = router.urls
