"""
URL configuration for the messaging API.

Routes:
    /                 - Message history (GET)
    /{id}/            - Message detail (GET)
    /unread-count/    - Unread count (GET)
    /{id}/read/       - Mark as read (POST)

The WebSocket route lives in messaging.routing.
"""

from rest_framework.routers import SimpleRouter

from messaging.views import MessageViewSet

router = SimpleRouter()
router.register(r"", MessageViewSet, basename="message")

app_name = "messaging"
urlpatterns = router.urls
