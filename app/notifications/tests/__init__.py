"""
Tests for notifications app.

- test_services.py: NotificationStore
- test_dispatcher.py: recipient rules and rendering per event
- test_views.py: read API
"""
