"""
WSGI entry point.

Serves the REST API only; WebSocket messaging needs the ASGI application
in config.asgi.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

application = get_wsgi_application()
