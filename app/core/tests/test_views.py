"""
Tests for infrastructure endpoints.
"""

from django.db import DatabaseError
from django.urls import reverse


class TestHealthCheck:
    def test_healthy(self, client, db):
        response = client.get(reverse("health_check"))

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "database": "connected", "cache": "connected"}

    def test_database_down(self, client, db, mocker):
        mocker.patch("core.views.connection.cursor", side_effect=DatabaseError("gone"))

        response = client.get(reverse("health_check"))

        assert response.status_code == 503
        assert response.json()["database"] == "disconnected"
