"""
Application configuration for the Draco API.

Registers the app with Django and builds the application context once the
model registry is ready.
"""

from django.apps import AppConfig


class ApiConfig(AppConfig):
    name = 'api'
    verbose_name = "Draco API"
    default_auto_field = 'django.db.models.BigAutoField'

    context = None

    def ready(self):
        from .context import build_context

        self.context = build_context()
