"""
URL configuration for the draco project.

The API routes are mounted at the root, as the front-end expects; the
OpenAPI schema and its Swagger UI sit beside them.
"""

from django.urls import path, include
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

urlpatterns = [
    path('', include('api.urls')),
    path('schema', SpectacularAPIView.as_view(), name='schema'),
    path('schema/swagger-ui',
         SpectacularSwaggerView.as_view(url_name='schema'),
         name='swagger-ui'),
]
