"""
The API package for the Draco application.

This package contains all Django REST Framework components, including
models, views, serializers, the bearer token gate and the repositories
that sit between the views and the database.
"""
