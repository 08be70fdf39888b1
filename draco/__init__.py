"""
Root package for the Draco Django project.

Holds the settings, the root URLconf and the WSGI entry point; the API
itself lives in the `api` app.
"""
