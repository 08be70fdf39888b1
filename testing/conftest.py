"""
Pytest configuration and shared fixtures.

Django itself is set up by pytest-django (DJANGO_SETTINGS_MODULE comes from
pyproject.toml). The fixtures here create players through the credential
store and hand out API clients carrying real bearer tokens, so every
authenticated test goes through the same token gate as production traffic.
"""

import os
import sys
from pathlib import Path

import pytest
from django.apps import apps
from rest_framework.test import APIClient

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.append(str(PROJECT_ROOT))

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'draco.settings')


@pytest.fixture(autouse=True)
def fast_password_hashing(settings):
    """PBKDF2 is deliberately slow; tests only need a working hasher."""
    settings.PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']


@pytest.fixture
def context():
    """The application context built at startup."""
    return apps.get_app_config('api').context


@pytest.fixture
def client():
    """A standard, unauthenticated API client."""
    return APIClient()


@pytest.fixture
def alice(db, context):
    return context.players.register("alice", "pw1", "Alice")


@pytest.fixture
def bob(db, context):
    return context.players.register("bob", "pw2", "Bob")


@pytest.fixture
def client_for(context):
    """Returns a factory building an API client authenticated as the given player."""

    def make(player):
        authed = APIClient()
        authed.credentials(HTTP_AUTHORIZATION=f"Bearer {context.tokens.issue(player.username)}")
        return authed

    return make


@pytest.fixture
def alice_client(client_for, alice):
    return client_for(alice)


@pytest.fixture
def bob_client(client_for, bob):
    return client_for(bob)


@pytest.fixture
def wizard(context, alice):
    """A character owned by alice."""
    return context.characters.insert(
        alice.username,
        name="Elminster",
        race="Human",
        character_class="Wizard",
        level=5,
    )


@pytest.fixture
def fighter(context, bob):
    """A character owned by bob."""
    return context.characters.insert(
        bob.username,
        name="Bruenor",
        race="Dwarf",
        character_class="Fighter",
        level=3,
    )
