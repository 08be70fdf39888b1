"""
Manual smoke check against a running server (python manage.py runserver).

Registers a throwaway player, logs in and reads the player record back with
the issued bearer token. Not collected as a test: run it directly.
"""

import json
import os
import time
import uuid

import requests

BASE_URL = os.environ.get("DRACO_BASE_URL", "http://localhost:8000")

TEST_USERNAME = f"smoke_{uuid.uuid4().hex[:8]}"
TEST_PASSWORD = "MySecurePassword123"


def exponential_backoff(func, max_retries=5, delay=1.0):
    """
    Attempts to call a function (network request) multiple times with increasing
    delay to handle temporary connection issues.

    Args:
        func (callable): The function to execute (e.g., requests.post).
        max_retries (int): Maximum number of attempts.
        delay (float): Initial delay in seconds.
    """
    for i in range(max_retries):
        try:
            return func()
        except requests.exceptions.ConnectionError:
            if i == max_retries - 1:
                raise
            wait_time = delay * (2 ** i)
            print(f"Connection failed. Retrying in {wait_time:.2f}s...")
            time.sleep(wait_time)


def call(method, path, token=None, payload=None):
    headers = {'Content-Type': 'application/json'}
    if token:
        headers['Authorization'] = f"Bearer {token}"

    def make_request():
        return requests.request(
            method,
            f"{BASE_URL}{path}",
            headers=headers,
            data=json.dumps(payload) if payload is not None else None,
            timeout=10,
        )

    response = exponential_backoff(make_request)
    print(f"{method} {path} -> {response.status_code}")
    try:
        body = response.json()
    except json.JSONDecodeError:
        print("Response Error: Could not decode JSON. Raw response:")
        print(response.text)
        return response.status_code, None
    print(json.dumps(body, indent=4))
    return response.status_code, body


def run_smoke_check():
    print("--- Draco API Smoke Check ---")
    print(f"Target: {BASE_URL}")
    print(f"Player: {TEST_USERNAME}")

    try:
        status_code, _ = call("POST", "/register", payload={
            "username": TEST_USERNAME,
            "password": TEST_PASSWORD,
            "name": "Smoke Test",
        })
    except requests.exceptions.ConnectionError as e:
        print("\n--- FATAL ERROR ---")
        print(f"Could not connect to the API. Is your Django server running at {BASE_URL}?")
        print(f"Details: {e}")
        return False

    if status_code != 201:
        print("\n❌ FAILED: registration was refused.")
        return False

    status_code, body = call("POST", "/login", payload={
        "username": TEST_USERNAME,
        "password": TEST_PASSWORD,
    })
    token = (body or {}).get('data', {}).get('token') if status_code == 200 else None
    if not token:
        print("\n❌ FAILED: login did not return a token.")
        return False

    status_code, body = call("GET", f"/auth/player/{TEST_USERNAME}", token=token)
    if status_code != 200 or body['data']['username'] != TEST_USERNAME:
        print("\n❌ FAILED: could not read the player record back.")
        return False

    call("DELETE", "/auth/player/me", token=token)
    print("\n✅ SUCCESS: register, login and token-guarded retrieval all work.")
    return True


if __name__ == "__main__":
    raise SystemExit(0 if run_smoke_check() else 1)
