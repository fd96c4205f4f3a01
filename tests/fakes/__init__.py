"""Shared sample documents for tests."""

from __future__ import annotations

API_RESPONSE = {
    "success": True,
    "status": 200,
    "data": {
        "users": [
            {
                "id": 1,
                "name": "John Doe",
                "email": "john@example.com",
                "role": "admin",
                "metadata": {
                    "lastLogin": "2024-02-24T10:00:00Z",
                    "loginCount": 42,
                    "preferences": {"theme": "dark", "notifications": True},
                },
                "posts": [
                    {
                        "id": 1,
                        "title": "Hello World",
                        "tags": ["tech", "blog"],
                        "comments": [{"id": 1, "user": "jane", "text": "Great post!", "likes": 5}],
                    }
                ],
            }
        ],
        "pagination": {"total": 100, "page": 1, "limit": 10, "hasMore": True},
    },
    "meta": {
        "requestId": "req-123",
        "processingTime": 0.123,
        "cache": {"hit": False, "ttl": 3600},
    },
}

CONFIG_FILE = {
    "app": {"name": "MyApp", "version": "1.0.0", "environment": "production", "debug": False},
    "server": {
        "host": "localhost",
        "port": 3000,
        "cors": {
            "enabled": True,
            "origins": ["http://localhost:3000"],
            "methods": ["GET", "POST"],
            "headers": ["Content-Type", "Authorization"],
        },
    },
    "database": {
        "primary": {"type": "postgres", "host": "localhost", "port": 5432, "pool": {"min": 5, "max": 20}},
        "replica": {"enabled": False, "hosts": []},
        "redis": {"enabled": True, "host": "localhost", "port": 6379, "password": None},
    },
    "logging": {
        "level": "info",
        "outputs": ["console", "file"],
        "files": {"error": "/var/log/myapp/error.log", "access": "/var/log/myapp/access.log"},
    },
}

USERS = [
    {"id": 1, "name": "Alice", "status": "active", "tags": ["admin"]},
    {"id": 2, "name": "Bob", "status": "inactive", "tags": []},
    {"id": 3, "name": None, "status": "pending"},
]


def deep_nest(levels: int) -> dict:
    """``{"next": {"next": ... {"value": 0}}}`` nested ``levels`` times."""
    node: dict = {"value": 0}
    for _ in range(levels):
        node = {"next": node}
    return node
