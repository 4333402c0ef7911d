"""
Request-scoped dependencies.
"""

from fastapi import Request

from catalog.store import EntityStore


def get_store(request: Request) -> EntityStore:
    """Return the store owned by the running application."""
    return request.app.state.store
