"""
API dependencies for the fortune service.
"""

from fastapi import Request

from fortune_api.storage import FortuneStore


def get_fortune_store(request: Request) -> FortuneStore:
    """Get the fortune store owned by the running application.

    The store is built in the application lifespan (or injected through
    create_app) and kept on app.state.

    Returns:
        FortuneStore instance
    """
    return request.app.state.fortune_store


__all__ = ["get_fortune_store"]
