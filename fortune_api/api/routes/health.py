"""
Health check endpoint for the fortune service.
"""

from typing import Dict, Any

from fastapi import APIRouter, Depends, status

from fortune_api.api.dependencies import get_fortune_store
from fortune_api.storage import FortuneStore

router = APIRouter()


@router.get(
    "/health",
    status_code=status.HTTP_200_OK,
    summary="Basic health check",
    description="""
    Quick health check returning storage mode and collection size.
    Redis is not contacted.

    **Example Response:**
    ```json
    {
      "status": "healthy",
      "storage": "redis",
      "fortunes": 4
    }
    ```
    """,
)
def health(store: FortuneStore = Depends(get_fortune_store)) -> Dict[str, Any]:
    """Returns basic system health status."""
    return {
        "status": "healthy",
        "storage": "redis" if store.uses_secondary else "memory",
        "fortunes": store.count(),
    }
