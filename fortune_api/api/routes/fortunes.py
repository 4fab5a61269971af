"""
Fortune endpoints.

Routing, in priority order:
    GET  /fortunes, /fortunes/      -> list every fortune
    GET  /fortunes/{digits}         -> one fortune by id
    GET  /fortunes/random           -> a random fortune, served through the get path
    POST /fortunes, /fortunes/      -> create or overwrite a fortune

Everything else answers 404 'not found' (see fortune_api.exceptions).
"""

import json
import logging
import re
from typing import Any

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import Response
from starlette.concurrency import run_in_threadpool

from fortune_api.api.dependencies import get_fortune_store
from fortune_api.exceptions import (
    NOT_FOUND_BODY,
    FortuneNotFound,
    SerializationFailure,
)
from fortune_api.models import Fortune, decode_fortune
from fortune_api.settings import settings
from fortune_api.storage import FortuneStore

router = APIRouter()
logger = logging.getLogger(__name__)

FORTUNE_ID_RE = re.compile(r"^\d+$")

# Id used by the random endpoint when the store is empty; never matches FORTUNE_ID_RE.
RANDOM_SENTINEL_ID = "zero"


def json_response(payload: Any) -> Response:
    """Encode payload as a 200 JSON response.

    Raises:
        SerializationFailure: payload cannot be encoded
    """
    try:
        body = json.dumps(payload, ensure_ascii=False, separators=(",", ":")).encode(
            "utf-8"
        )
    except (TypeError, ValueError) as e:
        raise SerializationFailure(f"Could not encode response body: {e}")
    return Response(content=body, status_code=status.HTTP_200_OK, media_type="application/json")


def serve_fortune(store: FortuneStore, fortune_id: str) -> Response:
    if not FORTUNE_ID_RE.match(fortune_id):
        raise FortuneNotFound(f"no route for fortune id {fortune_id!r}", body=NOT_FOUND_BODY)

    fortune = store.get(fortune_id)
    return json_response(fortune.to_dict())


@router.get(
    "/fortunes",
    summary="List all fortunes",
    description="Returns every stored fortune as a JSON array, in no particular order.",
)
@router.get("/fortunes/", include_in_schema=False)
def list_fortunes(store: FortuneStore = Depends(get_fortune_store)):
    fortunes = store.list()
    return json_response([f.to_dict() for f in fortunes])


@router.get(
    "/fortunes/random",
    summary="Get a random fortune",
    description="""
    Picks a fortune uniformly at random and serves it exactly like
    `GET /fortunes/{id}`. An empty store answers 404.
    """,
)
def random_fortune(store: FortuneStore = Depends(get_fortune_store)):
    try:
        fortune_id = store.random().id
    except FortuneNotFound:
        fortune_id = RANDOM_SENTINEL_ID
    return serve_fortune(store, fortune_id)


@router.get(
    "/fortunes/{fortune_id}",
    summary="Get a fortune by id",
    description="""
    Looks the fortune up by its numeric id. When Redis is available the
    stored value is refreshed from it first.
    """,
    responses={404: {"description": "Fortune not found"}},
)
def get_fortune(fortune_id: str, store: FortuneStore = Depends(get_fortune_store)):
    return serve_fortune(store, fortune_id)


@router.post(
    "/fortunes",
    summary="Create or overwrite a fortune",
    description="""
    Body: a JSON fortune object, e.g. `{"id": "5", "message": "..."}`.
    An existing fortune with the same id is replaced. A body that is not
    a JSON fortune object is rejected with FORTUNE_DECODE_ERROR_STATUS
    (500 by default).
    """,
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": Fortune.model_json_schema()}},
        }
    },
)
@router.post("/fortunes/", include_in_schema=False)
async def create_fortune(
    request: Request, store: FortuneStore = Depends(get_fortune_store)
):
    raw = await request.body()
    fortune = decode_fortune(raw, error_status=settings.decode_error_status)

    # Redis writes block, keep them off the event loop
    created = await run_in_threadpool(store.create, fortune)
    logger.info(f"Stored fortune {created.id}")
    return json_response(created.to_dict())
