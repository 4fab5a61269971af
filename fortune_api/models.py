"""
Pydantic models for the fortune API.

Defines the fortune record and the decoding of create request bodies.
"""

import json
import re
from typing import Any, Dict

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictStr,
    ValidationError,
    field_validator,
)

from fortune_api.exceptions import DecodeFailure

# Unpaired UTF-16 surrogates survive json.loads but have no UTF-8 form.
LONE_SURROGATE_RE = re.compile("[\ud800-\udfff]")


class Fortune(BaseModel):
    """A fortune record: an opaque identifier and its message."""

    # Instances are shared between snapshots and threads, so keep them immutable.
    # Unknown fields in request bodies are ignored.
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: StrictStr = Field(
        default="",
        description="Opaque identifier; last write wins on collision.",
        json_schema_extra={"example": "1"},
    )
    message: StrictStr = Field(
        default="",
        description="Fortune text.",
        json_schema_extra={"example": "It ain't over till it's EOF."},
    )

    @field_validator("id", "message", mode="before")
    @classmethod
    def replace_lone_surrogates(cls, v: Any) -> Any:
        """Swap unencodable surrogates for U+FFFD so every stored string is valid UTF-8."""
        if isinstance(v, str):
            return LONE_SURROGATE_RE.sub("\ufffd", v)
        return v

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "message": self.message}


DEFAULT_FORTUNES = [
    Fortune(id="1", message="A new voyage will fill your life with untold memories."),
    Fortune(
        id="2",
        message="The measure of time to your next goal is the measure of your discipline.",
    ),
    Fortune(id="3", message="The only way to do well is to do better each day."),
    Fortune(id="4", message="It ain't over till it's EOF."),
]


def decode_fortune(raw: bytes, error_status: int = 500) -> Fortune:
    """Decode a create request body into a Fortune.

    Missing fields default to the empty string and unknown fields are
    ignored. Anything else that is not a JSON object with string fields
    is rejected.

    Args:
        raw: Request body bytes
        error_status: HTTP status to attach to the DecodeFailure

    Returns:
        Decoded Fortune

    Raises:
        DecodeFailure: Body is not valid JSON or not a fortune object
    """
    try:
        data = json.loads(raw)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise DecodeFailure(f"Invalid JSON body: {e}", status_code=error_status)

    if not isinstance(data, dict):
        raise DecodeFailure(
            f"Expected a JSON object, got {type(data).__name__}",
            status_code=error_status,
        )

    try:
        return Fortune.model_validate(data)
    except ValidationError as e:
        raise DecodeFailure(
            f"Invalid fortune: {e.error_count()} field error(s)",
            status_code=error_status,
        )
