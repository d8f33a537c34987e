"""
Loop API — Request Parameter Validation
=========================================

What:  Helpers that parse request bodies and query strings into typed
       values, raising BadRequestError (400) on bad input.
Why:   Handlers parse input themselves, after authentication has passed,
       instead of letting FastAPI reject it with a 422 before the
       authorization dependencies run.
"""

import json
from typing import Any, Dict, Optional, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from starlette.requests import Request

from loop_api.exceptions import BadRequestError

ModelT = TypeVar("ModelT", bound=BaseModel)


async def read_json_body(request: Request) -> Dict[str, Any]:
    """
    Read the request body as a JSON object.

    An empty body reads as {}. Anything that is not a JSON object is a
    BadRequestError.
    """
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        data = json.loads(raw)
    except ValueError:
        raise BadRequestError(message="Request body must be valid JSON")
    if not isinstance(data, dict):
        raise BadRequestError(message="Request body must be a JSON object")
    return data


def parse_body(model: Type[ModelT], data: Dict[str, Any]) -> ModelT:
    """Validate data against model; failures name the offending fields."""
    try:
        return model.model_validate(data)
    except PydanticValidationError as exc:
        fields = sorted({".".join(str(part) for part in err["loc"]) for err in exc.errors()})
        raise BadRequestError(
            message=f"Invalid or missing fields: {', '.join(fields)}",
            context={"fields": fields},
        )


def parse_int_param(
    raw: Optional[str], name: str, default: int, minimum: int = 0
) -> int:
    """
    Parse an integer query parameter.

    Absent or blank values fall back to default. Non-integers and values
    below minimum raise BadRequestError.
    """
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        raise BadRequestError(message=f"'{name}' must be an integer", field=name)
    if value < minimum:
        raise BadRequestError(message=f"'{name}' must be at least {minimum}", field=name)
    return value


def split_csv_param(raw: Optional[str]) -> list:
    """Split a comma-separated query value, dropping empty entries."""
    if not raw:
        return []
    return [part.strip() for part in raw.split(",") if part.strip()]
