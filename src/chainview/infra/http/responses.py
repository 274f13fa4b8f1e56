"""Status-code and payload checks applied at every HTTP-response boundary."""

from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from chainview.exceptions import ExternalServiceError, RateLimitError, UpstreamError

ModelT = TypeVar("ModelT", bound=BaseModel)

_BODY_PREVIEW = 200


def decode_json(resp: httpx.Response, source: str) -> Any:
    """Return the decoded JSON body, raising on non-2xx status or an undecodable body."""
    if resp.status_code == 429:
        raise RateLimitError(f"{source} API rate limit exceeded. Please try again later.", status_code=429)
    if not resp.is_success:
        raise ExternalServiceError(f"{source} API error: {resp.status_code}", status_code=resp.status_code)
    try:
        return resp.json()
    except ValueError as exc:
        raise ExternalServiceError(
            f"{source} API returned a non-JSON body: {resp.text[:_BODY_PREVIEW]!r}"
        ) from exc


def parse_payload(model: type[ModelT], data: Any, source: str) -> ModelT:
    """Validate a raw payload against its boundary model."""
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise UpstreamError(f"{source} API returned a malformed payload: {exc.error_count()} field error(s)") from exc
