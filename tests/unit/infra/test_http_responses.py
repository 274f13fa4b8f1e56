import httpx
import pytest
from pydantic import BaseModel

from chainview.exceptions import ExternalServiceError, RateLimitError, UpstreamError
from chainview.infra.http.responses import decode_json, parse_payload


def _response(status: int = 200, json=None, text: str | None = None) -> httpx.Response:
    request = httpx.Request("GET", "https://api.example.com/x")
    if json is not None:
        return httpx.Response(status, json=json, request=request)
    return httpx.Response(status, text=text or "", request=request)


class _Item(BaseModel):
    id: int


class TestDecodeJson:
    def test_ok(self):
        assert decode_json(_response(json={"a": 1}), "Test") == {"a": 1}

    def test_429_is_rate_limit(self):
        with pytest.raises(RateLimitError) as exc_info:
            decode_json(_response(429, text="slow down"), "Test")
        assert exc_info.value.status_code == 429

    def test_non_2xx(self):
        with pytest.raises(ExternalServiceError, match="Test API error: 503") as exc_info:
            decode_json(_response(503, text="unavailable"), "Test")
        assert not isinstance(exc_info.value, RateLimitError)
        assert exc_info.value.status_code == 503

    def test_non_json_body(self):
        with pytest.raises(ExternalServiceError, match="non-JSON"):
            decode_json(_response(200, text="<html>"), "Test")


class TestParsePayload:
    def test_valid(self):
        assert parse_payload(_Item, {"id": 3}, "Test").id == 3

    def test_malformed(self):
        with pytest.raises(UpstreamError, match="malformed"):
            parse_payload(_Item, {"id": "x"}, "Test")
