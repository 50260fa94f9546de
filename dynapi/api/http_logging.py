"""
Per-route HTTP logging.

Writes request and response entries for routes whose effective metadata
carries a logging record. Only the fields selected by the record are
written; bodies are truncated to the record's limits or, when a limit is
unset or -1, to the configured defaults.
"""

from typing import Any, Dict, Optional

from starlette.requests import Request
from starlette.responses import Response

from dynapi.infrastructure.logging import get_logger
from dynapi.models.contract import HttpLogging, HttpLoggingFields

logger = get_logger("dynapi.http")

REDACTED_HEADERS = frozenset({"authorization", "cookie", "set-cookie", "proxy-authorization", "x-api-key"})


def _limit(value: Optional[int], default: int) -> int:
    if value is None or value == -1:
        return default
    return max(value, 0)


def _truncate(body: bytes, limit: int) -> str:
    text = body[:limit].decode("utf-8", errors="replace")
    if len(body) > limit:
        text += "...[truncated]"
    return text


def _headers(headers) -> Dict[str, str]:
    return {
        key: ("[Redacted]" if key.lower() in REDACTED_HEADERS else value)
        for key, value in headers.items()
    }


class HttpLoggingRecorder:
    """Writes HTTP log entries for one route according to its logging record"""

    def __init__(self, record: HttpLogging, default_request_limit: int, default_response_limit: int):
        self.fields = record.fields
        self.request_body_limit = _limit(record.request_body_limit, default_request_limit)
        self.response_body_limit = _limit(record.response_body_limit, default_response_limit)

    def _wants(self, field: HttpLoggingFields) -> bool:
        return bool(self.fields & field)

    async def log_request(self, request: Request) -> None:
        entry: Dict[str, Any] = {}
        if self._wants(HttpLoggingFields.REQUEST_METHOD):
            entry["method"] = request.method
        if self._wants(HttpLoggingFields.REQUEST_PATH):
            entry["path"] = request.url.path
        if self._wants(HttpLoggingFields.REQUEST_QUERY):
            entry["query"] = request.url.query
        if self._wants(HttpLoggingFields.REQUEST_PROTOCOL):
            entry["protocol"] = f"HTTP/{request.scope.get('http_version', '1.1')}"
        if self._wants(HttpLoggingFields.REQUEST_SCHEME):
            entry["scheme"] = request.url.scheme
        if self._wants(HttpLoggingFields.REQUEST_HEADERS):
            entry["headers"] = _headers(request.headers)
        if self._wants(HttpLoggingFields.REQUEST_BODY):
            entry["body"] = _truncate(await request.body(), self.request_body_limit)

        if entry:
            logger.info("Request", **entry)

    def log_response(self, response: Response, duration_ms: float) -> None:
        entry: Dict[str, Any] = {}
        if self._wants(HttpLoggingFields.RESPONSE_STATUS_CODE):
            entry["status_code"] = response.status_code
        if self._wants(HttpLoggingFields.RESPONSE_HEADERS):
            entry["headers"] = _headers(response.headers)
        if self._wants(HttpLoggingFields.RESPONSE_BODY):
            entry["body"] = _truncate(bytes(getattr(response, "body", b"") or b""), self.response_body_limit)
        if self._wants(HttpLoggingFields.DURATION):
            entry["duration_ms"] = round(duration_ms, 3)

        if entry:
            logger.info("Response", **entry)
