"""Uniform JSON envelopes for every gateway outcome."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from fastapi.responses import JSONResponse

from ..utils.settings import Branding


class Outcome(str, Enum):
    SUCCESS = "success"
    INVALID_INPUT = "invalid_input"
    QUOTA_EXCEEDED = "quota_exceeded"
    NOT_FOUND = "not_found"
    UPSTREAM_UNAVAILABLE = "upstream_unavailable"
    METHOD_NOT_ALLOWED = "method_not_allowed"
    NOT_IMPLEMENTED = "not_implemented"
    INTERNAL_ERROR = "internal_error"


STATUS_CODES: Dict[Outcome, int] = {
    Outcome.SUCCESS: 200,
    Outcome.INVALID_INPUT: 400,
    Outcome.QUOTA_EXCEEDED: 403,
    Outcome.NOT_FOUND: 404,
    Outcome.UPSTREAM_UNAVAILABLE: 404,
    Outcome.METHOD_NOT_ALLOWED: 405,
    Outcome.NOT_IMPLEMENTED: 501,
    Outcome.INTERNAL_ERROR: 500,
}

DEFAULT_MESSAGES: Dict[Outcome, str] = {
    Outcome.INVALID_INPUT: "Missing or invalid search parameter",
    Outcome.NOT_FOUND: "No data found",
    Outcome.UPSTREAM_UNAVAILABLE: "No data found",
    Outcome.METHOD_NOT_ALLOWED: "Method not allowed",
    Outcome.NOT_IMPLEMENTED: "Email lookup coming soon",
    Outcome.INTERNAL_ERROR: "Internal server error",
}

SUCCESS_CACHE_CONTROL = "public, max-age=60"


@dataclass
class GatewayResponse:
    status_code: int
    body: Dict[str, Any]
    headers: Dict[str, str] = field(default_factory=dict)


def header_safe(value: str) -> str:
    """HTTP header values are latin-1; keep the ASCII part of the brand."""
    return " ".join(value.encode("ascii", "ignore").decode("ascii").split())


def build_response(
    outcome: Outcome,
    branding: Branding,
    *,
    result: Optional[List[Any]] = None,
    remaining: Optional[int] = None,
    message: Optional[str] = None,
    now: Optional[datetime] = None,
) -> GatewayResponse:
    """Map an outcome to its envelope, status code and headers.

    Pure: the only input besides the arguments is ``now``, which defaults
    to the current UTC time for the success timestamp.
    """
    status = STATUS_CODES[outcome]

    if outcome is Outcome.SUCCESS:
        ts = (now or datetime.now(timezone.utc)).isoformat(timespec="milliseconds").replace("+00:00", "Z")
        return GatewayResponse(
            status_code=status,
            body={
                "data": {
                    "success": True,
                    "result": list(result or []),
                    "brand": branding.brand,
                    "timestamp": ts,
                    "searches_remaining": int(remaining or 0),
                }
            },
            headers={
                "X-Brand": header_safe(branding.brand),
                "Cache-Control": SUCCESS_CACHE_CONTROL,
            },
        )

    if outcome is Outcome.QUOTA_EXCEEDED:
        return GatewayResponse(
            status_code=status,
            body={
                "error": "API Down - Buy Premium",
                "message": message or "This API service is currently unavailable for free users",
                "contact": f"DM {branding.owner} for premium access with custom name",
                "telegram": branding.telegram,
                "status": status,
                "BRAND": branding.brand,
            },
            headers={"X-Brand": header_safe(branding.brand)},
        )

    return GatewayResponse(
        status_code=status,
        body={
            "success": False,
            "error": message or DEFAULT_MESSAGES[outcome],
            "brand": branding.brand,
        },
    )


def home_document(branding: Branding) -> Dict[str, Any]:
    """Static service description served on a bare GET /."""
    return {
        "message": "Secure API Services",
        "brand": branding.brand,
        "note": "Add query parameters to use",
        "example": "/?num=XXXXXXXXXX",
        "parameters": {
            "num": "10 digit Indian mobile number (aliases: mobile, number)",
            "email": "email address (coming soon)",
        },
    }


class PrettyJSONResponse(JSONResponse):
    """JSONResponse rendered with two-space indentation."""

    def render(self, content: Any) -> bytes:
        return json.dumps(content, ensure_ascii=False, indent=2).encode("utf-8")


def to_http(response: GatewayResponse) -> PrettyJSONResponse:
    return PrettyJSONResponse(
        content=response.body,
        status_code=response.status_code,
        headers=response.headers or None,
    )
