"""FastAPI web application for the mobile lookup gateway."""

import asyncio
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response

from lookup_gateway.api.responses import (
    Outcome,
    PrettyJSONResponse,
    build_response,
    home_document,
    to_http,
)
from lookup_gateway.api.services import GatewayServices, build_services
from lookup_gateway.api_manager.base import QuotaStore, SourceFetcher
from lookup_gateway.core.client_identifier import client_key_from_headers
from lookup_gateway.utils.logger import setup_logger
from lookup_gateway.utils.settings import GatewaySettings, load_settings

# Setup logger
logger = setup_logger()

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]
MOBILE_PARAMS = ("num", "mobile", "number")


def _respond(services: GatewayServices, outcome: Outcome, **kwargs) -> PrettyJSONResponse:
    return to_http(build_response(outcome, services.settings.branding, **kwargs))


def _mask(number: str) -> str:
    return number[:2] + "*" * max(len(number) - 4, 0) + number[-2:]


async def lookup_mobile(services: GatewayServices, raw: str, remaining: int) -> Response:
    """Validate a mobile number and resolve it across the configured sources."""
    cleaned = services.mobile_validator.validate(raw)
    if cleaned is None:
        return _respond(services, Outcome.INVALID_INPUT, message=services.mobile_validator.error)

    orchestrator = services.orchestrator
    if not orchestrator.sources_configured:
        logger.error("Mobile lookup requested but no upstream sources are configured")
        return _respond(services, Outcome.UPSTREAM_UNAVAILABLE)

    # the blocking upstream calls leave the event loop; quota state does not
    result = await asyncio.to_thread(orchestrator.resolve, cleaned)

    if not result.success:
        logger.info(f"No data for {_mask(cleaned)}")
        return _respond(services, Outcome.NOT_FOUND)

    logger.info(f"Resolved {_mask(cleaned)} via {result.source_name} ({len(result.items)} records)")
    return _respond(services, Outcome.SUCCESS, result=result.items, remaining=remaining)


def create_app(
    settings: Optional[GatewaySettings] = None,
    quota_store: Optional[QuotaStore] = None,
    fetcher: Optional[SourceFetcher] = None,
) -> FastAPI:
    """Create the gateway application.

    Args:
        settings: Gateway settings (loaded from YAML if None).
        quota_store: Injectable quota store (process-local if None).
        fetcher: Injectable upstream fetcher (HTTP if None).

    Returns:
        Configured FastAPI application.
    """
    settings = settings or load_settings()

    app = FastAPI(
        title="Mobile Lookup Gateway",
        description="Quota-gated mobile number lookup across upstream sources",
        version="1.0.0",
    )
    app.state.services = build_services(settings, quota_store=quota_store, fetcher=fetcher)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
        expose_headers=["X-Brand"],
    )

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception) -> Response:
        logger.error(f"Unexpected error on {request.method} {request.url.path}: {exc}", exc_info=True)
        return _respond(request.app.state.services, Outcome.INTERNAL_ERROR)

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy"}

    @app.api_route("/{full_path:path}", methods=ALL_METHODS, include_in_schema=False)
    async def gateway(request: Request) -> Response:
        """Single entry point: home document, mobile lookup or email placeholder."""
        services: GatewayServices = request.app.state.services

        if request.method != "GET":
            return _respond(services, Outcome.METHOD_NOT_ALLOWED)

        if request.url.path == "/" and not request.url.query:
            return PrettyJSONResponse(home_document(services.settings.branding))

        params = request.query_params
        mobile_param = next((params.get(p) for p in MOBILE_PARAMS if params.get(p)), None)

        client = client_key_from_headers(request.headers, services.settings.ip_headers)
        decision = services.quota.check(client)
        if not decision.allowed:
            return _respond(services, Outcome.QUOTA_EXCEEDED)

        if mobile_param:
            return await lookup_mobile(services, mobile_param, decision.remaining)

        email_param = params.get("email")
        if email_param and services.email_validator is not None:
            checked = services.email_validator.validate(email_param)
            if not checked.valid:
                return _respond(services, Outcome.INVALID_INPUT, message=checked.error)
            return _respond(services, Outcome.NOT_IMPLEMENTED)

        return _respond(services, Outcome.INVALID_INPUT)

    return app


app = create_app()
