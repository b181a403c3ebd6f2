"""Component wiring shared by the HTTP app and the CLI.

Importing this module builds nothing; callers pass in loaded settings.
"""

from dataclasses import dataclass
from typing import Optional

from lookup_gateway.api_manager.base import QuotaStore, SourceFetcher
from lookup_gateway.api_manager.fetchers.http_source import HttpSourceFetcher
from lookup_gateway.api_manager.lookup_orchestrator import LookupOrchestrator
from lookup_gateway.api_manager.normalizers.response_normalizer import ResponseNormalizer
from lookup_gateway.api_manager.normalizers.sanitizer import Sanitizer
from lookup_gateway.api_manager.utils.quota import QuotaTracker
from lookup_gateway.api_manager.utils.response_cache import ResponseCache
from lookup_gateway.utils.settings import GatewaySettings
from lookup_gateway.validators.email_validator import EmailValidator
from lookup_gateway.validators.number_validator import MobileNumberValidator


@dataclass
class GatewayServices:
    """Everything one request needs, built once per application."""

    settings: GatewaySettings
    quota: QuotaTracker
    orchestrator: LookupOrchestrator
    mobile_validator: MobileNumberValidator
    email_validator: Optional[EmailValidator]


def build_services(
    settings: GatewaySettings,
    quota_store: Optional[QuotaStore] = None,
    fetcher: Optional[SourceFetcher] = None,
) -> GatewayServices:
    """Wire the gateway components from settings.

    Args:
        settings: Loaded gateway settings.
        quota_store: Backing store for quota records (in-memory if None).
        fetcher: Upstream fetcher (HTTP with response cache if None).
    """
    upstream = settings.upstream
    if fetcher is None:
        fetcher = HttpSourceFetcher(
            timeout=upstream.timeout_seconds,
            user_agent=upstream.user_agent,
            cache=ResponseCache(ttl_seconds=upstream.cache_ttl_seconds),
        )

    sanitizer = Sanitizer(
        forbidden_keys=settings.sanitizer.forbidden_keys,
        vendor_patterns=settings.sanitizer.vendor_patterns,
    )

    return GatewayServices(
        settings=settings,
        quota=QuotaTracker(
            store=quota_store,
            limit=settings.quota.limit,
            window_seconds=settings.quota.window_seconds,
            eviction_rate=settings.quota.eviction_rate,
        ),
        orchestrator=LookupOrchestrator(
            sources=upstream.sources,
            fetcher=fetcher,
            normalizer=ResponseNormalizer(sanitizer),
        ),
        mobile_validator=MobileNumberValidator(
            pattern=settings.validation.mobile_pattern,
            error=settings.validation.mobile_error,
        ),
        email_validator=(
            EmailValidator(pattern=settings.email.pattern, error=settings.email.error)
            if settings.email.enabled
            else None
        ),
    )
