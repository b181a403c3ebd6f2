from __future__ import annotations

from typing import Any, Dict, Optional
from urllib.parse import quote

import requests

from ..base import FetchResult, SourceDescriptor, SourceFetcher, QUERY_PLACEHOLDER
from ..utils.logger import get_logger, log_event
from ..utils.response_cache import ResponseCache


DESKTOP_UA = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"


def build_url(source: SourceDescriptor, query: str) -> str:
    """Substitute the URL-quoted query value into the source's template."""

    return source.url_template.replace(QUERY_PLACEHOLDER, quote(str(query), safe=""))


class HttpSourceFetcher(SourceFetcher):
    """Upstream fetcher doing one bounded GET per call.

    Any transport problem (timeout, connection error, non-2xx status,
    body that is not JSON) is returned as ``FetchResult(ok=False)``.
    There is no retry: a failing source is skipped by the orchestrator.

    ``timeout`` is handed to ``requests`` as is, so it bounds the connect
    phase and each wait between received bytes separately. An upstream
    that keeps trickling data can hold a call longer than ``timeout`` in
    total; the ceiling is per phase, not per call.

    The cache is best-effort: a cache fault is logged and the call
    proceeds as if the entry were missing.
    """

    def __init__(
        self,
        timeout: float = 8.0,
        user_agent: str = DESKTOP_UA,
        cache: Optional[ResponseCache] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.timeout = float(timeout)
        self.user_agent = user_agent
        self.cache = cache
        self.session = session or requests.Session()
        self.logger = get_logger("gateway.fetcher")

    def _get_headers(self) -> Dict[str, str]:
        return {
            "User-Agent": self.user_agent,
            "Accept": "application/json",
        }

    def fetch(self, source: SourceDescriptor, query: str) -> FetchResult:
        url = build_url(source, query)

        cached = self._cache_get(source, url)
        if cached is not None:
            return FetchResult(ok=True, source=source.name, data=cached, status_code=200, cached=True)

        try:
            response = self.session.get(url, headers=self._get_headers(), timeout=self.timeout)
        except requests.Timeout as exc:
            return self._failure(source, "timeout", exc)
        except requests.RequestException as exc:
            return self._failure(source, "network_error", exc)

        if not 200 <= response.status_code < 300:
            return self._failure(source, f"http_{response.status_code}", status_code=response.status_code)

        try:
            data = response.json()
        except ValueError as exc:
            return self._failure(source, "invalid_json", exc, status_code=response.status_code)

        self._cache_set(source, url, data)

        return FetchResult(ok=True, source=source.name, data=data, status_code=response.status_code)

    def _cache_get(self, source: SourceDescriptor, url: str) -> Optional[Any]:
        if self.cache is None:
            return None
        try:
            return self.cache.get(url)
        except Exception as exc:
            self._cache_fault(source, "get", exc)
            return None

    def _cache_set(self, source: SourceDescriptor, url: str, data: Any) -> None:
        if self.cache is None:
            return
        try:
            self.cache.set(url, data)
        except Exception as exc:
            self._cache_fault(source, "set", exc)

    def _cache_fault(self, source: SourceDescriptor, operation: str, exc: Exception) -> None:
        log_event(
            self.logger,
            level=30,
            message="Response cache error",
            extra={"source": source.name, "operation": operation, "error": repr(exc)},
        )

    def _failure(
        self,
        source: SourceDescriptor,
        reason: str,
        exc: Optional[BaseException] = None,
        status_code: Optional[int] = None,
    ) -> FetchResult:
        log_event(
            self.logger,
            level=30,
            message="Source request failed",
            extra={"source": source.name, "reason": reason, "error": str(exc) if exc else None},
        )
        return FetchResult(ok=False, source=source.name, status_code=status_code, error=reason)
