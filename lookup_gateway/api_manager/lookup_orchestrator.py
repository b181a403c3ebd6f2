from __future__ import annotations

from typing import Optional, Sequence

from .base import LookupResult, SourceDescriptor, SourceFetcher
from .normalizers.response_normalizer import ResponseNormalizer
from .utils.logger import get_logger, log_event


class LookupOrchestrator:
    """Resolves a query value against the configured sources in priority order.

    Sources are tried one at a time. The first one whose normalized result
    list is non-empty wins and the rest are not called. A source that fails
    to fetch or normalize is logged and skipped.

    When every source is exhausted the result is a bare failure: callers
    cannot tell "all timed out" from "all answered empty".
    """

    def __init__(
        self,
        sources: Sequence[SourceDescriptor],
        fetcher: SourceFetcher,
        normalizer: Optional[ResponseNormalizer] = None,
    ) -> None:
        self.sources = tuple(sources)
        self.fetcher = fetcher
        self.normalizer = normalizer or ResponseNormalizer()
        self.logger = get_logger("gateway.orchestrator")

    @property
    def sources_configured(self) -> bool:
        return bool(self.sources)

    def resolve(self, query: str) -> LookupResult:
        for source in self.sources:
            try:
                fetched = self.fetcher.fetch(source, query)
            except Exception as exc:
                log_event(
                    self.logger,
                    level=30,
                    message="Skipping source after fetcher error",
                    extra={"source": source.name, "error": repr(exc)},
                )
                continue

            if not fetched.ok:
                log_event(
                    self.logger,
                    level=20,
                    message="Skipping source after fetch failure",
                    extra={"source": source.name, "error": fetched.error},
                )
                continue

            try:
                items = self.normalizer.normalize(fetched.data, source.response_shape)
            except Exception as exc:
                log_event(
                    self.logger,
                    level=30,
                    message="Skipping source after normalization failure",
                    extra={"source": source.name, "error": str(exc)},
                )
                continue

            if not items:
                log_event(
                    self.logger,
                    level=20,
                    message="Source returned no records",
                    extra={"source": source.name},
                )
                continue

            log_event(
                self.logger,
                level=20,
                message="Lookup resolved",
                extra={"source": source.name, "items": len(items), "cached": fetched.cached},
            )
            return LookupResult(success=True, items=items, source_name=source.name)

        return LookupResult(success=False, items=[], source_name=None)
