from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional, Any, Dict, Iterator, List


QUERY_PLACEHOLDER = "{query}"


@dataclass(frozen=True)
class SourceDescriptor:
    """Static description of one upstream lookup source.

    Attributes:
        name: Unique source name, used in logs and in LookupResult.
        url_template: Request URL with exactly one ``{query}`` placeholder.
        response_shape: Shape tag telling the normalizer which JSON nestings
            this source is known to answer with.
    """

    name: str
    url_template: str
    response_shape: str = "generic"


@dataclass
class FetchResult:
    """Outcome of a single upstream call.

    Failures are carried as data (``ok=False`` plus ``error``) so that
    nothing raised by the transport reaches the orchestrator.

    Attributes:
        ok: Whether a 2xx JSON body was obtained.
        source: Name of the source that was queried.
        data: Decoded JSON body when ``ok`` is True.
        status_code: HTTP status when a response was received.
        error: Short failure reason (timeout, http_502, invalid_json, ...).
        cached: Whether the body was served from the response cache.
    """

    ok: bool
    source: str
    data: Any = None
    status_code: Optional[int] = None
    error: Optional[str] = None
    cached: bool = False


@dataclass
class LookupResult:
    """Result of resolving one query value across the configured sources.

    Attributes:
        success: True when some source produced a non-empty normalized list.
        items: Normalized, sanitized records from the winning source.
        source_name: Name of the winning source (None on failure).
    """

    success: bool
    items: List[Any] = field(default_factory=list)
    source_name: Optional[str] = None


@dataclass
class ClientQuotaRecord:
    """Usage counter for one client key inside its active window."""

    client_key: str
    count: int
    window_reset_at: float


@dataclass(frozen=True)
class QuotaDecision:
    """Result of a quota check (which is also the consumption event)."""

    allowed: bool
    remaining: int


class QuotaStore(ABC):
    """Storage backend for ClientQuotaRecord objects.

    The tracker only relies on these four operations, so a durable or
    shared backend can replace the in-memory one without touching callers.
    """

    @abstractmethod
    def get(self, client_key: str) -> Optional[ClientQuotaRecord]:
        """Return the record for a key, or None if unknown."""
        raise NotImplementedError

    @abstractmethod
    def put(self, record: ClientQuotaRecord) -> None:
        """Insert or replace a record."""
        raise NotImplementedError

    @abstractmethod
    def delete(self, client_key: str) -> None:
        """Remove a record if present."""
        raise NotImplementedError

    @abstractmethod
    def records(self) -> Iterator[ClientQuotaRecord]:
        """Iterate over a snapshot of all stored records."""
        raise NotImplementedError


class SourceFetcher(ABC):
    """Abstract base class for upstream fetchers."""

    @abstractmethod
    def fetch(self, source: SourceDescriptor, query: str) -> FetchResult:
        """Query one source. Must never raise on transport failures."""
        raise NotImplementedError


class InMemoryQuotaStore(QuotaStore):
    """Process-local store. Does not survive restarts or span instances."""

    def __init__(self) -> None:
        self._records: Dict[str, ClientQuotaRecord] = {}

    def get(self, client_key: str) -> Optional[ClientQuotaRecord]:
        return self._records.get(client_key)

    def put(self, record: ClientQuotaRecord) -> None:
        self._records[record.client_key] = record

    def delete(self, client_key: str) -> None:
        self._records.pop(client_key, None)

    def records(self) -> Iterator[ClientQuotaRecord]:
        return iter(list(self._records.values()))

    def __len__(self) -> int:
        return len(self._records)
