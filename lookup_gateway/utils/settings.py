"""Typed gateway settings built from YAML and environment variables."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from ..api_manager.base import QUERY_PLACEHOLDER, SourceDescriptor
from ..api_manager.normalizers.sanitizer import DEFAULT_FORBIDDEN_KEYS, DEFAULT_VENDOR_PATTERNS
from ..api_manager.normalizers.shapes import SHAPES_BY_TAG
from ..core.client_identifier import DEFAULT_IP_HEADERS
from ..validators.email_validator import DEFAULT_EMAIL_ERROR, DEFAULT_EMAIL_PATTERN
from ..validators.number_validator import DEFAULT_MOBILE_ERROR, DEFAULT_MOBILE_PATTERN
from .config_loader import load_yaml_config

logger = logging.getLogger("lookup_gateway")

DEFAULT_CONFIG_PATH = "config/gateway_config.yaml"
CONFIG_ENV_VAR = "LOOKUP_GATEWAY_CONFIG"


class ConfigError(ValueError):
    """Raised when the gateway configuration is inconsistent."""


@dataclass(frozen=True)
class Branding:
    brand: str = "BLACK 🖤 ENTHEM"
    owner: str = "@BlackEnthemOwner"
    telegram: str = "https://t.me/blackenthem_1"


@dataclass(frozen=True)
class QuotaSettings:
    limit: int = 100
    window_hours: float = 24.0
    eviction_rate: float = 0.01

    @property
    def window_seconds(self) -> float:
        return self.window_hours * 3600


@dataclass(frozen=True)
class UpstreamSettings:
    timeout_seconds: float = 8.0
    cache_ttl_seconds: float = 300.0
    user_agent: str = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"
    sources: Tuple[SourceDescriptor, ...] = ()


@dataclass(frozen=True)
class EmailSettings:
    enabled: bool = True
    pattern: str = DEFAULT_EMAIL_PATTERN
    error: str = DEFAULT_EMAIL_ERROR


@dataclass(frozen=True)
class ValidationSettings:
    mobile_pattern: str = DEFAULT_MOBILE_PATTERN
    mobile_error: str = DEFAULT_MOBILE_ERROR


@dataclass(frozen=True)
class SanitizerSettings:
    forbidden_keys: Tuple[str, ...] = DEFAULT_FORBIDDEN_KEYS
    vendor_patterns: Tuple[str, ...] = DEFAULT_VENDOR_PATTERNS


@dataclass(frozen=True)
class GatewaySettings:
    branding: Branding = field(default_factory=Branding)
    quota: QuotaSettings = field(default_factory=QuotaSettings)
    upstream: UpstreamSettings = field(default_factory=UpstreamSettings)
    email: EmailSettings = field(default_factory=EmailSettings)
    validation: ValidationSettings = field(default_factory=ValidationSettings)
    sanitizer: SanitizerSettings = field(default_factory=SanitizerSettings)
    ip_headers: Tuple[str, ...] = DEFAULT_IP_HEADERS


def parse_sources(raw_sources: Optional[List[Dict[str, Any]]]) -> Tuple[SourceDescriptor, ...]:
    """Build SourceDescriptor objects, rejecting inconsistent entries.

    Raises:
        ConfigError: On a missing field, a duplicate name, a template without
            exactly one placeholder, or an unknown response shape.
    """
    sources: List[SourceDescriptor] = []
    seen = set()
    for entry in raw_sources or []:
        if not isinstance(entry, dict):
            raise ConfigError(f"Source entry must be a mapping, got {entry!r}")
        name = str(entry.get("name") or "").strip()
        template = str(entry.get("url_template") or "").strip()
        shape = str(entry.get("response_shape") or "generic").strip()

        if not name or not template:
            raise ConfigError("Each source needs a name and a url_template")
        if name in seen:
            raise ConfigError(f"Duplicate source name: {name}")
        if template.count(QUERY_PLACEHOLDER) != 1:
            raise ConfigError(f"Source {name}: url_template must contain {QUERY_PLACEHOLDER} exactly once")
        if shape not in SHAPES_BY_TAG:
            raise ConfigError(f"Source {name}: unknown response_shape {shape!r}")

        seen.add(name)
        sources.append(SourceDescriptor(name=name, url_template=template, response_shape=shape))
    return tuple(sources)


def settings_from_dict(cfg: Dict[str, Any]) -> GatewaySettings:
    """Merge a raw config mapping over the built-in defaults."""
    branding_cfg = cfg.get("branding", {}) or {}
    quota_cfg = cfg.get("quota", {}) or {}
    upstream_cfg = cfg.get("upstream", {}) or {}
    email_cfg = cfg.get("email", {}) or {}
    validation_cfg = cfg.get("validation", {}) or {}
    sanitizer_cfg = cfg.get("sanitizer", {}) or {}
    client_cfg = cfg.get("client", {}) or {}

    d_brand, d_quota, d_up = Branding(), QuotaSettings(), UpstreamSettings()
    d_email, d_val, d_san = EmailSettings(), ValidationSettings(), SanitizerSettings()

    try:
        quota = QuotaSettings(
            limit=int(quota_cfg.get("limit", d_quota.limit)),
            window_hours=float(quota_cfg.get("window_hours", d_quota.window_hours)),
            eviction_rate=float(quota_cfg.get("eviction_rate", d_quota.eviction_rate)),
        )
        upstream = UpstreamSettings(
            timeout_seconds=float(upstream_cfg.get("timeout_seconds", d_up.timeout_seconds)),
            cache_ttl_seconds=float(upstream_cfg.get("cache_ttl_seconds", d_up.cache_ttl_seconds)),
            user_agent=str(upstream_cfg.get("user_agent", d_up.user_agent)),
            sources=parse_sources(upstream_cfg.get("sources")),
        )
    except ConfigError:
        raise
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid numeric setting: {exc}") from exc

    if quota.limit < 0 or quota.window_hours <= 0:
        raise ConfigError("quota.limit must be >= 0 and quota.window_hours > 0")

    return GatewaySettings(
        branding=Branding(
            brand=str(branding_cfg.get("brand", d_brand.brand)),
            owner=str(branding_cfg.get("owner", d_brand.owner)),
            telegram=str(branding_cfg.get("telegram", d_brand.telegram)),
        ),
        quota=quota,
        upstream=upstream,
        email=EmailSettings(
            enabled=bool(email_cfg.get("enabled", d_email.enabled)),
            pattern=str(email_cfg.get("pattern", d_email.pattern)),
            error=str(email_cfg.get("error", d_email.error)),
        ),
        validation=ValidationSettings(
            mobile_pattern=str(validation_cfg.get("mobile_pattern", d_val.mobile_pattern)),
            mobile_error=str(validation_cfg.get("mobile_error", d_val.mobile_error)),
        ),
        sanitizer=SanitizerSettings(
            forbidden_keys=tuple(sanitizer_cfg.get("forbidden_keys", d_san.forbidden_keys)),
            vendor_patterns=tuple(sanitizer_cfg.get("vendor_patterns", d_san.vendor_patterns)),
        ),
        ip_headers=tuple(client_cfg.get("ip_headers", DEFAULT_IP_HEADERS)),
    )


def load_settings(config_path: Optional[Union[str, Path]] = None) -> GatewaySettings:
    """Load settings from YAML, falling back to defaults if the file is missing.

    The path defaults to $LOOKUP_GATEWAY_CONFIG, then config/gateway_config.yaml.
    $FREE_LIMIT overrides quota.limit.
    """
    path = config_path or os.getenv(CONFIG_ENV_VAR) or DEFAULT_CONFIG_PATH
    try:
        cfg = load_yaml_config(path)
    except FileNotFoundError:
        logger.warning(f"Config file {path} not found, using built-in defaults")
        cfg = {}

    free_limit = os.getenv("FREE_LIMIT")
    if free_limit:
        cfg = dict(cfg)
        cfg["quota"] = dict(cfg.get("quota", {}) or {}, limit=free_limit)

    return settings_from_dict(cfg)
