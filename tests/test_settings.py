"""Tests for settings loading and validation."""

import pytest
import yaml

from lookup_gateway.utils.settings import Branding, ConfigError, load_settings, parse_sources, settings_from_dict


def test_repository_config_loads() -> None:
    """The shipped config/gateway_config.yaml is valid."""
    settings = load_settings("config/gateway_config.yaml")
    assert settings.quota.limit == 100
    assert settings.quota.window_seconds == 24 * 3600
    assert settings.upstream.timeout_seconds == 8
    assert settings.upstream.sources
    assert settings.upstream.sources[0].response_shape == "nested_result"
    assert "source" in settings.sanitizer.forbidden_keys


def test_missing_file_uses_defaults(tmp_path) -> None:
    settings = load_settings(tmp_path / "nope.yaml")
    assert settings.quota.limit == 100
    assert settings.upstream.sources == ()


def test_free_limit_env_override(tmp_path, monkeypatch) -> None:
    path = tmp_path / "cfg.yaml"
    path.write_text(yaml.safe_dump({"quota": {"limit": 5}}), encoding="utf-8")
    monkeypatch.setenv("FREE_LIMIT", "7")
    assert load_settings(path).quota.limit == 7


def test_config_path_env(tmp_path, monkeypatch) -> None:
    path = tmp_path / "cfg.yaml"
    path.write_text(yaml.safe_dump({"branding": {"brand": "ENV BRAND"}}), encoding="utf-8")
    monkeypatch.setenv("LOOKUP_GATEWAY_CONFIG", str(path))
    monkeypatch.delenv("FREE_LIMIT", raising=False)
    assert load_settings().branding.brand == "ENV BRAND"


def test_malformed_yaml_propagates(tmp_path) -> None:
    path = tmp_path / "bad.yaml"
    path.write_text("quota: [unclosed", encoding="utf-8")
    with pytest.raises(yaml.YAMLError):
        load_settings(path)


def test_template_needs_one_placeholder() -> None:
    with pytest.raises(ConfigError):
        parse_sources([{"name": "x", "url_template": "https://x.example/?q="}])
    with pytest.raises(ConfigError):
        parse_sources([{"name": "x", "url_template": "https://x/{query}/{query}"}])


def test_duplicate_source_names() -> None:
    entry = {"name": "x", "url_template": "https://x/{query}"}
    with pytest.raises(ConfigError):
        parse_sources([entry, dict(entry)])


def test_unknown_shape_rejected() -> None:
    with pytest.raises(ConfigError):
        parse_sources([{"name": "x", "url_template": "https://x/{query}", "response_shape": "xml"}])


def test_source_order_preserved() -> None:
    sources = parse_sources(
        [
            {"name": "first", "url_template": "https://1/{query}"},
            {"name": "second", "url_template": "https://2/{query}", "response_shape": "bare"},
        ]
    )
    assert [s.name for s in sources] == ["first", "second"]
    assert sources[0].response_shape == "generic"


def test_invalid_quota_values() -> None:
    with pytest.raises(ConfigError):
        settings_from_dict({"quota": {"limit": "lots"}})
    with pytest.raises(ConfigError):
        settings_from_dict({"quota": {"window_hours": 0}})


def test_default_brand_keeps_emoji() -> None:
    """Only the X-Brand header is reduced to ASCII; the brand itself is not."""
    assert Branding().brand == "BLACK 🖤 ENTHEM"
    assert load_settings("config/gateway_config.yaml").branding.brand == "BLACK 🖤 ENTHEM"
