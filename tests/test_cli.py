"""Tests for the one-off lookup CLI."""

import json
import os
import subprocess
import sys
from pathlib import Path

import cli
from conftest import FakeFetcher

from lookup_gateway.api import services as services_module
from lookup_gateway.utils.settings import settings_from_dict


def _patch_services(monkeypatch, responses) -> None:
    real_build = services_module.build_services

    def build(settings, quota_store=None, fetcher=None):
        return real_build(settings, quota_store=quota_store, fetcher=FakeFetcher(responses))

    sources = [{"name": "A", "url_template": "https://a/{query}", "response_shape": "generic"}]
    monkeypatch.setattr(cli, "build_services", build)
    monkeypatch.setattr(cli, "load_settings", lambda path=None: settings_from_dict({"upstream": {"sources": sources}}))


def test_cli_success(monkeypatch, capsys) -> None:
    _patch_services(monkeypatch, {"A": [{"name": "Ravi", "credit": "x"}]})
    assert cli.main(["--number", "+917070096514"]) == 0
    out = json.loads(capsys.readouterr().out)
    assert out["data"]["result"] == [{"name": "Ravi"}]


def test_cli_invalid_number(monkeypatch, capsys) -> None:
    _patch_services(monkeypatch, {})
    assert cli.main(["--number", "12345", "--compact"]) == 1
    out = json.loads(capsys.readouterr().out)
    assert out["error"] == "Invalid Indian Mobile Number"


def test_cli_not_found(monkeypatch, capsys) -> None:
    _patch_services(monkeypatch, {"A": []})
    assert cli.main(["--number", "7070096514"]) == 1
    assert json.loads(capsys.readouterr().out)["error"] == "No data found"


def test_cli_ignores_broken_default_config(tmp_path) -> None:
    """--config wins; the default config is never loaded on import."""
    broken = tmp_path / "broken.yaml"
    broken.write_text("quota: [unclosed", encoding="utf-8")
    good = tmp_path / "good.yaml"
    good.write_text('branding:\n  brand: "CLI BRAND"\n', encoding="utf-8")
    root = Path(__file__).resolve().parents[1]
    env = dict(os.environ, LOOKUP_GATEWAY_CONFIG=str(broken))

    completed = subprocess.run(
        [sys.executable, str(root / "cli.py"), "--number", "12345", "--config", str(good), "--compact"],
        cwd=root,
        env=env,
        capture_output=True,
        text=True,
        encoding="utf-8",
    )

    assert completed.returncode == 1, completed.stderr
    out = json.loads(completed.stdout)
    assert out["brand"] == "CLI BRAND"
    assert out["error"] == "Invalid Indian Mobile Number"
