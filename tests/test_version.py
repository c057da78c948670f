from __future__ import annotations

from infra import version as version_mod


def test_get_app_version_prefers_env_override(monkeypatch):
    monkeypatch.setattr(version_mod, "_installed_version", lambda: "2.1.1")
    monkeypatch.setenv("WA_APP_VERSION", "9.9.9")

    assert version_mod.get_app_version() == "9.9.9"


def test_get_app_version_reads_installed_distribution(monkeypatch):
    monkeypatch.setattr(version_mod, "_installed_version", lambda: "2.1.1")
    monkeypatch.delenv("WA_APP_VERSION", raising=False)

    assert version_mod.get_app_version() == "2.1.1"


def test_get_app_version_falls_back_when_not_installed(monkeypatch):
    monkeypatch.setattr(version_mod, "_installed_version", lambda: None)
    monkeypatch.setenv("WA_APP_VERSION", "   ")

    assert version_mod.get_app_version() == version_mod._DEFAULT_APP_VERSION
