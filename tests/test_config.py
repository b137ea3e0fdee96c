from __future__ import annotations

from pathlib import Path

import pytest

from genova_image.common.config import DEFAULT_TIMEOUT, load_provider_config

_ENV = (
    "GENOVA_CONFIG",
    "GENOVA_TIMEOUT",
    "GENOVA_API_KEY",
    "GENOVA_API_BASE_URL",
    "NEXT_PUBLIC_API_KEY",
    "NEXT_PUBLIC_API_BASE_URL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV:
        monkeypatch.delenv(name, raising=False)


def test_empty_environment_is_incomplete() -> None:
    cfg = load_provider_config()
    assert not cfg.is_complete
    assert cfg.timeout == DEFAULT_TIMEOUT


def test_env_values_and_trailing_slash(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GENOVA_API_KEY", "k")
    monkeypatch.setenv("GENOVA_API_BASE_URL", "https://api.example/v1/")
    cfg = load_provider_config()
    assert cfg.is_complete
    assert cfg.generations_url == "https://api.example/v1/images/generations"


def test_legacy_variable_names(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NEXT_PUBLIC_API_KEY", "legacy")
    monkeypatch.setenv("NEXT_PUBLIC_API_BASE_URL", "https://legacy.example")
    cfg = load_provider_config()
    assert cfg.api_key == "legacy"
    assert cfg.base_url == "https://legacy.example"


def test_yaml_file_with_env_override(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = tmp_path / "provider.yaml"
    path.write_text("api_key: from-file\napi_base_url: https://file.example\ntimeout: 30\n", encoding="utf-8")
    monkeypatch.setenv("GENOVA_CONFIG", str(path))
    monkeypatch.setenv("GENOVA_API_BASE_URL", "https://env.example")

    cfg = load_provider_config()
    assert cfg.api_key == "from-file"
    assert cfg.base_url == "https://env.example"
    assert cfg.timeout == 30.0


def test_missing_yaml_file_is_ignored(tmp_path: Path) -> None:
    cfg = load_provider_config(str(tmp_path / "absent.yaml"))
    assert not cfg.is_complete


def test_redacted_hides_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GENOVA_API_KEY", "super-secret")
    info = load_provider_config().redacted()
    assert info["has_api_key"] is True
    assert "super-secret" not in repr(info)


@pytest.mark.parametrize("raw", ["soon", "0", "-5"])
def test_unusable_timeout_falls_back(monkeypatch: pytest.MonkeyPatch, raw: str) -> None:
    monkeypatch.setenv("GENOVA_TIMEOUT", raw)
    assert load_provider_config().timeout == DEFAULT_TIMEOUT


@pytest.mark.parametrize("content", ["- a\n- b\n", "just a string\n", "key: [unclosed\n"])
def test_unusable_yaml_file_is_ignored(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, content: str) -> None:
    path = tmp_path / "provider.yaml"
    path.write_text(content, encoding="utf-8")
    monkeypatch.setenv("GENOVA_API_KEY", "k")
    monkeypatch.setenv("GENOVA_API_BASE_URL", "https://api.example")

    cfg = load_provider_config(str(path))
    assert cfg.is_complete
    assert cfg.timeout == DEFAULT_TIMEOUT
