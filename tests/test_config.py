"""Tests for configuration."""

from outcome_registry.config import Settings


def test_defaults():
    settings = Settings(_env_file=None)

    assert settings.default_time_window == "90d"
    assert settings.default_include_overrides is False
    assert settings.registry_top_reasons == 5
    assert settings.instrument_catalog_path is None
    assert settings.has_catalog_file is False


def test_environment_overrides(monkeypatch, tmp_path):
    catalog_path = tmp_path / "instruments.json"
    monkeypatch.setenv("DEFAULT_TIME_WINDOW", "12mo")
    monkeypatch.setenv("DEFAULT_INCLUDE_OVERRIDES", "true")
    monkeypatch.setenv("INSTRUMENT_CATALOG_PATH", str(catalog_path))

    settings = Settings(_env_file=None)

    assert settings.default_time_window == "12mo"
    assert settings.default_include_overrides is True
    assert settings.instrument_catalog_path == catalog_path
    assert settings.has_catalog_file is True
