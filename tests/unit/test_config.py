"""
Tests for project configuration and process settings.
"""

import json
import logging
from pathlib import Path

import pytest

from geo_data.core.config import (
    CONFIG_SCHEMA_URL,
    DEFAULT_REGISTRY,
    ConfigStatus,
    RegistrySettings,
    detect_defaults,
    get_config_result,
    get_settings,
    set_settings,
    validate_config,
)
from geo_data.core.files import write_json_atomic, write_text_atomic
from geo_data.errors import ConfigError


def _raw(**overrides):
    raw = {
        "outputDir": "./src/data/geo",
        "languages": ["en", "ar"],
        "includeCoordinates": False,
        "typescript": True,
    }
    raw.update(overrides)
    return raw


class TestValidateConfig:

    def test_valid(self):
        config = validate_config(_raw())
        assert config.output_dir == "./src/data/geo"
        assert config.languages == ["en", "ar"]
        assert config.typescript is True
        assert config.module_name == "index.ts"

    @pytest.mark.parametrize("key,value", [
        ("outputDir", ""),
        ("outputDir", 42),
        ("languages", []),
        ("languages", "en"),
        ("languages", ["en", 7]),
        ("includeCoordinates", "yes"),
        ("typescript", None),
    ])
    def test_invalid_values(self, key, value):
        with pytest.raises(ConfigError):
            validate_config(_raw(**{key: value}))

    def test_not_an_object(self):
        with pytest.raises(ConfigError):
            validate_config(["en"])

    def test_unknown_language_warns(self, caplog):
        with caplog.at_level(logging.WARNING, logger="geo_data.core.config"):
            config = validate_config(_raw(languages=["en", "xx"]))
        assert config.languages == ["en", "xx"]
        assert any('"xx"' in r.getMessage() for r in caplog.records)


class TestConfigFiles:
    """Reading and writing geo-data.json / geo-data.yaml."""

    def test_not_found(self, tmp_path):
        assert get_config_result(tmp_path).status == ConfigStatus.NOT_FOUND

    def test_json_round_trip(self, tmp_path):
        config = validate_config(_raw())
        config.save(tmp_path / "geo-data.json")

        data = json.loads((tmp_path / "geo-data.json").read_text(encoding="utf-8"))
        assert data["$schema"] == CONFIG_SCHEMA_URL
        assert data["outputDir"] == "./src/data/geo"

        result = get_config_result(tmp_path)
        assert result.status == ConfigStatus.OK
        assert result.config.languages == ["en", "ar"]

    def test_yaml_config(self, tmp_path):
        (tmp_path / "geo-data.yaml").write_text(
            "outputDir: ./data/geo\n"
            "languages: [en, fr]\n"
            "includeCoordinates: true\n"
            "typescript: false\n",
            encoding="utf-8",
        )
        result = get_config_result(tmp_path)
        assert result.status == ConfigStatus.OK
        assert result.config.include_coordinates is True
        assert result.config.module_name == "index.js"

    def test_unparseable(self, tmp_path):
        (tmp_path / "geo-data.json").write_text("{oops", encoding="utf-8")
        result = get_config_result(tmp_path)
        assert result.status == ConfigStatus.INVALID
        assert "geo-data.json" in result.error

    def test_invalid_values(self, tmp_path):
        (tmp_path / "geo-data.json").write_text(json.dumps(_raw(languages=[])), encoding="utf-8")
        result = get_config_result(tmp_path)
        assert result.status == ConfigStatus.INVALID
        assert "languages" in result.error


class TestDetectDefaults:

    def test_plain_project(self, tmp_path):
        config = detect_defaults(tmp_path)
        assert config.output_dir == "./data/geo"
        assert config.typescript is False
        assert config.languages == ["en"]

    def test_src_and_tsconfig(self, tmp_path):
        (tmp_path / "src").mkdir()
        (tmp_path / "tsconfig.json").write_text("{}", encoding="utf-8")
        config = detect_defaults(tmp_path)
        assert config.output_dir == "./src/data/geo"
        assert config.typescript is True


class TestRegistrySettings:

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("GEO_DATA_REGISTRY", raising=False)
        monkeypatch.delenv("GEO_DATA_CACHE_DIR", raising=False)
        settings = RegistrySettings.from_env()
        assert settings.registry_base == DEFAULT_REGISTRY
        assert settings.cache_dir == Path.home() / ".cache" / "geo-data"
        assert settings.timeout == 30.0

    def test_environment_overrides(self, monkeypatch, tmp_path):
        monkeypatch.setenv("GEO_DATA_REGISTRY", str(tmp_path / "registry"))
        monkeypatch.setenv("GEO_DATA_CACHE_DIR", str(tmp_path / "cache"))
        settings = get_settings()
        assert settings.registry_base == str(tmp_path / "registry")
        assert settings.cache_dir == tmp_path / "cache"

    def test_set_settings(self, tmp_path):
        custom = RegistrySettings(registry_base="https://mirror.test", cache_dir=tmp_path)
        set_settings(custom)
        assert get_settings() is custom
        set_settings(None)
        assert get_settings() is not custom


class TestAtomicWrites:

    def test_replaces_content(self, tmp_path):
        path = tmp_path / "out" / "sa.json"
        write_text_atomic(path, "old")
        size = write_text_atomic(path, "الرياض")
        assert path.read_text(encoding="utf-8") == "الرياض"
        assert size == len("الرياض".encode("utf-8"))
        assert [p.name for p in path.parent.iterdir()] == ["sa.json"]

    def test_json_format(self, tmp_path):
        path = tmp_path / "sa.json"
        write_json_atomic(path, {"name": {"ar": "الرياض"}})
        text = path.read_text(encoding="utf-8")
        assert text.endswith("}\n")
        assert "الرياض" in text
        assert '  "name"' in text

    def test_failed_write_keeps_previous_content(self, tmp_path, monkeypatch):
        path = tmp_path / "sa.json"
        path.write_text("previous", encoding="utf-8")

        def broken_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr("geo_data.core.files.os.replace", broken_replace)
        with pytest.raises(OSError):
            write_text_atomic(path, "new")

        assert path.read_text(encoding="utf-8") == "previous"
        assert [p.name for p in tmp_path.iterdir()] == ["sa.json"]
