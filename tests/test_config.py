"""
Tests for environment-driven settings.
"""

import pytest

from kvs.config import DEFAULT_MAP_SIZE, Settings


class TestSettings:
    """Tests for Settings.from_env()."""

    def test_defaults(self):
        settings = Settings.from_env({})

        assert settings.host == "127.0.0.1"
        assert settings.port == 12345
        assert settings.log_level == "INFO"
        assert settings.map_size == DEFAULT_MAP_SIZE
        assert settings.listen_addr == "127.0.0.1:12345"

    def test_overrides(self):
        settings = Settings.from_env(
            {"HOST": "0.0.0.0", "PORT": "8080", "LOG_LEVEL": "debug", "KVS_MAP_SIZE": "1048576"}
        )

        assert settings.listen_addr == "0.0.0.0:8080"
        assert settings.log_level == "DEBUG"
        assert settings.map_size == 1048576

    def test_empty_values_use_defaults(self):
        settings = Settings.from_env({"HOST": "", "PORT": ""})

        assert settings.listen_addr == "127.0.0.1:12345"

    @pytest.mark.parametrize("port", ["http", "70000", "-1"])
    def test_invalid_port(self, port):
        with pytest.raises(ValueError, match="PORT"):
            Settings.from_env({"PORT": port})

    @pytest.mark.parametrize("map_size", ["big", "0"])
    def test_invalid_map_size(self, map_size):
        with pytest.raises(ValueError, match="KVS_MAP_SIZE"):
            Settings.from_env({"KVS_MAP_SIZE": map_size})

    def test_reads_process_environment(self, monkeypatch):
        monkeypatch.setenv("PORT", "9999")
        monkeypatch.delenv("HOST", raising=False)

        settings = Settings.from_env()

        assert settings.listen_addr == "127.0.0.1:9999"
