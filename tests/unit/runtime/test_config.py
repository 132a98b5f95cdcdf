"""Unit tests for configuration loading and the context manager system."""

import pytest

from src.accounts.api.utils.app_startup import resolve_signing_secret
from src.accounts.runtime.config.config_data import DEV_SIGNING_SECRET, ConfigData
from src.accounts.runtime.config.config_template import (
    load_config,
    load_templated_yaml,
    substitute_env_vars,
)
from src.accounts.runtime.context import AppContext, get_config, get_context, with_context

CONFIG_YAML = """
config:
  app:
    environment: test
    port: ${PORT:-5000}
    session_signing_secret: ${JWT_SECRET:-}
  database:
    url: ${DATABASE_URL:-sqlite://}
  jwt:
    access_token_ttl_seconds: 3600
"""


class TestSubstituteEnvVars:
    def test_default_used_when_unset(self, monkeypatch):
        monkeypatch.delenv("PORT", raising=False)

        assert substitute_env_vars("port: ${PORT:-5000}") == "port: 5000"

    def test_environment_wins(self, monkeypatch):
        monkeypatch.setenv("PORT", "8080")

        assert substitute_env_vars("port: ${PORT:-5000}") == "port: 8080"

    def test_required_variable_missing(self, monkeypatch):
        monkeypatch.delenv("JWT_SECRET", raising=False)

        with pytest.raises(ValueError, match="JWT_SECRET"):
            substitute_env_vars("${JWT_SECRET:?set a signing secret}")


class TestLoadConfig:
    def test_loads_yaml_with_substitution(self, tmp_path, monkeypatch):
        monkeypatch.setenv("APP_ENVIRONMENT", "test")
        monkeypatch.setenv("PORT", "7000")
        monkeypatch.setenv("JWT_SECRET", "from-env")
        monkeypatch.delenv("DATABASE_URL", raising=False)
        path = tmp_path / "config.yaml"
        path.write_text(CONFIG_YAML)

        config = load_templated_yaml(path)

        assert config.app.port == 7000
        assert config.app.session_signing_secret == "from-env"
        assert config.database.url == "sqlite://"
        assert config.database.is_memory

    def test_environment_prefixed_overrides(self, tmp_path, monkeypatch):
        monkeypatch.setenv("APP_ENVIRONMENT", "test")
        monkeypatch.setenv("TEST_DATABASE_URL", "sqlite:///./test-accounts.db")
        # Overrides write os.environ directly; register the key so it is restored
        monkeypatch.setenv("DATABASE_URL", "sqlite://")
        path = tmp_path / "config.yaml"
        path.write_text(CONFIG_YAML)

        config = load_templated_yaml(path)

        assert config.database.url == "sqlite:///./test-accounts.db"
        assert not config.database.is_memory

    def test_invalid_values_are_reported(self, tmp_path, monkeypatch):
        monkeypatch.setenv("PORT", "not-a-port")
        path = tmp_path / "config.yaml"
        path.write_text(CONFIG_YAML)

        with pytest.raises(ValueError, match="Invalid configuration"):
            load_templated_yaml(path)

    def test_missing_file_falls_back_to_defaults(self, tmp_path):
        config = load_config(tmp_path / "absent.yaml")

        assert config == ConfigData()
        assert config.app.port == 5000
        assert config.jwt.access_token_ttl_seconds == 3600


class TestContextManager:
    def test_default_context_available(self):
        context = get_context()

        assert isinstance(context, AppContext)
        assert context.config is get_config()

    def test_partial_override_is_merged_and_reverted(self):
        original = get_config()
        override = ConfigData()
        override.jwt.access_token_ttl_seconds = 60

        with with_context(override):
            config = get_config()
            assert config.jwt.access_token_ttl_seconds == 60
            assert config.jwt.algorithm == original.jwt.algorithm
            assert config.database.url == original.database.url

        assert get_config() is original

    def test_rejects_non_config_override(self):
        with pytest.raises(ValueError):
            with with_context({"jwt": {}}):  # type: ignore[arg-type]
                pass


class TestResolveSigningSecret:
    def _config(self, environment: str, secret: str | None) -> ConfigData:
        config = ConfigData()
        config.app.environment = environment
        config.app.session_signing_secret = secret
        return config

    def test_development_falls_back_to_placeholder(self):
        assert resolve_signing_secret(self._config("development", None)) == DEV_SIGNING_SECRET

    def test_configured_secret_is_used(self):
        assert resolve_signing_secret(self._config("production", "s3cr3t")) == "s3cr3t"

    @pytest.mark.parametrize("secret", [None, "", DEV_SIGNING_SECRET])
    def test_production_refuses_missing_or_placeholder(self, secret):
        with pytest.raises(RuntimeError):
            resolve_signing_secret(self._config("production", secret))
