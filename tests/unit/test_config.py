"""
Unit tests for environment-driven configuration.
"""

import pytest

from zoo_registry.core.config import BACKEND_MEMORY, BACKEND_SQL, Settings, get_settings

CONFIG_VARS = (
    "DATABASE_URL",
    "ZOO_REPOSITORY_BACKEND",
    "LOG_LEVEL",
    "LOG_JSON",
    "LOG_TO_FILE",
    "ZOO_SEED_DEMO_DATA",
)


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Clear config variables and run from a directory without a .env file."""
    for name in CONFIG_VARS:
        # setenv first so values loaded from a .env file are undone afterwards
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    return monkeypatch


@pytest.mark.unit
class TestSettings:
    def test_defaults(self, clean_env, tmp_path):
        settings = get_settings(str(tmp_path / "missing.env"))

        assert settings == Settings()
        assert settings.repository_backend == BACKEND_MEMORY
        assert settings.database_url == "sqlite:///:memory:"
        assert settings.seed_demo_data is False

    def test_environment_overrides(self, clean_env, tmp_path):
        clean_env.setenv("ZOO_REPOSITORY_BACKEND", " SQL ")
        clean_env.setenv("DATABASE_URL", "sqlite:///zoo.db")
        clean_env.setenv("LOG_LEVEL", "debug")
        clean_env.setenv("LOG_JSON", "yes")
        clean_env.setenv("ZOO_SEED_DEMO_DATA", "1")

        settings = get_settings(str(tmp_path / "missing.env"))

        assert settings.repository_backend == BACKEND_SQL
        assert settings.database_url == "sqlite:///zoo.db"
        assert settings.log_level == "DEBUG"
        assert settings.log_json is True
        assert settings.log_to_file is False
        assert settings.seed_demo_data is True

    def test_env_file_is_read(self, clean_env, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("ZOO_SEED_DEMO_DATA=true\nLOG_LEVEL=WARNING\n")

        settings = get_settings(str(env_file))

        assert settings.seed_demo_data is True
        assert settings.log_level == "WARNING"

    def test_environment_wins_over_env_file(self, clean_env, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("LOG_LEVEL=WARNING\n")
        clean_env.setenv("LOG_LEVEL", "ERROR")

        assert get_settings(str(env_file)).log_level == "ERROR"

    def test_unknown_backend_rejected(self):
        with pytest.raises(ValueError, match="Unsupported repository backend"):
            Settings(repository_backend="redis")
