"""Unit tests for config_template module."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from src.trpg.runtime.config.config_data import ConfigData
from src.trpg.runtime.config.config_template import (
    apply_environment_overrides,
    load_config,
    load_templated_yaml,
    substitute_env_vars,
)


class TestSubstituteEnvVars:
    """Test cases for substitute_env_vars function."""

    def test_substitute_simple_env_var(self):
        with patch.dict(os.environ, {"TEST_VAR": "test_value"}):
            assert substitute_env_vars("${TEST_VAR}") == "test_value"

    def test_substitute_env_var_in_text(self):
        with patch.dict(os.environ, {"HOST": "localhost", "PORT": "5432"}):
            text = "postgresql://${HOST}:${PORT}/trpg"
            assert substitute_env_vars(text) == "postgresql://localhost:5432/trpg"

    def test_substitute_env_var_with_default(self):
        with patch.dict(os.environ, {}, clear=True):
            assert substitute_env_vars("${MISSING_VAR:-default_value}") == "default_value"

    def test_substitute_env_var_with_default_when_set(self):
        with patch.dict(os.environ, {"PRESENT_VAR": "actual_value"}):
            assert substitute_env_vars("${PRESENT_VAR:-default_value}") == "actual_value"

    def test_substitute_required_env_var_missing(self):
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(
                ValueError, match="Required environment variable MISSING_VAR not set"
            ):
                substitute_env_vars("${MISSING_VAR}")

    def test_substitute_required_env_var_custom_message(self):
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(ValueError, match="set the database"):
                substitute_env_vars("${DB:?set the database}")


class TestEnvironmentOverrides:
    def test_prefixed_variables_replace_plain_ones(self):
        with patch.dict(os.environ, {"PRODUCTION_DATABASE_URL": "postgresql://db/trpg"}, clear=True):
            apply_environment_overrides("production")

            assert os.environ["DATABASE_URL"] == "postgresql://db/trpg"


class TestLoadTemplatedYaml:
    def test_load_config_file(self, tmp_path: Path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text(
            "config:\n"
            "  database:\n"
            "    url: ${TEST_DB_URL:-sqlite:///./fallback.db}\n"
            "  persistence:\n"
            "    orphan_policy: delete\n"
            "    default_actor: loader\n"
        )

        with patch.dict(os.environ, {"TEST_DB_URL": "sqlite:///./from-env.db"}):
            config = load_templated_yaml(config_file)

        assert isinstance(config, ConfigData)
        assert config.database.url == "sqlite:///./from-env.db"
        assert config.persistence.orphan_policy == "delete"
        assert config.persistence.default_actor == "loader"
        assert config.logging.level == "INFO"

    def test_invalid_orphan_policy(self, tmp_path: Path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("config:\n  persistence:\n    orphan_policy: shred\n")

        with pytest.raises(ValueError, match="Invalid configuration"):
            load_templated_yaml(config_file)

    def test_empty_file(self, tmp_path: Path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("")

        with pytest.raises(ValueError, match="Failed to parse YAML"):
            load_templated_yaml(config_file)

    def test_missing_file_raises(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            load_templated_yaml(tmp_path / "missing.yaml")

    def test_load_config_falls_back_to_defaults(self, tmp_path: Path):
        config = load_config(tmp_path / "missing.yaml")

        assert config == ConfigData()

    def test_repository_config_loads(self):
        config = load_templated_yaml(Path("config.yaml"))

        assert config.app.name == "trpg"
        assert config.persistence.orphan_policy in ("detach", "delete")


class TestDatabaseConfig:
    def test_sqlite_detection(self):
        config = ConfigData()
        config.database.url = "sqlite:///:memory:"

        assert config.database.is_sqlite
        assert config.database.connection_string == "sqlite:///:memory:"

    def test_password_from_environment(self):
        config = ConfigData()
        config.database.url = "postgresql://trpg@db:5432/trpg"
        config.database.password_env_var = "TRPG_DB_PASSWORD"

        with patch.dict(os.environ, {"TRPG_DB_PASSWORD": "s3cret"}):
            assert config.database.connection_string == "postgresql://trpg:s3cret@db:5432/trpg"

    def test_password_env_var_missing(self):
        config = ConfigData()
        config.database.url = "postgresql://trpg@db:5432/trpg"
        config.database.password_env_var = "TRPG_DB_PASSWORD"

        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(ValueError, match="TRPG_DB_PASSWORD"):
                config.database.connection_string
