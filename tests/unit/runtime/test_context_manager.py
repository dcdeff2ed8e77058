"""Unit tests for the application context."""

from src.trpg.runtime.config.config_data import ConfigData
from src.trpg.runtime.context import (
    AppContext,
    get_config,
    get_context,
    set_config,
    with_context,
)


class TestContextManager:
    def test_default_context_available(self):
        context = get_context()
        config = get_config()

        assert isinstance(context, AppContext)
        assert isinstance(config, ConfigData)
        assert context.config is config

    def test_with_context_override_single_field(self):
        original_config = get_config()
        original_level = original_config.logging.level

        override = ConfigData()
        override.persistence.orphan_policy = "delete"

        with with_context(override):
            config = get_config()
            assert config.persistence.orphan_policy == "delete"
            assert config.logging.level == original_level
            assert config.database.url == original_config.database.url

        assert get_config() is original_config

    def test_with_context_nested_overrides(self):
        original_config = get_config()

        level1 = ConfigData()
        level1.persistence.default_actor = "level1"

        with with_context(level1):
            level2 = ConfigData()
            level2.logging.level = "DEBUG"

            with with_context(level2):
                config = get_config()
                assert config.persistence.default_actor == "level1"
                assert config.logging.level == "DEBUG"

            assert get_config().logging.level == original_config.logging.level
            assert get_config().persistence.default_actor == "level1"

        assert get_config() is original_config

    def test_with_context_none_is_noop(self):
        original_config = get_config()

        with with_context(None):
            assert get_config() is original_config

    def test_with_context_rejects_other_types(self):
        try:
            with with_context({"logging": {"level": "DEBUG"}}):
                pass
        except ValueError as e:
            assert "ConfigData" in str(e)
        else:
            raise AssertionError("with_context accepted a dict")

    def test_set_config_replaces_whole_configuration(self):
        original_config = get_config()
        replacement = ConfigData()
        replacement.app.name = "replacement"

        with with_context(ConfigData()):
            set_config(replacement)
            assert get_config() is replacement

        assert get_config() is original_config
