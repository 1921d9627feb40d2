"""
Tests for settings loading.
"""

import pytest

from flint_release_notifier.config import ConfigError, load_settings, parse_watched_mods


class TestDefaults:
    """Defaults when nothing is configured."""

    def test_defaults(self):
        settings = load_settings(environ={})

        assert settings.cron == "0 * * * *"
        assert settings.labymod_version == "4.2.47"
        assert settings.watched_mods == ("",)
        assert settings.webhook_url == ""
        assert settings.webhook_content == ""
        assert settings.timezone == "Europe/Berlin"
        assert settings.cache_dir == ".cache"
        assert settings.request_timeout == 10
        assert settings.api_base_url == "https://flintmc.net/api/client-store"

    def test_empty_variables_fall_back_to_defaults(self):
        settings = load_settings(environ={"CRON_INTERVAL": "", "LABYMOD_VERSION": ""})

        assert settings.cron == "0 * * * *"
        assert settings.labymod_version == "4.2.47"


class TestEnvironment:
    """Values read from environment variables."""

    def test_overrides(self):
        settings = load_settings(environ={
            "CRON_INTERVAL": "*/5 * * * *",
            "LABYMOD_VERSION": "4.3.0",
            "WATCHED_MODS": "ExampleMod,Other",
            "DISCORD_WEBHOOK": "https://discord.test/hook",
            "DISCORD_CONTENT": "<@&1>",
            "REQUEST_TIMEOUT": "2.5",
            "API_BASE_URL": "http://localhost:8080/api/",
            "LOG_LEVEL": "debug",
        })

        assert settings.cron == "*/5 * * * *"
        assert settings.labymod_version == "4.3.0"
        assert settings.watched_mods == ("examplemod", "other")
        assert settings.webhook_url == "https://discord.test/hook"
        assert settings.webhook_content == "<@&1>"
        assert settings.request_timeout == 2.5
        assert settings.api_base_url == "http://localhost:8080/api"
        assert settings.log_level == "DEBUG"

    @pytest.mark.parametrize("value", ["abc", "0", "-1"])
    def test_invalid_timeout(self, value):
        with pytest.raises(ConfigError):
            load_settings(environ={"REQUEST_TIMEOUT": value})


class TestConfigFile:
    """Values read from a YAML config file."""

    def test_file_values_and_env_precedence(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "labymod_version: '4.1.0'\n"
            "watched_mods:\n"
            "  - FirstMod\n"
            "  - secondmod\n"
            "discord_content: hello\n"
        )

        settings = load_settings(environ={
            "CONFIG_FILE": str(path),
            "DISCORD_CONTENT": "from env",
        })

        assert settings.labymod_version == "4.1.0"
        assert settings.watched_mods == ("firstmod", "secondmod")
        assert settings.webhook_content == "from env"

    def test_file_must_be_a_mapping(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- just\n- a list\n")

        with pytest.raises(ConfigError):
            load_settings(environ={"CONFIG_FILE": str(path)})


class TestParseWatchedMods:
    """Tests for parse_watched_mods()."""

    def test_split_and_lowercase(self):
        assert parse_watched_mods("A,b,C") == ("a", "b", "c")

    def test_empty_string_is_single_empty_entry(self):
        assert parse_watched_mods("") == ("",)

    def test_list_input(self):
        assert parse_watched_mods(["Mod"]) == ("mod",)
