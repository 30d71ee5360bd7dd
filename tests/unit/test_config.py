"""Unit tests for settings loading."""

import pytest

from coursehub.config import ConfigError, Settings, load_settings


@pytest.mark.unit
class TestSettings:
    """Tests for Settings defaults and validation."""

    def test_defaults(self) -> None:
        settings = Settings()
        assert settings.db_path == "coursehub.db"
        assert settings.tick_interval_seconds == 60.0
        assert settings.max_attempts == 3
        assert settings.terminal_markers == ()
        assert settings.proposer_url is None
        assert settings.uses_memory_store is False
        assert settings.log_dir == "logs"
        assert settings.log_level == "INFO"

    def test_memory_store(self) -> None:
        assert Settings(db_path=":memory:").uses_memory_store is True

    def test_from_dict_rejects_unknown_keys(self) -> None:
        with pytest.raises(ConfigError, match="Unknown settings: colour"):
            Settings.from_dict({"colour": "blue"})

    def test_from_dict_converts_markers(self) -> None:
        settings = Settings.from_dict({"terminal_markers": ["course full", "closed"]})
        assert settings.terminal_markers == ("course full", "closed")

    def test_from_dict_rejects_scalar_markers(self) -> None:
        with pytest.raises(ConfigError, match="terminal_markers"):
            Settings.from_dict({"terminal_markers": "course full"})

    @pytest.mark.parametrize(
        ("field", "value"),
        [
            ("tick_interval_seconds", 0),
            ("max_attempts", 0),
            ("proposer_timeout", -1),
            ("gateway_failure_rate", 1.5),
            ("max_attempts", "many"),
            ("log_level", "LOUD"),
        ],
    )
    def test_invalid_values(self, field: str, value: object) -> None:
        with pytest.raises(ConfigError):
            Settings.from_dict({field: value})


@pytest.mark.unit
class TestLoadSettings:
    """Tests for load_settings."""

    def test_no_file_no_env(self) -> None:
        assert load_settings(environ={}) == Settings()

    def test_yaml_file(self, tmp_path) -> None:
        config = tmp_path / "coursehub.yaml"
        config.write_text("db_path: ':memory:'\nmax_attempts: 5\ntick_interval_seconds: 15\n")

        settings = load_settings(config, environ={})

        assert settings.uses_memory_store
        assert settings.max_attempts == 5
        assert settings.tick_interval_seconds == 15.0

    def test_empty_yaml_file(self, tmp_path) -> None:
        config = tmp_path / "coursehub.yaml"
        config.write_text("")
        assert load_settings(config, environ={}) == Settings()

    def test_env_overrides_file(self, tmp_path) -> None:
        config = tmp_path / "coursehub.yaml"
        config.write_text("max_attempts: 5\n")

        settings = load_settings(
            config,
            environ={"COURSEHUB_MAX_ATTEMPTS": "2", "COURSEHUB_GATEWAY_FAILURE_RATE": "0"},
        )

        assert settings.max_attempts == 2
        assert settings.gateway_failure_rate == 0.0

    def test_log_settings_from_env(self, tmp_path) -> None:
        settings = load_settings(
            environ={"COURSEHUB_LOG_DIR": str(tmp_path), "COURSEHUB_LOG_LEVEL": "debug"}
        )

        assert settings.log_dir == str(tmp_path)
        assert settings.log_level == "DEBUG"

    def test_missing_file(self, tmp_path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            load_settings(tmp_path / "nope.yaml", environ={})

    def test_invalid_yaml(self, tmp_path) -> None:
        config = tmp_path / "coursehub.yaml"
        config.write_text("db_path: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_settings(config, environ={})

    def test_non_mapping_yaml(self, tmp_path) -> None:
        config = tmp_path / "coursehub.yaml"
        config.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="YAML mapping"):
            load_settings(config, environ={})

    def test_invalid_env_value(self) -> None:
        with pytest.raises(ConfigError):
            load_settings(environ={"COURSEHUB_TICK_INTERVAL": "soon"})
