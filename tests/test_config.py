"""
Tests for configuration loading.
"""

import pytest
import tempfile
from pathlib import Path
from envtool.core.config import (
    ConfigError,
    DEFAULT_BASHRC_PATH,
    DEFAULT_ENV_FILE,
    DEFAULT_ZSHRC_PATH,
    env_bool,
    environ_settings,
    find_config_file,
    load_settings,
)


class TestDefaults:

    def test_defaults_without_config(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            settings = load_settings(environ={}, home=Path(tmpdir))

            assert settings.env_file == DEFAULT_ENV_FILE
            assert settings.init.bashrc == DEFAULT_BASHRC_PATH
            assert settings.init.zshrc == DEFAULT_ZSHRC_PATH
            assert settings.init.user is False
            assert settings.config_file is None


class TestConfigFile:
    """Test YAML config files."""

    def test_home_config_discovered(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            home = Path(tmpdir)
            (home / ".envtool.yaml").write_text("env-file: .env.local\n")

            assert find_config_file(home) == home / ".envtool.yaml"
            settings = load_settings(environ={}, home=home)

            assert settings.env_file == ".env.local"
            assert settings.config_file == str(home / ".envtool.yaml")

    def test_yml_extension(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            home = Path(tmpdir)
            (home / ".envtool.yml").write_text("env-file: dev.env\n")

            assert load_settings(environ={}, home=home).env_file == "dev.env"

    def test_init_section(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            config = Path(tmpdir) / "envtool.yaml"
            config.write_text(
                "init:\n"
                "  bashrc: /opt/bashrc\n"
                "  zshrc: /opt/zshrc\n"
                "  user: true\n"
                "  zsh: true\n"
            )

            settings = load_settings(str(config), environ={})

            assert settings.init.bashrc == "/opt/bashrc"
            assert settings.init.zshrc == "/opt/zshrc"
            assert settings.init.user is True
            assert settings.init.zsh is True
            assert settings.init.bash is False

    def test_tilde_expanded_in_paths(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            config = Path(tmpdir) / "envtool.yaml"
            config.write_text("init:\n  bashrc: ~/custom_bashrc\n")

            settings = load_settings(str(config), environ={})

            assert not settings.init.bashrc.startswith("~")
            assert settings.init.bashrc.endswith("custom_bashrc")

    def test_empty_config(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            config = Path(tmpdir) / "envtool.yaml"
            config.write_text("")

            assert load_settings(str(config), environ={}).env_file == DEFAULT_ENV_FILE

    def test_explicit_missing_config_raises(self):
        with pytest.raises(ConfigError, match="not found"):
            load_settings("/nonexistent/envtool.yaml", environ={})

    def test_invalid_yaml_raises(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            config = Path(tmpdir) / "envtool.yaml"
            config.write_text("env-file: [unclosed\n")

            with pytest.raises(ConfigError, match="invalid YAML"):
                load_settings(str(config), environ={})

    def test_non_mapping_raises(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            config = Path(tmpdir) / "envtool.yaml"
            config.write_text("- just\n- a list\n")

            with pytest.raises(ConfigError, match="mapping"):
                load_settings(str(config), environ={})

    def test_wrong_type_raises(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            config = Path(tmpdir) / "envtool.yaml"
            config.write_text("init:\n  user: sometimes\n")

            with pytest.raises(ConfigError, match="init.user"):
                load_settings(str(config), environ={})


class TestEnvironment:
    """Test ENVTOOL_* overrides."""

    def test_env_file_override(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            home = Path(tmpdir)
            (home / ".envtool.yaml").write_text("env-file: from-config.env\n")

            settings = load_settings(environ={"ENVTOOL_ENV_FILE": "from-env.env"}, home=home)

            assert settings.env_file == "from-env.env"

    def test_init_overrides(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            environ = {
                "ENVTOOL_INIT_BASHRC": "/env/bashrc",
                "ENVTOOL_INIT_USER": "1",
                "ENVTOOL_INIT_BASH": "true",
            }
            settings = load_settings(environ=environ, home=Path(tmpdir))

            assert settings.init.bashrc == "/env/bashrc"
            assert settings.init.user is True
            assert settings.init.bash is True
            assert settings.init.zsh is False

    def test_false_value_overrides_config(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            home = Path(tmpdir)
            (home / ".envtool.yaml").write_text("init:\n  user: true\n")

            settings = load_settings(environ={"ENVTOOL_INIT_USER": "off"}, home=home)

            assert settings.init.user is False

    def test_environ_settings_ignores_config_file(self):
        """Environment overrides apply without reading any config file."""
        settings = environ_settings({"ENVTOOL_ENV_FILE": "from-env.env", "ENVTOOL_INIT_ZSH": "yes"})

        assert settings.env_file == "from-env.env"
        assert settings.init.zsh is True
        assert settings.init.bashrc == DEFAULT_BASHRC_PATH
        assert settings.config_file is None


class TestEnvBool:

    @pytest.mark.parametrize("value", ["0", "false", "No", "OFF", "", "  "])
    def test_false_values(self, value):
        assert env_bool("FLAG", True, {"FLAG": value}) is False

    @pytest.mark.parametrize("value", ["1", "true", "yes", "on"])
    def test_true_values(self, value):
        assert env_bool("FLAG", False, {"FLAG": value}) is True

    def test_default_when_unset(self):
        assert env_bool("FLAG", True, {}) is True
        assert env_bool("FLAG", False, {}) is False
