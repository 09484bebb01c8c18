"""Tests for gitsage.global_config module."""

import os
import stat
from pathlib import Path

import pytest
import yaml

from gitsage.config import DEFAULT_DEPENDENCY_MANIFESTS, LLMProvider
from gitsage.global_config import (
    GlobalConfigError,
    ensure_global_config_dir,
    get_active_model,
    get_active_provider,
    get_config_file_path,
    get_credential,
    get_dependency_manifests,
    get_global_config_dir,
    get_max_chunk_length,
    get_staging_strategy,
    initialize_default_config,
    is_configured,
    load_credentials,
    load_global_config,
    save_credential,
    save_global_config,
    set_provider_and_model,
    set_staging_strategy,
)


@pytest.fixture
def config_dir(mocker, temp_dir):
    """Point the global config directory at a temp directory."""
    mock_dir = temp_dir / ".gitsage"
    mocker.patch("gitsage.global_config._CONFIG_DIR", mock_dir)
    return mock_dir


def _write_config(config_dir: Path, data) -> None:
    config_dir.mkdir(parents=True, exist_ok=True)
    (config_dir / "config.yaml").write_text(yaml.dump(data))


class TestGlobalConfigDir:
    """Tests for global config directory functions."""

    def test_get_global_config_dir_returns_path(self):
        """Test that get_global_config_dir returns a Path."""
        result = get_global_config_dir()
        assert isinstance(result, Path)
        assert ".gitsage" in str(result)

    def test_ensure_global_config_dir_creates_directory(self, config_dir):
        """Test that ensure_global_config_dir creates the directory."""
        assert ensure_global_config_dir() == config_dir
        assert config_dir.exists()

    def test_config_file_path(self, config_dir):
        """Test that config file path ends with config.yaml."""
        assert get_config_file_path() == config_dir / "config.yaml"


class TestLoadSaveConfig:
    """Tests for loading and saving config.yaml."""

    def test_missing_file_is_empty(self, config_dir):
        """Test a missing config file loads as empty."""
        assert load_global_config() == {}
        assert not is_configured()

    def test_round_trip(self, config_dir):
        """Test saved config is loaded back."""
        save_global_config({"provider": "groq", "model": "llama-3.1-8b-instant"})

        assert load_global_config() == {"provider": "groq", "model": "llama-3.1-8b-instant"}
        assert is_configured()

    def test_invalid_yaml_raises(self, config_dir):
        """Test unparseable YAML raises GlobalConfigError."""
        config_dir.mkdir(parents=True)
        (config_dir / "config.yaml").write_text("provider: [unclosed")

        with pytest.raises(GlobalConfigError):
            load_global_config()

    def test_non_mapping_raises(self, config_dir):
        """Test a YAML list is rejected."""
        _write_config(config_dir, ["a", "b"])

        with pytest.raises(GlobalConfigError):
            load_global_config()


class TestCredentials:
    """Tests for the credentials file."""

    def test_save_and_get(self, config_dir):
        """Test credentials are saved and read back."""
        save_credential("OPENAI_API_KEY", "sk-test")
        save_credential("GROQ_API_KEY", "gsk-test")

        assert get_credential("OPENAI_API_KEY") == "sk-test"
        assert load_credentials() == {"OPENAI_API_KEY": "sk-test", "GROQ_API_KEY": "gsk-test"}

    def test_update_existing(self, config_dir):
        """Test saving a key twice keeps the latest value."""
        save_credential("OPENAI_API_KEY", "old")
        save_credential("OPENAI_API_KEY", "new")

        assert get_credential("OPENAI_API_KEY") == "new"

    def test_owner_only_permissions(self, config_dir):
        """Test the credentials file is readable by the owner only."""
        save_credential("OPENAI_API_KEY", "sk-test")

        mode = os.stat(config_dir / "credentials").st_mode
        assert stat.S_IMODE(mode) == stat.S_IRUSR | stat.S_IWUSR

    def test_comments_ignored(self, config_dir):
        """Test comment and blank lines are skipped."""
        config_dir.mkdir(parents=True)
        (config_dir / "credentials").write_text("# comment\n\nKEY=value=with=equals\n")

        assert load_credentials() == {"KEY": "value=with=equals"}

    def test_missing_credential(self, config_dir):
        """Test an unknown key returns None."""
        assert get_credential("ANTHROPIC_API_KEY") is None


class TestSettings:
    """Tests for individual settings."""

    def test_provider_and_model(self, config_dir):
        """Test provider and model are stored together."""
        set_provider_and_model(LLMProvider.ANTHROPIC, "claude-3-5-haiku-latest")

        assert get_active_provider() == LLMProvider.ANTHROPIC
        assert get_active_model() == "claude-3-5-haiku-latest"

    def test_unknown_provider_is_none(self, config_dir):
        """Test an unknown provider name is ignored."""
        _write_config(config_dir, {"provider": "google"})

        assert get_active_provider() is None

    @pytest.mark.parametrize("value,expected", [(2000, 2000), (0, None), (-5, None), ("big", None), (True, None)])
    def test_max_chunk_length(self, config_dir, value, expected):
        """Test only positive integers are accepted."""
        _write_config(config_dir, {"max_chunk_length": value})

        assert get_max_chunk_length() == expected

    @pytest.mark.parametrize("value,expected", [("patch", "patch"), ("FILES", "files"), ("hunks", None)])
    def test_staging_strategy(self, config_dir, value, expected):
        """Test the staging strategy is validated."""
        _write_config(config_dir, {"staging_strategy": value})

        assert get_staging_strategy() == expected

    def test_set_staging_strategy(self, config_dir):
        """Test setting a valid strategy."""
        set_staging_strategy("patch")

        assert get_staging_strategy() == "patch"

    def test_set_invalid_staging_strategy(self, config_dir):
        """Test an unknown strategy is rejected."""
        with pytest.raises(GlobalConfigError):
            set_staging_strategy("hunks")

    def test_dependency_manifests(self, config_dir):
        """Test a custom manifest list is read."""
        _write_config(config_dir, {"dependency_manifests": ["Gemfile.lock"]})

        assert get_dependency_manifests() == ["Gemfile.lock"]

    def test_dependency_manifests_unset(self, config_dir):
        """Test an unset manifest list returns None."""
        assert get_dependency_manifests() is None


class TestInitializeDefaultConfig:
    """Tests for initialize_default_config."""

    def test_writes_defaults(self, config_dir):
        """Test defaults are written when no config exists."""
        initialize_default_config()

        config = load_global_config()
        assert config["provider"] == "openai"
        assert config["max_chunk_length"] == 4000
        assert config["staging_strategy"] == "files"
        assert config["dependency_manifests"] == list(DEFAULT_DEPENDENCY_MANIFESTS)

    def test_keeps_existing_config(self, config_dir):
        """Test an existing config is not overwritten."""
        _write_config(config_dir, {"provider": "groq"})

        initialize_default_config()

        assert load_global_config() == {"provider": "groq"}
