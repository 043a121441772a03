# Tests for Gemini CLI live configuration adapter
import json

import pytest

from livesync.adapters.gemini import (
    GeminiAdapter,
    GeminiAuthType,
    detect_gemini_auth_type,
    parse_gemini_settings,
    read_env_file,
    set_selected_auth_type,
    write_env_file,
)
from livesync.errors import ConfigError, LiveConfigMissing, LiveParseError
from livesync.models import Provider
from livesync.paths import LivePaths

API_ENV = {"GEMINI_API_KEY": "key-1", "GOOGLE_GEMINI_BASE_URL": "https://gw.example"}


def api_provider(config=None, env=None) -> Provider:
    return Provider(
        id="p1",
        name="gateway",
        settings_config={"env": dict(env or API_ENV), "config": config},
    )


def write_live_settings(paths: LivePaths, data: dict) -> None:
    paths.gemini_dir.mkdir(parents=True, exist_ok=True)
    paths.gemini_settings.write_text(json.dumps(data))


def read_live_settings(paths: LivePaths) -> dict:
    return json.loads(paths.gemini_settings.read_text())


def test_gemini_adapter_properties(paths: LivePaths) -> None:
    """Test adapter name and live files in write order."""
    adapter = GeminiAdapter(paths)

    assert adapter.name == "Gemini CLI"
    assert adapter.live_files() == [paths.gemini_env, paths.gemini_settings]


class TestDetectAuthType:
    """Tests for the provider authentication classifier."""

    def test_official_category(self):
        provider = Provider(id="1", name="Anything", category="official")
        assert detect_gemini_auth_type(provider) is GeminiAuthType.GOOGLE_OFFICIAL

    def test_google_name(self):
        provider = Provider(id="1", name="  Google Gemini")
        assert detect_gemini_auth_type(provider) is GeminiAuthType.GOOGLE_OFFICIAL

    def test_packycode_by_name(self):
        provider = Provider(id="1", name="PackyCode Relay")
        assert detect_gemini_auth_type(provider) is GeminiAuthType.PACKYCODE

    def test_packycode_by_base_url(self):
        provider = Provider(id="1", name="relay", settings_config={
            "env": {"GOOGLE_GEMINI_BASE_URL": "https://api.PackyCode.com"}})
        assert detect_gemini_auth_type(provider) is GeminiAuthType.PACKYCODE

    def test_generic(self):
        provider = Provider(id="1", name="gateway", settings_config={"env": API_ENV})
        assert detect_gemini_auth_type(provider) is GeminiAuthType.GENERIC


class TestParseGeminiSettings:
    """Tests for validating the canonical Gemini document."""

    def test_absent_env_and_config(self):
        parsed = parse_gemini_settings({})

        assert parsed.env == {}
        assert parsed.config is None

    def test_env_value_not_string(self):
        with pytest.raises(ConfigError) as exc_info:
            parse_gemini_settings({"env": {"GEMINI_API_KEY": 42}})
        assert exc_info.value.field == "env.GEMINI_API_KEY"

    def test_env_not_object(self):
        with pytest.raises(ConfigError) as exc_info:
            parse_gemini_settings({"env": ["A=1"]})
        assert exc_info.value.field == "env"

    def test_config_not_object(self):
        with pytest.raises(ConfigError) as exc_info:
            parse_gemini_settings({"config": "theme=dark"})
        assert exc_info.value.field == "config"


class TestEnvFile:
    """Tests for .env parsing and rendering."""

    def test_write_sorted_and_quoted(self, tmp_path):
        env_file = tmp_path / ".env"
        write_env_file(env_file, {"B": "2", "A": "1"})

        assert env_file.read_text() == "A='1'\nB='2'\n"

    def test_write_empty(self, tmp_path):
        env_file = tmp_path / ".env"
        write_env_file(env_file, {})

        assert env_file.read_text() == ""
        assert not (tmp_path / ".env.tmp").exists()

    @pytest.mark.parametrize("value", [
        "k #tail",
        "a${HOME}b",
        "it's",
        "  padded  ",
    ])
    def test_values_read_back_literally(self, tmp_path, value):
        env_file = tmp_path / ".env"
        write_env_file(env_file, {"GEMINI_API_KEY": value})

        assert read_env_file(env_file) == {"GEMINI_API_KEY": value}

    def test_newline_in_value_does_not_add_keys(self, tmp_path):
        env_file = tmp_path / ".env"
        value = "k\nGOOGLE_GEMINI_BASE_URL=https://evil"
        write_env_file(env_file, {"GEMINI_API_KEY": value})

        assert read_env_file(env_file) == {"GEMINI_API_KEY": value}

    def test_read_invalid_utf8(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_bytes(b"GEMINI_API_KEY=caf\xe9\n")

        with pytest.raises(LiveParseError):
            read_env_file(env_file)

    def test_read_ignores_comments_and_blank_lines(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("# comment\n\nA=1\nB=two words\n")

        assert read_env_file(env_file) == {"A": "1", "B": "two words"}


class TestSetSelectedAuthType:
    """Tests for the nested auth flag."""

    def test_creates_nested_objects(self):
        settings: dict = {}
        set_selected_auth_type(settings, "gemini-api-key")
        assert settings == {"security": {"auth": {"selectedType": "gemini-api-key"}}}

    def test_preserves_siblings(self):
        settings = {"security": {"folderTrust": True, "auth": {"other": 1}}}
        set_selected_auth_type(settings, "oauth-personal")
        assert settings == {"security": {"folderTrust": True,
                                         "auth": {"other": 1, "selectedType": "oauth-personal"}}}

    def test_security_not_object(self):
        with pytest.raises(ConfigError) as exc_info:
            set_selected_auth_type({"security": "strict"}, "oauth-personal")
        assert exc_info.value.field == "security"


class TestWriteLive:
    """Tests for writing .env and merging settings.json."""

    def test_api_key_provider(self, paths: LivePaths):
        GeminiAdapter(paths).write_live(api_provider())

        assert paths.gemini_env.read_text() == (
            "GEMINI_API_KEY='key-1'\nGOOGLE_GEMINI_BASE_URL='https://gw.example'\n"
        )
        assert read_live_settings(paths) == {"security": {"auth": {"selectedType": "gemini-api-key"}}}

    def test_official_provider_clears_env(self, paths: LivePaths):
        paths.gemini_dir.mkdir(parents=True)
        paths.gemini_env.write_text("GEMINI_API_KEY=stale\n")
        provider = Provider(id="g", name="Google", category="official",
                            settings_config={"env": {"GEMINI_API_KEY": "ignored"}})

        GeminiAdapter(paths).write_live(provider)

        assert paths.gemini_env.read_text() == ""
        assert read_live_settings(paths)["security"]["auth"]["selectedType"] == "oauth-personal"

    def test_api_key_provider_requires_key(self, paths: LivePaths):
        with pytest.raises(ConfigError) as exc_info:
            GeminiAdapter(paths).write_live(
                api_provider(env={"GOOGLE_GEMINI_BASE_URL": "https://gw.example"})
            )
        assert exc_info.value.field == "env.GEMINI_API_KEY"
        assert not paths.gemini_env.exists()

    def test_api_key_provider_rejects_blank_base_url(self, paths: LivePaths):
        with pytest.raises(ConfigError) as exc_info:
            GeminiAdapter(paths).write_live(
                api_provider(env={"GEMINI_API_KEY": "k", "GOOGLE_GEMINI_BASE_URL": "  "})
            )
        assert exc_info.value.field == "env.GOOGLE_GEMINI_BASE_URL"

    def test_null_config_preserves_settings(self, paths: LivePaths):
        """Scenario: config null keeps mcpServers and theme, only the flag changes."""
        existing = {"mcpServers": {"fs": {"command": "npx"}}, "theme": "dark"}
        write_live_settings(paths, existing)

        GeminiAdapter(paths).write_live(api_provider(config=None))

        assert read_live_settings(paths) == {
            "mcpServers": {"fs": {"command": "npx"}},
            "theme": "dark",
            "security": {"auth": {"selectedType": "gemini-api-key"}},
        }

    def test_config_merges_top_level_keys(self, paths: LivePaths):
        write_live_settings(paths, {"theme": "dark", "mcpServers": {"fs": {}}})

        GeminiAdapter(paths).write_live(api_provider(config={"theme": "light", "vimMode": True}))

        settings = read_live_settings(paths)
        assert settings["theme"] == "light"
        assert settings["vimMode"] is True
        assert settings["mcpServers"] == {"fs": {}}

    def test_flag_survives_config_security(self, paths: LivePaths):
        """Test that the auth flag is applied after merging provider config."""
        config = {"security": {"auth": {"selectedType": "oauth-personal"}}}

        GeminiAdapter(paths).write_live(api_provider(config=config))

        assert read_live_settings(paths)["security"]["auth"]["selectedType"] == "gemini-api-key"

    def test_corrupt_settings_aborts_before_env(self, paths: LivePaths):
        paths.gemini_dir.mkdir(parents=True)
        paths.gemini_settings.write_text("{ broken")

        with pytest.raises(LiveParseError):
            GeminiAdapter(paths).write_live(api_provider())
        assert not paths.gemini_env.exists()

    def test_settings_root_must_be_object(self, paths: LivePaths):
        paths.gemini_dir.mkdir(parents=True)
        paths.gemini_settings.write_text("[]")

        with pytest.raises(ConfigError):
            GeminiAdapter(paths).write_live(api_provider())

    def test_write_is_idempotent(self, paths: LivePaths):
        write_live_settings(paths, {"theme": "dark"})
        adapter = GeminiAdapter(paths)
        adapter.write_live(api_provider())
        env_before = paths.gemini_env.read_bytes()
        settings_before = paths.gemini_settings.read_bytes()

        adapter.write_live(api_provider())

        assert paths.gemini_env.read_bytes() == env_before
        assert paths.gemini_settings.read_bytes() == settings_before


class TestReadLive:
    """Tests for reading the canonical document back."""

    def test_missing_env(self, paths: LivePaths):
        with pytest.raises(LiveConfigMissing):
            GeminiAdapter(paths).read_live()

    def test_round_trip_preserves_unrelated(self, paths: LivePaths):
        write_live_settings(paths, {"mcpServers": {"fs": {"command": "npx"}}})
        adapter = GeminiAdapter(paths)
        adapter.write_live(api_provider(config=None))

        live = adapter.read_live()

        assert live["env"] == API_ENV
        assert live["config"]["mcpServers"] == {"fs": {"command": "npx"}}
        assert live["config"]["security"]["auth"]["selectedType"] == "gemini-api-key"

    def test_missing_settings_reads_empty(self, paths: LivePaths):
        paths.gemini_dir.mkdir(parents=True)
        paths.gemini_env.write_text("GEMINI_API_KEY=k\n")

        assert GeminiAdapter(paths).read_live() == {"env": {"GEMINI_API_KEY": "k"}, "config": {}}
