"""Tests for ConfigService and the config document model."""

import stat
from pathlib import Path

import pytest
import yaml

from izanami_cli.exceptions import ConfigFileError, InvalidConfigKeyError, IzError
from izanami_cli.models.config import ConfigDocument
from izanami_cli.models.enums import ConfigSource
from izanami_cli.services.config_service import ConfigService, get_config_service


@pytest.fixture
def service(config_path: Path) -> ConfigService:
    return ConfigService(config_path, environ={})


class TestGlobalKeys:
    """Tests for get/set/unset of global keys."""

    @pytest.mark.parametrize(
        "key,value",
        [("timeout", "45"), ("verbose", "true"), ("output-format", "json"), ("color", "never")],
    )
    def test_set_then_get_round_trip(self, service: ConfigService, key: str, value: str) -> None:
        service.set_config_value(key, value)

        config_value = service.get_config_value(key)

        assert config_value.value == value
        assert config_value.source == ConfigSource.FILE

    def test_set_writes_typed_yaml(self, service: ConfigService, config_path: Path) -> None:
        service.set_config_value("timeout", "45")
        service.set_config_value("verbose", "yes")

        data = yaml.safe_load(config_path.read_text())

        assert data == {"timeout": 45, "verbose": True}

    def test_set_restricts_permissions(self, service: ConfigService, config_path: Path) -> None:
        service.set_config_value("timeout", "45")

        assert stat.S_IMODE(config_path.stat().st_mode) == 0o600
        assert stat.S_IMODE(config_path.parent.stat().st_mode) == 0o700

    def test_defaults(self, service: ConfigService) -> None:
        assert service.get_config_value("timeout").value == "30"
        assert service.get_config_value("timeout").source == ConfigSource.DEFAULT
        assert service.get_config_value("verbose").value == "false"
        assert service.get_config_value("color").value == "auto"

    def test_env_when_not_in_file(self, config_path: Path) -> None:
        service = ConfigService(config_path, environ={"IZ_output_format": "json"})

        config_value = service.get_config_value("output-format")

        assert config_value.value == "json"
        assert config_value.source == ConfigSource.ENV

    def test_file_beats_env(self, config_path: Path) -> None:
        service = ConfigService(config_path, environ={"IZ_timeout": "12"})
        service.set_config_value("timeout", "45")

        assert service.get_config_value("timeout").source == ConfigSource.FILE
        assert service.get_global_value("timeout") == 45

    def test_false_in_file_beats_env(self, write_config, config_path: Path) -> None:
        write_config({"verbose": False})
        service = ConfigService(config_path, environ={"IZ_verbose": "true"})

        assert service.get_global_value("verbose") is False
        assert service.get_config_value("verbose").source == ConfigSource.FILE

    def test_zero_in_file_beats_env(self, write_config, config_path: Path) -> None:
        write_config({"timeout": 0})
        service = ConfigService(config_path, environ={"IZ_timeout": "12"})

        assert service.get_global_value("timeout") == 0
        assert service.get_config_value("timeout").value == "0"

    def test_has_key(self, write_config, config_path: Path) -> None:
        write_config({"verbose": False, "custom": "x"})
        document = ConfigDocument.load(config_path)

        assert document.has_key("verbose")
        assert not document.has_key("timeout")
        assert not document.has_key("custom")

    def test_typed_env_value(self, config_path: Path) -> None:
        service = ConfigService(config_path, environ={"IZ_timeout": "12"})

        assert service.get_global_value("timeout") == 12

    def test_non_global_key_is_not_set(self, service: ConfigService) -> None:
        config_value = service.get_config_value("tenant")

        assert config_value.source == ConfigSource.NOT_SET
        assert config_value.value == ""

    def test_unknown_key_rejected(self, service: ConfigService) -> None:
        with pytest.raises(InvalidConfigKeyError):
            service.get_config_value("bogus")
        with pytest.raises(InvalidConfigKeyError, match="invalid config key: bogus"):
            service.set_config_value("bogus", "1")

    def test_profile_key_rejected_with_hint(self, service: ConfigService) -> None:
        with pytest.raises(InvalidConfigKeyError) as exc_info:
            service.set_config_value("tenant", "acme")

        assert "profile-specific setting" in str(exc_info.value)
        assert "iz profiles set tenant <value>" in str(exc_info.value)

    @pytest.mark.parametrize(
        "key,value",
        [("timeout", "abc"), ("timeout", "-1"), ("verbose", "maybe"), ("color", "pink")],
    )
    def test_invalid_values(self, service: ConfigService, key: str, value: str) -> None:
        with pytest.raises(IzError, match="invalid value"):
            service.set_config_value(key, value)

    def test_unset_falls_back_to_default(self, service: ConfigService) -> None:
        service.set_config_value("timeout", "45")

        service.unset_config_value("timeout")

        assert service.get_config_value("timeout").source == ConfigSource.DEFAULT

    def test_unset_without_file(self, service: ConfigService) -> None:
        with pytest.raises(ConfigFileError, match="config file does not exist"):
            service.unset_config_value("timeout")

    def test_list_covers_every_key(self, service: ConfigService, write_config) -> None:
        write_config({"profiles": {"b": {}, "a": {}}})

        values = service.get_all_config_values()

        assert values["profiles"].value == "a, b"
        assert values["profiles"].source == ConfigSource.FILE
        assert values["timeout"].source == ConfigSource.DEFAULT
        assert values["tenant"].source == ConfigSource.NOT_SET

    def test_factory(self, config_path: Path) -> None:
        assert get_config_service(config_path).config_path == config_path


class TestDocument:
    """Tests for loading and saving the config document."""

    def test_missing_file_is_empty(self, config_path: Path) -> None:
        document = ConfigDocument.load(config_path)

        assert document.profiles == {}
        assert document.timeout is None

    def test_invalid_yaml(self, config_path: Path) -> None:
        config_path.parent.mkdir(parents=True)
        config_path.write_text("timeout: [unclosed\n")

        with pytest.raises(ConfigFileError) as exc_info:
            ConfigDocument.load(config_path)

        assert exc_info.value.path == config_path
        assert str(config_path) in str(exc_info.value)

    def test_non_mapping_document(self, config_path: Path) -> None:
        config_path.parent.mkdir(parents=True)
        config_path.write_text("- a\n- b\n")

        with pytest.raises(ConfigFileError, match="failed to parse config file"):
            ConfigDocument.load(config_path)

    def test_unknown_keys_survive_round_trip(self, write_config, config_path: Path) -> None:
        write_config({"timeout": 10, "custom": "kept"})
        service = ConfigService(config_path, environ={})

        service.set_config_value("color", "always")

        data = yaml.safe_load(config_path.read_text())
        assert data["custom"] == "kept"
        assert data["color"] == "always"

    def test_loose_permissions_are_repaired(self, write_config, config_path: Path) -> None:
        write_config({"timeout": 10})
        config_path.chmod(0o644)

        ConfigService(config_path, environ={}).load_document()

        assert stat.S_IMODE(config_path.stat().st_mode) == 0o600

    def test_hyphenated_keys(self, write_config, config_path: Path) -> None:
        write_config(
            {
                "output-format": "json",
                "profiles": {
                    "p": {
                        "leader-url": "http://x",
                        "insecure-skip-verify": True,
                        "workers": {"w": {"url": "http://w"}},
                    }
                },
            }
        )

        document = ConfigDocument.load(config_path)

        assert document.output_format == "json"
        assert document.profiles["p"].leader_url == "http://x"
        assert document.profiles["p"].insecure_skip_verify is True
        assert document.profiles["p"].workers["w"].url == "http://w"


class TestInitAndValidate:
    """Tests for creating and validating the config file."""

    def test_init_creates_sample_and_gitignore(
        self, service: ConfigService, config_path: Path
    ) -> None:
        service.init_config_file()

        assert config_path.exists()
        assert (config_path.parent / ".gitignore").exists()
        assert stat.S_IMODE(config_path.stat().st_mode) == 0o600
        assert service.get_config_value("timeout").source == ConfigSource.FILE

    def test_sample_values_beat_env(self, config_path: Path) -> None:
        service = ConfigService(config_path, environ={"IZ_timeout": "12", "IZ_color": "never"})
        service.init_config_file()

        assert service.get_global_value("timeout") == 30
        assert service.get_config_value("color").source == ConfigSource.FILE
        assert "beat IZ_<key>" in config_path.read_text()

    def test_init_refuses_overwrite(self, service: ConfigService) -> None:
        service.init_config_file()

        with pytest.raises(IzError, match="already exists"):
            service.init_config_file()

        service.init_config_file(force=True)

    def test_sample_is_valid(self, service: ConfigService) -> None:
        service.init_config_file()

        assert service.validate_config() == (True, [])

    def test_missing_file_is_invalid(self, service: ConfigService) -> None:
        is_valid, issues = service.validate_config()

        assert not is_valid
        assert issues == ["config file does not exist"]

    def test_reports_every_issue(self, service: ConfigService, write_config) -> None:
        write_config(
            {
                "timeout": -5,
                "output-format": "xml",
                "color": "pink",
                "active_profile": "ghost",
                "profiles": {"p": {"default-worker": "gone"}},
            }
        )

        is_valid, issues = service.validate_config()

        assert not is_valid
        assert len(issues) == 5
        assert any("active_profile" in issue and "ghost" in issue for issue in issues)
        assert any("default-worker" in issue for issue in issues)
