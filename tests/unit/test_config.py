from pathlib import Path

import pytest
import yaml

from cloudboard.core.config import AppConfig, ConfigLoader


class TestConfigLoader:
    def test_load_config_reads_yaml(self, tmp_path: Path) -> None:
        config_file = tmp_path / "cloudboard.yaml"
        config_file.write_text(yaml.dump({"region": "us-west-2", "tick_rate_ms": 100}))

        config = ConfigLoader().load_config(str(config_file))

        assert config == {"region": "us-west-2", "tick_rate_ms": 100}

    def test_load_config_missing_file_returns_empty(self) -> None:
        assert ConfigLoader().load_config("/nonexistent/path/cloudboard.yaml") == {}

    def test_load_config_uses_env_path(self, tmp_path: Path, monkeypatch) -> None:
        config_file = tmp_path / "custom.yaml"
        config_file.write_text("profile: prod\n")
        monkeypatch.setenv("CLOUDBOARD_CONFIG", str(config_file))

        assert ConfigLoader().load_config() == {"profile": "prod"}

    def test_load_config_resolves_env_interpolation(self, tmp_path: Path, monkeypatch) -> None:
        config_file = tmp_path / "cloudboard.yaml"
        config_file.write_text("region: ${oc.env:BOARD_REGION}\n")
        monkeypatch.setenv("BOARD_REGION", "ap-south-1")

        assert ConfigLoader().load_config(str(config_file)) == {"region": "ap-south-1"}

    def test_load_config_unresolvable_interpolation(self, tmp_path: Path) -> None:
        config_file = tmp_path / "cloudboard.yaml"
        config_file.write_text("region: ${missing_key}\n")

        with pytest.raises(ValueError, match="Configuration variable resolution error"):
            ConfigLoader().load_config(str(config_file))

    def test_load_config_invalid_yaml(self, tmp_path: Path) -> None:
        config_file = tmp_path / "cloudboard.yaml"
        config_file.write_text("region: [unclosed\n")

        with pytest.raises(ValueError, match="Invalid YAML"):
            ConfigLoader().load_config(str(config_file))

    def test_load_config_requires_mapping(self, tmp_path: Path) -> None:
        config_file = tmp_path / "cloudboard.yaml"
        config_file.write_text("- a\n- b\n")

        with pytest.raises(ValueError, match="must contain a mapping"):
            ConfigLoader().load_config(str(config_file))


class TestBuild:
    def test_defaults(self, monkeypatch, tmp_path: Path) -> None:
        monkeypatch.delenv("AWS_REGION", raising=False)
        monkeypatch.delenv("AWS_DEFAULT_REGION", raising=False)
        monkeypatch.setenv("CLOUDBOARD_DIR", str(tmp_path))

        config = ConfigLoader().build()

        assert config.region is None
        assert config.profile is None
        assert config.tick_rate_ms == 250
        assert config.tick_seconds == 0.25
        assert config.settings_path == tmp_path / "settings.yaml"
        assert config.login_command == "aws"

    def test_region_from_environment(self, monkeypatch) -> None:
        monkeypatch.delenv("AWS_REGION", raising=False)
        monkeypatch.setenv("AWS_DEFAULT_REGION", "eu-north-1")

        assert ConfigLoader().build().region == "eu-north-1"

    def test_overrides_win_over_file_values(self) -> None:
        config = ConfigLoader().build(
            {"region": "us-west-2", "profile": "dev"},
            {"region": "eu-west-1", "profile": None},
        )

        assert config.region == "eu-west-1"
        assert config.profile == "dev"

    def test_unknown_keys_warn(self, caplog) -> None:
        ConfigLoader().build({"colour": "blue"})

        assert "Ignoring unknown config key: colour" in caplog.text

    @pytest.mark.parametrize("tick_rate_ms", [0, -5, "fast", True, 2.5])
    def test_invalid_tick_rate(self, tick_rate_ms) -> None:
        with pytest.raises(ValueError, match="tick_rate_ms must be a positive integer"):
            ConfigLoader().build({"tick_rate_ms": tick_rate_ms})

    def test_paths_are_expanded(self, monkeypatch, tmp_path: Path) -> None:
        monkeypatch.setenv("HOME", str(tmp_path))

        config = ConfigLoader().build({"aws_config_path": "~/.aws/config"})

        assert config.aws_config_path == tmp_path / ".aws" / "config"


def test_app_config_is_frozen() -> None:
    config = AppConfig()

    with pytest.raises(AttributeError):
        config.region = "us-east-2"
