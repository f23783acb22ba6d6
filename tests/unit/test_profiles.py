import subprocess
from pathlib import Path
from types import SimpleNamespace

import pytest

from cloudboard.providers.aws.profiles import credentials_configured, list_profiles
from cloudboard.providers.aws.sso import build_sso_login_command, run_sso_login


class TestListProfiles:
    def test_reads_default_and_named_profiles_in_order(self, tmp_path: Path) -> None:
        config = tmp_path / "config"
        config.write_text(
            "[default]\nregion = us-east-1\n\n"
            "[profile dev]\nsso_start_url = https://example.awsapps.com/start\n\n"
            "[sso-session corp]\nsso_region = us-east-1\n\n"
            "[profile  prod ]\nregion = eu-west-1\n"
        )

        assert list_profiles(config) == ["default", "dev", "prod"]

    def test_missing_file_returns_empty(self, tmp_path: Path) -> None:
        assert list_profiles(tmp_path / "nope") == []

    def test_unparseable_file_returns_empty(self, tmp_path: Path) -> None:
        config = tmp_path / "config"
        config.write_text("region = us-east-1 without a section\n")

        assert list_profiles(config) == []

    def test_uses_aws_config_file_env(self, tmp_path: Path, monkeypatch) -> None:
        config = tmp_path / "custom"
        config.write_text("[profile staging]\n")
        monkeypatch.setenv("AWS_CONFIG_FILE", str(config))

        assert list_profiles() == ["staging"]


class TestCredentialsConfigured:
    @pytest.fixture(autouse=True)
    def no_env_keys(self, monkeypatch) -> None:
        monkeypatch.delenv("AWS_ACCESS_KEY_ID", raising=False)
        monkeypatch.delenv("AWS_SECRET_ACCESS_KEY", raising=False)

    def test_nothing_configured(self, tmp_path: Path) -> None:
        assert credentials_configured(home=tmp_path) is False

    def test_environment_keys(self, tmp_path: Path, monkeypatch) -> None:
        monkeypatch.setenv("AWS_ACCESS_KEY_ID", "AKIAEXAMPLE")
        monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "secret")

        assert credentials_configured(home=tmp_path) is True

    @pytest.mark.parametrize("filename", ["credentials", "config"])
    def test_shared_files(self, tmp_path: Path, filename: str) -> None:
        (tmp_path / ".aws").mkdir()
        (tmp_path / ".aws" / filename).write_text("[default]\n")

        assert credentials_configured(home=tmp_path) is True


class TestSsoLogin:
    def test_command_with_profile(self) -> None:
        assert build_sso_login_command("dev") == ["aws", "sso", "login", "--profile", "dev"]

    def test_command_without_profile(self) -> None:
        assert build_sso_login_command(None, command="aws2") == ["aws2", "sso", "login"]

    def test_success(self) -> None:
        calls = []

        def runner(argv, **kwargs):
            calls.append((argv, kwargs))
            return SimpleNamespace(returncode=0, stdout="Successfully logged into Start URL", stderr="")

        ok, output = run_sso_login("dev", runner=runner)

        assert ok is True
        assert output == "Successfully logged into Start URL"
        assert calls[0][0] == ["aws", "sso", "login", "--profile", "dev"]
        assert calls[0][1]["capture_output"] is True
        assert calls[0][1]["check"] is False

    def test_failure_prefers_stderr(self) -> None:
        def runner(argv, **kwargs):
            return SimpleNamespace(
                returncode=255,
                stdout="ignored",
                stderr="Missing the following required SSO configuration values: sso_region",
            )

        ok, output = run_sso_login("dev", runner=runner)

        assert ok is False
        assert output.startswith("Missing the following required SSO configuration")

    @pytest.mark.parametrize(
        "error",
        [FileNotFoundError("aws: command not found"), subprocess.TimeoutExpired(["aws"], 600)],
    )
    def test_helper_cannot_run(self, error) -> None:
        def runner(argv, **kwargs):
            raise error

        ok, output = run_sso_login(None, runner=runner)

        assert ok is False
        assert output == str(error)
