"""Tests for global settings."""

from pathlib import Path

import pytest
import yaml

from skillmaster.core.config import Settings, SettingsError


@pytest.fixture(autouse=True)
def no_env_token(monkeypatch):
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)


class TestSettingsLoad:
    """Tests for Settings.load."""

    def test_defaults_without_file(self, tmp_path: Path) -> None:
        settings = Settings.load(tmp_path)

        assert settings.github_token == ""
        assert settings.install_dir == ".ai"
        assert settings.api_url == "https://api.github.com"
        assert settings.settings_path == tmp_path / "config.yaml"

    def test_reads_file(self, tmp_path: Path) -> None:
        (tmp_path / "config.yaml").write_text(
            yaml.dump({"github": {"token": "ghp_abcdefgh"}, "install_dir": "prompts"})
        )

        settings = Settings.load(tmp_path)

        assert settings.github_token == "ghp_abcdefgh"
        assert settings.install_dir == "prompts"
        assert settings.masked_token == "ghp_...efgh"

    def test_env_token_overrides_file(self, tmp_path: Path, monkeypatch) -> None:
        (tmp_path / "config.yaml").write_text(yaml.dump({"github": {"token": "from-file"}}))
        monkeypatch.setenv("GITHUB_TOKEN", "from-env")

        settings = Settings.load(tmp_path)

        assert settings.github_token == "from-env"
        assert settings.token_from_env
        assert settings.to_dict()["github"]["token"] == ""

    def test_home_from_env(self, tmp_path: Path, monkeypatch) -> None:
        monkeypatch.setenv("SKILLMASTER_HOME", str(tmp_path / "custom"))

        assert Settings.load().home_dir == tmp_path / "custom"

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        (tmp_path / "config.yaml").write_text("github: [unclosed")

        with pytest.raises(SettingsError):
            Settings.load(tmp_path)

    def test_not_a_mapping(self, tmp_path: Path) -> None:
        (tmp_path / "config.yaml").write_text("- a\n- b\n")

        with pytest.raises(SettingsError):
            Settings.load(tmp_path)


class TestSettingsSave:
    """Tests for Settings.save and Settings.initialize."""

    def test_round_trip(self, tmp_path: Path) -> None:
        Settings(home_dir=tmp_path / "home", github_token="tok", install_dir="x").save()

        settings = Settings.load(tmp_path / "home")

        assert settings.github_token == "tok"
        assert settings.install_dir == "x"

    def test_initialize_does_not_overwrite(self, tmp_path: Path) -> None:
        Settings(home_dir=tmp_path, github_token="keep").save()

        created = Settings(home_dir=tmp_path).initialize()

        assert not created
        assert Settings.load(tmp_path).github_token == "keep"

    def test_initialize_creates_file(self, tmp_path: Path) -> None:
        settings = Settings(home_dir=tmp_path / "new")

        assert settings.initialize()
        assert settings.settings_path.exists()
