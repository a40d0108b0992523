"""Global settings for skillmaster."""

from pathlib import Path
from dataclasses import dataclass, field
import logging
import os

import yaml

from skillmaster.core.github import GITHUB_API_BASE


DEFAULT_INSTALL_DIR = ".ai"
SETTINGS_FILE_NAME = "config.yaml"

logger = logging.getLogger(__name__)


class SettingsError(Exception):
    """Settings file could not be read or written."""

    pass


def default_home() -> Path:
    return Path(os.environ.get("SKILLMASTER_HOME", Path.home() / ".skillmaster"))


@dataclass
class Settings:
    """User settings, loaded once and passed to clients and commands."""

    home_dir: Path = field(default_factory=default_home)
    github_token: str = ""
    install_dir: str = DEFAULT_INSTALL_DIR
    api_url: str = GITHUB_API_BASE
    token_from_env: bool = False

    @property
    def settings_path(self) -> Path:
        return self.home_dir / SETTINGS_FILE_NAME

    @classmethod
    def load(cls, home_dir: Path | None = None) -> "Settings":
        """Load settings from file, falling back to defaults.

        GITHUB_TOKEN in the environment takes precedence over the file.
        """
        settings = cls(home_dir=home_dir or default_home())
        path = settings.settings_path

        if path.exists():
            try:
                with open(path) as f:
                    data = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as e:
                raise SettingsError(f"Failed to read settings {path}: {e}") from e

            if not isinstance(data, dict):
                raise SettingsError(f"Failed to parse settings {path}: expected a mapping")

            github = data.get("github") or {}
            settings.github_token = github.get("token") or ""
            settings.api_url = github.get("api_url") or GITHUB_API_BASE
            settings.install_dir = data.get("install_dir") or DEFAULT_INSTALL_DIR
        else:
            logger.debug("No settings file at %s, using defaults", path)

        env_token = os.environ.get("GITHUB_TOKEN", "")
        if env_token:
            settings.github_token = env_token
            settings.token_from_env = True

        return settings

    def to_dict(self) -> dict:
        """Convert to dictionary for YAML serialization."""
        # A token taken from the environment is never written back
        token = "" if self.token_from_env else self.github_token
        return {
            "github": {"token": token, "api_url": self.api_url},
            "install_dir": self.install_dir,
        }

    def save(self) -> None:
        """Save settings to file."""
        try:
            self.home_dir.mkdir(parents=True, exist_ok=True)
            with open(self.settings_path, "w") as f:
                yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)
        except OSError as e:
            raise SettingsError(f"Failed to write settings {self.settings_path}: {e}") from e

    def initialize(self) -> bool:
        """Write a default settings file if none exists. Returns True if created."""
        if self.settings_path.exists():
            return False
        self.save()
        return True

    @property
    def masked_token(self) -> str:
        token = self.github_token
        if not token:
            return ""
        return token[:4] + "..." + token[-4:]
