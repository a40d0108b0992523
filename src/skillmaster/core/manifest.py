"""Project manifest (skillmaster.json) management."""

from dataclasses import dataclass, field
from pathlib import Path
import json

from skillmaster.core.config import DEFAULT_INSTALL_DIR


MANIFEST_FILE_NAME = "skillmaster.json"
DEFAULT_PROJECT_VERSION = "1.0.0"


class ManifestError(Exception):
    """Error reading or writing the project manifest."""

    pass


class ManifestNotFoundError(ManifestError):
    """No manifest in the project directory."""

    pass


class ManifestParseError(ManifestError):
    """Manifest exists but is not valid."""

    pass


@dataclass
class ManifestConfig:
    """The config section of the manifest."""

    install_dir: str = DEFAULT_INSTALL_DIR
    auto_merge: bool = True

    def to_dict(self) -> dict:
        return {"installDir": self.install_dir, "autoMerge": self.auto_merge}

    @classmethod
    def from_dict(cls, data: dict) -> "ManifestConfig":
        """Create ManifestConfig from the parsed config object.

        Raises ValueError when a field has the wrong type.
        """
        install_dir = data.get("installDir") or DEFAULT_INSTALL_DIR
        if not isinstance(install_dir, str):
            raise ValueError("'config.installDir' must be a string")

        auto_merge = data.get("autoMerge", True)
        if not isinstance(auto_merge, bool):
            raise ValueError("'config.autoMerge' must be true or false")

        return cls(install_dir=install_dir, auto_merge=auto_merge)


@dataclass
class Manifest:
    """Declared dependencies of a project, keyed by owner/repo."""

    name: str
    version: str = DEFAULT_PROJECT_VERSION
    dependencies: dict[str, str] = field(default_factory=dict)
    config: ManifestConfig = field(default_factory=ManifestConfig)

    @classmethod
    def new(cls, name: str, install_dir: str = DEFAULT_INSTALL_DIR) -> "Manifest":
        """Create a manifest with default values."""
        return cls(name=name, config=ManifestConfig(install_dir=install_dir))

    @staticmethod
    def path_for(project_dir: Path) -> Path:
        return Path(project_dir) / MANIFEST_FILE_NAME

    @classmethod
    def exists(cls, project_dir: Path) -> bool:
        return cls.path_for(project_dir).is_file()

    @classmethod
    def load(cls, project_dir: Path) -> "Manifest":
        """Load the manifest from a project directory.

        Missing dependencies default to an empty mapping and a missing
        install directory defaults to '.ai'.
        """
        path = cls.path_for(project_dir)
        if not path.exists():
            raise ManifestNotFoundError(
                f"Manifest file not found: {path} (run 'skillmaster init' to create one)"
            )

        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ManifestParseError(f"Failed to parse manifest {path}: {e}") from e
        except OSError as e:
            raise ManifestError(f"Failed to read manifest {path}: {e}") from e

        if not isinstance(data, dict):
            raise ManifestParseError(f"Failed to parse manifest {path}: expected a JSON object")

        dependencies = data.get("dependencies") or {}
        if not isinstance(dependencies, dict):
            raise ManifestParseError(f"Failed to parse manifest {path}: 'dependencies' must be an object")

        config_data = data.get("config") or {}
        if not isinstance(config_data, dict):
            raise ManifestParseError(f"Failed to parse manifest {path}: 'config' must be an object")
        try:
            config = ManifestConfig.from_dict(config_data)
        except ValueError as e:
            raise ManifestParseError(f"Failed to parse manifest {path}: {e}") from e

        return cls(
            name=data.get("name") or Path(project_dir).resolve().name,
            version=data.get("version") or DEFAULT_PROJECT_VERSION,
            dependencies={str(k): str(v) for k, v in dependencies.items()},
            config=config,
        )

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "version": self.version,
            "dependencies": dict(self.dependencies),
            "config": self.config.to_dict(),
        }

    def save(self, project_dir: Path) -> None:
        """Save the manifest to a project directory."""
        path = self.path_for(project_dir)
        try:
            with open(path, "w", encoding="utf-8") as f:
                json.dump(self.to_dict(), f, indent=2)
                f.write("\n")
        except OSError as e:
            raise ManifestError(f"Failed to write manifest {path}: {e}") from e

    def add_dependency(self, key: str, version: str) -> None:
        """Add or update a dependency."""
        self.dependencies[key] = version

    def remove_dependency(self, key: str) -> None:
        """Remove a dependency. Does nothing if it is not declared."""
        self.dependencies.pop(key, None)

    def has_dependency(self, key: str) -> bool:
        return key in self.dependencies

    def install_path(self, project_dir: Path) -> Path:
        """Absolute location of the install directory for this project."""
        return Path(project_dir) / self.config.install_dir
