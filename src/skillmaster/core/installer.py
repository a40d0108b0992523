"""Writing package files into the project install directory."""

from pathlib import Path
import logging
import shutil

from skillmaster.core.github import RemoteClient, is_markdown


logger = logging.getLogger(__name__)


class InstallError(Exception):
    """Error while writing package files.

    files_written is the number of files already on disk when it failed;
    those files are left in place.
    """

    def __init__(self, message: str, files_written: int = 0):
        super().__init__(message)
        self.files_written = files_written


class NotInstalledError(Exception):
    """Package directory does not exist."""

    pass


def package_dir(install_dir: Path, owner: str, repo: str) -> Path:
    """Namespaced directory for a package: <install_dir>/<owner>-<repo>."""
    return Path(install_dir) / f"{owner}-{repo}"


def count_installed_files(install_dir: Path, owner: str, repo: str) -> int:
    """Count markdown files of an installed package. Returns 0 if not installed."""
    target_dir = package_dir(install_dir, owner, repo)
    if not target_dir.is_dir():
        return 0

    return sum(1 for item in target_dir.rglob("*") if item.is_file() and is_markdown(item.name))


def uninstall_package(owner: str, repo: str, install_dir: Path) -> None:
    """Remove a package directory and everything in it."""
    target_dir = package_dir(install_dir, owner, repo)
    if not target_dir.exists():
        raise NotInstalledError(f"Package not installed: {owner}/{repo}")

    try:
        shutil.rmtree(target_dir)
    except OSError as e:
        raise InstallError(f"Failed to remove package directory {target_dir}: {e}") from e
    logger.debug("Removed %s", target_dir)


class Installer:
    """Installs packages fetched through a RemoteClient."""

    def __init__(self, client: RemoteClient):
        self.client = client

    def install_package(self, owner: str, repo: str, install_dir: Path, replace: bool = False) -> int:
        """Install a package from its default branch. Returns the number of files written.

        With replace, an existing package directory is removed once the new
        files have been fetched, so a failed fetch leaves it untouched.
        """
        metadata = self.client.get_metadata(owner, repo)
        ref = metadata.default_branch
        logger.debug("Installing %s/%s from ref %s", owner, repo, ref)

        files = self.client.list_markdown_files(owner, repo, ref)

        target_dir = package_dir(install_dir, owner, repo)
        if replace and target_dir.exists():
            uninstall_package(owner, repo, install_dir)

        try:
            target_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise InstallError(f"Failed to create installation directory {target_dir}: {e}") from e

        root = target_dir.resolve()
        file_count = 0
        for file in files:
            target_path = target_dir / file.path
            if not target_path.resolve().is_relative_to(root):
                raise InstallError(
                    f"Refusing to write {file.path} outside {target_dir}", files_written=file_count
                )

            try:
                target_path.parent.mkdir(parents=True, exist_ok=True)
                target_path.write_bytes(file.content)
            except OSError as e:
                raise InstallError(
                    f"Failed to write file {file.path}: {e}", files_written=file_count
                ) from e

            file_count += 1
            logger.debug("Wrote %s", target_path)

        return file_count

    def uninstall_package(self, owner: str, repo: str, install_dir: Path) -> None:
        uninstall_package(owner, repo, install_dir)

    def is_installed(self, owner: str, repo: str, install_dir: Path) -> bool:
        return count_installed_files(install_dir, owner, repo) > 0
