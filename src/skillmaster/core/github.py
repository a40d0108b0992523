"""GitHub API client for fetching markdown packages."""

import base64
import binascii
import logging
from typing import Protocol
from urllib.parse import quote

import httpx

from skillmaster.models.package import PackageIdentifier
from skillmaster.models.repository import RemoteFile, RepositoryMetadata


GITHUB_API_BASE = "https://api.github.com"
PACKAGE_TOPIC = "skillmaster-package"
DEFAULT_BRANCH_FALLBACK = "main"
MAX_FILES = 1000
MAX_LISTINGS = 2000

logger = logging.getLogger(__name__)


class InvalidFormatError(ValueError):
    """Package identifier is not in owner/repo format."""

    pass


class GitHubError(Exception):
    """Error from GitHub API."""

    pass


class NotFoundError(GitHubError):
    """Repository, path or file does not exist."""

    pass


class RateLimitError(GitHubError):
    """GitHub API quota exhausted."""

    pass


class TransientError(GitHubError):
    """Network failure or unexpected API response."""

    pass


class EmptyResultError(GitHubError):
    """Repository walk succeeded but found no markdown files."""

    pass


class TooManyFilesError(GitHubError):
    """Repository holds more markdown files or directories than the client will fetch."""

    pass


def parse_repo_spec(spec: str) -> PackageIdentifier:
    """Parse a package spec in owner/repo format.

    Exactly one '/' is accepted and both parts must be non-empty once
    surrounding whitespace is stripped.
    """
    parts = spec.split("/")
    if len(parts) != 2:
        raise InvalidFormatError(
            f"Invalid package spec: {spec!r}. Expected format: owner/repo"
        )

    owner, name = parts[0].strip(), parts[1].strip()
    if not owner or not name:
        raise InvalidFormatError(
            f"Invalid package spec: {spec!r}. Owner and repository name cannot be empty"
        )

    return PackageIdentifier(owner=owner, name=name)


def is_markdown(name: str) -> bool:
    return name.lower().endswith(".md")


def is_hidden(path: str) -> bool:
    """Check whether the last segment of a path starts with a dot."""
    return path.rstrip("/").rsplit("/", 1)[-1].startswith(".")


class RemoteClient(Protocol):
    """Operations the installer and commands need from a package host."""

    def get_metadata(self, owner: str, repo: str) -> RepositoryMetadata: ...

    def resolve_version(self, owner: str, repo: str) -> str: ...

    def list_markdown_files(self, owner: str, repo: str, ref: str) -> list[RemoteFile]: ...

    def search(self, query: str, limit: int = 20) -> list[RepositoryMetadata]: ...


class GitHubClient:
    """Client for interacting with GitHub API."""

    def __init__(
        self,
        token: str = "",
        base_url: str = GITHUB_API_BASE,
        transport: httpx.BaseTransport | None = None,
        max_files: int = MAX_FILES,
        max_listings: int = MAX_LISTINGS,
    ):
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"

        self.max_files = max_files
        self.max_listings = max_listings
        self._listings = 0
        self.client = httpx.Client(
            base_url=base_url,
            headers=headers,
            timeout=30.0,
            follow_redirects=True,
            transport=transport,
        )

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.client.close()

    def close(self) -> None:
        self.client.close()

    def _get(self, url: str, what: str, params: dict | None = None) -> httpx.Response:
        """Issue a GET and map failures onto the GitHubError hierarchy."""
        logger.debug("GET %s %s", url, params or "")
        try:
            response = self.client.get(url, params=params)
        except httpx.HTTPError as e:
            raise TransientError(f"Failed to fetch {what}: {e}") from e

        if response.status_code == 404:
            raise NotFoundError(f"{what} not found")
        if response.status_code in (403, 429):
            raise RateLimitError(
                "GitHub API rate limit exceeded. "
                "Add a GitHub token to the skillmaster config or set GITHUB_TOKEN."
            )
        if response.is_error:
            raise TransientError(
                f"Failed to fetch {what}: HTTP {response.status_code}"
            )
        return response

    def _json(self, response: httpx.Response, what: str):
        try:
            return response.json()
        except ValueError as e:
            raise TransientError(f"Invalid response for {what}: {e}") from e

    def get_metadata(self, owner: str, repo: str) -> RepositoryMetadata:
        """Fetch repository information."""
        response = self._get(f"/repos/{owner}/{repo}", f"Repository {owner}/{repo}")
        data = self._json(response, f"{owner}/{repo}")
        if not isinstance(data, dict) or not isinstance(data.get("name"), str):
            raise TransientError(f"Invalid response for {owner}/{repo}: missing repository name")

        metadata = RepositoryMetadata.from_api_response(data)
        if not metadata.owner:
            metadata.owner = owner
        return metadata

    def resolve_version(self, owner: str, repo: str) -> str:
        """Pick a version label: latest release, newest tag, default branch, 'main'.

        Never raises. A step is skipped when it yields nothing or fails.
        """
        try:
            response = self._get(
                f"/repos/{owner}/{repo}/releases/latest", f"Latest release of {owner}/{repo}"
            )
            release = self._json(response, "latest release")
            tag = release.get("tag_name") if isinstance(release, dict) else None
            if tag and isinstance(tag, str):
                return tag
            logger.debug("Latest release of %s/%s has no tag", owner, repo)
        except NotFoundError:
            logger.debug("No releases for %s/%s", owner, repo)
        except GitHubError as e:
            logger.warning("Could not check releases for %s/%s: %s", owner, repo, e)

        try:
            response = self._get(
                f"/repos/{owner}/{repo}/tags", f"Tags of {owner}/{repo}", params={"per_page": 1}
            )
            tags = self._json(response, "tags")
            if tags and isinstance(tags, list) and isinstance(tags[0], dict):
                name = tags[0].get("name")
                if name and isinstance(name, str):
                    return name
            logger.debug("No tags for %s/%s", owner, repo)
        except NotFoundError:
            logger.debug("No tags for %s/%s", owner, repo)
        except GitHubError as e:
            logger.warning("Could not check tags for %s/%s: %s", owner, repo, e)

        try:
            metadata = self.get_metadata(owner, repo)
        except GitHubError as e:
            logger.warning(
                "Falling back to '%s' for %s/%s: %s", DEFAULT_BRANCH_FALLBACK, owner, repo, e
            )
            return DEFAULT_BRANCH_FALLBACK

        return metadata.default_branch or DEFAULT_BRANCH_FALLBACK

    def list_markdown_files(self, owner: str, repo: str, ref: str) -> list[RemoteFile]:
        """Download every non-hidden markdown file in the repository at ref.

        Raises EmptyResultError when the repository has no markdown files.
        Any failed fetch aborts the whole walk.
        """
        files: list[RemoteFile] = []
        self._listings = 0
        self._walk(owner, repo, ref, "", files)

        if not files:
            raise EmptyResultError(f"No markdown files found in {owner}/{repo}")

        logger.debug("Fetched %d markdown file(s) from %s/%s@%s", len(files), owner, repo, ref)
        return files

    @staticmethod
    def _contents_url(owner: str, repo: str, path: str) -> str:
        # Names may contain '#', '?' or '%'
        return f"/repos/{owner}/{repo}/contents/{quote(path, safe='/')}"

    def _walk(self, owner: str, repo: str, ref: str, dir_path: str, files: list[RemoteFile]) -> None:
        if self._listings >= self.max_listings:
            raise TooManyFilesError(
                f"{owner}/{repo} has more than {self.max_listings} directories"
            )
        self._listings += 1

        response = self._get(
            self._contents_url(owner, repo, dir_path),
            f"Path '{dir_path or '/'}' in {owner}/{repo}",
            params={"ref": ref},
        )
        entries = self._json(response, dir_path or "/")
        if isinstance(entries, dict):
            # The path was a file, not a directory
            entries = [entries]
        if not isinstance(entries, list):
            raise TransientError(f"Invalid listing for '{dir_path or '/'}' in {owner}/{repo}")

        for entry in entries:
            if not isinstance(entry, dict):
                continue
            entry_type = entry.get("type")
            entry_path = entry.get("path")
            if not entry_type or not entry_path or not isinstance(entry_path, str):
                continue

            # Skip hidden files and directories
            if is_hidden(entry_path):
                continue

            if entry_type == "file":
                if is_markdown(entry_path):
                    if len(files) >= self.max_files:
                        raise TooManyFilesError(
                            f"{owner}/{repo} has more than {self.max_files} markdown files"
                        )
                    content = self.download_file(owner, repo, ref, entry_path)
                    files.append(RemoteFile(path=entry_path, content=content))
            elif entry_type == "dir":
                self._walk(owner, repo, ref, entry_path, files)

    def download_file(self, owner: str, repo: str, ref: str, file_path: str) -> bytes:
        """Fetch and decode a single file."""
        response = self._get(
            self._contents_url(owner, repo, file_path),
            f"File '{file_path}' in {owner}/{repo}",
            params={"ref": ref},
        )
        data = self._json(response, file_path)
        if not isinstance(data, dict):
            raise TransientError(f"Expected a file at '{file_path}', got a directory")

        encoding = data.get("encoding")
        if encoding == "base64":
            try:
                return base64.b64decode(data.get("content", ""))
            except (binascii.Error, ValueError) as e:
                raise TransientError(f"Failed to decode '{file_path}': {e}") from e

        # Files over 1 MB come back without inline content
        download_url = data.get("download_url")
        if not download_url:
            raise TransientError(f"No content available for '{file_path}'")
        return self._get(download_url, f"File '{file_path}' in {owner}/{repo}").content

    def search(self, query: str, limit: int = 20) -> list[RepositoryMetadata]:
        """Search for package repositories, most starred first."""
        search_query = f"topic:{PACKAGE_TOPIC} {query}".strip()
        response = self._get(
            "/search/repositories",
            "Search results",
            params={
                "q": search_query,
                "sort": "stars",
                "order": "desc",
                "per_page": limit,
            },
        )

        data = self._json(response, "search")
        items = data.get("items") if isinstance(data, dict) else None
        if not isinstance(items, list):
            return []
        return [
            RepositoryMetadata.from_api_response(item)
            for item in items
            if isinstance(item, dict) and isinstance(item.get("name"), str)
        ]
