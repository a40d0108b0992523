"""Shared pytest fixtures for skillmaster tests."""

import base64
from pathlib import Path

import httpx
import pytest

from skillmaster.core.config import Settings
from skillmaster.core.github import GitHubClient, NotFoundError
from skillmaster.core.manifest import Manifest
from skillmaster.models.repository import RemoteFile, RepositoryMetadata


class FakeRemoteClient:
    """In-memory RemoteClient keyed by (owner, repo)."""

    def __init__(self):
        self.repos: dict[tuple[str, str], dict] = {}
        self.listed: list[tuple[str, str, str]] = []

    def add_repo(
        self,
        owner: str,
        name: str,
        files: dict[str, bytes] | None = None,
        default_branch: str = "main",
        version: str | None = None,
        error: Exception | None = None,
    ) -> None:
        self.repos[(owner, name)] = {
            "files": files or {},
            "default_branch": default_branch,
            "version": version,
            "error": error,
        }

    def __enter__(self):
        return self

    def __exit__(self, *args):
        pass

    def _repo(self, owner: str, name: str) -> dict:
        repo = self.repos.get((owner, name))
        if repo is None:
            raise NotFoundError(f"Repository {owner}/{name} not found")
        return repo

    def get_metadata(self, owner: str, name: str) -> RepositoryMetadata:
        repo = self._repo(owner, name)
        return RepositoryMetadata(owner=owner, name=name, default_branch=repo["default_branch"])

    def resolve_version(self, owner: str, name: str) -> str:
        repo = self.repos.get((owner, name))
        if repo is None:
            return "main"
        return repo["version"] or repo["default_branch"]

    def list_markdown_files(self, owner: str, name: str, ref: str) -> list[RemoteFile]:
        repo = self._repo(owner, name)
        self.listed.append((owner, name, ref))
        if repo["error"] is not None:
            raise repo["error"]
        return [RemoteFile(path=path, content=content) for path, content in repo["files"].items()]

    def search(self, query: str, limit: int = 20) -> list[RepositoryMetadata]:
        return [
            RepositoryMetadata(owner=owner, name=name, default_branch=repo["default_branch"])
            for (owner, name), repo in self.repos.items()
        ][:limit]


class FakeGitHub:
    """Serves a small subset of the GitHub REST API for httpx.MockTransport."""

    def __init__(self):
        self.repos: dict[tuple[str, str], dict] = {}
        self.search_items: list[dict] = []
        self.search_status = 200
        self.requests: list[httpx.Request] = []

    def add_repo(
        self,
        owner: str,
        name: str,
        files: dict[str, bytes] | None = None,
        default_branch: str = "main",
        release: str | None = None,
        tags: list[str] | None = None,
        status: int = 200,
        release_status: int | None = None,
        missing_files: set[str] | None = None,
    ) -> None:
        self.repos[(owner, name)] = {
            "files": files or {},
            "default_branch": default_branch,
            "release": release,
            "tags": tags or [],
            "status": status,
            "release_status": release_status,
            "missing_files": missing_files or set(),
        }

    def repo_json(self, owner: str, name: str, repo: dict) -> dict:
        return {
            "name": name,
            "owner": {"login": owner},
            "description": f"{name} prompts",
            "stargazers_count": 42,
            "updated_at": "2024-05-01T10:00:00Z",
            "default_branch": repo["default_branch"],
        }

    def contents_paths(self, owner: str, name: str) -> list[str]:
        return [
            r.url.path.split("/contents/", 1)[1]
            for r in self.requests
            if r.url.path.startswith(f"/repos/{owner}/{name}/contents/")
        ]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path == "/search/repositories":
            if self.search_status != 200:
                return httpx.Response(self.search_status, json={"message": "API rate limit exceeded"})
            return httpx.Response(200, json={"items": self.search_items})

        parts = path.strip("/").split("/")
        if len(parts) < 3 or parts[0] != "repos":
            return httpx.Response(404, json={"message": "Not Found"})

        owner, name, rest = parts[1], parts[2], parts[3:]
        repo = self.repos.get((owner, name))
        if repo is None:
            return httpx.Response(404, json={"message": "Not Found"})

        if not rest:
            if repo["status"] != 200:
                return httpx.Response(repo["status"], json={"message": "error"})
            return httpx.Response(200, json=self.repo_json(owner, name, repo))

        if rest == ["releases", "latest"]:
            if repo["release_status"] is not None:
                return httpx.Response(repo["release_status"], json={"message": "error"})
            if repo["release"] is None:
                return httpx.Response(404, json={"message": "Not Found"})
            return httpx.Response(200, json={"tag_name": repo["release"]})

        if rest == ["tags"]:
            per_page = int(request.url.params.get("per_page", 30))
            return httpx.Response(200, json=[{"name": t} for t in repo["tags"][:per_page]])

        if rest[0] == "contents":
            return self.contents(repo, "/".join(rest[1:]))

        return httpx.Response(404, json={"message": "Not Found"})

    def contents(self, repo: dict, content_path: str) -> httpx.Response:
        files = repo["files"]

        if content_path in files:
            if content_path in repo["missing_files"]:
                return httpx.Response(404, json={"message": "Not Found"})
            return httpx.Response(
                200,
                json={
                    "type": "file",
                    "name": content_path.rsplit("/", 1)[-1],
                    "path": content_path,
                    "encoding": "base64",
                    "content": base64.encodebytes(files[content_path]).decode(),
                },
            )

        prefix = f"{content_path}/" if content_path else ""
        entries: dict[str, str] = {}
        for file_path in files:
            if not file_path.startswith(prefix):
                continue
            head, sep, _ = file_path[len(prefix):].partition("/")
            entries[prefix + head] = "dir" if sep else "file"

        if not entries and content_path:
            return httpx.Response(404, json={"message": "Not Found"})

        return httpx.Response(
            200,
            json=[
                {"type": entry_type, "name": entry_path.rsplit("/", 1)[-1], "path": entry_path}
                for entry_path, entry_type in sorted(entries.items())
            ],
        )


@pytest.fixture
def fake_remote() -> FakeRemoteClient:
    return FakeRemoteClient()


@pytest.fixture
def fake_github() -> FakeGitHub:
    return FakeGitHub()


@pytest.fixture
def github_client(fake_github: FakeGitHub):
    """GitHubClient talking to FakeGitHub."""
    with GitHubClient(token="test-token", transport=httpx.MockTransport(fake_github.handler)) as client:
        yield client


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(home_dir=tmp_path / "home", github_token="test-token")


@pytest.fixture
def project_dir(tmp_path: Path, monkeypatch) -> Path:
    """Initialized project directory, used as the working directory."""
    project = tmp_path / "project"
    project.mkdir()
    Manifest.new("project").save(project)
    monkeypatch.chdir(project)
    return project
