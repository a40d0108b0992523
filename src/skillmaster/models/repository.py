"""GitHub repository data models."""

from dataclasses import dataclass


@dataclass
class RepositoryMetadata:
    """Represents a GitHub repository."""

    owner: str
    name: str
    description: str = ""
    stars: int = 0
    updated_at: str = ""  # YYYY-MM-DD
    default_branch: str = ""

    @classmethod
    def from_api_response(cls, data: dict) -> "RepositoryMetadata":
        """Create RepositoryMetadata from GitHub API response."""
        owner = data.get("owner") or {}
        return cls(
            owner=owner.get("login", ""),
            name=data["name"],
            description=data.get("description") or "",
            stars=data.get("stargazers_count") or 0,
            updated_at=(data.get("updated_at") or "")[:10],
            default_branch=data.get("default_branch") or "",
        )

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"


@dataclass
class RemoteFile:
    """A markdown file fetched from a repository."""

    path: str  # relative to the repository root
    content: bytes
