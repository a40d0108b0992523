"""Package identifier data model."""

from dataclasses import dataclass


@dataclass(frozen=True)
class PackageIdentifier:
    """Represents a package as an owner/repo pair."""

    owner: str
    name: str

    @property
    def key(self) -> str:
        """Manifest key in owner/repo format."""
        return f"{self.owner}/{self.name}"

    @property
    def namespace(self) -> str:
        """Name of the local directory holding the package files."""
        return f"{self.owner}-{self.name}"

    def __str__(self) -> str:
        return self.key
