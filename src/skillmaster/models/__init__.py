"""Data models for skillmaster."""

from skillmaster.models.package import PackageIdentifier
from skillmaster.models.repository import RepositoryMetadata, RemoteFile

__all__ = ["PackageIdentifier", "RepositoryMetadata", "RemoteFile"]
