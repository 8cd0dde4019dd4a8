"""Domain models for secret management."""
from dataclasses import dataclass

from google.cloud import secretmanager


@dataclass(frozen=True)
class ProjectContext:
    """A project parent and the client used to reach it."""
    parent: str  # "projects/<project_id>"
    client: secretmanager.SecretManagerServiceClient

    def secret_name(self, secret_id: str) -> str:
        return f"{self.parent}/secrets/{secret_id}"


@dataclass(frozen=True)
class SecretContext(ProjectContext):
    """Project context narrowed to a single secret."""
    secret_id: str

    @property
    def name(self) -> str:
        return self.secret_name(self.secret_id)

    def version_name(self, version: str) -> str:
        return f"{self.name}/versions/{version}"
