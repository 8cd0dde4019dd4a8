"""Project and secret handles composed over the operation functions."""
import logging
from dataclasses import dataclass
from typing import List, Optional

from google.cloud import secretmanager

from ..domains.gcp_client import new_client
from ..domains.models import ProjectContext, SecretContext
from . import project_operations, secret_operations

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SecretHandle:
    """Operations bound to ``{parent}/secrets/{secret_id}``."""
    context: SecretContext

    @property
    def name(self) -> str:
        return self.context.name

    def create(self) -> secretmanager.Secret:
        return secret_operations.create_secret(self.context)

    def get(self) -> secretmanager.Secret:
        return secret_operations.get_secret(self.context)

    def delete(self) -> None:
        return secret_operations.delete_secret(self.context)

    def add_version(self, content: str) -> secretmanager.SecretVersion:
        return secret_operations.add_version(self.context, content)

    def access(self, version: Optional[int] = None) -> Optional[str]:
        return secret_operations.access_version(self.context, version)

    def access_only_latest(self) -> Optional[str]:
        return secret_operations.access_only_latest(self.context)

    def versions(self) -> List[secretmanager.SecretVersion]:
        return secret_operations.list_secret_versions(self.context)


@dataclass(frozen=True)
class ProjectHandle:
    """Operations bound to a project parent such as ``projects/my-project``."""
    context: ProjectContext

    @property
    def parent(self) -> str:
        return self.context.parent

    def list(self) -> List[secretmanager.Secret]:
        return project_operations.list_secrets(self.context)

    def versions(self) -> List[secretmanager.SecretVersion]:
        return project_operations.list_versions(self.context)

    def client(self) -> secretmanager.SecretManagerServiceClient:
        """The underlying client, for calls this handle does not cover."""
        return self.context.client

    def secret(self, secret_id: str) -> SecretHandle:
        return SecretHandle(
            SecretContext(parent=self.context.parent, client=self.context.client, secret_id=secret_id)
        )


def create_handle(
    parent: str,
    client: Optional[secretmanager.SecretManagerServiceClient] = None,
) -> ProjectHandle:
    """
    Build a handle for a project.

    Example:
        secrets = create_handle("projects/my-project")
        secrets.secret("api-key").create()
        secrets.secret("api-key").add_version("s3cret")
        secrets.secret("api-key").access()

    Args:
        parent: Project resource name, ``projects/<project_id>``
        client: Client to use; a new one is created on every call when omitted

    Returns:
        ProjectHandle bound to ``parent``
    """
    if client is None:
        client = new_client()
    logger.debug(f"Created secret handle for {parent}")
    return ProjectHandle(ProjectContext(parent=parent, client=client))
