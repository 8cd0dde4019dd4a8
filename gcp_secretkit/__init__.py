"""Project and secret handles over Google Cloud Secret Manager."""

__version__ = "0.1.0"

from .secrets.domains.gcp_client import project_parent
from .secrets.domains.models import ProjectContext, SecretContext
from .secrets.workflows.handles import ProjectHandle, SecretHandle, create_handle

__all__ = [
    "ProjectContext",
    "ProjectHandle",
    "SecretContext",
    "SecretHandle",
    "create_handle",
    "project_parent",
]
