"""Project-scoped operations: listing secrets and versions under a parent."""
import logging
from typing import List

from google.cloud import secretmanager

from ..domains.models import ProjectContext

logger = logging.getLogger(__name__)


def list_secrets(context: ProjectContext) -> List[secretmanager.Secret]:
    """
    List every secret under the project.

    The client returns a pager that fetches further pages while it is
    iterated, so the returned list is complete and in service order.
    """
    logger.debug(f"Listing secrets under {context.parent}")
    return list(context.client.list_secrets(request={"parent": context.parent}))


def list_versions(context: ProjectContext) -> List[secretmanager.SecretVersion]:
    """List secret versions with the project as parent, as the service defines it."""
    logger.debug(f"Listing secret versions under {context.parent}")
    return list(context.client.list_secret_versions(request={"parent": context.parent}))
