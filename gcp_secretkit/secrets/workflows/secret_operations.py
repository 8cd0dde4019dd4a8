"""Operations on a single secret and its versions.

Every function here is one round trip to Secret Manager. Errors raised by the
client (``google.api_core.exceptions.NotFound``, ``AlreadyExists``,
``PermissionDenied``...) propagate to the caller untouched.
"""
import logging
from typing import List, Optional

from google.cloud import secretmanager

from ..domains.models import SecretContext

logger = logging.getLogger(__name__)

LATEST_VERSION = "latest"


def create_secret(context: SecretContext) -> secretmanager.Secret:
    """
    Create the secret container with automatic replication.

    Automatic replication is the only policy exposed.

    Raises:
        google.api_core.exceptions.AlreadyExists: If the secret id is taken
    """
    logger.debug(f"Creating secret {context.name}")
    return context.client.create_secret(
        request={
            "parent": context.parent,
            "secret_id": context.secret_id,
            "secret": {"replication": {"automatic": {}}},
        }
    )


def get_secret(context: SecretContext) -> secretmanager.Secret:
    logger.debug(f"Fetching secret {context.name}")
    return context.client.get_secret(request={"name": context.name})


def delete_secret(context: SecretContext) -> None:
    """Delete the secret and all of its versions."""
    logger.debug(f"Deleting secret {context.name}")
    return context.client.delete_secret(request={"name": context.name})


def add_version(context: SecretContext, content: str) -> secretmanager.SecretVersion:
    """
    Add a version whose payload is ``content`` encoded as UTF-8.

    Size limits are enforced by Secret Manager, not here.
    """
    logger.debug(f"Adding version to {context.name}")
    return context.client.add_secret_version(
        request={
            "parent": context.name,
            "payload": {"data": content.encode("UTF-8")},
        }
    )


def resolve_version(version: Optional[int] = None) -> str:
    """Render a version number for a resource name; None means latest."""
    if version is None:
        return LATEST_VERSION
    return str(version)


def _decode_payload(response: Optional[secretmanager.AccessSecretVersionResponse]) -> Optional[str]:
    if response is None or not response.payload:
        return None
    # Invalid UTF-8 bytes become U+FFFD
    return response.payload.data.decode("UTF-8", errors="replace")


def access_version(context: SecretContext, version: Optional[int] = None) -> Optional[str]:
    """
    Fetch and decode a version's payload.

    Args:
        context: Secret to read from
        version: Version number, or None for the latest version

    Returns:
        The payload as text, or None if the response carries no payload
    """
    name = context.version_name(resolve_version(version))
    logger.debug(f"Accessing secret version {name}")
    response = context.client.access_secret_version(request={"name": name})
    return _decode_payload(response)


def access_only_latest(context: SecretContext) -> Optional[str]:
    return access_version(context)


def list_secret_versions(context: SecretContext) -> List[secretmanager.SecretVersion]:
    """List the versions of this one secret, newest first as the service orders them."""
    logger.debug(f"Listing versions of {context.name}")
    return list(context.client.list_secret_versions(request={"parent": context.name}))
