"""GCP Secret Manager client and project resolution."""
import logging
import os
from typing import Any, Dict, Optional

from google.cloud import secretmanager

from .config_loader import ConfigError, load_config

logger = logging.getLogger(__name__)

CREDENTIALS_ENV_VAR = "GOOGLE_APPLICATION_CREDENTIALS"
PROJECT_ENV_VAR = "GCP_PROJECT"

# Lazy loading: the config file is only read when a GCP operation needs it,
# so `secretkit --help` and `secretkit version` run without one.
_CONFIG: Optional[Dict[str, Any]] = None
_CONFIG_LOADED = False


def _get_config() -> Dict[str, Any]:
    """
    Load configuration on first use and export its credentials.

    Returns:
        Configuration dictionary

    Raises:
        FileNotFoundError: If no config file exists
        ConfigError: If the config file is invalid
    """
    global _CONFIG, _CONFIG_LOADED

    if not _CONFIG_LOADED:
        _CONFIG = load_config()
        _CONFIG_LOADED = True

        service_account_path = _CONFIG['authentication']['service_account_path']
        os.environ[CREDENTIALS_ENV_VAR] = service_account_path
        logger.info(f"Set {CREDENTIALS_ENV_VAR} from config: {service_account_path}")

    return _CONFIG


def project_parent(project_id: str) -> str:
    """Return the parent resource name for a project id."""
    return f"projects/{project_id}"


def new_client() -> secretmanager.SecretManagerServiceClient:
    """Instantiate a Secret Manager client using application default credentials."""
    return secretmanager.SecretManagerServiceClient()


class GCPSecretClient:
    """Resolves credentials and project id before handing out a client."""

    def __init__(self):
        self._client = None

    @property
    def client(self) -> secretmanager.SecretManagerServiceClient:
        """Lazy-initialize client, applying config credentials when none are exported."""
        if self._client is None:
            if not os.getenv(CREDENTIALS_ENV_VAR):
                self._load_config_credentials()
            self._client = new_client()
        return self._client

    def _load_config_credentials(self) -> None:
        try:
            _get_config()
        except FileNotFoundError:
            logger.debug("No config file found, using application default credentials")
        except ConfigError as e:
            logger.warning(f"Ignoring invalid config, using application default credentials: {e}")

    def get_project_id(self, project_id: Optional[str] = None) -> Optional[str]:
        """
        Resolve the GCP project ID.

        Priority order:
        1. Explicit ``project_id`` argument
        2. GCP_PROJECT environment variable
        3. Config file ``gcp.project_id``

        Returns:
            Project ID string, or None if no source provides one
        """
        if project_id:
            return project_id

        gcp_project_env = os.getenv(PROJECT_ENV_VAR)
        if gcp_project_env:
            logger.debug(f"Using {PROJECT_ENV_VAR} from environment: {gcp_project_env}")
            return gcp_project_env

        try:
            config = _get_config()
        except (FileNotFoundError, ConfigError) as e:
            logger.error(f"Failed to load config: {e}")
            return None

        project_id = config['gcp']['project_id']
        logger.debug(f"Using project_id from config: {project_id}")
        return project_id
