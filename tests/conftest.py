"""Shared fixtures: an in-memory Secret Manager client and an isolated home directory."""
from pathlib import Path

import pytest
from google.api_core import exceptions
from google.cloud import secretmanager

from gcp_secretkit import create_handle
from gcp_secretkit.secrets.domains import gcp_client, preferences

PROJECT_PARENT = "projects/test-project"


class FakeSecretManagerClient:
    """Stores secrets in memory and answers the client calls the handles make.

    Every request is recorded in ``calls`` as ``(method_name, request)``.
    """

    def __init__(self):
        self._secrets = {}
        self._versions = {}  # secret name -> list of [SecretVersion, payload bytes or None]
        self.calls = []

    def _require_secret(self, name):
        if name not in self._secrets:
            raise exceptions.NotFound(f"Secret [{name}] not found or has no versions.")

    def list_secrets(self, request):
        self.calls.append(("list_secrets", request))
        prefix = f"{request['parent']}/secrets/"
        return iter([secret for name, secret in self._secrets.items() if name.startswith(prefix)])

    def list_secret_versions(self, request):
        self.calls.append(("list_secret_versions", request))
        parent = request["parent"]
        if parent in self._secrets:
            return iter([version for version, _ in reversed(self._versions[parent])])
        prefix = f"{parent}/secrets/"
        return iter([
            version
            for name, versions in self._versions.items() if name.startswith(prefix)
            for version, _ in versions
        ])

    def create_secret(self, request):
        self.calls.append(("create_secret", request))
        name = f"{request['parent']}/secrets/{request['secret_id']}"
        if name in self._secrets:
            raise exceptions.AlreadyExists(f"Secret [{name}] already exists.")
        secret = secretmanager.Secret(name=name, replication=request["secret"]["replication"])
        self._secrets[name] = secret
        self._versions[name] = []
        return secret

    def get_secret(self, request):
        self.calls.append(("get_secret", request))
        self._require_secret(request["name"])
        return self._secrets[request["name"]]

    def delete_secret(self, request):
        self.calls.append(("delete_secret", request))
        self._require_secret(request["name"])
        del self._secrets[request["name"]]
        del self._versions[request["name"]]

    def add_secret_version(self, request):
        self.calls.append(("add_secret_version", request))
        parent = request["parent"]
        self._require_secret(parent)
        versions = self._versions[parent]
        version = secretmanager.SecretVersion(
            name=f"{parent}/versions/{len(versions) + 1}",
            state=secretmanager.SecretVersion.State.ENABLED,
        )
        versions.append([version, request["payload"]["data"]])
        return version

    def _find_version(self, name):
        secret_name, _, version_id = name.rpartition("/versions/")
        self._require_secret(secret_name)
        versions = self._versions[secret_name]
        if version_id == "latest" and versions:
            return versions[-1]
        if version_id.isdigit() and 0 < int(version_id) <= len(versions):
            return versions[int(version_id) - 1]
        raise exceptions.NotFound(f"Secret Version [{name}] not found.")

    def access_secret_version(self, request):
        self.calls.append(("access_secret_version", request))
        version, data = self._find_version(request["name"])
        if data is None:
            return secretmanager.AccessSecretVersionResponse(name=version.name)
        return secretmanager.AccessSecretVersionResponse(
            name=version.name,
            payload=secretmanager.SecretPayload(data=data),
        )

    def destroy_secret_version(self, request):
        self.calls.append(("destroy_secret_version", request))
        entry = self._find_version(request["name"])
        entry[0] = secretmanager.SecretVersion(
            name=entry[0].name,
            state=secretmanager.SecretVersion.State.DESTROYED,
        )
        entry[1] = None
        return entry[0]


@pytest.fixture
def fake_client():
    return FakeSecretManagerClient()


@pytest.fixture
def project(fake_client):
    """Project handle wired to the in-memory client."""
    return create_handle(PROJECT_PARENT, client=fake_client)


@pytest.fixture
def isolated_env(monkeypatch):
    """Clear project/credential env vars and the lazily loaded config for one test."""
    for var in (gcp_client.PROJECT_ENV_VAR, gcp_client.CREDENTIALS_ENV_VAR):
        # setenv first so monkeypatch restores the variable even if code under test sets it
        monkeypatch.setenv(var, "unset")
        monkeypatch.delenv(var)
    monkeypatch.setattr(gcp_client, "_CONFIG", None)
    monkeypatch.setattr(gcp_client, "_CONFIG_LOADED", False)


@pytest.fixture
def temp_home(tmp_path, monkeypatch, isolated_env):
    """Temporary home directory with the preferences module pointed inside it."""
    fake_home = tmp_path / "home"
    fake_home.mkdir()
    monkeypatch.setenv("HOME", str(fake_home))
    monkeypatch.setattr(Path, "home", lambda: fake_home)

    fake_config_dir = fake_home / ".config" / "gcp-secretkit"
    monkeypatch.setattr(preferences, "PREFERENCES_DIR", fake_config_dir)
    monkeypatch.setattr(preferences, "PREFERENCES_FILE", fake_config_dir / "preferences.json")

    return fake_home
