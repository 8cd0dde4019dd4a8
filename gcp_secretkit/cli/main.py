"""CLI entrypoint for gcp-secretkit."""
import argparse
import logging
import sys
from pathlib import Path

from google.api_core.exceptions import GoogleAPICallError, GoogleAPIError
from google.auth.exceptions import GoogleAuthError

from gcp_secretkit import __version__
from gcp_secretkit.secrets.domains.config_loader import ConfigError, default_config_path
from gcp_secretkit.secrets.domains.gcp_client import GCPSecretClient, project_parent
from gcp_secretkit.secrets.workflows.handles import ProjectHandle, create_handle

from .validators import validate_secret_name, validate_secret_value, validate_version

# Configure logging to stderr
logging.basicConfig(
    level=logging.WARNING,
    format="%(message)s",
    stream=sys.stderr
)
logger = logging.getLogger(__name__)


def _short_name(resource_name: str) -> str:
    """Last path segment of a resource name (secret id or version number)."""
    return resource_name.rsplit("/", 1)[-1]


def _project_handle(args) -> ProjectHandle:
    """Resolve the project for this invocation and build a handle for it."""
    gcp = GCPSecretClient()
    project_id = gcp.get_project_id(args.project_id)
    if not project_id:
        print(
            "Error: No GCP project configured. Pass --project-id, set GCP_PROJECT, "
            "or add gcp.project_id to your config file.",
            file=sys.stderr
        )
        sys.exit(1)
    return create_handle(project_parent(project_id), client=gcp.client)


def cmd_version(args):
    """Show version information."""
    print(f"gcp-secretkit {__version__}")


def cmd_config_set_path(args):
    """Set config file path preference."""
    from gcp_secretkit.secrets.domains.preferences import set_preference

    config_path = Path(args.path).resolve()

    if not config_path.exists():
        print(f"Error: Config file does not exist: {config_path}", file=sys.stderr)
        sys.exit(1)

    if not config_path.is_file():
        print(f"Error: Path is not a file: {config_path}", file=sys.stderr)
        sys.exit(1)

    set_preference("config_path", str(config_path))
    print(f"Config path set to: {config_path}")


def cmd_config_show(args):
    """Show current config file path and where it came from."""
    from gcp_secretkit.secrets.domains.preferences import get_preference

    config_path_pref = get_preference("config_path")

    if config_path_pref:
        config_path = Path(config_path_pref)
        if config_path.exists():
            print(f"Config path: {config_path}")
        else:
            print(f"Config path (from preference, but file not found): {config_path}")
        print("Source: preference")
        return

    default_config = default_config_path()
    print(f"Config path: {default_config}")
    if default_config.exists():
        print("Source: default")
    else:
        print("Source: default (file not found)")


def cmd_config_clear(args):
    """Clear config path preference."""
    from gcp_secretkit.secrets.domains.preferences import clear_preference

    clear_preference("config_path")
    print(f"Config path preference cleared. Will use default: {default_config_path()}")


def cmd_secrets_list(args):
    """List secret ids under the project."""
    secrets = _project_handle(args).list()

    if not secrets and not args.quiet:
        print("No secrets found", file=sys.stderr)
    for secret in secrets:
        print(_short_name(secret.name))


def cmd_secrets_versions(args):
    """List versions of one secret, or the project-level listing when no secret is given."""
    if args.secret_name:
        validate_secret_name(args.secret_name)

    handle = _project_handle(args)
    if args.secret_name:
        versions = handle.secret(args.secret_name).versions()
    else:
        versions = handle.versions()

    for version in versions:
        if args.quiet:
            print(_short_name(version.name))
        else:
            print(f"{version.name}\t{version.state.name}")


def cmd_secrets_create(args):
    """Create a secret with automatic replication."""
    validate_secret_name(args.secret_name)
    secret = _project_handle(args).secret(args.secret_name).create()

    if args.quiet:
        print(secret.name)
    else:
        print(f"Created secret: {secret.name}")


def cmd_secrets_describe(args):
    """Show secret metadata."""
    validate_secret_name(args.secret_name)
    secret = _project_handle(args).secret(args.secret_name).get()

    print(f"Name: {secret.name}")
    if not args.quiet:
        replication = "automatic" if "automatic" in secret.replication else "user-managed"
        print(f"Replication: {replication}")
        for key, value in sorted(secret.labels.items()):
            print(f"Label: {key}={value}")


def cmd_secrets_delete(args):
    """Delete a secret and all of its versions."""
    validate_secret_name(args.secret_name)
    _project_handle(args).secret(args.secret_name).delete()

    if not args.quiet:
        print(f"Deleted secret: {args.secret_name}")


def cmd_secrets_add_version(args):
    """Add a version from the command line or stdin."""
    validate_secret_name(args.secret_name)

    value = args.value
    if value is None:
        value = sys.stdin.read().rstrip("\n")
    validate_secret_value(value)

    version = _project_handle(args).secret(args.secret_name).add_version(value)

    if args.quiet:
        print(_short_name(version.name))
    else:
        print(f"Added version {_short_name(version.name)} to secret '{args.secret_name}'")


def cmd_secrets_access(args):
    """Print a secret version's payload."""
    validate_secret_name(args.secret_name)
    version = validate_version(args.version) if args.version is not None else None

    secret_value = _project_handle(args).secret(args.secret_name).access(version)

    if secret_value is None:
        print(f"Error: Secret '{args.secret_name}' version has no payload", file=sys.stderr)
        sys.exit(1)

    if args.quiet:
        print(secret_value)
    else:
        print(f"Secret '{args.secret_name}': {secret_value}")


SECRETS_COMMANDS = {
    "list": cmd_secrets_list,
    "versions": cmd_secrets_versions,
    "create": cmd_secrets_create,
    "describe": cmd_secrets_describe,
    "delete": cmd_secrets_delete,
    "add-version": cmd_secrets_add_version,
    "access": cmd_secrets_access,
}

CONFIG_COMMANDS = {
    "set-path": cmd_config_set_path,
    "show": cmd_config_show,
    "clear": cmd_config_clear,
}


def build_parser():
    """Build the argument parser, returning it with its command-group subparsers."""
    parser = argparse.ArgumentParser(
        prog="secretkit",
        description="gcp-secretkit CLI - manage secrets and versions in GCP Secret Manager",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Exit codes:
  0 - Success
  1 - Runtime error (authentication, network, secret not found, etc.)
  2 - Usage error (invalid arguments, invalid secret name format, etc.)

Environment variables:
  GCP_PROJECT - GCP project ID (overrides config file)
  GOOGLE_APPLICATION_CREDENTIALS - service account key (overrides config file)

Configuration:
  Default location: ~/.config/gcp-secretkit/config.yml
  Custom path: Set with 'secretkit config set-path <path>'
  View current: Run 'secretkit config show'
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser(
        "version",
        help="Show version information",
        description="Display the current version of gcp-secretkit"
    )

    # config command
    config_parser = subparsers.add_parser(
        "config",
        help="Configuration management",
        description="Manage gcp-secretkit configuration"
    )
    config_subparsers = config_parser.add_subparsers(dest="config_command")

    config_set_path_parser = config_subparsers.add_parser(
        "set-path",
        help="Set config file path",
        description="Store the absolute path to your config file in ~/.config/gcp-secretkit/preferences.json"
    )
    config_set_path_parser.add_argument("path", help="Path to config file")

    config_subparsers.add_parser(
        "show",
        help="Show current config path",
        description="Display the current configuration file path and its source (preference or default)"
    )
    config_subparsers.add_parser(
        "clear",
        help="Clear config path preference",
        description="Remove the config path preference and fall back to ~/.config/gcp-secretkit/config.yml"
    )

    # secrets command
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--project-id",
        help="GCP project ID (auto-detected from GCP_PROJECT env var or config file if not provided)"
    )
    common.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Output only values (no labels or formatting, useful for scripts)"
    )

    secrets_parser = subparsers.add_parser(
        "secrets",
        help="Secret management operations",
        description="Manage secrets in GCP Secret Manager"
    )
    secrets_subparsers = secrets_parser.add_subparsers(dest="secrets_command")

    secrets_subparsers.add_parser(
        "list", parents=[common],
        help="List secrets in the project"
    )

    versions_parser = secrets_subparsers.add_parser(
        "versions", parents=[common],
        help="List secret versions",
        description="List versions of a secret. Without a secret name, the project is passed as the listing parent."
    )
    versions_parser.add_argument("secret_name", nargs="?", help="Name of the secret")

    for command, help_text in (
        ("create", "Create a secret with automatic replication"),
        ("describe", "Show secret metadata"),
        ("delete", "Delete a secret and all of its versions"),
    ):
        command_parser = secrets_subparsers.add_parser(command, parents=[common], help=help_text)
        command_parser.add_argument("secret_name", help="Name of the secret (format: [a-zA-Z0-9_-]+)")

    add_version_parser = secrets_subparsers.add_parser(
        "add-version", parents=[common],
        help="Add a new secret version",
        description="Add a version to a secret. The value is read from stdin when not given as an argument."
    )
    add_version_parser.add_argument("secret_name", help="Name of the secret (format: [a-zA-Z0-9_-]+)")
    add_version_parser.add_argument("value", nargs="?", help="Secret value (read from stdin if omitted)")

    access_parser = secrets_subparsers.add_parser(
        "access", parents=[common],
        help="Print a secret value",
        description="Print the payload of a secret version (latest unless --version is given)."
    )
    access_parser.add_argument("secret_name", help="Name of the secret (format: [a-zA-Z0-9_-]+)")
    access_parser.add_argument("--version", help="Version number (default: latest)")

    return parser, config_parser, secrets_parser


def main(argv=None):
    """Main CLI entrypoint.

    Exit codes:
        0 - Success
        1 - Runtime errors (authentication, network, secret not found, etc.)
        2 - Usage errors (invalid arguments, invalid secret name format, etc.)
    """
    parser, config_parser, secrets_parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(2)

    try:
        if args.command == "version":
            cmd_version(args)
        elif args.command == "config":
            handler = CONFIG_COMMANDS.get(args.config_command)
            if handler is None:
                config_parser.print_help()
                sys.exit(2)
            handler(args)
        elif args.command == "secrets":
            handler = SECRETS_COMMANDS.get(args.secrets_command)
            if handler is None:
                secrets_parser.print_help()
                sys.exit(2)
            handler(args)
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        sys.exit(1)
    except GoogleAPICallError as e:
        logger.debug(f"Secret Manager call failed: {e!r}")
        print(f"Error: {e.message}", file=sys.stderr)
        sys.exit(1)
    except (GoogleAPIError, GoogleAuthError) as e:
        logger.debug(f"Secret Manager client failed: {e!r}")
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
